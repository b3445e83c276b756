"""
PostProcessorOrchestrator

Runs processors in a fixed order during refresh:

1. manually supplied registry processors, in supply order
2. registry processors defined as beans, in registration order, repeated
   until a pass discovers no new one
3. the factory hook of every registry processor that also implements it
4. manually supplied factory processors
5. factory processors defined as beans not run yet

Each hook of each processor instance runs at most once.
"""

import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Set

from .exceptions import PostProcessingError
from .processors import BeanDefinitionRegistryPostProcessor, BeanFactoryPostProcessor

if TYPE_CHECKING:
    from .container import BeanjectionContainer
    from .registry import BeanDefinitionRegistry

logger = logging.getLogger(__name__)


class PostProcessorOrchestrator:
    """Invokes registry and factory processors exactly once each."""

    def invoke_all(self, bean_factory: 'BeanjectionContainer', manual_processors: Iterable[Any] = ()) -> None:
        """Run every processor against ``bean_factory``.

        Args:
            bean_factory: The container being refreshed
            manual_processors: Processors supplied outside the registry

        Raises:
            PostProcessingError: When a processor fails; processors that ran
                before keep their effects
        """
        processed_names: Set[str] = set()
        registry_processors: List[BeanDefinitionRegistryPostProcessor] = []
        regular_processors: List[BeanFactoryPostProcessor] = []
        registry = bean_factory.registry

        for processor in manual_processors:
            if isinstance(processor, BeanDefinitionRegistryPostProcessor):
                self._run_registry_processor(processor, registry)
                registry_processors.append(processor)
            elif isinstance(processor, BeanFactoryPostProcessor):
                regular_processors.append(processor)

        while True:
            pending = [
                name for name in bean_factory.get_bean_names_for_type(BeanDefinitionRegistryPostProcessor)
                if name not in processed_names
            ]
            if not pending:
                break
            for name in pending:
                processed_names.add(name)
                processor = self._get_processor(bean_factory, name)
                if _contains_instance(registry_processors, processor):
                    logger.debug("Registry processor '%s' already invoked", name)
                    continue
                self._run_registry_processor(processor, registry, name)
                registry_processors.append(processor)

        factory_invoked: List[Any] = []
        for processor in registry_processors + regular_processors:
            if isinstance(processor, BeanFactoryPostProcessor):
                self._run_factory_processor(processor, bean_factory)
                factory_invoked.append(processor)

        for name in bean_factory.get_bean_names_for_type(BeanFactoryPostProcessor):
            if name in processed_names:
                continue
            processed_names.add(name)
            processor = self._get_processor(bean_factory, name)
            if _contains_instance(factory_invoked, processor):
                continue
            self._run_factory_processor(processor, bean_factory, name)
            factory_invoked.append(processor)

        logger.debug(
            "Invoked %d registry and %d factory processor(s)",
            len(registry_processors), len(factory_invoked),
        )

    def _get_processor(self, bean_factory: 'BeanjectionContainer', name: str) -> Any:
        try:
            return bean_factory.get_bean(name)
        except Exception as e:
            raise PostProcessingError(f"Failed to create processor bean '{name}': {e}") from e

    def _run_registry_processor(
        self,
        processor: BeanDefinitionRegistryPostProcessor,
        registry: 'BeanDefinitionRegistry',
        name: Optional[str] = None,
    ) -> None:
        label = name or type(processor).__qualname__
        logger.debug("Invoking registry processor %s", label)
        try:
            processor.post_process_bean_definition_registry(registry)
        except Exception as e:
            raise PostProcessingError(f"Registry processor {label} failed: {e}") from e

    def _run_factory_processor(
        self,
        processor: BeanFactoryPostProcessor,
        bean_factory: 'BeanjectionContainer',
        name: Optional[str] = None,
    ) -> None:
        label = name or type(processor).__qualname__
        logger.debug("Invoking factory processor %s", label)
        try:
            processor.post_process_bean_factory(bean_factory)
        except Exception as e:
            raise PostProcessingError(f"Factory processor {label} failed: {e}") from e


def _contains_instance(processors: List[Any], processor: Any) -> bool:
    return any(candidate is processor for candidate in processors)
