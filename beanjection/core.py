"""
AnnotationConfigContext

This module provides the refreshable application context. A context owns one
BeanjectionContainer and drives it through its lifecycle::

    new -> register / scan -> refresh -> get_bean ... -> close

``refresh()`` runs the processors (the configuration processor among them),
freezes the configuration and creates every non-lazy singleton. It can be
called only once.

Example::

    @configuration
    @component_scan("myapp.services")
    class AppConfig:

        @bean
        def clock(self):
            return SystemClock()

    with AnnotationConfigContext(AppConfig) as context:
        clock = context.get_bean("clock")
    # close() runs destroy hooks automatically
"""

import logging
from typing import Any, Callable, List, Optional, Type, TypeVar, Union

from . import annotations
from .configuration_processor import ConfigurationClassPostProcessor
from .configuration_utils import (
    CONFIGURATION_PROCESSOR_BEAN_NAME,
    generate_bean_name,
    process_common_definition_annotations,
)
from .container import BeanjectionContainer
from .definition import AnnotatedBeanDefinition, BeanDefinition
from .exceptions import ContainerClosedError, IllegalStateError
from .post_processor_orchestrator import PostProcessorOrchestrator
from .processors import BeanFactoryPostProcessor
from .scanner import PackageScanner

logger = logging.getLogger(__name__)

T = TypeVar('T')


class AnnotationConfigContext:
    """Application context configured from decorated classes.

    Attributes:
        _container: Internal BeanjectionContainer instance
        _closed: Flag indicating if the context has been closed

    Example::

        context = AnnotationConfigContext()
        context.register(AppConfig)
        context.refresh()

        user = context.get_bean("userName1")
        service = context.get_bean(UserService)
        service = context[UserService]()
    """

    def __init__(
        self,
        *component_classes: Type,
        allow_bean_definition_overriding: bool = True,
        skip_existing_bean_methods: bool = True,
        scanner: Optional[PackageScanner] = None,
    ):
        """Initialize a context, registering and refreshing when classes are given.

        Args:
            *component_classes: Configuration or component classes; when any
                is given the context is refreshed right away
            allow_bean_definition_overriding: Replace definitions registered
                twice under the same name instead of raising
            skip_existing_bean_methods: Skip ``@bean`` methods whose bean name
                is already defined
            scanner: Scanner used by ``scan()`` and ``@component_scan``
        """
        self._container = BeanjectionContainer(allow_bean_definition_overriding)
        self._scanner = scanner or PackageScanner()
        self._bean_factory_post_processors: List[Any] = []
        self._orchestrator = PostProcessorOrchestrator()
        self._refreshed = False
        self._active = False
        self._closed = False

        self._register_configuration_processor(skip_existing_bean_methods)

        if component_classes:
            self.register(*component_classes)
            self.refresh()

    def _register_configuration_processor(self, skip_existing_bean_methods: bool) -> None:
        self._container.register_bean_definition(
            CONFIGURATION_PROCESSOR_BEAN_NAME,
            BeanDefinition(bean_class=ConfigurationClassPostProcessor, source=type(self).__qualname__),
        )
        # Pre-built so it shares this context's scanner
        self._container.register_singleton(
            CONFIGURATION_PROCESSOR_BEAN_NAME,
            ConfigurationClassPostProcessor(self._scanner, skip_existing_bean_methods),
        )

    def _ensure_not_closed(self) -> None:
        """Raises ContainerClosedError when the context has been closed."""
        if self._closed:
            raise ContainerClosedError("This context is already closed")

    def _assert_active(self) -> None:
        self._ensure_not_closed()
        if not self._active:
            if self._refreshed:
                raise IllegalStateError(
                    "Context refresh failed; the context cannot be used.\n"
                    "Hint: create a new context once the cause is fixed."
                )
            raise IllegalStateError(
                "Context has not been refreshed yet.\n"
                "Hint: call refresh() after registering your classes."
            )

    @property
    def bean_factory(self) -> BeanjectionContainer:
        """The underlying container.

        Raises:
            ContainerClosedError: When the context has been closed
        """
        self._ensure_not_closed()
        return self._container

    # Configuration

    def register(self, *component_classes: Type) -> None:
        """Register configuration or component classes.

        Each class is named by its explicit component name, or its class name
        with a lower-cased first letter.

        Raises:
            ContainerClosedError: When the context has been closed
            FrozenRegistryError: When the context has already been refreshed
        """
        self._ensure_not_closed()
        for component_class in component_classes:
            definition = AnnotatedBeanDefinition.for_class(component_class)
            process_common_definition_annotations(definition, definition.metadata)
            self._container.register_bean_definition(generate_bean_name(definition), definition)

    def register_definition(self, definition: BeanDefinition, name: Optional[str] = None) -> str:
        """Register a hand-built definition and return its bean name.

        Args:
            definition: The definition
            name: Bean name; defaults to ``definition.name``, then a name
                generated from the bean class
        """
        self._ensure_not_closed()
        bean_name = name or definition.name or generate_bean_name(definition)
        self._container.register_bean_definition(bean_name, definition)
        return bean_name

    def scan(self, *base_packages: str) -> int:
        """Register every component found below ``base_packages``.

        Returns:
            The number of definitions registered

        Raises:
            ScanFailureError: When a module cannot be imported
        """
        self._ensure_not_closed()
        before = self._container.get_bean_definition_count()
        for definition in self._scanner.scan(base_packages, [annotations.COMPONENT]):
            process_common_definition_annotations(definition, definition.metadata)
            self._container.register_bean_definition(generate_bean_name(definition), definition)
        registered = self._container.get_bean_definition_count() - before
        logger.info("Scan of %s registered %d bean definition(s)", ', '.join(base_packages), registered)
        return registered

    def add_bean_factory_post_processor(self, processor: Any) -> None:
        """Add a processor run during refresh before processors defined as beans.

        Accepts BeanDefinitionRegistryPostProcessor and BeanFactoryPostProcessor
        instances.
        """
        self._ensure_not_closed()
        self._bean_factory_post_processors.append(processor)

    def get_bean_factory_post_processors(self) -> List[BeanFactoryPostProcessor]:
        return list(self._bean_factory_post_processors)

    # Lifecycle

    def refresh(self) -> None:
        """Process configuration and create the non-lazy singletons.

        Raises:
            IllegalStateError: When called a second time
            ContainerClosedError: When the context has been closed
            PostProcessingError: When a processor fails
            BeanjectionError: When a singleton cannot be created
        """
        self._ensure_not_closed()
        if self._refreshed:
            raise IllegalStateError(
                "Context does not support multiple refresh attempts: just call 'refresh' once"
            )
        self._refreshed = True
        logger.info("Refreshing %s", self)

        try:
            self._orchestrator.invoke_all(self._container, self._bean_factory_post_processors)
            self._container.freeze_configuration()
            self._container.pre_instantiate_singletons()
        except Exception:
            logger.warning("Context refresh failed; destroying already created singletons")
            self._container.destroy_singletons()
            raise

        self._active = True
        logger.info(
            "Context refreshed with %d bean definition(s)",
            self._container.get_bean_definition_count(),
        )

    @property
    def is_active(self) -> bool:
        return self._active and not self._closed

    def close(self) -> None:
        """Close the context and destroy its singletons.

        Destroy hooks run in reverse creation order. This method is
        idempotent.
        """
        if not self._closed:
            self._closed = True
            if self._active:
                self._container.destroy_singletons()
            self._active = False
            logger.info("Closed %s", self)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def __enter__(self) -> 'AnnotationConfigContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    # Bean access

    def get_bean(
        self,
        name_or_type: Union[str, Type[T]],
        required_type: Optional[Type[T]] = None,
        *args: Any,
    ) -> Any:
        """Return a bean by name or type.

        See BeanjectionContainer.get_bean.

        Raises:
            ContainerClosedError: When the context has been closed
            IllegalStateError: When the context is not refreshed, or the
                refresh failed
        """
        self._assert_active()
        return self._container.get_bean(name_or_type, required_type, *args)

    def __getitem__(self, name_or_type: Union[str, Type[T]]) -> Callable[[], T]:
        """Support subscript syntax: context[Type]()."""
        self._assert_active()
        return self._container[name_or_type]

    def contains_bean(self, name: str) -> bool:
        self._ensure_not_closed()
        return self._container.contains_bean(name)

    def is_singleton(self, name: str) -> bool:
        self._assert_active()
        return self._container.is_singleton(name)

    def is_prototype(self, name: str) -> bool:
        self._assert_active()
        return self._container.is_prototype(name)

    def get_type(self, name: str) -> Optional[Type]:
        self._assert_active()
        return self._container.get_type(name)

    def get_bean_definition_names(self) -> List[str]:
        self._ensure_not_closed()
        return self._container.get_bean_definition_names()

    def get_bean_names_for_type(self, required_type: Type) -> List[str]:
        self._assert_active()
        return self._container.get_bean_names_for_type(required_type)

    def __repr__(self) -> str:
        state = 'closed' if self._closed else ('active' if self._active else 'inactive')
        return f"AnnotationConfigContext({state})"
