"""
Processors

Hooks invoked once per refresh, before any singleton is instantiated.

Registry processors run first and may add, remove or replace definitions.
Factory processors run afterwards and may only adjust what is registered.
A class may implement both interfaces.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .container import BeanjectionContainer
    from .registry import BeanDefinitionRegistry


class BeanDefinitionRegistryPostProcessor(ABC):
    """Processor allowed to mutate the definition registry.

    Example::

        class AddAuditBean(BeanDefinitionRegistryPostProcessor):
            def post_process_bean_definition_registry(self, registry):
                registry.register("audit", BeanDefinition(bean_class=Audit))
    """

    @abstractmethod
    def post_process_bean_definition_registry(self, registry: 'BeanDefinitionRegistry') -> None:
        raise NotImplementedError


class BeanFactoryPostProcessor(ABC):
    """Processor allowed to adjust registered definitions.

    Example::

        @component
        class PrototypeUsers(BeanFactoryPostProcessor):
            def post_process_bean_factory(self, bean_factory):
                bean_factory.get_bean_definition("user").scope = "prototype"
    """

    @abstractmethod
    def post_process_bean_factory(self, bean_factory: 'BeanjectionContainer') -> None:
        raise NotImplementedError
