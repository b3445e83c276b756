"""
InstanceCreator

Builds bean instances from their definitions.

Dispatch order (first match wins):

1. Instance factory: ``factory_bean_name`` and ``factory_method_name`` set.
   The factory bean is fetched from the container, which may create it.
2. Static factory: ``factory_method_name`` set, no factory bean. The method
   is located on the bean class.
3. Constructor: the bean class is called without arguments.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from .definition import BeanDefinition
from .exceptions import (
    BeanjectionError,
    FactoryMethodNotFoundError,
    IllegalStateError,
    InstantiationError,
    NoDefaultConstructorError,
    NoFactoryClassError,
    SelfReferentialFactoryError,
)
from .introspection import TypeIntrospector

if TYPE_CHECKING:
    from .container import BeanjectionContainer

logger = logging.getLogger(__name__)


class InstanceCreator:
    """Constructor / factory-method dispatcher.

    Attributes:
        container: Container used to resolve factory beans
        introspector: Method lookup and invocation capability
    """

    def __init__(
        self,
        container: 'BeanjectionContainer',
        introspector: Optional[TypeIntrospector] = None,
    ):
        self.container = container
        self.introspector = introspector or TypeIntrospector()

    def create_instance(
        self,
        name: str,
        definition: BeanDefinition,
        explicit_args: Optional[Sequence[Any]] = None,
    ) -> Any:
        """Create a new instance for ``definition``.

        Args:
            name: Bean name being created
            definition: The bean definition
            explicit_args: Arguments passed to the factory method or constructor

        Returns:
            The new instance

        Raises:
            SelfReferentialFactoryError: When the definition is its own factory bean
            FactoryMethodNotFoundError: When the factory method does not exist
            NoFactoryClassError: When a static factory has no class
            NoDefaultConstructorError: When the class needs constructor arguments
            InstantiationError: When construction fails for any other reason
        """
        logger.debug("Creating instance of bean '%s'", name)
        try:
            if definition.factory_method_name is not None:
                return self._instantiate_using_factory_method(name, definition, explicit_args)
            return self._instantiate_bean(name, definition, explicit_args)
        except BeanjectionError:
            raise
        except Exception as e:
            raise InstantiationError(
                f"Instantiation of bean '{name}' failed: {e}"
            ) from e

    def _instantiate_using_factory_method(
        self,
        name: str,
        definition: BeanDefinition,
        explicit_args: Optional[Sequence[Any]],
    ) -> Any:
        factory_bean_name = definition.factory_bean_name
        if factory_bean_name is not None:
            if factory_bean_name == name:
                raise SelfReferentialFactoryError(
                    f"Factory bean '{factory_bean_name}' cannot be the bean it creates ('{name}').\n"
                    f"Hint: point factory_bean_name at the configuration bean declaring "
                    f"'{definition.factory_method_name}'."
                )
            logger.debug("Resolving factory bean '%s' for bean '%s'", factory_bean_name, name)
            factory_bean = self.container.get_bean(factory_bean_name)
            if factory_bean is None:
                raise InstantiationError(
                    f"Factory bean '{factory_bean_name}' of bean '{name}' resolved to None"
                )
            if definition.is_singleton() and self.container.contains_singleton(name):
                raise IllegalStateError(
                    f"Singleton bean '{name}' was created while resolving its factory bean "
                    f"'{factory_bean_name}'"
                )
            factory_class = type(factory_bean)
        else:
            factory_class = definition.resolve_bean_class()
            if factory_class is None:
                raise NoFactoryClassError(
                    f"Static factory method bean '{name}' declares no factory class.\n"
                    f"Hint: set bean_class to the class declaring "
                    f"'{definition.factory_method_name}'."
                )
            factory_bean = None

        args = tuple(explicit_args) if explicit_args else ()
        handle = self.introspector.find_method(factory_class, definition.factory_method_name, len(args))
        if handle is None:
            raise FactoryMethodNotFoundError(
                f"No factory method '{definition.factory_method_name}' accepting "
                f"{len(args)} argument(s) found on {factory_class.__qualname__} for bean '{name}'"
            )
        if factory_bean is None and not handle.is_static:
            raise FactoryMethodNotFoundError(
                f"Factory method {handle.describe()} of bean '{name}' is an instance method; "
                f"set factory_bean_name to call it on a factory bean"
            )

        logger.debug("Invoking factory method %s for bean '%s'", handle.describe(), name)
        return self.introspector.invoke(handle, factory_bean, args)

    def _instantiate_bean(
        self,
        name: str,
        definition: BeanDefinition,
        explicit_args: Optional[Sequence[Any]],
    ) -> Any:
        bean_class = definition.resolve_bean_class()
        if bean_class is None:
            raise NoDefaultConstructorError(
                f"Bean '{name}' has neither a bean class nor a factory method"
            )
        if explicit_args:
            return self.introspector.instantiate(bean_class, tuple(explicit_args))
        if not self.introspector.has_default_constructor(bean_class):
            raise NoDefaultConstructorError(
                f"No default constructor found for bean '{name}' of type "
                f"{bean_class.__qualname__}.\n"
                f"Hint: give every __init__ parameter a default or use a @bean factory method."
            )
        return self.introspector.instantiate(bean_class)
