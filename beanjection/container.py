"""
BeanjectionContainer

This module provides the bean factory at the heart of Beanjection. It
composes three collaborators:

- BeanDefinitionRegistry: what can be created
- SingletonRegistry: what has been created
- InstanceCreator: how an instance is created

and adds lookup by name or type, init/destroy hooks and eager instantiation
of singletons. Beans implementing FactoryBean are dereferenced on lookup:
``name`` returns the product, ``&name`` the factory itself.

The container is typically not used directly. Instead, use
AnnotationConfigContext, which drives the configuration pipeline before
handing out beans.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Set, Type, TypeVar, Union

from .creator import InstanceCreator
from .definition import AnnotatedBeanDefinition, BeanDefinition
from .exceptions import (
    BeanjectionError,
    BeanTypeMismatchError,
    CyclicCreationError,
    DefinitionNotFoundError,
    InstantiationError,
    NoUniqueDefinitionError,
)
from .factory_bean import FACTORY_BEAN_PREFIX, FactoryBean, is_factory_dereference, transformed_bean_name
from .introspection import TypeIntrospector
from .registry import BeanDefinitionRegistry
from .singleton_registry import SingletonRegistry

logger = logging.getLogger(__name__)

T = TypeVar('T')


class BeanjectionContainer:
    """Bean factory with definition registry, singleton cache and instance creator.

    Beans are looked up by name, or by type when the type identifies a single
    bean (a ``primary`` definition wins over the others).

    Attributes:
        registry: The bean definition registry
        singletons: The singleton cache
        creator: The instance creator

    Example::

        container = BeanjectionContainer()
        container.register_bean_definition("foo", BeanDefinition(bean_class=Foo))
        container.register_bean_definition("bar", BeanDefinition(
            factory_bean_name="foo", factory_method_name="bar", scope="prototype"))

        foo = container.get_bean("foo")
        bar = container.get_bean("bar", Bar)
        same_foo = container[Foo]()
    """

    def __init__(
        self,
        allow_bean_definition_overriding: bool = True,
        introspector: Optional[TypeIntrospector] = None,
    ):
        """Initialize an empty container.

        Args:
            allow_bean_definition_overriding: Replace definitions registered
                twice under the same name instead of raising
                DuplicateDefinitionError
            introspector: Method lookup capability used for factory methods
                and lifecycle hooks
        """
        self.introspector = introspector or TypeIntrospector()
        self.registry = BeanDefinitionRegistry(allow_override=allow_bean_definition_overriding)
        self.singletons = SingletonRegistry()
        self.creator = InstanceCreator(self, self.introspector)
        self._prototypes_in_creation = threading.local()
        self._factory_bean_objects: Dict[str, Any] = {}
        self._factory_bean_objects_lock = threading.RLock()

    # Definition registry

    def register_bean_definition(self, name: str, definition: BeanDefinition) -> None:
        self.registry.register(name, definition)

    def get_bean_definition(self, name: str) -> BeanDefinition:
        return self.registry.get(name)

    def contains_bean_definition(self, name: str) -> bool:
        return self.registry.contains(name)

    def get_bean_definition_names(self) -> List[str]:
        return self.registry.names()

    def get_bean_definition_count(self) -> int:
        return self.registry.count()

    def remove_bean_definition(self, name: str) -> None:
        self.registry.remove(name)

    def freeze_configuration(self) -> None:
        self.registry.freeze()

    def is_configuration_frozen(self) -> bool:
        return self.registry.is_frozen()

    def register_singleton(self, name: str, instance: Any) -> None:
        """Register an existing object as a finished singleton.

        Raises:
            IllegalStateError: When a singleton with that name already exists
        """
        self.singletons.register_singleton(name, instance)
        logger.info("Registered singleton instance '%s'", name)

    def contains_singleton(self, name: str) -> bool:
        return self.singletons.contains_singleton(name)

    # Bean lookup

    def get_bean(
        self,
        name_or_type: Union[str, Type[T]],
        required_type: Optional[Type[T]] = None,
        *args: Any,
    ) -> Any:
        """Return the bean registered under a name, or the single bean of a type.

        Args:
            name_or_type: Bean name, or a type identifying one bean. A name
                prefixed with ``&`` returns a FactoryBean itself instead of
                its product
            required_type: Type the bean must be an instance of
            *args: Explicit arguments for the constructor or factory method;
                only used when an instance is actually created

        Returns:
            The bean instance; a shared one for singletons, a new one for
            prototypes

        Raises:
            DefinitionNotFoundError: When no bean has that name or type
            NoUniqueDefinitionError: When several beans match the type
            BeanTypeMismatchError: When the bean is not a ``required_type``
            CyclicCreationError: When the bean depends on itself during creation
            InstantiationError: When creating the bean fails
        """
        if isinstance(name_or_type, str):
            name = name_or_type
        else:
            name = self._resolve_name_for_type(name_or_type)
            required_type = required_type or name_or_type

        bean = self._do_get_bean(name, args)
        if required_type is not None and bean is not None and not isinstance(bean, required_type):
            raise BeanTypeMismatchError(
                f"Bean '{name}' is expected to be of type {required_type.__qualname__} "
                f"but is actually of type {type(bean).__qualname__}"
            )
        return bean

    def _do_get_bean(self, name: str, args: tuple) -> Any:
        bean_name = transformed_bean_name(name)
        instance = self._get_raw_bean(bean_name, args)
        return self._get_object_for_bean_instance(instance, name, bean_name)

    def _get_object_for_bean_instance(self, instance: Any, name: str, bean_name: str) -> Any:
        if is_factory_dereference(name):
            if instance is not None and not isinstance(instance, FactoryBean):
                raise BeanTypeMismatchError(
                    f"Bean '{bean_name}' is of type {type(instance).__qualname__}, "
                    f"which is not a FactoryBean.\n"
                    f"Hint: drop the '{FACTORY_BEAN_PREFIX}' prefix to look up the bean itself."
                )
            return instance
        if not isinstance(instance, FactoryBean):
            return instance

        if not (instance.is_singleton() and self.singletons.contains_singleton(bean_name)):
            return self._get_object_from_factory_bean(instance, bean_name)
        with self._factory_bean_objects_lock:
            if bean_name in self._factory_bean_objects:
                return self._factory_bean_objects[bean_name]
            product = self._get_object_from_factory_bean(instance, bean_name)
            self._factory_bean_objects[bean_name] = product
            return product

    def _get_object_from_factory_bean(self, factory: FactoryBean, bean_name: str) -> Any:
        try:
            product = factory.get_object()
        except BeanjectionError:
            raise
        except Exception as e:
            raise InstantiationError(
                f"FactoryBean '{bean_name}' of type {type(factory).__qualname__} "
                f"failed to create its object: {e}"
            ) from e
        logger.debug(
            "FactoryBean '%s' created object of type %s", bean_name, type(product).__qualname__
        )
        return product

    def _get_raw_bean(self, name: str, args: tuple) -> Any:
        if not args:
            shared = self.singletons.get_singleton(name)
            if shared is not None or self.singletons.contains_singleton(name):
                return shared

        definition = self.registry.get(name)
        if definition.abstract:
            raise InstantiationError(
                f"Bean definition '{name}' is abstract and cannot be instantiated"
            )

        if definition.is_singleton():
            return self.singletons.get_or_create_singleton(
                name, lambda: self._create_bean(name, definition, args)
            )

        in_creation = self._prototype_names_in_creation()
        if name in in_creation:
            raise CyclicCreationError(
                f"Prototype bean '{name}' is already in creation: "
                f"is there an unresolvable circular reference?"
            )
        in_creation.add(name)
        try:
            return self._create_bean(name, definition, args)
        finally:
            in_creation.discard(name)

    def _prototype_names_in_creation(self) -> Set[str]:
        names = getattr(self._prototypes_in_creation, 'names', None)
        if names is None:
            names = self._prototypes_in_creation.names = set()
        return names

    def _create_bean(self, name: str, definition: BeanDefinition, args: tuple) -> Any:
        instance = self.creator.create_instance(name, definition, args)
        if definition.is_singleton():
            self.singletons.register_singleton_factory(name, lambda: instance)
        if definition.init_method_name:
            self._invoke_lifecycle_method(name, instance, definition.init_method_name, 'init')
        logger.debug("Created bean '%s' of type %s", name, type(instance).__qualname__)
        return instance

    def _invoke_lifecycle_method(self, name: str, instance: Any, method_name: str, kind: str) -> None:
        handle = self.introspector.find_method(type(instance), method_name, 0)
        if handle is None:
            raise InstantiationError(
                f"Could not find an {kind} method named '{method_name}' on bean '{name}' "
                f"of type {type(instance).__qualname__}"
            )
        logger.debug("Invoking %s method %s on bean '%s'", kind, handle.describe(), name)
        self.introspector.invoke(handle, instance)

    def __getitem__(self, name_or_type: Union[str, Type[T]]) -> Callable[[], T]:
        """Support subscript syntax: container[Type]() or container["name"]()."""

        def getter() -> T:
            return self.get_bean(name_or_type)

        return getter

    def _resolve_name_for_type(self, required_type: Type) -> str:
        candidates = self.get_bean_names_for_type(required_type)
        if len(candidates) == 1:
            return candidates[0]
        if not candidates:
            raise DefinitionNotFoundError(
                f"No bean of type {required_type.__qualname__} is defined.\n"
                f"Registered names: {', '.join(self.registry.names()) or 'None'}"
            )

        autowire_candidates = [
            name for name in candidates
            if self._definition_flag(name, 'autowire_candidate', True)
        ]
        if len(autowire_candidates) == 1:
            return autowire_candidates[0]
        primaries = [
            name for name in autowire_candidates
            if self._definition_flag(name, 'primary', False)
        ]
        if len(primaries) == 1:
            return primaries[0]
        raise NoUniqueDefinitionError(
            f"Expected a single bean of type {required_type.__qualname__} but found "
            f"{len(candidates)}: {', '.join(candidates)}.\n"
            f"Hint: mark one of them with @primary or look the bean up by name."
        )

    def _definition_flag(self, name: str, flag: str, default: bool) -> bool:
        bean_name = transformed_bean_name(name)
        if not self.registry.contains(bean_name):
            return default
        return getattr(self.registry.get(bean_name), flag)

    # Introspection

    def contains_bean(self, name: str) -> bool:
        bean_name = transformed_bean_name(name)
        return self.singletons.contains_singleton(bean_name) or self.registry.contains(bean_name)

    def is_singleton(self, name: str) -> bool:
        """True when ``get_bean(name)`` always returns the same instance.

        For an instantiated FactoryBean the answer comes from its
        ``is_singleton()`` unless ``name`` carries the ``&`` prefix.

        Raises:
            DefinitionNotFoundError: When no bean has that name
        """
        bean_name = transformed_bean_name(name)
        if self.registry.contains(bean_name):
            singleton = self.registry.get(bean_name).is_singleton()
        elif self.singletons.contains_singleton(bean_name):
            singleton = True
        else:
            raise DefinitionNotFoundError(f"No bean named '{name}' is defined")

        factory = self._shared_factory_bean(bean_name)
        if singleton and factory is not None and not is_factory_dereference(name):
            return factory.is_singleton()
        return singleton

    def is_prototype(self, name: str) -> bool:
        bean_name = transformed_bean_name(name)
        if self.registry.contains(bean_name):
            prototype = self.registry.get(bean_name).is_prototype()
        elif self.singletons.contains_singleton(bean_name):
            prototype = False
        else:
            raise DefinitionNotFoundError(f"No bean named '{name}' is defined")

        factory = self._shared_factory_bean(bean_name)
        if not prototype and factory is not None and not is_factory_dereference(name):
            return not factory.is_singleton()
        return prototype

    def _shared_factory_bean(self, bean_name: str) -> Optional[FactoryBean]:
        if not self.singletons.contains_singleton(bean_name):
            return None
        instance = self.singletons.get_singleton(bean_name, allow_early_reference=False)
        return instance if isinstance(instance, FactoryBean) else None

    def get_type(self, name: str) -> Optional[Type]:
        """Return the type of the bean named ``name`` without creating it.

        For factory-method beans the declared return annotation is used until
        the bean exists. For a FactoryBean the product type reported by
        ``get_object_type()`` is returned once the factory is instantiated;
        ``&name`` gives the factory's own type. None when the type cannot be
        determined.

        Raises:
            DefinitionNotFoundError: When no bean has that name
            InvalidDefinitionError: When the bean class cannot be loaded
        """
        bean_name = transformed_bean_name(name)
        bean_type = self._get_raw_type(bean_name)
        if is_factory_dereference(name) or not _is_factory_bean_type(bean_type):
            return bean_type
        factory = self._shared_factory_bean(bean_name)
        return factory.get_object_type() if factory is not None else None

    def _get_raw_type(self, name: str) -> Optional[Type]:
        if self.singletons.contains_singleton(name):
            instance = self.singletons.get_singleton(name, allow_early_reference=False)
            if instance is not None:
                return type(instance)
        if not self.registry.contains(name):
            if self.singletons.contains_singleton(name):
                return None
            raise DefinitionNotFoundError(f"No bean named '{name}' is defined")

        definition = self.registry.get(name)
        if definition.factory_method_name is not None:
            if isinstance(definition, AnnotatedBeanDefinition) and definition.factory_method_metadata:
                annotation = definition.factory_method_metadata.get_return_annotation()
                if isinstance(annotation, type):
                    return annotation
            return None
        return definition.resolve_bean_class()

    def get_bean_names_for_type(self, required_type: Type) -> List[str]:
        """Names of the beans whose type is ``required_type`` or a subclass.

        Abstract definitions are ignored, as are definitions whose type
        cannot be determined (an unloadable class, or a factory method
        without a return annotation). A FactoryBean matches by its product
        type under its own name, and by its own type as ``&name``. Manually
        registered singletons without a definition come last.
        """
        names = []
        for name in self.registry.names():
            definition = self.registry.get(name)
            if definition.abstract:
                continue
            try:
                bean_type = self._get_raw_type(name)
            except BeanjectionError as e:
                logger.debug(
                    "Skipping bean '%s' while matching type %s: %s",
                    name, required_type.__qualname__, e,
                )
                continue
            if bean_type is None:
                logger.debug(
                    "Skipping bean '%s' while matching type %s: type unknown before creation",
                    name, required_type.__qualname__,
                )
                continue
            self._collect_type_match(names, name, bean_type, required_type)
        for name in self.singletons.singleton_names():
            if name in self.registry:
                continue
            instance = self.singletons.get_singleton(name)
            if instance is not None:
                self._collect_type_match(names, name, type(instance), required_type)
        return names

    def _collect_type_match(self, names: List[str], name: str, bean_type: Type, required_type: Type) -> None:
        if not _is_factory_bean_type(bean_type):
            if issubclass(bean_type, required_type):
                names.append(name)
            return
        product_type = self.get_type(name)
        if isinstance(product_type, type) and issubclass(product_type, required_type):
            names.append(name)
        if issubclass(bean_type, required_type):
            names.append(FACTORY_BEAN_PREFIX + name)

    # Lifecycle

    def pre_instantiate_singletons(self) -> None:
        """Create every non-abstract, non-lazy singleton in registration order.

        A FactoryBean is instantiated itself; its product is created on
        first lookup.
        """
        names = self.registry.names()
        logger.info("Pre-instantiating singletons in %d bean definition(s)", len(names))
        for name in names:
            definition = self.registry.get(name)
            if not definition.abstract and definition.is_singleton() and not definition.lazy_init:
                self._get_raw_bean(name, ())

    def destroy_singletons(self) -> None:
        """Drop every singleton, running destroy hooks in reverse creation order."""
        logger.info("Destroying %d singleton(s)", self.singletons.singleton_count())
        with self._factory_bean_objects_lock:
            self._factory_bean_objects.clear()
        self.singletons.destroy_singletons(self._destroy_bean)

    def _destroy_bean(self, name: str, instance: Any) -> None:
        if instance is None or not self.registry.contains(name):
            return
        method_name = self.registry.get(name).destroy_method_name
        if method_name:
            self._invoke_lifecycle_method(name, instance, method_name, 'destroy')


def _is_factory_bean_type(bean_type: Any) -> bool:
    return isinstance(bean_type, type) and issubclass(bean_type, FactoryBean)
