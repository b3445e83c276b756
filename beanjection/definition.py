"""
Definition

Data classes representing bean definitions
"""

import importlib
from dataclasses import dataclass, field
from typing import Any, Optional, Type, Union

from .exceptions import FrozenRegistryError, InvalidDefinitionError
from .lifecycle import BeanjectionLifeCycle
from .metadata import AnnotationMetadata, MethodMetadata


def _coerce_scope(scope: Union[str, BeanjectionLifeCycle, None]) -> BeanjectionLifeCycle:
    if scope is None or scope == '':
        return BeanjectionLifeCycle.SINGLETON
    if isinstance(scope, BeanjectionLifeCycle):
        return scope
    try:
        return BeanjectionLifeCycle(str(scope).lower())
    except ValueError:
        raise InvalidDefinitionError(
            f"Unknown scope '{scope}'. "
            f"Supported scopes: {', '.join(s.value for s in BeanjectionLifeCycle)}"
        ) from None


def load_class(class_name: str) -> Type:
    """Import a class from its qualified ``module.QualName`` name.

    Raises:
        InvalidDefinitionError: When no importable module prefix exposes the name
    """
    parts = class_name.split('.')
    for index in range(len(parts) - 1, 0, -1):
        module_name = '.'.join(parts[:index])
        try:
            target: Any = importlib.import_module(module_name)
        except ModuleNotFoundError:
            continue
        except Exception as e:
            raise InvalidDefinitionError(
                f"Cannot load bean class [{class_name}]: importing {module_name} failed: {e}"
            ) from e
        try:
            for attribute in parts[index:]:
                target = getattr(target, attribute)
        except AttributeError:
            continue
        if isinstance(target, type):
            return target
    raise InvalidDefinitionError(
        f"Cannot load bean class [{class_name}]. "
        f"Hint: use the qualified 'module.ClassName' form."
    )


@dataclass(eq=False)
class BeanDefinition:
    """Construction recipe for one named bean.

    Exactly one construction path is active:

    - constructor: no factory method, ``bean_class`` set
    - static factory: ``factory_method_name`` and ``bean_class`` set
    - instance factory: ``factory_bean_name`` and ``factory_method_name`` set

    A definition can be modified until it is frozen together with its registry.
    """
    bean_class: Optional[Type] = None
    bean_class_name: Optional[str] = None  # Resolved lazily when bean_class is absent
    name: Optional[str] = None
    scope: Union[BeanjectionLifeCycle, str, None] = BeanjectionLifeCycle.SINGLETON
    lazy_init: bool = False
    abstract: bool = False  # Abstract definitions are never instantiated eagerly
    primary: bool = False
    factory_bean_name: Optional[str] = None
    factory_method_name: Optional[str] = None
    init_method_name: Optional[str] = None
    destroy_method_name: Optional[str] = None
    autowire_candidate: bool = True
    source: Optional[Any] = None
    _frozen: bool = field(default=False, init=False, repr=False)

    def __setattr__(self, key: str, value: Any) -> None:
        if self.__dict__.get('_frozen', False):
            raise FrozenRegistryError(
                f"Bean definition '{self.name}' is frozen and cannot be modified "
                f"(attempted to set '{key}')"
            )
        if key == 'scope':
            value = _coerce_scope(value)
        object.__setattr__(self, key, value)

    def freeze(self) -> None:
        object.__setattr__(self, '_frozen', True)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def is_singleton(self) -> bool:
        return self.scope == BeanjectionLifeCycle.SINGLETON

    def is_prototype(self) -> bool:
        return self.scope == BeanjectionLifeCycle.PROTOTYPE

    def has_bean_class(self) -> bool:
        return isinstance(self.bean_class, type)

    def get_bean_class_name(self) -> Optional[str]:
        if self.bean_class is not None:
            return f"{self.bean_class.__module__}.{self.bean_class.__qualname__}"
        return self.bean_class_name

    def resolve_bean_class(self) -> Optional[Type]:
        """Return the bean class, importing it from ``bean_class_name`` if needed.

        The resolved class is cached even on a frozen definition.
        """
        if self.bean_class is None and self.bean_class_name:
            object.__setattr__(self, 'bean_class', load_class(self.bean_class_name))
        return self.bean_class

    def is_factory_method(self) -> bool:
        return self.factory_method_name is not None

    def has_instance_provider(self) -> bool:
        return self.factory_bean_name is not None and self.factory_method_name is not None

    def validate(self) -> None:
        """Reject partial factory configuration.

        Raises:
            InvalidDefinitionError: When a factory bean is named without a
                factory method, or either name is empty
        """
        if self.factory_method_name == '':
            raise InvalidDefinitionError(
                f"Bean definition '{self.name}' has an empty factory method name"
            )
        if self.factory_bean_name == '':
            raise InvalidDefinitionError(
                f"Bean definition '{self.name}' has an empty factory bean name"
            )
        if self.factory_bean_name is not None and self.factory_method_name is None:
            raise InvalidDefinitionError(
                f"Bean definition '{self.name}' names factory bean "
                f"'{self.factory_bean_name}' but no factory method.\n"
                f"Hint: set factory_method_name as well."
            )


@dataclass(eq=False)
class AnnotatedBeanDefinition(BeanDefinition):
    """Bean definition carrying the marker metadata of its class.

    Created for registered component classes, scanned components, imported
    classes and ``@bean`` methods. For the latter, ``metadata`` describes the
    configuration class and ``factory_method_metadata`` the bean method.
    """
    metadata: Optional[AnnotationMetadata] = None
    factory_method_metadata: Optional[MethodMetadata] = None

    @classmethod
    def for_class(cls, bean_class: Type, **kwargs: Any) -> 'AnnotatedBeanDefinition':
        return cls(bean_class=bean_class, metadata=AnnotationMetadata(bean_class), **kwargs)
