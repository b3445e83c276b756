"""
ConfigurationClass

Parsed representation of one configuration-bearing bean definition and the
``@bean`` methods discovered on it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from . import annotations
from .definition import AnnotatedBeanDefinition
from .metadata import AnnotationMetadata, MethodMetadata


class ConfigurationClass:
    """A configuration class with its bean methods.

    Two instances are equal when they describe the same class, whatever the
    bean name they were registered under.

    Attributes:
        definition: The annotated definition the class was parsed from
        bean_name: Registry name of the configuration bean
        bean_methods: ``@bean`` methods in declaration order
    """

    def __init__(self, definition: AnnotatedBeanDefinition, bean_name: str):
        self.definition = definition
        self.bean_name = bean_name
        self.bean_methods: List['BeanMethod'] = []

    @property
    def metadata(self) -> AnnotationMetadata:
        return self.definition.metadata

    @property
    def class_name(self) -> str:
        return self.metadata.class_name

    @property
    def config_type(self) -> Type:
        return self.metadata.introspected_class

    def add_bean_method(self, bean_method: 'BeanMethod') -> None:
        self.bean_methods.append(bean_method)

    def get_imports(self) -> Tuple[Type, ...]:
        """Classes named by the ``@import_beans`` marker, or an empty tuple."""
        attributes = self.metadata.get_annotation_attributes(annotations.IMPORT)
        if not attributes:
            return ()
        return tuple(attributes.get('value', ()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigurationClass):
            return NotImplemented
        return self.class_name == other.class_name

    def __hash__(self) -> int:
        return hash(self.class_name)

    def __repr__(self) -> str:
        return f"ConfigurationClass(bean_name={self.bean_name!r}, class={self.class_name})"


@dataclass
class BeanMethod:
    """A ``@bean`` factory method attached to a ConfigurationClass.

    Attributes:
        metadata: The method metadata
        configuration_class: The owning configuration class
        bean_names: Explicit names, first one wins; empty means the method name
        autowire_candidate: Copied to the resulting definition
        init_method: Name of the init hook, or empty
        destroy_method: Name of the destroy hook, or empty
    """
    metadata: MethodMetadata
    configuration_class: ConfigurationClass
    bean_names: Tuple[str, ...] = ()
    autowire_candidate: bool = True
    init_method: str = ''
    destroy_method: str = ''
    attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def method_name(self) -> str:
        return self.metadata.method_name

    def is_static(self) -> bool:
        return self.metadata.is_static()

    def resolve_bean_name(self) -> str:
        return self.bean_names[0] if self.bean_names else self.method_name

    @classmethod
    def from_metadata(
        cls,
        metadata: MethodMetadata,
        configuration_class: ConfigurationClass,
    ) -> 'BeanMethod':
        attributes: Optional[Dict[str, Any]] = metadata.get_annotation_attributes(annotations.BEAN)
        attributes = attributes or {}
        names = tuple(attributes.get('value', ())) + tuple(attributes.get('name', ()))
        return cls(
            metadata=metadata,
            configuration_class=configuration_class,
            bean_names=names,
            autowire_candidate=attributes.get('autowire_candidate', True),
            init_method=attributes.get('init_method', ''),
            destroy_method=attributes.get('destroy_method', ''),
            attributes=attributes,
        )
