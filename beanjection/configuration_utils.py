"""
Configuration utilities

Helpers shared by the parser, the reader and the scanner.
"""

from typing import Optional, Union

from . import annotations
from .definition import AnnotatedBeanDefinition, BeanDefinition
from .metadata import AnnotationMetadata, MethodMetadata

# Name under which every context registers its configuration processor
CONFIGURATION_PROCESSOR_BEAN_NAME = 'configurationClassPostProcessor'


def check_configuration_class_candidate(definition: BeanDefinition) -> bool:
    """True when ``definition`` describes a class the parser should process.

    That is a class marked ``@configuration``, a component (directly or via a
    stereotype), or a class declaring ``@component_scan`` or ``@import_beans``.
    Factory-method definitions never qualify.
    """
    if definition.factory_method_name is not None:
        return False
    metadata = _metadata_of(definition)
    if metadata is None:
        return False
    return (
        metadata.has_annotation(annotations.CONFIGURATION)
        or metadata.is_annotated(annotations.COMPONENT)
        or metadata.has_annotation(annotations.COMPONENT_SCAN)
        or metadata.has_annotation(annotations.IMPORT)
    )


def _metadata_of(definition: BeanDefinition) -> Optional[AnnotationMetadata]:
    if isinstance(definition, AnnotatedBeanDefinition) and definition.metadata is not None:
        return definition.metadata
    return None


def process_common_definition_annotations(
    definition: BeanDefinition,
    metadata: Union[AnnotationMetadata, MethodMetadata],
) -> None:
    """Apply ``@lazy``, ``@primary`` and ``@scope`` found on ``metadata``."""
    lazy = metadata.get_annotation_attributes(annotations.LAZY)
    if lazy is not None:
        definition.lazy_init = bool(lazy.get('value', True))
    if metadata.has_annotation(annotations.PRIMARY):
        definition.primary = True
    scope = metadata.get_annotation_attributes(annotations.SCOPE)
    if scope:
        definition.scope = scope.get('value')


def generate_bean_name(definition: BeanDefinition) -> str:
    """Explicit component name, else the simple class name with a lower-cased first letter.

    Names starting with two upper-case letters are kept as is
    (``URLParser`` stays ``URLParser``).
    """
    bean_class = definition.bean_class
    if bean_class is not None:
        explicit = annotations.explicit_component_name(bean_class)
        if explicit:
            return explicit
        simple_name = bean_class.__name__
    else:
        simple_name = (definition.bean_class_name or '').rpartition('.')[2]
    return decapitalize(simple_name)


def decapitalize(name: str) -> str:
    if not name:
        return name
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[0].lower() + name[1:]
