"""
ConfigurationClassParser

First phase of the configuration pipeline: turns candidate definitions into
ConfigurationClass objects.

Parsing a class:

1. runs its ``@component_scan`` (registering every scanned component right
   away and parsing those that are configuration classes themselves),
2. parses classes named by ``@import_beans`` that are configuration classes,
3. collects its ``@bean`` methods.

Nested results come before the class that caused them. Bean methods are only
collected here; the reader turns them into definitions.
"""

import logging
from typing import Iterable, List, Optional, Set, Tuple

from . import annotations
from .configuration_class import BeanMethod, ConfigurationClass
from .configuration_utils import (
    check_configuration_class_candidate,
    generate_bean_name,
    process_common_definition_annotations,
)
from .definition import AnnotatedBeanDefinition, BeanDefinition
from .exceptions import DuplicateDefinitionError, ScanFailureError
from .metadata import AnnotationMetadata
from .registry import BeanDefinitionRegistry
from .scanner import PackageScanner

logger = logging.getLogger(__name__)


class ConfigurationClassParser:
    """Parses configuration classes and runs their component scans.

    Attributes:
        registry: Registry receiving scanned component definitions
        scanner: Package scanner used for ``@component_scan``
    """

    def __init__(self, registry: BeanDefinitionRegistry, scanner: Optional[PackageScanner] = None):
        self.registry = registry
        self.scanner = scanner or PackageScanner()
        self._configuration_classes: List[ConfigurationClass] = []
        self._parsed: Set[str] = set()

    def parse(self, candidates: Iterable[Tuple[str, BeanDefinition]]) -> List[ConfigurationClass]:
        """Parse ``(bean_name, definition)`` candidates.

        Returns:
            The configuration classes found, nested ones first

        Raises:
            ScanFailureError: When a component scan fails
            DuplicateDefinitionError: When a scanned component clashes with an
                existing definition and overriding is disabled
        """
        for bean_name, definition in candidates:
            if not isinstance(definition, AnnotatedBeanDefinition) or definition.metadata is None:
                logger.warning(
                    "Skipping configuration candidate '%s': definition carries no annotation metadata",
                    bean_name,
                )
                continue
            self._process_configuration_class(ConfigurationClass(definition, bean_name))
        return list(self._configuration_classes)

    def get_configuration_classes(self) -> List[ConfigurationClass]:
        return list(self._configuration_classes)

    def _process_configuration_class(self, config_class: ConfigurationClass) -> None:
        if config_class.class_name in self._parsed:
            logger.debug("Configuration class %s already parsed", config_class.class_name)
            return
        self._parsed.add(config_class.class_name)
        logger.debug("Parsing configuration class %s", config_class.class_name)
        metadata = config_class.metadata

        scan_attributes = metadata.get_annotation_attributes(annotations.COMPONENT_SCAN)
        if scan_attributes is not None:
            for bean_name, scanned in self._component_scan(scan_attributes, config_class):
                if check_configuration_class_candidate(scanned):
                    self._process_configuration_class(ConfigurationClass(scanned, bean_name))

        for imported in config_class.get_imports():
            definition = AnnotatedBeanDefinition.for_class(imported)
            if check_configuration_class_candidate(definition):
                bean_name = definition.metadata.class_name
                self._process_configuration_class(ConfigurationClass(definition, bean_name))

        for method_metadata in metadata.get_annotated_methods(annotations.BEAN):
            config_class.add_bean_method(BeanMethod.from_metadata(method_metadata, config_class))

        self._configuration_classes.append(config_class)

    def _component_scan(self, attributes: dict, config_class: ConfigurationClass) -> List[Tuple[str, AnnotatedBeanDefinition]]:
        base_packages = list(attributes.get('value', ())) + list(attributes.get('base_packages', ()))
        for cls in attributes.get('base_package_classes', ()):
            base_packages.append(AnnotationMetadata(cls).package_name)
        if not base_packages:
            base_packages = [config_class.metadata.package_name]
        base_packages = list(dict.fromkeys(base_packages))

        include_markers = list(attributes.get('include_filters', ()))
        if not include_markers and attributes.get('use_default_filters', True):
            include_markers = [annotations.COMPONENT]
        exclude_markers = list(attributes.get('exclude_filters', ()))

        try:
            scanned = self.scanner.scan(base_packages, include_markers, exclude_markers)
        except ScanFailureError:
            raise
        except Exception as e:
            raise ScanFailureError(
                f"Component scan of {', '.join(base_packages)} declared on "
                f"{config_class.class_name} failed: {e}"
            ) from e

        registered = []
        for definition in scanned:
            if definition.metadata.class_name == config_class.class_name:
                continue
            if attributes.get('lazy_init'):
                definition.lazy_init = True
            process_common_definition_annotations(definition, definition.metadata)
            bean_name = generate_bean_name(definition)
            if self._check_candidate(bean_name, definition):
                self.registry.register(bean_name, definition)
                registered.append((bean_name, definition))
        logger.info(
            "Component scan of %s registered %d bean definition(s)",
            ', '.join(base_packages), len(registered),
        )
        return registered

    def _check_candidate(self, bean_name: str, definition: AnnotatedBeanDefinition) -> bool:
        if not self.registry.contains(bean_name):
            return True
        existing = self.registry.get(bean_name)
        if existing.get_bean_class_name() == definition.get_bean_class_name():
            logger.debug("Skipping scanned bean '%s': already registered for the same class", bean_name)
            return False
        if self.registry.allow_override:
            return True
        raise DuplicateDefinitionError(
            f"Scanned bean '{bean_name}' for {definition.get_bean_class_name()} conflicts with "
            f"the existing definition for {existing.get_bean_class_name()}.\n"
            f"Hint: give one of the components an explicit name, e.g. @component(\"otherName\")."
        )
