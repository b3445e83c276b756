"""
ConfigurationClassBeanDefinitionReader

Second phase of the configuration pipeline: registers the definitions implied
by parsed configuration classes.
"""

import logging
from typing import Iterable

from .configuration_class import BeanMethod, ConfigurationClass
from .configuration_utils import process_common_definition_annotations
from .definition import AnnotatedBeanDefinition
from .registry import BeanDefinitionRegistry

logger = logging.getLogger(__name__)


class ConfigurationClassBeanDefinitionReader:
    """Registers imported classes and ``@bean`` method definitions.

    Attributes:
        registry: Target registry
        skip_existing_bean_methods: When True, a bean method whose name is
            already registered is skipped. When False, the registry's
            override policy decides.
    """

    def __init__(self, registry: BeanDefinitionRegistry, skip_existing_bean_methods: bool = True):
        self.registry = registry
        self.skip_existing_bean_methods = skip_existing_bean_methods

    def load_bean_definitions(self, config_classes: Iterable[ConfigurationClass]) -> None:
        for config_class in config_classes:
            self._load_for_configuration_class(config_class)

    def _load_for_configuration_class(self, config_class: ConfigurationClass) -> None:
        if not self.registry.contains(config_class.bean_name):
            # Imported configuration classes are not registered yet
            self._register_imported(config_class.config_type)

        for imported in config_class.get_imports():
            self._register_imported(imported)

        for bean_method in config_class.bean_methods:
            self._load_for_bean_method(bean_method)

    def _register_imported(self, imported: type) -> None:
        definition = AnnotatedBeanDefinition.for_class(imported)
        bean_name = definition.metadata.class_name
        if self.registry.contains(bean_name):
            logger.debug("Imported class %s already registered", bean_name)
            return
        process_common_definition_annotations(definition, definition.metadata)
        self.registry.register(bean_name, definition)

    def _load_for_bean_method(self, bean_method: BeanMethod) -> None:
        config_class = bean_method.configuration_class
        bean_name = bean_method.resolve_bean_name()

        if self.skip_existing_bean_methods and self.registry.contains(bean_name):
            logger.debug(
                "Skipping bean method %s.%s: bean '%s' is already defined",
                config_class.class_name, bean_method.method_name, bean_name,
            )
            return

        definition = AnnotatedBeanDefinition(
            metadata=config_class.metadata,
            factory_method_metadata=bean_method.metadata,
            source=f"{config_class.class_name}.{bean_method.method_name}",
        )
        if bean_method.is_static():
            definition.bean_class = config_class.config_type
        else:
            definition.factory_bean_name = config_class.bean_name
        definition.factory_method_name = bean_method.method_name

        definition.autowire_candidate = bean_method.autowire_candidate
        if bean_method.init_method:
            definition.init_method_name = bean_method.init_method
        if bean_method.destroy_method:
            definition.destroy_method_name = bean_method.destroy_method
        process_common_definition_annotations(definition, bean_method.metadata)

        logger.debug(
            "Registering bean definition for @bean method %s.%s()",
            config_class.class_name, bean_method.method_name,
        )
        self.registry.register(bean_name, definition)
