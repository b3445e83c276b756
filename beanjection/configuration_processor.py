"""
ConfigurationClassPostProcessor

Registry processor driving the configuration pipeline: collects candidate
definitions, parses them and loads the definitions they imply.
"""

import logging
from typing import Optional

from .configuration_parser import ConfigurationClassParser
from .configuration_reader import ConfigurationClassBeanDefinitionReader
from .configuration_utils import check_configuration_class_candidate
from .processors import BeanDefinitionRegistryPostProcessor
from .registry import BeanDefinitionRegistry
from .scanner import PackageScanner

logger = logging.getLogger(__name__)


class ConfigurationClassPostProcessor(BeanDefinitionRegistryPostProcessor):
    """Turns registered configuration classes into bean definitions.

    Attributes:
        scanner: Scanner used for ``@component_scan``; a PackageScanner by default
        skip_existing_bean_methods: Passed on to the reader
    """

    def __init__(self, scanner: Optional[PackageScanner] = None, skip_existing_bean_methods: bool = True):
        self.scanner = scanner or PackageScanner()
        self.skip_existing_bean_methods = skip_existing_bean_methods

    def post_process_bean_definition_registry(self, registry: BeanDefinitionRegistry) -> None:
        candidates = [
            (name, registry.get(name))
            for name in registry.names()
            if check_configuration_class_candidate(registry.get(name))
        ]
        if not candidates:
            logger.debug("No configuration classes found")
            return

        logger.info("Processing %d configuration class candidate(s)", len(candidates))
        parser = ConfigurationClassParser(registry, self.scanner)
        config_classes = parser.parse(candidates)

        reader = ConfigurationClassBeanDefinitionReader(registry, self.skip_existing_bean_methods)
        reader.load_bean_definitions(config_classes)
