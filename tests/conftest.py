"""
Test Configuration and Utilities

Common base classes and helper functions for Beanjection tests
"""

import unittest
from typing import Type

from beanjection import AnnotationConfigContext, BeanDefinition, BeanjectionContainer


class BeanjectionTestCase(unittest.TestCase):
    """
    Base test case class for Beanjection tests.

    Provides a fresh container per test and closes every context created
    through create_context() after the test.
    """

    def setUp(self):
        """Create an empty container before each test"""
        self.container = BeanjectionContainer()

    def create_context(self, *component_classes: Type, **kwargs) -> AnnotationConfigContext:
        """Create a context that is closed automatically after the test."""
        context = AnnotationConfigContext(*component_classes, **kwargs)
        self.addCleanup(context.close)
        return context


def create_simple_container(**service_classes: Type) -> BeanjectionContainer:
    """
    Create a container with singleton definitions for the given classes.

    Each keyword becomes the bean name. Classes must have a no-arg constructor.

    Example:
        >>> container = create_simple_container(database=Database, cache=CacheService)
        >>> container.get_bean("database")
    """
    container = BeanjectionContainer()
    for name, cls in service_classes.items():
        container.register_bean_definition(name, BeanDefinition(bean_class=cls))
    return container
