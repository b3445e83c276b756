"""
Post Processor Tests

Tests for processor ordering, discovery and exactly-once invocation
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from beanjection import (
    BeanDefinition,
    BeanDefinitionRegistryPostProcessor,
    BeanFactoryPostProcessor,
    BeanjectionLifeCycle,
    PostProcessingError,
    PostProcessorOrchestrator,
)
from conftest import BeanjectionTestCase
from fixtures import Database


CALLS = []


class AddX(BeanDefinitionRegistryPostProcessor):
    """Registers definition 'X'"""

    def post_process_bean_definition_registry(self, registry):
        CALLS.append("registry:AddX")
        registry.register("X", BeanDefinition(bean_class=Database))


class MakeXPrototype(BeanFactoryPostProcessor):
    """Changes the scope of 'X'"""

    def post_process_bean_factory(self, bean_factory):
        CALLS.append(("factory:MakeXPrototype", bean_factory.contains_bean_definition("X")))
        bean_factory.get_bean_definition("X").scope = "prototype"


class RegistersAnotherProcessor(BeanDefinitionRegistryPostProcessor):
    """Registers a further registry processor as a bean"""

    def post_process_bean_definition_registry(self, registry):
        CALLS.append("registry:RegistersAnotherProcessor")
        registry.register("addX", BeanDefinition(bean_class=AddX))


class BothKinds(BeanDefinitionRegistryPostProcessor, BeanFactoryPostProcessor):
    """Implements both hooks"""

    def post_process_bean_definition_registry(self, registry):
        CALLS.append("registry:BothKinds")

    def post_process_bean_factory(self, bean_factory):
        CALLS.append("factory:BothKinds")


class Failing(BeanFactoryPostProcessor):
    """Always fails"""

    def post_process_bean_factory(self, bean_factory):
        raise ValueError("processor failed")


class TestOrdering(BeanjectionTestCase):
    """Registry processors run before factory processors"""

    def setUp(self):
        super().setUp()
        CALLS.clear()
        self.orchestrator = PostProcessorOrchestrator()

    def test_registry_addition_visible_to_factory_processor(self):
        self.orchestrator.invoke_all(self.container, [MakeXPrototype(), AddX()])

        self.assertEqual(CALLS, ["registry:AddX", ("factory:MakeXPrototype", True)])
        self.assertEqual(self.container.get_bean_definition("X").scope, BeanjectionLifeCycle.PROTOTYPE)

    def test_discovered_processors(self):
        self.container.register_bean_definition("makeXPrototype", BeanDefinition(bean_class=MakeXPrototype))
        self.container.register_bean_definition("addX", BeanDefinition(bean_class=AddX))

        self.orchestrator.invoke_all(self.container)

        self.assertEqual(CALLS, ["registry:AddX", ("factory:MakeXPrototype", True)])
        self.assertTrue(self.container.get_bean_definition("X").is_prototype())

    def test_manual_processors_run_before_discovered_ones(self):
        self.container.register_bean_definition("bothKinds", BeanDefinition(bean_class=BothKinds))

        self.orchestrator.invoke_all(self.container, [AddX()])

        self.assertEqual(CALLS, ["registry:AddX", "registry:BothKinds", "factory:BothKinds"])

    def test_registry_processor_registered_by_another_one(self):
        self.container.register_bean_definition(
            "registersAnother", BeanDefinition(bean_class=RegistersAnotherProcessor)
        )

        self.orchestrator.invoke_all(self.container)

        self.assertEqual(CALLS, ["registry:RegistersAnotherProcessor", "registry:AddX"])
        self.assertTrue(self.container.contains_bean_definition("X"))


class TestExactlyOnce(BeanjectionTestCase):
    """Each processor runs at most once"""

    def setUp(self):
        super().setUp()
        CALLS.clear()

    def test_processor_supplied_and_registered_runs_once(self):
        processor = BothKinds()
        self.container.register_singleton("bothKinds", processor)

        PostProcessorOrchestrator().invoke_all(self.container, [processor])

        self.assertEqual(CALLS, ["registry:BothKinds", "factory:BothKinds"])

    def test_factory_processor_supplied_and_registered_runs_once(self):
        processor = MakeXPrototype()
        self.container.register_singleton("makeXPrototype", processor)

        PostProcessorOrchestrator().invoke_all(self.container, [AddX(), processor])

        self.assertEqual(CALLS, ["registry:AddX", ("factory:MakeXPrototype", True)])


class TestFailures(BeanjectionTestCase):
    """Processor failures"""

    def test_failure_is_wrapped(self):
        with self.assertRaises(PostProcessingError) as ctx:
            PostProcessorOrchestrator().invoke_all(self.container, [Failing()])

        self.assertIsInstance(ctx.exception.__cause__, ValueError)
        self.assertIn("Failing", str(ctx.exception))

    def test_no_rollback_of_earlier_processors(self):
        CALLS.clear()
        with self.assertRaises(PostProcessingError):
            PostProcessorOrchestrator().invoke_all(self.container, [AddX(), Failing()])
        self.assertTrue(self.container.contains_bean_definition("X"))

    def test_processor_bean_creation_failure(self):
        self.container.register_bean_definition(
            "broken", BeanDefinition(bean_class=BeanFactoryPostProcessor)
        )
        with self.assertRaises(PostProcessingError) as ctx:
            PostProcessorOrchestrator().invoke_all(self.container)
        self.assertIn("broken", str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
