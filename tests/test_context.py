"""
Application Context Tests

Tests for AnnotationConfigContext: refresh, bean access, lifecycle and the
full configuration pipeline
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from beanjection import (
    AnnotationConfigContext,
    BeanDefinition,
    BeanFactoryPostProcessor,
    ConfigurationClassPostProcessor,
    ContainerClosedError,
    FrozenRegistryError,
    IllegalStateError,
    InvalidDefinitionError,
    PostProcessingError,
    ScanFailureError,
    SelfReferentialFactoryError,
    bean,
    component,
    component_scan,
    configuration,
)
from beanjection_fixtures.scan.components import AccountServiceImpl, UserDao
from conftest import BeanjectionTestCase
from fixtures import Connection, Database, MyConfig, ScopedConfig, User


@component
class UserHolder:
    """Component whose scope is changed by a processor"""
    pass


@component
class MyBeanFactoryPostProcessor(BeanFactoryPostProcessor):
    """Turns the 'userHolder' bean into a prototype"""

    def post_process_bean_factory(self, bean_factory):
        bean_factory.get_bean_definition("userHolder").scope = "prototype"


UNTYPED_PROCESSOR_CALLS = []


class CountingProcessor(BeanFactoryPostProcessor):
    """Records each invocation"""

    def post_process_bean_factory(self, bean_factory):
        UNTYPED_PROCESSOR_CALLS.append(bean_factory)


@configuration
class UntypedProcessorConfig:

    @bean
    def untyped_processor(self):
        return CountingProcessor()


CONNECTION_LOG = []


@configuration
class LifecycleConfig:

    @bean(init_method="open", destroy_method="shutdown")
    def first_connection(self):
        return Connection(CONNECTION_LOG)

    @bean(init_method="open", destroy_method="shutdown")
    def second_connection(self):
        return Connection(CONNECTION_LOG)


@configuration
class FailingConfig:

    @bean
    def database(self):
        return Database()

    @bean
    def broken(self):
        raise RuntimeError("cannot create")


@configuration
@component_scan("beanjection_fixtures.broken")
class BrokenScanConfig:
    pass


@configuration
@component_scan("beanjection_fixtures.scan")
class AppConfig:

    @bean
    def user(self) -> User:
        return User("app")


class TestRefresh(BeanjectionTestCase):
    """Refresh lifecycle"""

    def test_constructor_with_classes_refreshes(self):
        context = self.create_context(MyConfig)
        self.assertTrue(context.is_active)
        self.assertIsInstance(context.get_bean("userName1"), User)

    def test_explicit_register_and_refresh(self):
        context = self.create_context()
        context.register(MyConfig)
        self.assertFalse(context.is_active)

        context.refresh()

        self.assertTrue(context.is_active)
        self.assertEqual(
            context.get_bean_definition_names(),
            ["configurationClassPostProcessor", "myConfig", "userName1", "userName2"],
        )

    def test_refresh_only_once(self):
        context = self.create_context(MyConfig)
        with self.assertRaises(IllegalStateError) as ctx:
            context.refresh()
        self.assertIn("once", str(ctx.exception))

    def test_use_before_refresh(self):
        context = self.create_context()
        context.register(MyConfig)
        with self.assertRaises(IllegalStateError):
            context.get_bean("myConfig")

    def test_register_after_refresh(self):
        context = self.create_context(MyConfig)
        with self.assertRaises(FrozenRegistryError):
            context.register(Database)

    def test_unloadable_lazy_definition_does_not_fail_refresh(self):
        context = self.create_context()
        context.register(Database)
        context.register_definition(
            BeanDefinition(bean_class_name="nowhere.Missing", lazy_init=True), "ghost"
        )

        context.refresh()

        self.assertTrue(context.is_active)
        self.assertIs(context.get_bean(Database), context.get_bean("database"))
        with self.assertRaises(InvalidDefinitionError):
            context.get_bean("ghost")

    def test_configuration_processor_registered(self):
        context = self.create_context(MyConfig)
        self.assertIsInstance(
            context.get_bean("configurationClassPostProcessor"), ConfigurationClassPostProcessor
        )


class TestBeanAccess(BeanjectionTestCase):
    """Beans produced through the configuration pipeline"""

    def test_singleton_identity(self):
        context = self.create_context(MyConfig)
        for name in ("myConfig", "userName1", "userName2"):
            self.assertIs(context.get_bean(name), context.get_bean(name))
            self.assertTrue(context.is_singleton(name))

    def test_instance_and_static_factory_methods(self):
        context = self.create_context(MyConfig)

        self.assertEqual(context.get_bean("userName1").name, "userName1")
        self.assertEqual(context.get_bean("userName2").name, "userName2")
        self.assertIs(context.get_type("userName1"), User)

    def test_lookup_by_type_with_primary(self):
        context = self.create_context(ScopedConfig)

        self.assertEqual(context.get_bean(User).name, "main")
        self.assertEqual(context[User]().name, "main")
        self.assertEqual(
            context.get_bean_names_for_type(User), ["prototype_user", "lazy_user", "main_user"]
        )

    def test_prototype_and_lazy_beans(self):
        context = self.create_context(ScopedConfig)
        container = context.bean_factory

        self.assertIsNot(context.get_bean("prototype_user"), context.get_bean("prototype_user"))
        self.assertTrue(context.is_prototype("prototype_user"))
        self.assertFalse(container.contains_singleton("lazy_user"))
        self.assertIs(context.get_bean("lazy_user"), context.get_bean("lazy_user"))

    def test_component_scan_through_context(self):
        context = self.create_context(AppConfig)

        self.assertIsInstance(context.get_bean("userDao"), UserDao)
        self.assertIsInstance(context.get_bean("accountService"), AccountServiceImpl)
        self.assertFalse(context.contains_bean("plainHelper"))
        self.assertEqual(context.get_bean("user").name, "app")
        self.assertIs(context.get_bean(UserDao), context.get_bean("userDao"))

    def test_scan_method(self):
        context = self.create_context()
        registered = context.scan("beanjection_fixtures.scan")
        context.refresh()

        # The scanned configuration class also contributes its bean method
        self.assertEqual(registered, 4)
        self.assertEqual(context.get_bean("greeting"), "hello")
        self.assertIsInstance(context.get_bean("orderRepository"), object)

    def test_scan_failure_surfaces_from_refresh(self):
        context = self.create_context()
        context.register(BrokenScanConfig)

        with self.assertRaises(PostProcessingError) as ctx:
            context.refresh()
        self.assertIsInstance(ctx.exception.__cause__, ScanFailureError)


class TestProcessors(BeanjectionTestCase):
    """Factory processors registered as components"""

    def test_component_processor_changes_scope(self):
        context = self.create_context(UserHolder, MyBeanFactoryPostProcessor)

        self.assertTrue(context.is_prototype("userHolder"))
        self.assertIsNot(context.get_bean("userHolder"), context.get_bean("userHolder"))

    def test_manual_processor(self):
        calls = []

        class Recording(BeanFactoryPostProcessor):
            def post_process_bean_factory(self, bean_factory):
                calls.append(bean_factory.get_bean_definition_names())

        context = self.create_context()
        context.register(MyConfig)
        context.add_bean_factory_post_processor(Recording())
        context.refresh()

        self.assertEqual(len(calls), 1)
        self.assertIn("userName1", calls[0])

    def test_untyped_processor_bean_is_not_discovered(self):
        UNTYPED_PROCESSOR_CALLS.clear()
        context = self.create_context()
        context.register(UntypedProcessorConfig)

        with self.assertLogs("beanjection.container", level="DEBUG") as logs:
            context.refresh()

        self.assertEqual(UNTYPED_PROCESSOR_CALLS, [])
        self.assertIsInstance(context.get_bean("untyped_processor"), CountingProcessor)
        self.assertTrue(any(
            "'untyped_processor'" in line and "type unknown" in line for line in logs.output
        ))


class TestFailedRefresh(BeanjectionTestCase):
    """A failed refresh leaves the context unusable"""

    def test_self_referential_factory_fails_refresh(self):
        context = self.create_context()
        context.register_definition(
            BeanDefinition(factory_bean_name="loop", factory_method_name="user1"), "loop"
        )

        with self.assertRaises(SelfReferentialFactoryError):
            context.refresh()

    def test_context_unusable_after_failed_refresh(self):
        context = self.create_context()
        context.register(FailingConfig)

        with self.assertRaises(Exception):
            context.refresh()

        self.assertFalse(context.is_active)
        with self.assertRaises(IllegalStateError) as ctx:
            context.get_bean("database")
        self.assertIn("refresh failed", str(ctx.exception))
        with self.assertRaises(IllegalStateError):
            context.refresh()


class TestClose(BeanjectionTestCase):
    """Closing the context"""

    def setUp(self):
        super().setUp()
        CONNECTION_LOG.clear()

    def test_destroy_hooks_on_close(self):
        context = AnnotationConfigContext(LifecycleConfig)
        first = context.get_bean("first_connection")
        second = context.get_bean("second_connection")

        context.close()

        self.assertEqual(CONNECTION_LOG, [
            ("open", id(first)),
            ("open", id(second)),
            ("shutdown", id(second)),
            ("shutdown", id(first)),
        ])
        self.assertTrue(context.is_closed)

    def test_closed_context_raises(self):
        context = AnnotationConfigContext(MyConfig)
        context.close()

        with self.assertRaises(ContainerClosedError):
            context.get_bean("userName1")
        with self.assertRaises(ContainerClosedError):
            context.register(Database)

    def test_close_is_idempotent(self):
        context = AnnotationConfigContext(LifecycleConfig)
        context.close()
        context.close()
        self.assertEqual(len(CONNECTION_LOG), 4)

    def test_context_manager(self):
        with AnnotationConfigContext(LifecycleConfig) as context:
            self.assertTrue(context.is_active)
        self.assertTrue(context.is_closed)
        self.assertEqual(CONNECTION_LOG[-1][0], "shutdown")


if __name__ == '__main__':
    unittest.main()
