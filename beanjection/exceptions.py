"""
Beanjection Exceptions

Custom exception hierarchy for the Beanjection IoC container
"""


class BeanjectionError(Exception):
    """
    Base exception for all Beanjection errors.

    All Beanjection-specific exceptions inherit from this class.
    You can catch this to handle any container error generically.

    Example:
        >>> try:
        ...     service = context.get_bean("userService")
        ... except BeanjectionError as e:
        ...     print(f"DI error: {e}")
    """

    pass


class InvalidNameError(BeanjectionError):
    """
    Raised when a bean definition is registered without a usable name.

    Common causes:
        - Passing ``None`` or ``""`` to ``register_bean_definition()``
        - Registering a ``BeanDefinition`` whose ``name`` was never set

    Solution:
        Always give the definition a non-empty name::

            registry.register("userService", BeanDefinition(bean_class=UserService))
    """

    pass


class InvalidDefinitionError(BeanjectionError):
    """
    Raised when a bean definition is missing or inconsistent.

    Common causes:
        - Registering ``None`` instead of a ``BeanDefinition``
        - Setting ``factory_bean_name`` without ``factory_method_name``
        - Using an empty string as factory method or factory bean name
        - Using a scope other than ``"singleton"`` or ``"prototype"``

    Solution:
        Configure exactly one construction path::

            # constructor
            BeanDefinition(bean_class=UserService)
            # static factory
            BeanDefinition(bean_class=AppConfig, factory_method_name="user_service")
            # instance factory
            BeanDefinition(factory_bean_name="appConfig", factory_method_name="user_service")
    """

    pass


class DuplicateDefinitionError(BeanjectionError):
    """
    Raised when the same bean name is registered twice with overriding disabled.

    Common causes:
        - Two ``@bean`` methods or scanned components deriving the same name
        - Registering the same component class twice
        - ``allow_bean_definition_overriding=False`` on the container

    Solution:
        1. Give one of the beans an explicit, distinct name::

            @bean("primaryDataSource")
            def data_source(self): ...

        2. Or allow overriding when replacement is intended::

            context = AnnotationConfigContext(allow_bean_definition_overriding=True)
    """

    pass


class FrozenRegistryError(BeanjectionError):
    """
    Raised when bean definitions are modified after the configuration is frozen.

    The registry is frozen right before eager singleton instantiation during
    ``refresh()``. After that point definitions can no longer be registered,
    removed, or mutated.

    Solution:
        Perform all modifications before ``refresh()``, or from a
        ``BeanFactoryPostProcessor`` which runs before the freeze.
    """

    pass


class DefinitionNotFoundError(BeanjectionError):
    """
    Raised when a requested bean name (or type) is not registered.

    Common causes:
        - Typo in the bean name
        - Component class not registered and not reachable by a component scan
        - ``@bean`` method registered under an explicit name different from
          the method name

    Solution:
        Register the component or check the generated name. Scanned components
        are named after their class with a lower-cased first letter::

            @component
            class UserService: ...

            context.get_bean("userService")

    Note:
        The error message includes a list of registered names
        to help identify available beans.
    """

    pass


class NoUniqueDefinitionError(DefinitionNotFoundError):
    """
    Raised when a by-type lookup matches several beans and none is primary.

    Solution:
        Mark one candidate as the default with ``@primary``, or look the bean
        up by name instead of by type.
    """

    pass


class BeanTypeMismatchError(BeanjectionError):
    """
    Raised when ``get_bean(name, required_type)`` finds a bean of another type.

    Solution:
        Check the ``required_type`` argument against the type the factory
        method or constructor actually produces.
    """

    pass


class CyclicCreationError(BeanjectionError):
    """
    Raised when a singleton is requested while it is already being created.

    This error occurs when bean A (directly or indirectly) needs bean A to
    finish its own construction, and no early reference is available.

    Example of a cycle::

        @configuration
        class AppConfig:
            def __init__(self):
                # AppConfig is still being created here
                context.get_bean("appConfig")

    Solution:
        1. Refactor to remove the cycle
        2. Move the lookup into an ``init_method`` hook, which runs after the
           early reference has been exposed
    """

    pass


class IllegalStateError(BeanjectionError):
    """
    Raised when an operation is called in the wrong container state.

    Common causes:
        - Calling ``refresh()`` twice on the same context
        - Using a context whose ``refresh()`` failed
        - Ending a singleton creation that was never started
        - Registering a singleton instance under a name that already has one
    """

    pass


class InstantiationError(BeanjectionError):
    """
    Raised when a bean cannot be instantiated.

    The underlying exception (if any) is available as ``__cause__``.

    Common causes:
        - The constructor or factory method raised an exception
        - The bean class is abstract
        - The ``init_method`` hook is missing or raised

    Solution:
        Inspect ``error.__cause__`` for the underlying failure.
    """

    pass


class SelfReferentialFactoryError(InstantiationError):
    """
    Raised when a bean definition names itself as its own factory bean.

    Such a definition can never be satisfied: creating the bean requires the
    factory bean, which is the bean being created.

    Solution:
        Point ``factory_bean_name`` at the configuration bean that declares
        the factory method.
    """

    pass


class FactoryMethodNotFoundError(InstantiationError):
    """
    Raised when the factory method named by a definition does not exist.

    Common causes:
        - Typo in ``factory_method_name``
        - The method requires arguments and none were passed to ``get_bean``
        - The method is defined on a different class than the factory bean

    Solution:
        Check the method name and arity on the factory bean's class.
    """

    pass


class NoFactoryClassError(InstantiationError):
    """
    Raised when a static factory method definition has no bean class.

    Solution:
        Set ``bean_class`` (or ``bean_class_name``) to the class declaring the
        static factory method, or set ``factory_bean_name`` for an instance
        factory method.
    """

    pass


class NoDefaultConstructorError(InstantiationError):
    """
    Raised when a bean class cannot be constructed without arguments.

    Constructor autowiring is not supported, so classes instantiated through
    their constructor need an ``__init__`` that accepts no arguments.

    Solution:
        Give every constructor parameter a default value, or produce the bean
        from a ``@bean`` factory method instead::

            @configuration
            class AppConfig:
                @bean
                def repository(self):
                    return Repository(url="sqlite://")
    """

    pass


class ScanFailureError(BeanjectionError):
    """
    Raised when component scanning fails.

    Common causes:
        - A base package that cannot be imported
        - A module inside the scanned package raising on import

    Solution:
        Check the base packages given to ``@component_scan`` and make sure
        every module beneath them imports cleanly.
    """

    pass


class PostProcessingError(BeanjectionError):
    """
    Raised when a bean factory post-processor fails during ``refresh()``.

    The failing processor's exception is available as ``__cause__``.
    The refresh is aborted and no rollback is attempted.
    """

    pass


class ContainerClosedError(BeanjectionError):
    """
    Raised when attempting to use a closed context.

    Common causes:
        - Using a context after calling ``context.close()``
        - Using a context after exiting a ``with`` block

    Solution:
        Create a new ``AnnotationConfigContext`` instead of reusing
        a closed one::

            with AnnotationConfigContext(AppConfig) as context:
                service = context.get_bean("userService")  # OK
            # Context is now closed

            context2 = AnnotationConfigContext(AppConfig)
    """

    pass
