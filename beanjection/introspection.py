"""
TypeIntrospector

Name-based method lookup and invocation used by the instance creator.

The contract is small: exact-name lookup with an arity check, and invocation
that wraps any failure in InstantiationError.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Type

from .exceptions import InstantiationError


@dataclass(frozen=True)
class MethodHandle:
    """A method located on a type.

    Attributes:
        owner_type: The type the method was found on
        name: The method name
        kind: 'static', 'class' or 'instance'
    """
    owner_type: Type
    name: str
    kind: str

    @property
    def is_static(self) -> bool:
        return self.kind != 'instance'

    def describe(self) -> str:
        return f"{self.owner_type.__qualname__}.{self.name}()"


def _accepts(function: Callable, arity: int, skip_first: bool) -> bool:
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return False
    parameters = list(signature.parameters.values())
    if skip_first and parameters:
        parameters = parameters[1:]
    try:
        signature.replace(parameters=parameters).bind(*([None] * arity))
    except TypeError:
        return False
    return True


class TypeIntrospector:
    """Locates and invokes methods and constructors by name.

    Example::

        introspector = TypeIntrospector()
        handle = introspector.find_method(AppConfig, "user_service", 0)
        service = introspector.invoke(handle, config_instance, ())
    """

    def find_method(self, owner_type: Type, name: str, arity: int = 0) -> Optional[MethodHandle]:
        """Find ``name`` on ``owner_type`` (or its bases) accepting ``arity`` arguments.

        Returns:
            A MethodHandle, or None when no method with that name and arity exists
        """
        try:
            raw = inspect.getattr_static(owner_type, name)
        except AttributeError:
            return None

        if isinstance(raw, staticmethod):
            function, kind, skip_first = raw.__func__, 'static', False
        elif isinstance(raw, classmethod):
            function, kind, skip_first = raw.__func__, 'class', True
        elif inspect.isfunction(raw):
            function, kind, skip_first = raw, 'instance', True
        else:
            return None

        if not _accepts(function, arity, skip_first):
            return None
        return MethodHandle(owner_type=owner_type, name=name, kind=kind)

    def invoke(self, handle: MethodHandle, receiver: Any, args: Sequence[Any] = ()) -> Any:
        """Invoke the method behind ``handle``.

        Args:
            handle: The located method
            receiver: The instance for instance methods; ignored otherwise
            args: Positional arguments

        Raises:
            InstantiationError: When the method raises, wrapping the cause
        """
        if handle.is_static:
            target = getattr(handle.owner_type, handle.name)
        else:
            if receiver is None:
                raise InstantiationError(
                    f"Instance method {handle.describe()} requires a receiver"
                )
            target = getattr(receiver, handle.name)
        try:
            return target(*args)
        except Exception as e:
            raise InstantiationError(
                f"Factory method {handle.describe()} threw exception: {e}"
            ) from e

    def has_default_constructor(self, cls: Type) -> bool:
        """True when ``cls`` can be called without arguments."""
        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError):
            # Builtins without signature metadata: assume constructible
            return True
        try:
            signature.bind()
        except TypeError:
            return False
        return True

    def instantiate(self, cls: Type, args: Sequence[Any] = ()) -> Any:
        """Call the constructor of ``cls``.

        Raises:
            InstantiationError: When the class is abstract or the constructor raises
        """
        if inspect.isabstract(cls):
            raise InstantiationError(
                f"Cannot instantiate abstract class {cls.__qualname__}: "
                f"abstract methods {', '.join(sorted(cls.__abstractmethods__))}"
            )
        try:
            return cls(*args)
        except Exception as e:
            raise InstantiationError(
                f"Constructor of {cls.__qualname__} threw exception: {e}"
            ) from e
