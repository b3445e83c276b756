"""
FactoryBean

A bean that produces the object handed out under its name.

Looking up ``"clock"`` on a FactoryBean registered as ``clock`` returns the
result of ``get_object()``. Looking up ``"&clock"`` returns the FactoryBean
itself.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Type

FACTORY_BEAN_PREFIX = '&'


class FactoryBean(ABC):
    """Bean whose product, not the bean itself, is exposed under its name.

    Products of singleton factories are created once and cached by the
    container. Prototype factories are asked for a new object on every
    lookup.

    Example::

        @component("clock")
        class ClockFactory(FactoryBean):
            def get_object(self):
                return SystemClock(tz="UTC")

            def get_object_type(self):
                return SystemClock

        context.get_bean("clock")    # SystemClock
        context.get_bean("&clock")   # ClockFactory
    """

    @abstractmethod
    def get_object(self) -> Any:
        raise NotImplementedError

    def get_object_type(self) -> Optional[Type]:
        """Type of the product, or None when not known in advance."""
        return None

    def is_singleton(self) -> bool:
        return True


def is_factory_dereference(name: str) -> bool:
    """True when ``name`` asks for the FactoryBean itself (``&name``)."""
    return name is not None and name.startswith(FACTORY_BEAN_PREFIX)


def transformed_bean_name(name: str) -> str:
    """Strip every leading ``&`` to get the registered bean name."""
    while name.startswith(FACTORY_BEAN_PREFIX):
        name = name[len(FACTORY_BEAN_PREFIX):]
    return name
