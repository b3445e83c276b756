"""
SingletonRegistry

This module provides the tiered singleton cache used by the container to
create every singleton exactly once and to break creation cycles.

Each name moves through a small state machine::

    absent -> creating -> (creating, factory registered) -> (creating, early) -> finished

- finished: fully constructed instances
- early: instances that exist but have not completed post-construction steps
- factories: suppliers minting the early instance on first demand

A name lives in at most one tier at a time. The ``creating`` set marks names
whose construction is in progress: asking for such a name again yields its
early reference when one is available, and otherwise fails with
CyclicCreationError.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Set

from .exceptions import CyclicCreationError, IllegalStateError

logger = logging.getLogger(__name__)

# Placeholder cached for creators returning None
_NULL_OBJECT = object()


class SingletonRegistry:
    """Three-tier singleton cache with creation tracking.

    All tier maps and the creating set are guarded by one re-entrant lock.
    The lock is held for the whole of get_or_create_singleton, so a second
    thread asking for a singleton under construction waits for the first one
    and then receives the finished instance.

    Attributes:
        _singleton_objects: Tier 1, finished instances
        _early_singleton_objects: Tier 2, early references
        _singleton_factories: Tier 3, early reference suppliers
        _singletons_currently_in_creation: Names being created
    """

    def __init__(self):
        self._singleton_objects: Dict[str, Any] = {}
        self._early_singleton_objects: Dict[str, Any] = {}
        self._singleton_factories: Dict[str, Callable[[], Any]] = {}
        self._singletons_currently_in_creation: Set[str] = set()
        self._lock = threading.RLock()

    def get_singleton(self, name: str, allow_early_reference: bool = True) -> Optional[Any]:
        """Return the singleton registered under ``name``, or None.

        1. A finished instance is returned as is.
        2. For a name in creation, the early reference is returned. If only a
           factory is registered, it is invoked once and its result moves to
           the early tier.
        3. Otherwise None.

        Args:
            name: Bean name
            allow_early_reference: Whether a registered factory may be invoked

        Returns:
            The instance, or None when absent or when the creator produced None
        """
        with self._lock:
            singleton = self._singleton_objects.get(name)
            if singleton is None and name in self._singletons_currently_in_creation:
                singleton = self._early_singleton_objects.get(name)
                if singleton is None and allow_early_reference:
                    factory = self._singleton_factories.get(name)
                    if factory is not None:
                        singleton = factory()
                        logger.debug("Created early reference for singleton '%s'", name)
                        self._early_singleton_objects[name] = (
                            singleton if singleton is not None else _NULL_OBJECT
                        )
                        del self._singleton_factories[name]

        if singleton is _NULL_OBJECT:
            return None
        return singleton

    def register_singleton_factory(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a supplier for the early reference of a singleton in creation.

        Ignored when the singleton is already finished. Any stale early
        reference for the name is dropped.
        """
        with self._lock:
            if name not in self._singleton_objects:
                self._singleton_factories[name] = factory
                self._early_singleton_objects.pop(name, None)
                logger.debug("Registered early reference factory for singleton '%s'", name)

    def register_singleton(self, name: str, instance: Any) -> None:
        """Register an externally created instance as a finished singleton.

        Raises:
            IllegalStateError: When a singleton with that name already exists
        """
        with self._lock:
            if name in self._singleton_objects:
                raise IllegalStateError(
                    f"Could not register singleton '{name}': there is already one bound"
                )
            self.promote_to_finished(name, instance)

    def mark_creation_start(self, name: str) -> None:
        """Mark ``name`` as being created.

        Raises:
            CyclicCreationError: When the name is already in creation
        """
        with self._lock:
            if name in self._singletons_currently_in_creation:
                raise CyclicCreationError(
                    f"Bean '{name}' is already in creation: "
                    f"is there an unresolvable circular reference?\n"
                    f"Currently in creation: {', '.join(sorted(self._singletons_currently_in_creation))}"
                )
            self._singletons_currently_in_creation.add(name)
            logger.debug("Started creation of singleton '%s'", name)

    def mark_creation_end(self, name: str) -> None:
        """Clear the creation mark of ``name``.

        Raises:
            IllegalStateError: When the name is not in creation
        """
        with self._lock:
            if name not in self._singletons_currently_in_creation:
                raise IllegalStateError(f"Singleton '{name}' isn't currently in creation")
            self._singletons_currently_in_creation.remove(name)
            logger.debug("Finished creation of singleton '%s'", name)

    def promote_to_finished(self, name: str, instance: Any) -> None:
        """Store ``instance`` as the finished singleton and clear the other tiers."""
        with self._lock:
            self._singleton_objects[name] = instance if instance is not None else _NULL_OBJECT
            self._singleton_factories.pop(name, None)
            self._early_singleton_objects.pop(name, None)
            logger.debug("Registered finished singleton '%s'", name)

    def get_or_create_singleton(self, name: str, creator: Callable[[], Any]) -> Optional[Any]:
        """Return the finished singleton, creating it with ``creator`` if needed.

        The creator may call back into this registry, for example to resolve a
        factory bean or to register an early reference factory. The creation
        mark is always cleared, also when the creator raises.

        Raises:
            CyclicCreationError: When ``name`` is already being created
        """
        with self._lock:
            if name in self._singleton_objects:
                singleton = self._singleton_objects[name]
                return None if singleton is _NULL_OBJECT else singleton

            self.mark_creation_start(name)
            try:
                singleton = creator()
                self.promote_to_finished(name, singleton)
            except BaseException:
                # Early references of a failed creation must not leak
                self._singleton_factories.pop(name, None)
                self._early_singleton_objects.pop(name, None)
                raise
            finally:
                self.mark_creation_end(name)
            return singleton

    def contains_singleton(self, name: str) -> bool:
        with self._lock:
            return name in self._singleton_objects

    def is_currently_in_creation(self, name: str) -> bool:
        with self._lock:
            return name in self._singletons_currently_in_creation

    def singleton_names(self) -> List[str]:
        """Names of finished singletons in registration order."""
        with self._lock:
            return list(self._singleton_objects)

    def singleton_count(self) -> int:
        with self._lock:
            return len(self._singleton_objects)

    def destroy_singletons(self, callback: Optional[Callable[[str, Any], None]] = None) -> None:
        """Drop every cached singleton.

        ``callback`` is called for each finished singleton in reverse
        registration order, so beans are destroyed before the beans they were
        created from. Errors raised by the callback are logged and do not stop
        the remaining destructions.
        """
        with self._lock:
            finished = list(self._singleton_objects.items())
            self._singleton_objects.clear()
            self._early_singleton_objects.clear()
            self._singleton_factories.clear()

        if callback is None:
            return
        for name, instance in reversed(finished):
            try:
                callback(name, None if instance is _NULL_OBJECT else instance)
            except Exception:
                logger.exception("Destruction of singleton '%s' failed", name)
