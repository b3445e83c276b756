"""
BeanDefinitionRegistry

Ordered storage of bean definitions by name.

The registry keeps insertion order for enumeration, applies the override
policy on re-registration, and can be frozen once configuration is complete.
"""

import logging
from typing import Dict, Iterator, List, Optional

from .definition import BeanDefinition
from .exceptions import (
    DefinitionNotFoundError,
    DuplicateDefinitionError,
    FrozenRegistryError,
    InvalidDefinitionError,
    InvalidNameError,
)

logger = logging.getLogger(__name__)


class BeanDefinitionRegistry:
    """Name -> BeanDefinition mapping with override policy and freezing.

    Attributes:
        allow_override: Replace existing definitions (with a warning) instead
            of raising DuplicateDefinitionError

    Example::

        registry = BeanDefinitionRegistry()
        registry.register("userService", BeanDefinition(bean_class=UserService))
        registry.names()  # ['userService']
    """

    def __init__(self, allow_override: bool = True):
        self._definitions: Dict[str, BeanDefinition] = {}
        self._names: List[str] = []
        self._frozen: bool = False
        self.allow_override: bool = allow_override

    def register(self, name: Optional[str], definition: Optional[BeanDefinition]) -> None:
        """Register a definition under ``name``.

        Args:
            name: Unique bean name
            definition: The construction recipe

        Raises:
            InvalidNameError: When the name is None or empty
            InvalidDefinitionError: When the definition is None or invalid
            FrozenRegistryError: When the registry is frozen
            DuplicateDefinitionError: When the name exists and overriding
                is disabled
        """
        if not name:
            raise InvalidNameError("Bean name must not be empty")
        if definition is None:
            raise InvalidDefinitionError(f"Bean definition for '{name}' must not be None")
        if self._frozen:
            raise FrozenRegistryError(
                f"Configuration is frozen, cannot register bean definition '{name}'"
            )

        if definition.name is None:
            definition.name = name
        definition.validate()

        existing = self._definitions.get(name)
        if existing is not None:
            if not self.allow_override:
                raise DuplicateDefinitionError(
                    f"Cannot register bean definition '{name}': "
                    f"there is already a definition bound to that name.\n"
                    f"Existing: {existing.get_bean_class_name() or existing.factory_method_name}"
                )
            logger.warning(
                "Overriding bean definition '%s': replacing %r with %r",
                name, existing, definition,
            )
        else:
            self._names.append(name)

        self._definitions[name] = definition
        logger.info(
            "Registered bean definition: %s -> %s",
            name, definition.get_bean_class_name() or definition.factory_method_name,
        )

    def get(self, name: str) -> BeanDefinition:
        """Return the definition registered under ``name``.

        Raises:
            DefinitionNotFoundError: When no definition has that name
        """
        definition = self._definitions.get(name)
        if definition is None:
            registered = ", ".join(self._names) or "None"
            raise DefinitionNotFoundError(
                f"No bean definition named '{name}'.\n"
                f"Registered names: {registered}"
            )
        return definition

    def contains(self, name: str) -> bool:
        return name in self._definitions

    def names(self) -> List[str]:
        """Snapshot of the registered names in registration order."""
        return list(self._names)

    def count(self) -> int:
        return len(self._definitions)

    def remove(self, name: str) -> None:
        """Remove a definition.

        Raises:
            DefinitionNotFoundError: When no definition has that name
            FrozenRegistryError: When the registry is frozen
        """
        if self._frozen:
            raise FrozenRegistryError(
                f"Configuration is frozen, cannot remove bean definition '{name}'"
            )
        if name not in self._definitions:
            raise DefinitionNotFoundError(f"No bean definition named '{name}'")
        del self._definitions[name]
        self._names.remove(name)
        logger.info("Removed bean definition: %s", name)

    def freeze(self) -> None:
        """Freeze the registry and every definition it holds."""
        self._frozen = True
        for definition in self._definitions.values():
            definition.freeze()
        logger.info("Bean definition registry frozen with %d definitions", self.count())

    def is_frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
