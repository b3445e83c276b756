"""
PackageScanner

Finds component classes by importing every module below a set of base
packages.

A class is a candidate when it is defined in the scanned module (not merely
imported into it), is concrete, carries at least one include marker and no
exclude marker. Markers implied by stereotypes count, so ``@service``
classes pass the default ``component`` filter.
"""

import importlib
import logging
import pkgutil
from types import ModuleType
from typing import Iterable, Iterator, List, Sequence, Set

from .definition import AnnotatedBeanDefinition
from .exceptions import ScanFailureError
from .metadata import AnnotationMetadata

logger = logging.getLogger(__name__)


class PackageScanner:
    """Classpath scanning over importable Python packages.

    Example::

        scanner = PackageScanner()
        definitions = scanner.scan(["myapp.services"], ["component"], [])
    """

    def scan(
        self,
        base_packages: Iterable[str],
        include_markers: Sequence[str],
        exclude_markers: Sequence[str] = (),
    ) -> List[AnnotatedBeanDefinition]:
        """Return a definition for every candidate class below ``base_packages``.

        Each class is reported once, even when base packages overlap.

        Raises:
            ScanFailureError: When a package or module cannot be imported
        """
        seen: Set[type] = set()
        candidates: List[AnnotatedBeanDefinition] = []
        for base_package in base_packages:
            logger.debug("Scanning package '%s'", base_package)
            for module in self._iter_modules(base_package):
                for cls in self._candidate_classes(module, include_markers, exclude_markers):
                    if cls in seen:
                        continue
                    seen.add(cls)
                    candidates.append(
                        AnnotatedBeanDefinition.for_class(cls, source=getattr(module, '__file__', None))
                    )
        logger.debug("Scan found %d candidate component(s)", len(candidates))
        return candidates

    def _iter_modules(self, base_package: str) -> Iterator[ModuleType]:
        package = self._import(base_package)
        yield package
        if not hasattr(package, '__path__'):
            return

        def on_error(name: str) -> None:
            raise ScanFailureError(f"Failed to import package '{name}' while scanning '{base_package}'")

        for info in pkgutil.walk_packages(package.__path__, prefix=f"{base_package}.", onerror=on_error):
            yield self._import(info.name)

    def _import(self, module_name: str) -> ModuleType:
        try:
            return importlib.import_module(module_name)
        except Exception as e:
            raise ScanFailureError(
                f"Failed to import module '{module_name}' during component scan: {e}\n"
                f"Hint: check the base packages given to @component_scan."
            ) from e

    def _candidate_classes(
        self,
        module: ModuleType,
        include_markers: Sequence[str],
        exclude_markers: Sequence[str],
    ) -> Iterator[type]:
        for value in list(vars(module).values()):
            if not isinstance(value, type) or value.__module__ != module.__name__:
                continue
            metadata = AnnotationMetadata(value)
            if not metadata.is_concrete():
                continue
            if any(metadata.is_annotated(marker) for marker in exclude_markers):
                logger.debug("Excluded %s from scan", metadata.class_name)
                continue
            if any(metadata.is_annotated(marker) for marker in include_markers):
                yield value
