"""
Metadata

Read-only views over the markers recorded by the decorators in
``beanjection.annotations``.

AnnotationMetadata describes a class, MethodMetadata describes one function
found in a class namespace. Both expose the same small capability:

- has_annotation(marker): the marker is declared directly
- is_annotated(marker): declared directly or implied by a stereotype
- get_annotation_attributes(marker): the attribute map, or None
"""

import inspect
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from . import annotations


class _MarkerView(ABC):
    """Shared marker lookups for classes and methods."""

    @abstractmethod
    def _markers(self) -> Dict[str, Dict[str, Any]]:
        raise NotImplementedError

    def has_annotation(self, marker: str) -> bool:
        return marker in self._markers()

    def is_annotated(self, marker: str) -> bool:
        return marker in annotations.marker_names(self._target())

    def get_annotation_attributes(self, marker: str) -> Optional[Dict[str, Any]]:
        """Return a copy of the marker's attributes.

        Meta-markers implied by a stereotype report an empty mapping;
        absent markers report None.
        """
        markers = self._markers()
        if marker in markers:
            return dict(markers[marker])
        if self.is_annotated(marker):
            return {}
        return None

    def get_annotation_types(self) -> List[str]:
        return list(self._markers())

    @abstractmethod
    def _target(self) -> Any:
        raise NotImplementedError


class AnnotationMetadata(_MarkerView):
    """Marker metadata of a class.

    Attributes:
        introspected_class: The class described by this metadata

    Example::

        metadata = AnnotationMetadata(AppConfig)
        metadata.is_annotated("component")   # True for @configuration
        metadata.get_annotation_attributes("component_scan")
    """

    def __init__(self, introspected_class: Type):
        self.introspected_class = introspected_class

    def _target(self) -> Any:
        return self.introspected_class

    def _markers(self) -> Dict[str, Dict[str, Any]]:
        return annotations.get_markers(self.introspected_class)

    @property
    def class_name(self) -> str:
        """Qualified name: ``module.QualName``."""
        cls = self.introspected_class
        return f"{cls.__module__}.{cls.__qualname__}"

    @property
    def simple_name(self) -> str:
        return self.introspected_class.__name__

    @property
    def package_name(self) -> str:
        """Name of the package the class's module belongs to."""
        module_name = self.introspected_class.__module__
        module = sys.modules.get(module_name)
        if module is not None and hasattr(module, '__path__'):
            return module_name
        return module_name.rpartition('.')[0] or module_name

    def is_abstract(self) -> bool:
        return inspect.isabstract(self.introspected_class)

    def is_concrete(self) -> bool:
        return not self.is_abstract()

    def get_annotated_methods(self, marker: str) -> List['MethodMetadata']:
        """Return metadata for every function in the class namespace with the marker.

        Only the class's own namespace is searched, in definition order.
        """
        methods = []
        for attr_name, value in vars(self.introspected_class).items():
            function = value.__func__ if isinstance(value, (staticmethod, classmethod)) else value
            if not inspect.isfunction(function):
                continue
            metadata = MethodMetadata(value, self.introspected_class, attr_name)
            if metadata.is_annotated(marker):
                methods.append(metadata)
        return methods

    def __repr__(self) -> str:
        return f"AnnotationMetadata({self.class_name})"


class MethodMetadata(_MarkerView):
    """Marker metadata of a function found in a class namespace.

    Attributes:
        method: The raw namespace entry (function, staticmethod or classmethod)
        declaring_class: The class whose namespace holds the method
        method_name: Attribute name of the method
    """

    def __init__(self, method: Any, declaring_class: Type, method_name: Optional[str] = None):
        self.method = method
        self.declaring_class = declaring_class
        self.method_name = method_name or self._function().__name__

    def _function(self) -> Any:
        if isinstance(self.method, (staticmethod, classmethod)):
            return self.method.__func__
        return self.method

    def _target(self) -> Any:
        return self.method

    def _markers(self) -> Dict[str, Dict[str, Any]]:
        return annotations.get_markers(self.method)

    @property
    def declaring_class_name(self) -> str:
        cls = self.declaring_class
        return f"{cls.__module__}.{cls.__qualname__}"

    def is_static(self) -> bool:
        """True when the method can be called without an instance.

        Class methods count as static: they are invoked on the class.
        """
        return isinstance(self.method, (staticmethod, classmethod))

    def get_return_annotation(self) -> Any:
        """Return the declared return annotation, or None."""
        annotation = inspect.signature(self._function()).return_annotation
        if annotation is inspect.Signature.empty:
            return None
        return annotation

    def __repr__(self) -> str:
        return f"MethodMetadata({self.declaring_class_name}.{self.method_name})"
