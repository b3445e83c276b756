"""
Annotations

Decorators that mark classes and methods for the configuration pipeline.

Each decorator records a marker (and its attributes) on the decorated object.
Markers are read back through AnnotationMetadata and MethodMetadata, never
directly, so the rest of the container only sees the
``is_annotated()`` / ``get_annotation_attributes()`` capability.

Example::

    @configuration
    @component_scan("myapp.services")
    class AppConfig:

        @bean("userName1")
        def user1(self):
            return User()

        @bean("userName2")
        @staticmethod
        def user2():
            return User()
"""

from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type, Union

from .lifecycle import BeanjectionLifeCycle

MARKERS_ATTRIBUTE = '__beanjection_markers__'

CONFIGURATION = 'configuration'
COMPONENT = 'component'
SERVICE = 'service'
REPOSITORY = 'repository'
CONTROLLER = 'controller'
COMPONENT_SCAN = 'component_scan'
IMPORT = 'import'
BEAN = 'bean'
LAZY = 'lazy'
PRIMARY = 'primary'
SCOPE = 'scope'

# Stereotype markers carry @component as a meta-marker
META_MARKERS: Dict[str, Tuple[str, ...]] = {
    CONFIGURATION: (COMPONENT,),
    SERVICE: (COMPONENT,),
    REPOSITORY: (COMPONENT,),
    CONTROLLER: (COMPONENT,),
}


def _unwrap(target: Any) -> Any:
    """Return the function stored inside a staticmethod/classmethod."""
    if isinstance(target, (staticmethod, classmethod)):
        return target.__func__
    return target


def get_markers(target: Any) -> Dict[str, Dict[str, Any]]:
    """Return the markers declared directly on a class or function.

    Markers are not inherited: only the object's own namespace is consulted,
    so a subclass of a ``@component`` is not a component itself.
    """
    target = _unwrap(target)
    if isinstance(target, type):
        return target.__dict__.get(MARKERS_ATTRIBUTE, {})
    return getattr(target, MARKERS_ATTRIBUTE, {})


def _add_marker(target: Any, marker: str, attributes: Dict[str, Any]) -> Any:
    holder = _unwrap(target)
    markers = dict(get_markers(holder))
    markers[marker] = attributes
    setattr(holder, MARKERS_ATTRIBUTE, markers)
    return target


def _is_decoratable(value: Any) -> bool:
    return isinstance(value, (type, staticmethod, classmethod)) or callable(value)


def _marker_decorator(marker: str, args: tuple, build: Callable[..., Dict[str, Any]]):
    # Supports both @marker and @marker(...)
    if len(args) == 1 and _is_decoratable(args[0]) and not isinstance(args[0], str):
        return _add_marker(args[0], marker, build())

    def decorator(target):
        return _add_marker(target, marker, build(*args))

    return decorator


def component(*args: Any):
    """Mark a class as a component picked up by component scanning.

    An optional explicit bean name may be given: ``@component("userDao")``.
    """
    return _marker_decorator(COMPONENT, args, lambda value='': {'value': value})


def service(*args: Any):
    """Stereotype for service-layer components."""
    return _marker_decorator(SERVICE, args, lambda value='': {'value': value})


def repository(*args: Any):
    """Stereotype for persistence-layer components."""
    return _marker_decorator(REPOSITORY, args, lambda value='': {'value': value})


def controller(*args: Any):
    """Stereotype for presentation-layer components."""
    return _marker_decorator(CONTROLLER, args, lambda value='': {'value': value})


def configuration(*args: Any):
    """Mark a class as a source of ``@bean`` definitions."""
    return _marker_decorator(CONFIGURATION, args, lambda value='': {'value': value})


def component_scan(
    *value: Any,
    base_packages: Iterable[str] = (),
    base_package_classes: Iterable[Type] = (),
    include_filters: Iterable[str] = (),
    exclude_filters: Iterable[str] = (),
    use_default_filters: bool = True,
    lazy_init: bool = False,
):
    """Scan packages for components when the configuration class is parsed.

    Without any package, the package of the declaring class is scanned.

    Args:
        *value: Base packages to scan
        base_packages: Additional base packages
        base_package_classes: Classes whose packages are scanned
        include_filters: Markers a class must carry (defaults to component)
        exclude_filters: Markers that exclude a class
        use_default_filters: Register the component filter when no
            include filter is given
        lazy_init: Make every scanned bean lazily initialized
    """
    def build(*packages: str) -> Dict[str, Any]:
        return {
            'value': tuple(packages),
            'base_packages': tuple(base_packages),
            'base_package_classes': tuple(base_package_classes),
            'include_filters': tuple(include_filters),
            'exclude_filters': tuple(exclude_filters),
            'use_default_filters': use_default_filters,
            'lazy_init': lazy_init,
        }

    return _marker_decorator(COMPONENT_SCAN, value, build)


def import_beans(*classes: Type):
    """Register the given classes as beans named after their qualified name."""
    def decorator(target):
        return _add_marker(target, IMPORT, {'value': tuple(classes)})

    return decorator


def bean(
    *value: Any,
    name: Union[str, Iterable[str], None] = None,
    autowire_candidate: bool = True,
    init_method: str = '',
    destroy_method: str = '',
):
    """Mark a configuration class method as a bean factory method.

    The bean is named after the first explicit name, or the method name.
    Works on instance methods, ``staticmethod`` and ``classmethod``.

    The return annotation is the bean's type until the bean is created.
    Without one the bean is invisible to lookups by type before creation;
    in particular a processor returned by an unannotated method is never
    discovered during refresh.
    """
    names: Tuple[str, ...] = ()
    if isinstance(name, str):
        names = (name,)
    elif name is not None:
        names = tuple(name)

    def build(*values: str) -> Dict[str, Any]:
        return {
            'value': tuple(values),
            'name': names,
            'autowire_candidate': autowire_candidate,
            'init_method': init_method,
            'destroy_method': destroy_method,
        }

    return _marker_decorator(BEAN, value, build)


def lazy(*args: Any):
    """Defer creation of a singleton until it is first requested."""
    return _marker_decorator(LAZY, args, lambda value=True: {'value': value})


def primary(*args: Any):
    """Prefer this bean when several candidates match a type lookup."""
    return _marker_decorator(PRIMARY, args, lambda: {})


def scope(value: Union[str, BeanjectionLifeCycle]):
    """Set the bean scope: ``"singleton"`` or ``"prototype"``."""
    if isinstance(value, BeanjectionLifeCycle):
        value = value.value

    def decorator(target):
        return _add_marker(target, SCOPE, {'value': value})

    return decorator


def marker_names(target: Any) -> Tuple[str, ...]:
    """Names of the markers on ``target``, including implied meta-markers."""
    names = []
    for marker in get_markers(target):
        names.append(marker)
        names.extend(META_MARKERS.get(marker, ()))
    return tuple(dict.fromkeys(names))


def explicit_component_name(target: Type) -> Optional[str]:
    """Return the explicit bean name given to a stereotype marker, if any."""
    for marker, attributes in get_markers(target).items():
        if marker in (COMPONENT,) + tuple(META_MARKERS) and attributes.get('value'):
            return attributes['value']
    return None
