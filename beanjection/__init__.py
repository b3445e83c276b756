# Public API
from .annotations import (
    bean,
    component,
    component_scan,
    configuration,
    controller,
    import_beans,
    lazy,
    primary,
    repository,
    scope,
    service,
)
from .configuration_class import BeanMethod, ConfigurationClass
from .configuration_parser import ConfigurationClassParser
from .configuration_processor import ConfigurationClassPostProcessor
from .configuration_reader import ConfigurationClassBeanDefinitionReader
from .container import BeanjectionContainer
from .core import AnnotationConfigContext
from .creator import InstanceCreator
from .definition import AnnotatedBeanDefinition, BeanDefinition
from .exceptions import (
    BeanjectionError,
    BeanTypeMismatchError,
    ContainerClosedError,
    CyclicCreationError,
    DefinitionNotFoundError,
    DuplicateDefinitionError,
    FactoryMethodNotFoundError,
    FrozenRegistryError,
    IllegalStateError,
    InstantiationError,
    InvalidDefinitionError,
    InvalidNameError,
    NoDefaultConstructorError,
    NoFactoryClassError,
    NoUniqueDefinitionError,
    PostProcessingError,
    ScanFailureError,
    SelfReferentialFactoryError,
)
from .factory_bean import FACTORY_BEAN_PREFIX, FactoryBean
from .introspection import MethodHandle, TypeIntrospector
from .lifecycle import BeanjectionLifeCycle
from .metadata import AnnotationMetadata, MethodMetadata
from .post_processor_orchestrator import PostProcessorOrchestrator
from .processors import BeanDefinitionRegistryPostProcessor, BeanFactoryPostProcessor
from .registry import BeanDefinitionRegistry
from .scanner import PackageScanner
from .singleton_registry import SingletonRegistry

__all__ = [
    "AnnotationConfigContext",
    "BeanjectionContainer",
    "BeanjectionLifeCycle",
    "BeanDefinition",
    "AnnotatedBeanDefinition",
    "BeanDefinitionRegistry",
    "SingletonRegistry",
    "InstanceCreator",
    "TypeIntrospector",
    "MethodHandle",
    "PackageScanner",
    "FactoryBean",
    "FACTORY_BEAN_PREFIX",
    # Configuration pipeline
    "ConfigurationClass",
    "BeanMethod",
    "ConfigurationClassParser",
    "ConfigurationClassBeanDefinitionReader",
    "ConfigurationClassPostProcessor",
    "PostProcessorOrchestrator",
    "BeanDefinitionRegistryPostProcessor",
    "BeanFactoryPostProcessor",
    "AnnotationMetadata",
    "MethodMetadata",
    # Decorators
    "configuration",
    "component",
    "service",
    "repository",
    "controller",
    "component_scan",
    "import_beans",
    "bean",
    "lazy",
    "primary",
    "scope",
    # Exceptions
    "BeanjectionError",
    "InvalidNameError",
    "InvalidDefinitionError",
    "DuplicateDefinitionError",
    "FrozenRegistryError",
    "DefinitionNotFoundError",
    "NoUniqueDefinitionError",
    "BeanTypeMismatchError",
    "CyclicCreationError",
    "IllegalStateError",
    "InstantiationError",
    "SelfReferentialFactoryError",
    "FactoryMethodNotFoundError",
    "NoFactoryClassError",
    "NoDefaultConstructorError",
    "ScanFailureError",
    "PostProcessingError",
    "ContainerClosedError",
]

__version__ = '0.1.0'
