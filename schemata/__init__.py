"""
schemata Package - Type Graphs to Cross-Referenced Schemas

Compiles described types into JSON-Schema-style definitions for Swagger 2.0
documents.  Every complex type gets one named definition; every use of it
becomes a reference, so shared and recursive types stay finite.

Main Components:
    - schemata.descriptors: Language-neutral type descriptors
    - schemata.adapter: Python classes and typing constructs to descriptors
    - schemata.registry: Cycle-safe schema registry
    - schemata.document: Swagger document assembly from an API surface
    - schemata.cli: ``schemata`` command-line entry point
"""

__version__ = "1.0.0"

from .adapter import DescriptorAdapter, describe
from .config import SchemataConfig, get_config
from .descriptors import (
    Constraints,
    EnumMember,
    PropertyDescriptor,
    TypeDescriptor,
    TypeKind,
    array_of,
    dictionary_of,
    enum_type,
    nullable,
    primitive,
)
from .document import ApiExplorer, DocumentBuilder, Operation, Parameter, StaticApiExplorer
from .documentation import DocumentationFilter, YamlDocumentationSource
from .errors import (
    BuildError,
    ConfigurationError,
    DescriptionError,
    DuplicateSchemaIdError,
    FilterError,
    SchemataError,
    UnsupportedTypeError,
)
from .filters import DocumentFilter, ModelFilter, RegisterTypesFilter, SchemaFilter, TypeNameFilter
from .nodes import SchemaNode
from .options import SchemaOptions
from .registry import SchemaRegistry

__all__ = [
    "__version__",
    "DescriptorAdapter",
    "describe",
    "SchemataConfig",
    "get_config",
    "Constraints",
    "EnumMember",
    "PropertyDescriptor",
    "TypeDescriptor",
    "TypeKind",
    "array_of",
    "dictionary_of",
    "enum_type",
    "nullable",
    "primitive",
    "ApiExplorer",
    "DocumentBuilder",
    "Operation",
    "Parameter",
    "StaticApiExplorer",
    "DocumentationFilter",
    "YamlDocumentationSource",
    "BuildError",
    "ConfigurationError",
    "DescriptionError",
    "DuplicateSchemaIdError",
    "FilterError",
    "SchemataError",
    "UnsupportedTypeError",
    "DocumentFilter",
    "ModelFilter",
    "SchemaFilter",
    "RegisterTypesFilter",
    "TypeNameFilter",
    "SchemaNode",
    "SchemaOptions",
    "SchemaRegistry",
]
