from schemagraph.config.load import load_settings
from schemagraph.config.model import EnumHandling, GeneratorSettings
from schemagraph.errors import (
    ConfigError,
    CyclicDefinitionError,
    DocumentLoadError,
    ExtensionDataCollisionError,
    InvalidDocumentError,
    MalformedDocumentError,
    SchemagraphError,
    UnresolvedReferenceError,
    UnsupportedTypeShapeError,
)
from schemagraph.generation.generator import JsonSchemaGenerator, generate
from schemagraph.generation.metadata import (
    EnumMember,
    Length,
    MemberInfo,
    Pattern,
    Range,
    Required,
    TypeInfo,
    TypeKind,
)
from schemagraph.references.loaders import (
    CompositeDocumentLoader,
    FileDocumentLoader,
    HttpDocumentLoader,
)
from schemagraph.references.resolver import ReferenceResolver, ResolutionResult
from schemagraph.schema import (
    DRAFT_04,
    JsonObjectType,
    JsonSchema,
    ParseResult,
    SchemaDialect,
    check_document,
    parse,
    parse_document,
    to_json,
)

__version__ = "0.1.0"

__all__ = [
    "CompositeDocumentLoader",
    "ConfigError",
    "CyclicDefinitionError",
    "DRAFT_04",
    "DocumentLoadError",
    "EnumHandling",
    "EnumMember",
    "ExtensionDataCollisionError",
    "FileDocumentLoader",
    "GeneratorSettings",
    "HttpDocumentLoader",
    "InvalidDocumentError",
    "JsonObjectType",
    "JsonSchema",
    "JsonSchemaGenerator",
    "Length",
    "MalformedDocumentError",
    "MemberInfo",
    "ParseResult",
    "Pattern",
    "Range",
    "ReferenceResolver",
    "Required",
    "ResolutionResult",
    "SchemaDialect",
    "SchemagraphError",
    "TypeInfo",
    "TypeKind",
    "UnresolvedReferenceError",
    "UnsupportedTypeShapeError",
    "__version__",
    "check_document",
    "generate",
    "load_settings",
    "parse",
    "parse_document",
    "to_json",
]
