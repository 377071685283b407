from .dereference import SchemaDialect, actual_schema, actual_type_schema, is_nullable
from .flags import JsonObjectType
from .node import UNSET, JsonSchema
from .serializer import DRAFT_04, check_document, to_dict, to_json
from .parser import ParseResult, build_schema, load_document, parse, parse_document

__all__ = [
    "DRAFT_04",
    "JsonObjectType",
    "JsonSchema",
    "ParseResult",
    "SchemaDialect",
    "UNSET",
    "actual_schema",
    "actual_type_schema",
    "build_schema",
    "check_document",
    "is_nullable",
    "load_document",
    "parse",
    "parse_document",
    "to_dict",
    "to_json",
]
