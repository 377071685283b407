from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from typing import Any

from schemagraph import events as ev
from schemagraph.errors import MalformedDocumentError, UnresolvedReferenceError
from schemagraph.references.pointer import escape_segment
from schemagraph.schema.flags import type_from_json
from schemagraph.schema.node import RESERVED_KEYWORDS, JsonSchema

_STRING_KEYWORDS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "format": "format",
    "pattern": "pattern",
}
_NUMBER_KEYWORDS = {
    "multipleOf": "multiple_of",
    "maximum": "maximum",
    "minimum": "minimum",
}
_BOUND_KEYWORDS = {
    "exclusiveMaximum": "exclusive_maximum",
    "exclusiveMinimum": "exclusive_minimum",
}
_COUNT_KEYWORDS = {
    "maxLength": "max_length",
    "minLength": "min_length",
    "maxItems": "max_items",
    "minItems": "min_items",
    "maxProperties": "max_properties",
    "minProperties": "min_properties",
}
_COMBINATOR_KEYWORDS = {
    "allOf": "all_of",
    "anyOf": "any_of",
    "oneOf": "one_of",
}
_SCHEMA_MAP_KEYWORDS = {
    "properties": "properties",
    "definitions": "definitions",
}


@dataclass
class ParseResult:
    schema: JsonSchema
    errors: list[UnresolvedReferenceError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_document(
    text: str,
    *,
    base_uri: str | None = None,
    loader: Any = None,
    on_event: ev.EventHandler | None = None,
    cancel: threading.Event | None = None,
) -> ParseResult:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDocumentError(f"Invalid JSON: {exc.msg}", location=f"line {exc.lineno}") from exc
    return load_document(data, base_uri=base_uri, loader=loader, on_event=on_event, cancel=cancel)


def load_document(
    data: Any,
    *,
    base_uri: str | None = None,
    loader: Any = None,
    on_event: ev.EventHandler | None = None,
    cancel: threading.Event | None = None,
) -> ParseResult:
    from schemagraph.references.resolver import ReferenceResolver

    schema = build_schema(data)
    schema.base_uri = base_uri
    resolver = ReferenceResolver(loader=loader, on_event=on_event, cancel=cancel)
    result = resolver.resolve_document(schema)
    ev.emit(
        on_event,
        ev.DocumentParsed(
            base_uri=base_uri,
            references=result.resolved + len(result.errors),
            unresolved=len(result.errors),
        ),
    )
    return ParseResult(schema=schema, errors=result.errors)


def parse(text: str, *, strict: bool = False, **options: Any) -> JsonSchema:
    result = parse_document(text, **options)
    if strict and result.errors:
        raise result.errors[0]
    return result.schema


def build_schema(data: Any, *, location: str = "#") -> JsonSchema:
    """Build a node graph from decoded JSON, leaving every ``$ref`` unbound."""
    if isinstance(data, JsonSchema):
        return data
    if not isinstance(data, dict):
        raise MalformedDocumentError("schema must be a JSON object.", location=location)

    schema = JsonSchema()
    extension: dict[str, Any] = {}
    for key, value in data.items():
        path = f"{location}/{escape_segment(key)}"
        if key not in RESERVED_KEYWORDS:
            extension[key] = value
        elif key == "$schema":
            schema.meta_schema = _require_string(value, path)
        elif key == "$ref":
            schema.ref = _require_string(value, path)
        elif key == "type":
            schema.type = type_from_json(value, location=path)
        elif key in _STRING_KEYWORDS:
            setattr(schema, _STRING_KEYWORDS[key], _require_string(value, path))
        elif key in _NUMBER_KEYWORDS:
            setattr(schema, _NUMBER_KEYWORDS[key], _require_number(value, path))
        elif key in _BOUND_KEYWORDS:
            if not isinstance(value, bool):
                value = _require_number(value, path)
            setattr(schema, _BOUND_KEYWORDS[key], value)
        elif key in _COUNT_KEYWORDS:
            setattr(schema, _COUNT_KEYWORDS[key], _require_count(value, path))
        elif key == "uniqueItems":
            if not isinstance(value, bool):
                raise MalformedDocumentError("must be a boolean.", location=path)
            schema.unique_items = value
        elif key == "default":
            schema.default = value
        elif key == "enum":
            if not isinstance(value, list):
                raise MalformedDocumentError("must be a list.", location=path)
            schema.enumeration = list(value)
        elif key == "required":
            schema.required = _require_names(value, path)
            if not value:
                schema.empty_keywords.add(key)
        elif key in _SCHEMA_MAP_KEYWORDS:
            setattr(schema, _SCHEMA_MAP_KEYWORDS[key], _build_schema_map(value, path))
            if not value:
                schema.empty_keywords.add(key)
        elif key in _COMBINATOR_KEYWORDS:
            setattr(schema, _COMBINATOR_KEYWORDS[key], _build_schema_list(value, path))
            if not value:
                schema.empty_keywords.add(key)
        elif key == "items":
            if isinstance(value, list):
                schema.items = _build_schema_list(value, path)
            else:
                schema.items = build_schema(value, location=path)
        elif key == "additionalProperties":
            if isinstance(value, bool):
                schema.additional_properties = value
            else:
                schema.additional_properties = build_schema(value, location=path)
        elif key == "not":
            schema.not_schema = build_schema(value, location=path)

    if extension:
        schema.extension_data = extension
    return schema


def _build_schema_map(value: Any, path: str) -> dict[str, JsonSchema]:
    if not isinstance(value, dict):
        raise MalformedDocumentError("must be an object.", location=path)
    return {
        name: build_schema(item, location=f"{path}/{escape_segment(name)}")
        for name, item in value.items()
    }


def _build_schema_list(value: Any, path: str) -> list[JsonSchema]:
    if not isinstance(value, list):
        raise MalformedDocumentError("must be a list.", location=path)
    return [build_schema(item, location=f"{path}/{index}") for index, item in enumerate(value)]


def _require_string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise MalformedDocumentError("must be a string.", location=path)
    return value


def _require_number(value: Any, path: str) -> int | float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise MalformedDocumentError("must be numeric.", location=path)
    return value


def _require_count(value: Any, path: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise MalformedDocumentError("must be a non-negative integer.", location=path)
    return value


def _require_names(value: Any, path: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedDocumentError("must be a list of strings.", location=path)
    names: list[str] = []
    for item in value:
        if item not in names:
            names.append(item)
    return names
