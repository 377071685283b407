from __future__ import annotations

import json
from typing import Any

from jsonschema import Draft4Validator
from jsonschema.exceptions import SchemaError

from schemagraph.errors import CyclicDefinitionError, ExtensionDataCollisionError, InvalidDocumentError
from schemagraph.references.pointer import join_pointer
from schemagraph.schema.flags import type_to_json
from schemagraph.schema.node import RESERVED_KEYWORDS, UNSET, JsonSchema
from schemagraph.schema.traversal import walk

DRAFT_04 = "http://json-schema.org/draft-04/schema#"

_HEAD_FIELDS = [
    ("id", "id"),
    ("title", "title"),
    ("description", "description"),
]
_CONSTRAINT_FIELDS = [
    ("multipleOf", "multiple_of"),
    ("maximum", "maximum"),
    ("exclusiveMaximum", "exclusive_maximum"),
    ("minimum", "minimum"),
    ("exclusiveMinimum", "exclusive_minimum"),
    ("maxLength", "max_length"),
    ("minLength", "min_length"),
    ("pattern", "pattern"),
    ("maxItems", "max_items"),
    ("minItems", "min_items"),
    ("uniqueItems", "unique_items"),
    ("maxProperties", "max_properties"),
    ("minProperties", "min_properties"),
]


def to_json(schema: JsonSchema, *, indent: int | None = 2) -> str:
    return json.dumps(to_dict(schema), indent=indent, ensure_ascii=False)


def to_dict(schema: JsonSchema, *, root: bool = True) -> dict[str, Any]:
    """Serialize ``schema`` with a fixed keyword order.

    With ``root`` set the draft header comes first and bound references
    without a ``$ref`` string are written as pointers into ``schema``.
    """
    writer = _Writer(schema if root else None)
    return writer.node(schema, header=root, path=())


def check_document(schema: JsonSchema) -> dict[str, Any]:
    document = to_dict(schema)
    try:
        Draft4Validator.check_schema(document)
    except SchemaError as exc:
        path = join_pointer([str(part) for part in exc.path])
        raise InvalidDocumentError(f"Schema is not valid at {path}: {exc.message}") from exc
    return document


class _Writer:
    def __init__(self, root: JsonSchema | None):
        self.root = root
        self.active: set[int] = set()
        self._pointers: dict[int, str] | None = None

    def node(self, schema: JsonSchema, *, header: bool, path: tuple[str, ...]) -> dict[str, Any]:
        if id(schema) in self.active:
            raise CyclicDefinitionError(join_pointer(list(path)))
        self.active.add(id(schema))
        try:
            return self._node(schema, header=header, path=path)
        finally:
            self.active.discard(id(schema))

    def _node(self, schema: JsonSchema, *, header: bool, path: tuple[str, ...]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if header:
            out["$schema"] = DRAFT_04
        elif schema.meta_schema is not None:
            out["$schema"] = schema.meta_schema
        ref = self._ref_string(schema)
        if ref is not None:
            out["$ref"] = ref
        for keyword, attr in _HEAD_FIELDS:
            _put(out, keyword, getattr(schema, attr))
        _put(out, "type", type_to_json(schema.type))
        _put(out, "format", schema.format)
        if schema.default is not UNSET:
            out["default"] = schema.default
        for keyword, attr in _CONSTRAINT_FIELDS:
            _put(out, keyword, getattr(schema, attr))

        if isinstance(schema.additional_properties, JsonSchema):
            out["additionalProperties"] = self.node(
                schema.additional_properties, header=False, path=path + ("additionalProperties",)
            )
        else:
            _put(out, "additionalProperties", schema.additional_properties)
        if _written(schema, "required", schema.required):
            out["required"] = list(schema.required)
        if _written(schema, "properties", schema.properties):
            out["properties"] = {
                name: self.node(child, header=False, path=path + ("properties", name))
                for name, child in schema.properties.items()
            }
        if isinstance(schema.items, list):
            out["items"] = self._branches(schema.items, path + ("items",))
        elif schema.items is not None:
            out["items"] = self.node(schema.items, header=False, path=path + ("items",))
        if schema.enumeration is not None:
            out["enum"] = list(schema.enumeration)
        for keyword, branches in (("allOf", schema.all_of), ("anyOf", schema.any_of), ("oneOf", schema.one_of)):
            if _written(schema, keyword, branches):
                out[keyword] = self._branches(branches, path + (keyword,))
        if schema.not_schema is not None:
            out["not"] = self.node(schema.not_schema, header=False, path=path + ("not",))
        if _written(schema, "definitions", schema.definitions):
            out["definitions"] = {
                name: self.node(child, header=False, path=path + ("definitions", name))
                for name, child in schema.definitions.items()
            }

        if schema.extension_data:
            for key, value in schema.extension_data.items():
                if key in RESERVED_KEYWORDS:
                    raise ExtensionDataCollisionError(key)
                out[key] = self._raw(value, path + (key,))
        return out

    def _branches(self, branches: list[JsonSchema], path: tuple[str, ...]) -> list[dict[str, Any]]:
        return [
            self.node(child, header=False, path=path + (str(index),))
            for index, child in enumerate(branches)
        ]

    def _raw(self, value: Any, path: tuple[str, ...]) -> Any:
        if isinstance(value, JsonSchema):
            return self.node(value, header=False, path=path)
        if isinstance(value, dict):
            return {key: self._raw(item, path + (key,)) for key, item in value.items()}
        if isinstance(value, list):
            return [self._raw(item, path + (str(index),)) for index, item in enumerate(value)]
        return value

    def _ref_string(self, schema: JsonSchema) -> str | None:
        if schema.ref is not None:
            return schema.ref
        if schema.reference is None:
            return None
        if self.root is not None:
            pointer = self._pointer_index().get(id(schema.reference))
            if pointer is not None:
                return pointer
        raise InvalidDocumentError("Bound reference target is not part of the serialized document.")

    def _pointer_index(self) -> dict[int, str]:
        if self._pointers is None:
            self._pointers = {}
            for segments, node in walk(self.root):
                self._pointers.setdefault(id(node), join_pointer(list(segments)))
        return self._pointers


def _written(schema: JsonSchema, keyword: str, value: Any) -> bool:
    return bool(value) or keyword in schema.empty_keywords


def _put(out: dict[str, Any], keyword: str, value: Any) -> None:
    if value is not None:
        out[keyword] = value
