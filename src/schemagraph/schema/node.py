from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from schemagraph.errors import ExtensionDataCollisionError
from schemagraph.schema import dereference
from schemagraph.schema.dereference import SchemaDialect
from schemagraph.schema.flags import JsonObjectType


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

Number = Union[int, float]

RESERVED_KEYWORDS = frozenset(
    {
        "$schema",
        "$ref",
        "id",
        "title",
        "description",
        "type",
        "format",
        "default",
        "multipleOf",
        "maximum",
        "exclusiveMaximum",
        "minimum",
        "exclusiveMinimum",
        "maxLength",
        "minLength",
        "pattern",
        "maxItems",
        "minItems",
        "uniqueItems",
        "maxProperties",
        "minProperties",
        "additionalProperties",
        "required",
        "properties",
        "items",
        "enum",
        "allOf",
        "anyOf",
        "oneOf",
        "not",
        "definitions",
    }
)


@dataclass(eq=False)
class JsonSchema:
    """One JSON Schema object in an in-memory document graph.

    Child nodes under ``properties``, ``definitions``, ``items`` and the
    combinators are owned by this node. ``reference`` is a non-owning link to
    the node a ``$ref`` points at, bound by the resolver or the generator.

    Empty collections are not written unless their keyword is listed in
    ``empty_keywords``; the parser records keywords it read as ``{}`` or
    ``[]`` there. ``meta_schema`` holds a ``$schema`` found below the root.
    """

    type: JsonObjectType = JsonObjectType.NONE
    id: str | None = None
    title: str | None = None
    description: str | None = None
    format: str | None = None
    default: Any = UNSET
    pattern: str | None = None
    multiple_of: Number | None = None
    minimum: Number | None = None
    maximum: Number | None = None
    exclusive_minimum: Number | bool | None = None
    exclusive_maximum: Number | bool | None = None
    min_length: int | None = None
    max_length: int | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool | None = None
    min_properties: int | None = None
    max_properties: int | None = None
    enumeration: list[Any] | None = None
    properties: dict[str, JsonSchema] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    items: JsonSchema | list[JsonSchema] | None = None
    additional_properties: bool | JsonSchema | None = None
    all_of: list[JsonSchema] = field(default_factory=list)
    any_of: list[JsonSchema] = field(default_factory=list)
    one_of: list[JsonSchema] = field(default_factory=list)
    not_schema: JsonSchema | None = None
    definitions: dict[str, JsonSchema] = field(default_factory=dict)
    ref: str | None = None
    reference: JsonSchema | None = field(default=None, repr=False)
    meta_schema: str | None = None
    empty_keywords: set[str] = field(default_factory=set, repr=False)
    extension_data: dict[str, Any] | None = None
    base_uri: str | None = field(default=None, repr=False)

    @classmethod
    def reference_to(cls, target: JsonSchema, ref: str | None = None) -> JsonSchema:
        return cls(ref=ref, reference=target)

    @classmethod
    def null(cls) -> JsonSchema:
        return cls(type=JsonObjectType.NULL)

    @classmethod
    def from_json(cls, text: str, **options: Any) -> JsonSchema:
        from schemagraph.schema.parser import parse

        return parse(text, **options)

    def to_json(self, *, indent: int | None = 2) -> str:
        from schemagraph.schema.serializer import to_json

        return to_json(self, indent=indent)

    def to_dict(self) -> dict[str, Any]:
        from schemagraph.schema.serializer import to_dict

        return to_dict(self)

    @property
    def has_reference(self) -> bool:
        return self.ref is not None or self.reference is not None

    def set_reference(self, target: JsonSchema | None) -> None:
        self.reference = target
        self.ref = None

    @property
    def is_any_type(self) -> bool:
        return (
            self.type == JsonObjectType.NONE
            and not self.has_reference
            and not self.properties
            and not self.all_of
            and not self.any_of
            and not self.one_of
            and self.enumeration is None
        )

    @property
    def is_null_type(self) -> bool:
        return self.type == JsonObjectType.NULL and not self.has_reference

    def is_required(self, name: str) -> bool:
        return name in self.required

    def add_required(self, name: str) -> None:
        if name not in self.required:
            self.required.append(name)

    def set_extension(self, key: str, value: Any) -> None:
        if key in RESERVED_KEYWORDS:
            raise ExtensionDataCollisionError(key)
        if self.extension_data is None:
            self.extension_data = {}
        self.extension_data[key] = value

    @property
    def actual_schema(self) -> JsonSchema:
        return dereference.actual_schema(self)

    @property
    def actual_type_schema(self) -> JsonSchema:
        return dereference.actual_type_schema(self)

    def is_nullable(self, dialect: SchemaDialect = SchemaDialect.JSON_SCHEMA) -> bool:
        return dereference.is_nullable(self, dialect)
