"""Structural type descriptions consumed by the schema generator.

Whatever inspects the host type system (dataclasses, ORM models, a foreign
IDL) produces these records; the generator never looks at real types.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from schemagraph.config.model import EnumHandling


class TypeKind(str, Enum):
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    ENUM = "enum"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    OBJECT = "object"
    DYNAMIC = "dynamic"


REFERENCE_KINDS = frozenset(
    {TypeKind.STRING, TypeKind.ARRAY, TypeKind.DICTIONARY, TypeKind.OBJECT, TypeKind.DYNAMIC}
)


@dataclass(frozen=True)
class Range:
    minimum: int | float | None = None
    maximum: int | float | None = None


@dataclass(frozen=True)
class Pattern:
    pattern: str


@dataclass(frozen=True)
class Length:
    minimum: int | None = None
    maximum: int | None = None


@dataclass(frozen=True)
class Required:
    pass


Constraint = Union[Range, Pattern, Length, Required]


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: int | str


@dataclass(eq=False)
class TypeInfo:
    """A type as the generator sees it.

    ``name`` is the identity name (the short type name, e.g. ``MyType``) and
    is what titles and definition keys fall back to. ``identity`` is the
    deduplication key (e.g. a qualified name) and defaults to ``name``.
    """

    name: str
    kind: TypeKind | str
    identity: str | None = None
    display_name: str | None = None
    description: str | None = None
    nullable: bool = False
    format: str | None = None
    members: list[MemberInfo] = field(default_factory=list)
    item_type: TypeInfo | None = None
    enum_members: list[EnumMember] = field(default_factory=list)
    extension_data: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return self.identity or self.name


@dataclass(eq=False)
class MemberInfo:
    name: str
    type: TypeInfo
    json_name: str | None = None
    description: str | None = None
    nullable: bool | None = None
    required: bool = False
    constraints: list[Constraint] = field(default_factory=list)
    enum_handling: EnumHandling | None = None
    extension_data: dict[str, Any] = field(default_factory=dict)

    @property
    def property_name(self) -> str:
        return self.json_name or self.name

    @property
    def is_required(self) -> bool:
        return self.required or any(isinstance(item, Required) for item in self.constraints)
