from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from schemagraph.config.model import EnumHandling  # noqa: E402
from schemagraph.generation.metadata import (  # noqa: E402
    EnumMember,
    MemberInfo,
    Pattern,
    Range,
    Required,
    TypeInfo,
    TypeKind,
)


COMPONENTS_DOCUMENT = """
{
  "$schema": "http://json-schema.org/draft-04/schema#",
  "type": "array",
  "minItems": 1,
  "additionalProperties": false,
  "items": {
    "maxProperties": 1,
    "minProperties": 1,
    "additionalProperties": false,
    "properties": {
      "Ok": {
        "$ref": "#/messages/Ok"
      }
    }
  },
  "components": {
    "Foo": true,
    "Bar": {},
    "Id": {
      "type": "integer",
      "maximum": 4294967295.0,
      "minimum": 0.0
    },
    "IdMessage": {
      "maxProperties": 1,
      "minProperties": 1,
      "additionalProperties": false,
      "required": [
        "Id"
      ],
      "properties": {
        "Id": {
          "$ref": "#/components/Id"
        }
      }
    }
  },
  "messages": {
    "Ok": {
      "type": "object",
      "anyOf": [
        {
          "$ref": "#/components/IdMessage"
        }
      ]
    }
  }
}
""".strip()


def _primitive(kind: TypeKind, name: str, *, nullable: bool = False) -> TypeInfo:
    return TypeInfo(name=name, kind=kind, nullable=nullable)


@pytest.fixture
def components_document() -> str:
    return COMPONENTS_DOCUMENT


@pytest.fixture
def subtype() -> TypeInfo:
    return TypeInfo(
        name="MySubtype",
        kind=TypeKind.OBJECT,
        identity="tests.MySubtype",
        members=[MemberInfo(name="Id", type=_primitive(TypeKind.STRING, "str"))],
    )


@pytest.fixture
def color() -> TypeInfo:
    return TypeInfo(
        name="MyColor",
        kind=TypeKind.ENUM,
        enum_members=[
            EnumMember("Red", 0),
            EnumMember("Green", 1),
            EnumMember("Blue", 2),
        ],
    )


@pytest.fixture
def my_type(subtype: TypeInfo, color: TypeInfo) -> TypeInfo:
    def array_of(kind_name: str) -> TypeInfo:
        return TypeInfo(name=kind_name, kind=TypeKind.ARRAY, item_type=subtype)

    return TypeInfo(
        name="MyType",
        kind=TypeKind.OBJECT,
        identity="tests.MyType",
        display_name="My Type",
        members=[
            MemberInfo(name="Integer", type=_primitive(TypeKind.INTEGER, "int"), description="Test"),
            MemberInfo(name="Decimal", type=_primitive(TypeKind.NUMBER, "decimal")),
            MemberInfo(name="Double", type=_primitive(TypeKind.NUMBER, "float")),
            MemberInfo(name="Boolean", type=_primitive(TypeKind.BOOLEAN, "bool")),
            MemberInfo(name="NullableInteger", type=_primitive(TypeKind.INTEGER, "int", nullable=True)),
            MemberInfo(name="NullableDecimal", type=_primitive(TypeKind.NUMBER, "decimal", nullable=True)),
            MemberInfo(name="NullableDouble", type=_primitive(TypeKind.NUMBER, "float", nullable=True)),
            MemberInfo(name="NullableBoolean", type=_primitive(TypeKind.BOOLEAN, "bool", nullable=True)),
            MemberInfo(name="String", type=_primitive(TypeKind.STRING, "str")),
            MemberInfo(name="ChangedName", json_name="abc", type=_primitive(TypeKind.STRING, "str")),
            MemberInfo(name="RequiredReference", type=subtype, constraints=[Required()]),
            MemberInfo(
                name="RegexString",
                type=_primitive(TypeKind.STRING, "str"),
                constraints=[Pattern("regex")],
            ),
            MemberInfo(
                name="RangeInteger",
                type=_primitive(TypeKind.INTEGER, "int"),
                constraints=[Range(5, 10)],
            ),
            MemberInfo(name="Reference", type=subtype),
            MemberInfo(name="Array", type=array_of("MySubtype[]")),
            MemberInfo(name="Collection", type=array_of("Collection[MySubtype]")),
            MemberInfo(name="List", type=array_of("list[MySubtype]")),
            MemberInfo(name="Color", type=color, enum_handling=EnumHandling.NAME),
        ],
    )
