from __future__ import annotations

from enum import Flag
from typing import Any

from schemagraph.errors import MalformedDocumentError


class JsonObjectType(Flag):
    NONE = 0
    STRING = 1
    NUMBER = 2
    INTEGER = 4
    BOOLEAN = 8
    OBJECT = 16
    ARRAY = 32
    NULL = 64


_TYPE_NAMES: list[tuple[JsonObjectType, str]] = [
    (JsonObjectType.STRING, "string"),
    (JsonObjectType.NUMBER, "number"),
    (JsonObjectType.INTEGER, "integer"),
    (JsonObjectType.BOOLEAN, "boolean"),
    (JsonObjectType.OBJECT, "object"),
    (JsonObjectType.ARRAY, "array"),
    (JsonObjectType.NULL, "null"),
]
_BY_NAME = {name: flag for flag, name in _TYPE_NAMES}


def type_to_json(flags: JsonObjectType) -> str | list[str] | None:
    names = [name for flag, name in _TYPE_NAMES if flag in flags]
    if not names:
        return None
    if len(names) == 1:
        return names[0]
    return names


def type_from_json(value: Any, *, location: str = "type") -> JsonObjectType:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise MalformedDocumentError("type must be a string or a list of strings.", location=location)
    flags = JsonObjectType.NONE
    for index, name in enumerate(value):
        flag = _BY_NAME.get(name) if isinstance(name, str) else None
        if flag is None:
            raise MalformedDocumentError(f"unknown type {name!r}.", location=f"{location}[{index}]")
        flags |= flag
    return flags
