from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from schemagraph.schema.flags import JsonObjectType

if TYPE_CHECKING:
    from schemagraph.schema.node import JsonSchema


class SchemaDialect(str, Enum):
    JSON_SCHEMA = "json-schema"
    SWAGGER2 = "swagger2"


def actual_schema(node: JsonSchema) -> JsonSchema:
    """Follow ``reference`` links to the first node without one.

    A chain that comes back to a node already seen stops at the last
    distinct node; an unbound ``$ref`` stops at the node carrying it.
    """
    seen = {id(node)}
    current = node
    while current.reference is not None:
        target = current.reference
        if id(target) in seen:
            return current
        seen.add(id(target))
        current = target
    return current


def actual_type_schema(node: JsonSchema) -> JsonSchema:
    """Like :func:`actual_schema`, also looking through ``oneOf [null, X]`` wrappers."""
    seen: set[int] = set()
    current = actual_schema(node)
    while id(current) not in seen:
        seen.add(id(current))
        branch = null_union_branch(current)
        if branch is None:
            break
        current = actual_schema(branch)
    return current


def null_union_branch(node: JsonSchema) -> JsonSchema | None:
    """Return the non-null branch when ``node`` is a two-branch union with a null marker."""
    for branches in (node.one_of, node.any_of):
        if len(branches) != 2:
            continue
        first, second = branches
        if _is_null_marker(first) and not _is_null_marker(second):
            return second
        if _is_null_marker(second) and not _is_null_marker(first):
            return first
    return None


def is_nullable(node: JsonSchema, dialect: SchemaDialect = SchemaDialect.JSON_SCHEMA) -> bool:
    if dialect is SchemaDialect.SWAGGER2:
        if node.extension_data and node.extension_data.get("x-nullable") is True:
            return True
        return JsonObjectType.NULL in actual_schema(node).type

    if JsonObjectType.NULL in node.type:
        return True
    if any(_is_null_marker(branch) for branch in (*node.one_of, *node.any_of)):
        return True
    target = actual_schema(node)
    if target is not node:
        return is_nullable(target, dialect) if target.reference is None else False
    return node.is_any_type


def _is_null_marker(node: JsonSchema) -> bool:
    return actual_schema(node).is_null_type
