from __future__ import annotations

from typing import Any, Iterator

from schemagraph.errors import CyclicDefinitionError
from schemagraph.references.pointer import join_pointer
from schemagraph.schema.node import JsonSchema

Segments = tuple[str, ...]


def walk(root: JsonSchema) -> Iterator[tuple[Segments, JsonSchema]]:
    """Yield every node owned by ``root`` (depth first, root included) with its path.

    References are not followed. Nodes stored inside extension data are
    included, so targets promoted by the resolver keep their location.
    """
    yield from _walk(root, (), set())


def children(node: JsonSchema) -> Iterator[tuple[Segments, JsonSchema]]:
    for name, child in node.properties.items():
        yield ("properties", name), child
    if isinstance(node.additional_properties, JsonSchema):
        yield ("additionalProperties",), node.additional_properties
    if isinstance(node.items, JsonSchema):
        yield ("items",), node.items
    elif isinstance(node.items, list):
        for index, child in enumerate(node.items):
            yield ("items", str(index)), child
    for keyword, branches in (("allOf", node.all_of), ("anyOf", node.any_of), ("oneOf", node.one_of)):
        for index, child in enumerate(branches):
            yield (keyword, str(index)), child
    if node.not_schema is not None:
        yield ("not",), node.not_schema
    for name, child in node.definitions.items():
        yield ("definitions", name), child
    if node.extension_data:
        for key, value in node.extension_data.items():
            yield from _embedded(value, (key,))


def _walk(node: JsonSchema, path: Segments, ancestors: set[int]) -> Iterator[tuple[Segments, JsonSchema]]:
    if id(node) in ancestors:
        raise CyclicDefinitionError(join_pointer(list(path)))
    yield path, node
    ancestors.add(id(node))
    for segments, child in children(node):
        yield from _walk(child, path + segments, ancestors)
    ancestors.discard(id(node))


def _embedded(value: Any, path: Segments) -> Iterator[tuple[Segments, JsonSchema]]:
    if isinstance(value, JsonSchema):
        yield path, value
    elif isinstance(value, dict):
        for key, item in value.items():
            yield from _embedded(item, path + (key,))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from _embedded(item, path + (str(index),))
