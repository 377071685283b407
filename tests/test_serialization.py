from __future__ import annotations

import json

import pytest

from schemagraph.errors import (
    CyclicDefinitionError,
    ExtensionDataCollisionError,
    InvalidDocumentError,
    MalformedDocumentError,
)
from schemagraph.schema import (
    DRAFT_04,
    JsonObjectType,
    JsonSchema,
    build_schema,
    check_document,
    parse,
    to_dict,
)
from schemagraph.schema.traversal import walk


def test_extension_data_is_written_next_to_header() -> None:
    schema = JsonSchema()
    schema.extension_data = {"Test": 123}

    text = schema.to_json()

    assert text == '{\n  "$schema": "http://json-schema.org/draft-04/schema#",\n  "Test": 123\n}'


def test_unknown_keys_fill_extension_data() -> None:
    schema = parse('{\n  "$schema": "http://json-schema.org/draft-04/schema#",\n  "Test": 123\n}')

    assert schema.extension_data == {"Test": 123}
    assert isinstance(schema.extension_data["Test"], int)


def test_extension_data_is_absent_without_unknown_keys() -> None:
    schema = parse(
        json.dumps(
            {
                "$schema": DRAFT_04,
                "type": "object",
                "properties": {"name": {"type": "string"}},
                "definitions": {"Other": {"type": "integer"}},
            }
        )
    )

    for _, node in walk(schema):
        assert node.extension_data is None


def test_extension_data_on_properties_survives_round_trip() -> None:
    text = json.dumps(
        {
            "$schema": DRAFT_04,
            "type": "object",
            "properties": {"name": {"type": "string", "x-order": 1.5, "x-tags": ["a", {"b": None}]}},
            "x-root": {"nested": [1, 2]},
        },
        indent=2,
    )

    schema = parse(text)

    assert schema.properties["name"].extension_data == {"x-order": 1.5, "x-tags": ["a", {"b": None}]}
    assert schema.to_json() == text


def test_round_trip_with_custom_containers(components_document: str) -> None:
    schema = parse(components_document, strict=True)

    assert schema.to_json() == components_document


def test_round_trip_is_stable_after_normalization() -> None:
    text = json.dumps(
        {
            "properties": {"b": {"type": ["null", "string"]}, "a": {"minimum": 1, "type": "integer"}},
            "type": "object",
            "$schema": DRAFT_04,
        }
    )

    once = parse(text).to_json()
    twice = parse(once).to_json()

    assert once == twice
    normalized = json.loads(once)
    assert list(normalized) == ["$schema", "type", "properties"]
    assert list(normalized["properties"]) == ["b", "a"]
    assert normalized["properties"]["b"]["type"] == ["string", "null"]
    assert list(normalized["properties"]["a"]) == ["type", "minimum"]


def test_numbers_keep_their_json_form() -> None:
    schema = parse(json.dumps({"type": "number", "minimum": 0.0, "maximum": 10, "multipleOf": 0.5}))

    document = to_dict(schema)

    assert document["minimum"] == 0.0 and isinstance(document["minimum"], float)
    assert isinstance(document["maximum"], int)
    assert '"minimum": 0.0' in schema.to_json()


def test_draft4_boolean_exclusive_bounds_round_trip() -> None:
    text = json.dumps({"$schema": DRAFT_04, "type": "integer", "maximum": 5, "exclusiveMaximum": True}, indent=2)

    assert parse(text).to_json() == text


def test_header_is_only_written_at_the_root() -> None:
    schema = JsonSchema(properties={"child": JsonSchema(type=JsonObjectType.STRING)})

    document = to_dict(schema)

    assert list(document) == ["$schema", "properties"]
    assert "$schema" not in document["properties"]["child"]


def test_type_flags_serialize_as_scalar_list_or_nothing() -> None:
    schema = JsonSchema(
        properties={
            "one": JsonSchema(type=JsonObjectType.INTEGER),
            "many": JsonSchema(type=JsonObjectType.INTEGER | JsonObjectType.NULL),
            "any": JsonSchema(),
        }
    )

    properties = to_dict(schema)["properties"]

    assert properties["one"] == {"type": "integer"}
    assert properties["many"] == {"type": ["integer", "null"]}
    assert properties["any"] == {}


def test_bound_reference_without_string_is_written_as_pointer() -> None:
    target = JsonSchema(type=JsonObjectType.STRING)
    schema = JsonSchema(definitions={"Name/With~Slash": target})
    schema.properties["name"] = JsonSchema.reference_to(target)

    document = to_dict(schema)

    assert document["properties"]["name"] == {"$ref": "#/definitions/Name~1With~0Slash"}


def test_bound_reference_outside_document_is_rejected() -> None:
    schema = JsonSchema(properties={"name": JsonSchema.reference_to(JsonSchema())})

    with pytest.raises(InvalidDocumentError, match="not part of the serialized document"):
        schema.to_json()


def test_reserved_extension_key_is_rejected() -> None:
    schema = JsonSchema()
    with pytest.raises(ExtensionDataCollisionError, match="type"):
        schema.set_extension("type", "string")

    schema.extension_data = {"properties": {}}
    with pytest.raises(ExtensionDataCollisionError, match="properties"):
        schema.to_json()


def test_node_that_owns_itself_is_reported() -> None:
    schema = JsonSchema()
    schema.properties["self"] = schema

    with pytest.raises(CyclicDefinitionError, match="#/properties/self"):
        schema.to_json()


def test_malformed_json_is_rejected() -> None:
    with pytest.raises(MalformedDocumentError, match="Invalid JSON"):
        parse('{"type": ')


def test_non_object_root_is_rejected() -> None:
    with pytest.raises(MalformedDocumentError, match="must be a JSON object"):
        parse("[1, 2]")


@pytest.mark.parametrize(
    ("document", "location"),
    [
        ({"type": "text"}, "#/type[0]"),
        ({"properties": []}, "#/properties"),
        ({"properties": {"a": 1}}, "#/properties/a"),
        ({"required": "a"}, "#/required"),
        ({"minLength": -1}, "#/minLength"),
        ({"allOf": {}}, "#/allOf"),
    ],
)
def test_wrong_keyword_shapes_are_rejected(document: dict[str, object], location: str) -> None:
    with pytest.raises(MalformedDocumentError) as excinfo:
        parse(json.dumps(document))
    assert excinfo.value.location == location


def test_required_may_name_missing_properties() -> None:
    schema = parse(json.dumps({"type": "object", "required": ["ghost", "ghost"], "properties": {}}))

    assert schema.required == ["ghost"]
    assert schema.is_required("ghost")
    assert "ghost" not in schema.properties


def test_build_schema_reads_every_modelled_keyword() -> None:
    schema = build_schema(
        {
            "id": "urn:example",
            "title": "T",
            "description": "D",
            "type": "array",
            "format": "f",
            "default": [],
            "maxItems": 3,
            "minItems": 1,
            "uniqueItems": True,
            "items": [{"type": "string"}, {"type": "integer"}],
            "not": {"type": "null"},
            "enum": [[1], [2]],
        }
    )

    assert schema.id == "urn:example"
    assert schema.default == []
    assert schema.unique_items is True
    assert isinstance(schema.items, list) and len(schema.items) == 2
    assert schema.not_schema is not None and schema.not_schema.is_null_type
    assert schema.enumeration == [[1], [2]]


def test_check_document_accepts_generated_shape(components_document: str) -> None:
    document = check_document(parse(components_document))

    assert document["$schema"] == DRAFT_04


def test_check_document_rejects_invalid_keyword_values() -> None:
    schema = JsonSchema(type=JsonObjectType.STRING)
    schema.set_extension("x-fine", 1)
    schema.min_length = 2
    schema.properties["a"] = JsonSchema(enumeration=[])

    with pytest.raises(InvalidDocumentError, match="not valid"):
        check_document(schema)


def test_empty_collections_round_trip() -> None:
    text = json.dumps(
        {
            "$schema": DRAFT_04,
            "type": "object",
            "additionalProperties": False,
            "required": [],
            "properties": {},
            "items": [],
            "allOf": [],
            "anyOf": [],
            "oneOf": [],
            "definitions": {},
        },
        indent=2,
    )

    assert parse(text).to_json() == text


def test_nested_meta_schema_round_trips() -> None:
    text = json.dumps(
        {"$schema": DRAFT_04, "properties": {"a": {"$schema": DRAFT_04, "type": "string"}}},
        indent=2,
    )

    schema = parse(text)

    assert schema.properties["a"].meta_schema == DRAFT_04
    assert schema.properties["a"].extension_data is None
    assert schema.to_json() == text


def test_shared_target_is_written_as_one_pointer() -> None:
    target = JsonSchema(type=JsonObjectType.INTEGER)
    schema = JsonSchema(definitions={"Count": target})
    schema.properties["a"] = JsonSchema.reference_to(target)
    schema.properties["b"] = JsonSchema(items=JsonSchema.reference_to(target))

    document = to_dict(schema)

    assert document["properties"]["a"] == {"$ref": "#/definitions/Count"}
    assert document["properties"]["b"]["items"] == {"$ref": "#/definitions/Count"}
