from __future__ import annotations

from dataclasses import dataclass

from schemagraph import events as ev
from schemagraph.config.model import EnumHandling, GeneratorSettings
from schemagraph.errors import UnsupportedTypeShapeError
from schemagraph.generation.metadata import (
    REFERENCE_KINDS,
    Length,
    MemberInfo,
    Pattern,
    Range,
    TypeInfo,
    TypeKind,
)
from schemagraph.references.pointer import escape_segment
from schemagraph.schema.dereference import SchemaDialect
from schemagraph.schema.flags import JsonObjectType
from schemagraph.schema.node import JsonSchema

_PRIMITIVE_FLAGS = {
    TypeKind.INTEGER: JsonObjectType.INTEGER,
    TypeKind.NUMBER: JsonObjectType.NUMBER,
    TypeKind.BOOLEAN: JsonObjectType.BOOLEAN,
    TypeKind.STRING: JsonObjectType.STRING,
}


@dataclass
class _Definition:
    schema: JsonSchema
    pointer: str


class JsonSchemaGenerator:
    """Map structural type descriptions to a schema graph.

    Object and enum types are registered once per identity in the root's
    ``definitions`` and every use of them becomes a reference node. The
    registry lives for one :meth:`generate` call.
    """

    def __init__(
        self,
        settings: GeneratorSettings | None = None,
        *,
        on_event: ev.EventHandler | None = None,
    ):
        self.settings = settings or GeneratorSettings()
        self.on_event = on_event
        self._root = JsonSchema()
        self._registry: dict[tuple[str, ...], _Definition] = {}

    def generate(self, type_info: TypeInfo) -> JsonSchema:
        self._root = root = JsonSchema()
        self._registry = {}

        kind = self._classify(type_info, owner=type_info.name)
        if kind is TypeKind.OBJECT:
            self._registry[("object", type_info.key)] = _Definition(root, "#")
            self._build_object(root, type_info)
        elif kind is TypeKind.ENUM:
            handling = self.settings.enum_handling
            self._registry[("enum", type_info.key, handling.value)] = _Definition(root, "#")
            self._build_enum(root, type_info, handling)
        else:
            schema = self._schema_for(
                type_info,
                kind,
                nullable=type_info.nullable,
                enum_handling=None,
                owner=type_info.name,
            )
            schema.definitions = root.definitions
            return schema
        return root

    def _member_schema(self, member: MemberInfo, owner: TypeInfo) -> JsonSchema:
        kind = self._classify(member.type, owner=owner.name, member=member.name)
        nullable = member.nullable
        if nullable is None:
            nullable = member.type.nullable or (
                kind in REFERENCE_KINDS and self.settings.reference_types_nullable
            )
        schema = self._schema_for(
            member.type,
            kind,
            nullable=nullable,
            enum_handling=member.enum_handling,
            owner=owner.name,
        )

        for constraint in member.constraints:
            if isinstance(constraint, Range):
                target = self._constraint_target(schema, owner, member, "range")
                if target is not None:
                    target.minimum = constraint.minimum
                    target.maximum = constraint.maximum
            elif isinstance(constraint, Length):
                target = self._constraint_target(schema, owner, member, "length")
                if target is not None:
                    target.min_length = constraint.minimum
                    target.max_length = constraint.maximum
            elif isinstance(constraint, Pattern):
                target = schema
                if kind is TypeKind.DICTIONARY and isinstance(schema.additional_properties, JsonSchema):
                    target = schema.additional_properties
                target = self._constraint_target(target, owner, member, "pattern")
                if target is not None:
                    target.pattern = constraint.pattern

        if member.description and self.settings.include_property_descriptions:
            schema.description = member.description
        for key, value in member.extension_data.items():
            schema.set_extension(key, value)
        return schema

    def _schema_for(
        self,
        type_info: TypeInfo,
        kind: TypeKind,
        *,
        nullable: bool,
        enum_handling: EnumHandling | None,
        owner: str,
    ) -> JsonSchema:
        null_flag = JsonObjectType.NULL if nullable else JsonObjectType.NONE
        if kind in _PRIMITIVE_FLAGS:
            return JsonSchema(type=_PRIMITIVE_FLAGS[kind] | null_flag, format=type_info.format)
        if kind is TypeKind.ARRAY:
            return JsonSchema(
                type=JsonObjectType.ARRAY | null_flag,
                items=self._element_schema(type_info.item_type, owner=owner),
            )
        if kind is TypeKind.DICTIONARY:
            return JsonSchema(
                type=JsonObjectType.OBJECT | null_flag,
                additional_properties=self._element_schema(type_info.item_type, owner=owner),
            )
        if kind is TypeKind.OBJECT:
            return self._reference(self._object_definition(type_info), nullable=nullable)
        if kind is TypeKind.ENUM:
            handling = enum_handling or self.settings.enum_handling
            return self._reference(self._enum_definition(type_info, handling), nullable=nullable)
        return JsonSchema(additional_properties=True)

    def _element_schema(self, type_info: TypeInfo | None, *, owner: str) -> JsonSchema:
        if type_info is None:
            return JsonSchema(additional_properties=True)
        kind = self._classify(type_info, owner=owner)
        return self._schema_for(
            type_info,
            kind,
            nullable=type_info.nullable,
            enum_handling=None,
            owner=owner,
        )

    def _reference(self, definition: _Definition, *, nullable: bool) -> JsonSchema:
        reference = JsonSchema.reference_to(definition.schema, definition.pointer)
        if not nullable:
            return reference
        if self.settings.dialect is SchemaDialect.SWAGGER2:
            reference.set_extension("x-nullable", True)
            return reference
        return JsonSchema(one_of=[JsonSchema.null(), reference])

    def _object_definition(self, type_info: TypeInfo) -> _Definition:
        key = ("object", type_info.key)
        definition = self._registry.get(key)
        if definition is None:
            definition = self._register(key, type_info)
            self._build_object(definition.schema, type_info)
        return definition

    def _enum_definition(self, type_info: TypeInfo, handling: EnumHandling) -> _Definition:
        key = ("enum", type_info.key, handling.value)
        definition = self._registry.get(key)
        if definition is None:
            definition = self._register(key, type_info)
            self._build_enum(definition.schema, type_info, handling)
        return definition

    def _register(self, key: tuple[str, ...], type_info: TypeInfo) -> _Definition:
        name = _display_name(type_info)
        candidate, counter = name, 2
        while candidate in self._root.definitions:
            candidate = f"{name}{counter}"
            counter += 1
        schema = JsonSchema()
        self._root.definitions[candidate] = schema
        definition = _Definition(schema, f"#/definitions/{escape_segment(candidate)}")
        self._registry[key] = definition
        ev.emit(self.on_event, ev.DefinitionRegistered(name=candidate, identity=type_info.key))
        return definition

    def _build_object(self, schema: JsonSchema, type_info: TypeInfo) -> None:
        schema.type = JsonObjectType.OBJECT
        schema.title = _display_name(type_info)
        schema.description = type_info.description
        schema.additional_properties = not self.settings.strict_objects
        for member in type_info.members:
            name = member.property_name
            if name in schema.properties:
                ev.emit(
                    self.on_event,
                    ev.Warning(
                        code="duplicate_property",
                        message=f"{type_info.name}.{member.name} replaces property {name!r}.",
                    ),
                )
            schema.properties[name] = self._member_schema(member, type_info)
            if member.is_required:
                schema.add_required(name)
        for key, value in type_info.extension_data.items():
            schema.set_extension(key, value)

    def _build_enum(self, schema: JsonSchema, type_info: TypeInfo, handling: EnumHandling) -> None:
        schema.description = type_info.description
        names = [item.name for item in type_info.enum_members]
        if handling is EnumHandling.NAME:
            schema.type = JsonObjectType.STRING
            schema.enumeration = names
        else:
            values = [item.value for item in type_info.enum_members]
            if all(isinstance(value, int) and not isinstance(value, bool) for value in values):
                schema.type = JsonObjectType.INTEGER
            elif all(isinstance(value, str) for value in values):
                schema.type = JsonObjectType.STRING
            schema.enumeration = values
            schema.set_extension("x-enumNames", names)
        for key, value in type_info.extension_data.items():
            schema.set_extension(key, value)

    def _classify(self, type_info: TypeInfo, *, owner: str, member: str | None = None) -> TypeKind:
        try:
            kind = TypeKind(type_info.kind)
        except ValueError:
            return self._unsupported(owner, member, f"unknown kind {type_info.kind!r}")
        if kind in {TypeKind.ARRAY, TypeKind.DICTIONARY} and type_info.item_type is None:
            return self._unsupported(owner, member, f"{kind.value} {type_info.name!r} has no element type")
        if kind is TypeKind.ENUM and not type_info.enum_members:
            return self._unsupported(owner, member, f"enum {type_info.name!r} has no members")
        return kind

    def _unsupported(self, owner: str, member: str | None, message: str) -> TypeKind:
        if self.settings.strict:
            raise UnsupportedTypeShapeError(owner, message, member=member)
        ev.emit(self.on_event, ev.TypeShapeUnsupported(type_name=owner, member=member, message=message))
        return TypeKind.DYNAMIC

    def _constraint_target(
        self,
        schema: JsonSchema,
        owner: TypeInfo,
        member: MemberInfo,
        constraint: str,
    ) -> JsonSchema | None:
        if not schema.has_reference and not schema.one_of:
            return schema
        ev.emit(
            self.on_event,
            ev.Warning(
                code="constraint_on_reference",
                message=f"Ignoring {constraint} constraint on {owner.name}.{member.name}: "
                "the schema is a reference.",
            ),
        )
        return None


def generate(
    type_info: TypeInfo,
    settings: GeneratorSettings | None = None,
    *,
    on_event: ev.EventHandler | None = None,
) -> JsonSchema:
    return JsonSchemaGenerator(settings, on_event=on_event).generate(type_info)


def _display_name(type_info: TypeInfo) -> str:
    if type_info.display_name and type_info.display_name.strip():
        return type_info.display_name.strip()
    return type_info.name
