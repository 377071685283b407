from enum import Enum

from pydantic import BaseModel, ConfigDict

from schemagraph.schema.dereference import SchemaDialect


class EnumHandling(str, Enum):
    NAME = "name"
    VALUE = "value"


class GeneratorSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enum_handling: EnumHandling = EnumHandling.NAME
    reference_types_nullable: bool = True
    include_property_descriptions: bool = True
    dialect: SchemaDialect = SchemaDialect.JSON_SCHEMA
    strict_objects: bool = True
    strict: bool = False
