"""
Domain layer for TS Auto Generator.

Framework-independent descriptor types, naming conventions, the value-object
capability marker and the type mapper shared by schema extraction and code
generation.
"""

from .capability import DataObject, is_value_object
from .diagnostics import Diagnostics, SkippedItem, Stage
from .locator import ValueObjectLocator
from .models import (
    EmissionState,
    FieldDescriptor,
    ImportDescriptor,
    ModelSchema,
    PivotInfo,
    RelationDescriptor,
    RelationInfo,
    ScalarDescriptor,
    SchemaMap,
    ValueObjectDescriptor,
    ValueObjectField,
    schema_to_dict,
)
from .naming import interface_name, to_snake_case
from .type_mapping import (
    TypeMapper,
    describe_annotation,
    map_column_type,
    map_relation_type,
)

__all__ = [
    "DataObject",
    "is_value_object",
    "Diagnostics",
    "SkippedItem",
    "Stage",
    "ValueObjectLocator",
    "EmissionState",
    "FieldDescriptor",
    "ImportDescriptor",
    "ModelSchema",
    "PivotInfo",
    "RelationDescriptor",
    "RelationInfo",
    "ScalarDescriptor",
    "SchemaMap",
    "ValueObjectDescriptor",
    "ValueObjectField",
    "schema_to_dict",
    "interface_name",
    "to_snake_case",
    "TypeMapper",
    "describe_annotation",
    "map_column_type",
    "map_relation_type",
]
