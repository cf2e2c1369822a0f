"""
Core domain models for TS Auto Generator.

These models describe the normalized schema that sits between model
introspection and TypeScript emission. They are independent of Django and of
the template layer, and every one of them serializes to plain data so the
schema can be persisted for debugging.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Set, Tuple, Union

from ..constants import RelationKinds, TypeScriptNames


@dataclass(frozen=True)
class PivotInfo:
    """Join model of a many-to-many relation that carries its own columns."""

    accessor: str
    class_name: str
    columns: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accessor": self.accessor,
            "class": self.class_name,
            "columns": list(self.columns),
        }


@dataclass(frozen=True)
class RelationInfo:
    """
    One association read from a model's relation registry.

    ``method_name`` is the attribute through which the relation is reached
    on an instance (a forward field name or a reverse accessor).
    """

    method_name: str
    kind: str
    related_model: str
    pivot: Optional[PivotInfo] = None

    @property
    def is_collection(self) -> bool:
        return self.kind in RelationKinds.COLLECTION


@dataclass(frozen=True)
class ValueObjectField:
    """
    One constructor parameter of a value object.

    ``mapped_type`` is already TypeScript text. ``references`` holds the
    qualified identifiers of value objects named by the unmapped descriptor,
    which the emitter uses to queue nested interfaces.
    """

    name: str
    mapped_type: str
    nullable: bool = False
    has_default: bool = False
    references: Tuple[str, ...] = ()

    @property
    def is_optional(self) -> bool:
        return self.nullable or self.has_default

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.mapped_type,
            "nullable": self.nullable,
            "hasDefault": self.has_default,
            "references": list(self.references),
        }


@dataclass
class ScalarDescriptor:
    """
    A plain column or a synthetic field.

    When ``literal`` is set, ``declared_type`` is already TypeScript and is
    emitted verbatim; otherwise it is a column tag looked up at emission time.
    """

    name: str
    declared_type: str
    nullable: bool = False
    literal: bool = False

    kind = "scalar"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "type": self.declared_type,
            "nullable": self.nullable,
            "literal": self.literal,
        }


@dataclass
class RelationDescriptor:
    """An association rendered as a reference to another model interface."""

    name: str
    declared_type: str
    related_model: str
    pivot: Optional[PivotInfo] = None

    kind = "relation"

    @property
    def nullable(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "kind": self.kind,
            "name": self.name,
            "type": self.declared_type,
            "relatedModel": self.related_model,
        }
        if self.pivot is not None:
            data["pivot"] = self.pivot.to_dict()
        return data


@dataclass
class ValueObjectDescriptor:
    """
    A column surfaced as a structured value object through a custom field.

    ``declared_type`` is the value object's short name, with ``[]`` appended
    when the column holds a list of them.
    """

    name: str
    declared_type: str
    value_object_type: str
    properties: Optional[List[ValueObjectField]] = None
    nullable: bool = False
    is_array: bool = False

    kind = "value_object"

    @property
    def canonical_name(self) -> str:
        return self.declared_type.replace(TypeScriptNames.ARRAY_SUFFIX, "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "type": self.declared_type,
            "valueObjectType": self.value_object_type,
            "nullable": self.nullable,
            "isArray": self.is_array,
            "properties": [prop.to_dict() for prop in (self.properties or [])],
        }


@dataclass
class ImportDescriptor:
    """
    A field whose type comes from an external TypeScript module.

    ``declared_type`` is either ``"<module>|<TypeName>"`` or a bare module
    path whose basename doubles as the type name.
    """

    name: str
    declared_type: str

    kind = "import"

    @property
    def nullable(self) -> bool:
        return False

    @property
    def module_path(self) -> str:
        path = self.declared_type.split(TypeScriptNames.IMPORT_SEPARATOR, 1)[0]
        return path.replace(TypeScriptNames.ARRAY_SUFFIX, "")

    @property
    def type_name(self) -> str:
        """Alias after the separator, else the basename of the module path."""
        if TypeScriptNames.IMPORT_SEPARATOR in self.declared_type:
            return self.declared_type.split(TypeScriptNames.IMPORT_SEPARATOR, 1)[1].strip()
        return self.declared_type.rstrip("/").rsplit("/", 1)[-1]

    @property
    def import_name(self) -> str:
        """Name listed in the import statement (array marker removed)."""
        return self.type_name.replace(TypeScriptNames.ARRAY_SUFFIX, "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "type": self.declared_type,
        }


FieldDescriptor = Union[
    ScalarDescriptor, RelationDescriptor, ValueObjectDescriptor, ImportDescriptor
]


@dataclass
class ModelSchema:
    """The ordered field list of one model, keyed by its short name."""

    name: str
    qualified_identifier: str
    fields: List[FieldDescriptor] = field(default_factory=list)

    def has_field(self, name: str) -> bool:
        return any(existing.name == name for existing in self.fields)

    def add_field(self, descriptor: FieldDescriptor) -> bool:
        """
        Append a descriptor unless a field with the same name exists.

        Returns:
            True if the descriptor was appended, False if it was skipped
        """
        if self.has_field(descriptor.name):
            return False
        self.fields.append(descriptor)
        return True

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        for existing in self.fields:
            if existing.name == name:
                return existing
        return None

    @property
    def field_names(self) -> List[str]:
        return [descriptor.name for descriptor in self.fields]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "class": self.qualified_identifier,
            "fields": [descriptor.to_dict() for descriptor in self.fields],
        }


SchemaMap = Dict[str, ModelSchema]


def schema_to_dict(schema: SchemaMap) -> Dict[str, Any]:
    """Serialize a schema map to plain data, preserving model order."""
    return {name: model.to_dict() for name, model in schema.items()}


@dataclass
class EmissionState:
    """Per-run bookkeeping shared by the emitters of one generation."""

    processed_interface_names: Set[str] = field(default_factory=set)
    pending_value_objects: Deque[str] = field(default_factory=deque)
    import_table: Dict[str, List[str]] = field(default_factory=dict)

    def mark_processed(self, interface_name: str) -> bool:
        """
        Record an interface name as emitted.

        Returns:
            False if the name had already been processed
        """
        if interface_name in self.processed_interface_names:
            return False
        self.processed_interface_names.add(interface_name)
        return True

    def enqueue(self, identifier: str, interface_name: str) -> bool:
        if interface_name in self.processed_interface_names:
            return False
        if identifier in self.pending_value_objects:
            return False
        self.pending_value_objects.append(identifier)
        return True
