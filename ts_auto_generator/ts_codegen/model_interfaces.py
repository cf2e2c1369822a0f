import logging
from typing import Iterable, Optional

from jinja2 import Environment

from ..constants import DefaultConfig, TypeScriptNames
from ..domain.models import (
    EmissionState,
    FieldDescriptor,
    ImportDescriptor,
    ModelSchema,
    RelationDescriptor,
    SchemaMap,
    ValueObjectDescriptor,
)
from ..domain.naming import interface_name, is_count_field
from ..domain.type_mapping import map_column_type, map_relation_type
from .base import InterfaceMember, render_interface, setup_jinja_env


logger = logging.getLogger(__name__)


class ModelInterfaceEmitter:
    """
    Renders one ``I<Model>`` interface per model schema.

    A non-value-object member is optional when it is a relation, a
    ``_count`` field or listed in ``nullable_fields``; with
    ``nullable_from_schema`` columns declared ``null=True`` are optional too.
    Value-object members are always unioned with ``null`` and optional
    exactly when nullable.

    Args:
        state: Emission state shared with the other emitters of the run
        nullable_fields: Field names always rendered optional
        nullable_from_schema: Also honour column nullability
        with_json_ld: Render JsonLdData fields as ``JsonLdRawNode[]``
    """

    def __init__(
        self,
        state: EmissionState,
        env: Optional[Environment] = None,
        nullable_fields: Optional[Iterable[str]] = None,
        nullable_from_schema: bool = False,
        with_json_ld: bool = False,
    ):
        self.state = state
        self.env = env or setup_jinja_env()
        if nullable_fields is None:
            nullable_fields = DefaultConfig.NULLABLE_FIELDS
        self.nullable_fields = frozenset(nullable_fields)
        self.nullable_from_schema = nullable_from_schema
        self.with_json_ld = with_json_ld

    def emit_all(self, schema: SchemaMap) -> str:
        return "".join(self.emit_one(model_schema) for model_schema in schema.values())

    def emit_one(self, model_schema: ModelSchema) -> str:
        name = interface_name(model_schema.name)
        if not self.state.mark_processed(name):
            logger.debug(f"Interface {name} already emitted")
            return ""
        members = [self.render_member(descriptor) for descriptor in model_schema.fields]
        return render_interface(self.env, name, members)

    def render_member(self, descriptor: FieldDescriptor) -> InterfaceMember:
        if descriptor.kind == ValueObjectDescriptor.kind:
            return InterfaceMember(
                name=descriptor.name,
                type=f"{self._value_object_type(descriptor)}{TypeScriptNames.UNION_SEPARATOR}{TypeScriptNames.NULL}",
                optional=descriptor.nullable,
            )

        if descriptor.kind == ImportDescriptor.kind:
            ts_type = descriptor.type_name
        elif descriptor.kind == RelationDescriptor.kind:
            ts_type = map_relation_type(descriptor.declared_type, descriptor.related_model)
        elif descriptor.literal:
            ts_type = descriptor.declared_type
        else:
            ts_type = map_column_type(descriptor.declared_type)

        return InterfaceMember(name=descriptor.name, type=ts_type, optional=self.is_optional(descriptor))

    def is_optional(self, descriptor: FieldDescriptor) -> bool:
        if descriptor.kind == RelationDescriptor.kind:
            return True
        if is_count_field(descriptor.name) or descriptor.name in self.nullable_fields:
            return True
        return self.nullable_from_schema and descriptor.nullable

    def _value_object_type(self, descriptor: ValueObjectDescriptor) -> str:
        canonical = descriptor.canonical_name
        if self.with_json_ld and canonical == TypeScriptNames.JSON_LD_DATA:
            return f"{TypeScriptNames.JSON_LD_NODE}{TypeScriptNames.ARRAY_SUFFIX}"
        ts_type = interface_name(canonical)
        if descriptor.is_array:
            ts_type += TypeScriptNames.ARRAY_SUFFIX
        return ts_type
