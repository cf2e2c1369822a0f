"""
Per-model field extraction.

The field order produced here is the member order of the generated
interface:

1. primary key
2. editable columns in declaration order; a foreign key or one-to-one
   contributes its ``<name>_id`` column here
3. ``auto_now_add`` / ``auto_now`` timestamps
4. relations, each collection followed by its ``_count`` field
5. model overrides not consumed above
"""

import logging
from typing import Dict, List, Optional

from ..config_validation import GeneratorConfig
from ..constants import TypeScriptNames
from ..domain.models import (
    FieldDescriptor,
    ImportDescriptor,
    ModelSchema,
    RelationDescriptor,
    ScalarDescriptor,
)
from ..domain.naming import count_field_name, qualified_name, to_snake_case
from .casts import CastTypeResolver
from .relationships import RelationshipResolver


logger = logging.getLogger(__name__)

PRIMARY_KEY_TAG = "integer"
COUNT_TAG = "integer"
TIMESTAMP_TAG = "string"
DEFAULT_COLUMN_TAG = "string"


def override_descriptor(name: str, value: str) -> FieldDescriptor:
    """
    Build the descriptor for a configured override.

    Values starting with ``@/`` reference an external TypeScript module;
    anything else is TypeScript text used as is.
    """
    if value.startswith(TypeScriptNames.IMPORT_PREFIX):
        return ImportDescriptor(name=name, declared_type=value)
    return ScalarDescriptor(name=name, declared_type=value, literal=True)


def is_relation_column(field) -> bool:
    """Forward foreign keys and one-to-ones store the related key in a column."""
    return field.is_relation and (field.many_to_one or field.one_to_one)


def declared_fields(model: type) -> list:
    """Editable concrete columns other than the primary key, relation key columns included."""
    return [
        field
        for field in model._meta.concrete_fields
        if (not field.is_relation or is_relation_column(field))
        and not field.primary_key
        and field.editable
    ]


def timestamp_fields(model: type) -> list:
    """Creation timestamps first, then update timestamps."""
    created = [f for f in model._meta.concrete_fields if getattr(f, "auto_now_add", False)]
    updated = [
        f for f in model._meta.concrete_fields
        if getattr(f, "auto_now", False) and f not in created
    ]
    return created + updated


class TypeExtractor:
    """
    Builds the ordered field descriptor list of a model.

    Args:
        config: Generator configuration (overrides and count toggle)
        cast_resolver: Resolver for custom fields returning value objects
        relationship_resolver: Resolver for the model's relations
    """

    def __init__(
        self,
        config: GeneratorConfig,
        cast_resolver: CastTypeResolver,
        relationship_resolver: RelationshipResolver,
    ):
        self.config = config
        self.cast_resolver = cast_resolver
        self.relationship_resolver = relationship_resolver

    def extract_types(self, model: type) -> List[FieldDescriptor]:
        return self.extract_schema(model).fields

    def extract_schema(self, model: type) -> ModelSchema:
        """Extract a ModelSchema for ``model``."""
        schema = ModelSchema(name=model.__name__, qualified_identifier=qualified_name(model))
        overrides = self.config.overrides_for(model.__name__)

        schema.add_field(ScalarDescriptor(name=model._meta.pk.name, declared_type=PRIMARY_KEY_TAG))

        for field in declared_fields(model):
            schema.add_field(self._column_descriptor(field, overrides))

        for field in timestamp_fields(model):
            if field.name not in overrides:
                schema.add_field(ScalarDescriptor(name=field.name, declared_type=TIMESTAMP_TAG))

        for relation in self.relationship_resolver.resolve(model):
            name = to_snake_case(relation.method_name)
            schema.add_field(
                RelationDescriptor(
                    name=name,
                    declared_type=relation.kind,
                    related_model=relation.related_model,
                    pivot=relation.pivot,
                )
            )
            if relation.is_collection and self.config.with_counts:
                schema.add_field(ScalarDescriptor(name=count_field_name(name), declared_type=COUNT_TAG))

        for name, value in overrides.items():
            schema.add_field(override_descriptor(name, value))

        logger.debug(f"Extracted {len(schema.fields)} fields for {model.__name__}")
        return schema

    def _column_descriptor(self, field, overrides: Dict[str, str]) -> FieldDescriptor:
        if is_relation_column(field):
            return self._key_column_descriptor(field, overrides)

        if field.name in overrides:
            return override_descriptor(field.name, overrides[field.name])

        descriptor: Optional[FieldDescriptor] = self.cast_resolver.resolve(type(field), field.name)
        if descriptor is not None:
            return descriptor

        return ScalarDescriptor(
            name=field.name,
            declared_type=field.get_internal_type() or DEFAULT_COLUMN_TAG,
            nullable=field.null,
        )

    @staticmethod
    def _key_column_descriptor(field, overrides: Dict[str, str]) -> FieldDescriptor:
        if field.attname in overrides:
            return override_descriptor(field.attname, overrides[field.attname])

        # The column takes the type of the key it points at; child tables of
        # multi-table inheritance point at their parent link
        target = field.target_field
        while target.is_relation:
            target = target.target_field
        return ScalarDescriptor(
            name=field.attname,
            declared_type=target.get_internal_type() or PRIMARY_KEY_TAG,
            nullable=field.null,
        )
