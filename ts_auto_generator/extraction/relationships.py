"""
Relationship resolution from Django's relation registry.

Relations are read from ``Model._meta.get_fields()``: forward fields declared
on the model and the reverse accessors Django adds to it. No relation
accessor is ever called, so no database access happens here.
"""

import logging
from typing import List, Optional

from django.apps import apps
from django.db import models

from ..constants import RelationKinds
from ..domain.diagnostics import Diagnostics, Stage
from ..domain.models import PivotInfo, RelationInfo
from ..domain.naming import pluralize, qualified_name, to_snake_case
from ..exceptions import RelationshipResolutionError


logger = logging.getLogger(__name__)


def is_generic_relation(field) -> bool:
    """True for ``GenericRelation`` fields when contenttypes is installed."""
    if not apps.is_installed("django.contrib.contenttypes"):
        return False
    from django.contrib.contenttypes.fields import GenericRelation

    return isinstance(field, GenericRelation)


def is_reverse_relation(field) -> bool:
    return isinstance(field, models.ForeignObjectRel)


class RelationshipResolver:
    """
    Produces RelationInfo entries for one model.

    Args:
        reverse_accessor_style: ``"django"`` keeps Django's reverse accessor
            names (``comment_set``); ``"plural"`` names collection reverse
            relations without a related_name after the pluralized model
            (``comments``)
        diagnostics: Collector for relations that cannot be resolved
    """

    def __init__(self, reverse_accessor_style: str = "django", diagnostics: Optional[Diagnostics] = None):
        self.reverse_accessor_style = reverse_accessor_style
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def resolve(self, model: type) -> List[RelationInfo]:
        """
        Resolve every relation owned by ``model``, in registry order.

        Relations inherited from a concrete parent model are left to the
        parent's own interface.
        """
        relations = []
        for field in model._meta.get_fields(include_hidden=False):
            if not field.is_relation:
                continue
            subject = f"{model.__name__}.{getattr(field, 'name', field)}"
            try:
                info = self._resolve_field(model, field)
            except RelationshipResolutionError as e:
                self.diagnostics.skip(Stage.RELATIONSHIP, subject, e.message)
                continue
            if info is not None:
                logger.debug(f"Resolved relation {subject} -> {info.kind} {info.related_model}")
                relations.append(info)
        return relations

    def _resolve_field(self, model: type, field) -> Optional[RelationInfo]:
        if is_reverse_relation(field):
            if field.model is not model:
                return None
            return self._reverse_relation(model, field)

        if getattr(field, "model", model) is not model:
            return None
        return self._forward_relation(model, field)

    def _forward_relation(self, model: type, field) -> Optional[RelationInfo]:
        related_model = field.related_model
        if related_model is None:
            raise RelationshipResolutionError(
                "Polymorphic relation has no concrete target model",
                model=model.__name__,
                relation=field.name,
            )
        self._check_resolved(model, field.name, related_model)

        if is_generic_relation(field):
            kind = RelationKinds.MORPH_MANY
        elif field.many_to_many:
            kind = RelationKinds.BELONGS_TO_MANY
        elif field.one_to_one:
            if field.remote_field.parent_link:
                return None
            kind = RelationKinds.BELONGS_TO
        elif field.many_to_one:
            kind = RelationKinds.BELONGS_TO
        else:
            raise RelationshipResolutionError(
                f"Unsupported relation field {type(field).__name__}",
                model=model.__name__,
                relation=field.name,
            )

        pivot = None
        if field.many_to_many and not is_generic_relation(field):
            pivot = self._pivot(model, field.name, field.remote_field.through)
        return RelationInfo(
            method_name=field.name,
            kind=kind,
            related_model=qualified_name(related_model),
            pivot=pivot,
        )

    def _reverse_relation(self, model: type, rel) -> Optional[RelationInfo]:
        related_model = rel.related_model
        accessor = self._accessor_name(rel)
        if not accessor:
            raise RelationshipResolutionError(
                "Reverse relation has no accessor",
                model=model.__name__,
                relation=str(rel),
            )
        self._check_resolved(model, accessor, related_model)

        if rel.one_to_one:
            kind = RelationKinds.HAS_ONE
        elif rel.many_to_many:
            kind = RelationKinds.BELONGS_TO_MANY
        elif rel.one_to_many:
            kind = RelationKinds.HAS_MANY
        else:
            raise RelationshipResolutionError(
                f"Unsupported reverse relation {type(rel).__name__}",
                model=model.__name__,
                relation=accessor,
            )

        pivot = None
        if rel.many_to_many:
            pivot = self._pivot(model, accessor, rel.through)
        return RelationInfo(
            method_name=accessor,
            kind=kind,
            related_model=qualified_name(related_model),
            pivot=pivot,
        )

    def _accessor_name(self, rel) -> Optional[str]:
        accessor = rel.get_accessor_name()
        if (
            self.reverse_accessor_style == "plural"
            and not rel.related_name
            and (rel.one_to_many or rel.many_to_many)
        ):
            accessor = pluralize(to_snake_case(rel.related_model.__name__))
        return accessor

    def _check_resolved(self, model: type, name: str, related_model) -> None:
        if isinstance(related_model, str):
            raise RelationshipResolutionError(
                f"Lazy reference {related_model!r} was never resolved",
                model=model.__name__,
                relation=name,
            )

    def _pivot(self, model: type, name: str, through) -> Optional[PivotInfo]:
        if through is None:
            return None
        if isinstance(through, str):
            raise RelationshipResolutionError(
                f"Through model {through!r} was never resolved",
                model=model.__name__,
                relation=name,
            )
        if through._meta.auto_created:
            return None
        columns = tuple(
            field.attname
            for field in through._meta.concrete_fields
            if not field.primary_key
        )
        return PivotInfo(
            accessor=RelationKinds.PIVOT_ACCESSOR,
            class_name=qualified_name(through),
            columns=columns,
        )
