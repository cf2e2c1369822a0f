"""
Custom model field resolution.

A custom Django field whose ``from_db_value`` returns a value object is the
only way a flat column surfaces as a nested structure. This module turns
such fields into ValueObjectDescriptors.
"""

import inspect
import logging
import re
import types
import typing
from typing import Any, Optional

from django.db import models

from ..constants import TypeScriptNames
from ..domain.capability import is_value_object
from ..domain.diagnostics import Diagnostics, Stage
from ..domain.locator import ValueObjectLocator
from ..domain.models import ValueObjectDescriptor
from ..domain.naming import qualified_name
from ..exceptions import CastResolutionError, ValueObjectResolutionError
from .data_objects import DataObjectAnalyzer


logger = logging.getLogger(__name__)

ACCESSOR_NAME = "from_db_value"
LIST_TYPES = (list, typing.List)

# ":rtype: list[ItemData]", ":returns: List[ItemData]", ":return: ItemData[]"
RETURNS_LIST_PATTERN = re.compile(
    r"^\s*:(?:rtype|returns?)\s*:\s*"
    r"(?:(?:list|List|array)\s*[\[<]\s*(?P<generic>[\w.]+)\s*[\]>]|(?P<suffixed>[\w.]+)\[\])"
)


def unwrap_optional(annotation: Any) -> Any:
    """Return the single non-None member of an optional annotation."""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def is_list_annotation(annotation: Any) -> bool:
    return annotation in LIST_TYPES or typing.get_origin(annotation) is list


def item_type_from_docstring(docstring: Optional[str]) -> Optional[str]:
    """
    Find the item type of a list-returning accessor in its docstring.

    Example:
        >>> item_type_from_docstring(":rtype: list[AddressData]")
        'AddressData'
    """
    if not docstring:
        return None
    for line in docstring.splitlines():
        match = RETURNS_LIST_PATTERN.match(line)
        if match:
            return match.group("generic") or match.group("suffixed")
    return None


class CastTypeResolver:
    """
    Resolves custom Django field classes to value-object descriptors.

    Args:
        analyzer: Analyzer used to extract value-object properties
        locator: Locator used to resolve list item names
        diagnostics: Collector for fields that cannot be analyzed
    """

    def __init__(
        self,
        analyzer: DataObjectAnalyzer,
        locator: ValueObjectLocator,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.analyzer = analyzer
        self.locator = locator
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def resolve(self, field_class: type, field_name: str) -> Optional[ValueObjectDescriptor]:
        """
        Resolve a field class to a value-object descriptor.

        Args:
            field_class: The model field's class
            field_name: Name of the model field

        Returns:
            A descriptor, or None when the field is an ordinary column
        """
        subject = f"{getattr(field_class, '__name__', field_class)!s}.{field_name}"
        try:
            return self._resolve(field_class, field_name)
        except (CastResolutionError, ValueObjectResolutionError) as e:
            self.diagnostics.skip(Stage.CAST, subject, e.message)
            return None

    def _resolve(self, field_class: type, field_name: str) -> Optional[ValueObjectDescriptor]:
        if not inspect.isclass(field_class) or not issubclass(field_class, models.Field):
            return None
        accessor = getattr(field_class, ACCESSOR_NAME, None)
        if accessor is None:
            return None

        annotation = self._return_annotation(accessor, field_class, field_name)
        if annotation is inspect.Signature.empty:
            return None

        nullable = annotation is None or self._accepts_none(annotation)
        core = unwrap_optional(annotation)

        if is_list_annotation(core):
            item_class = self._list_item_class(core, accessor, field_class, field_name)
            return self._descriptor(field_name, item_class, nullable, is_array=True)

        if inspect.isclass(core):
            if not is_value_object(core):
                return None
            return self._descriptor(field_name, core, nullable, is_array=False)

        return None

    def _return_annotation(self, accessor: Any, field_class: type, field_name: str) -> Any:
        try:
            hints = typing.get_type_hints(accessor)
        except Exception as e:
            raise CastResolutionError(
                f"Cannot read the return annotation of {field_class.__name__}.{ACCESSOR_NAME}: {e}",
                field_class=qualified_name(field_class),
                field=field_name,
            ) from e
        return hints.get("return", inspect.Signature.empty)

    @staticmethod
    def _accepts_none(annotation: Any) -> bool:
        origin = typing.get_origin(annotation)
        if origin is typing.Union or origin is types.UnionType:
            return type(None) in typing.get_args(annotation)
        return annotation is type(None)

    def _list_item_class(
        self, annotation: Any, accessor: Any, field_class: type, field_name: str
    ) -> type:
        args = typing.get_args(annotation)
        item = args[0] if args else None

        if inspect.isclass(item):
            if is_value_object(item):
                return item
            raise CastResolutionError(
                f"List item type {item.__name__} is not a value object",
                field_class=qualified_name(field_class),
                field=field_name,
            )

        if isinstance(item, typing.ForwardRef):
            item_name = item.__forward_arg__
        elif isinstance(item, str):
            item_name = item
        else:
            item_name = item_type_from_docstring(getattr(accessor, "__doc__", None))

        if not item_name:
            raise CastResolutionError(
                f"{field_class.__name__}.{ACCESSOR_NAME} returns a list without an item type",
                field_class=qualified_name(field_class),
                field=field_name,
            )

        item_class = self.locator.locate(item_name, context_module=field_class.__module__)
        if item_class is None:
            raise CastResolutionError(
                f"List item type {item_name} does not resolve to a value object",
                field_class=qualified_name(field_class),
                field=field_name,
                suggestions=[
                    "Use a dotted path in the docstring",
                    "Define the value object in the field's module or a value_object_modules entry",
                ],
            )
        return item_class

    def _descriptor(
        self, field_name: str, cls: type, nullable: bool, is_array: bool
    ) -> ValueObjectDescriptor:
        properties = self.analyzer.extract_fields(cls)
        identifier = self.locator.remember(cls)
        declared_type = cls.__name__
        if is_array:
            declared_type += TypeScriptNames.ARRAY_SUFFIX
        logger.debug(f"Field {field_name} resolves to value object {identifier}")
        return ValueObjectDescriptor(
            name=field_name,
            declared_type=declared_type,
            value_object_type=identifier,
            properties=properties,
            nullable=nullable,
            is_array=is_array,
        )
