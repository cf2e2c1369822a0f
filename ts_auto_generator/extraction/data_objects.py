"""
Value-object analysis.

Reads the constructor of a value object (or the field table of a pydantic
model) and produces one ValueObjectField per parameter, in declaration order.
Types written in the docstring take precedence over native annotations since
they can express shapes the annotation does not, such as
``:param dict[int, str] labels:``.
"""

import inspect
import logging
import re
import typing
from typing import Any, Dict, List, Optional, Tuple

from ..constants import TypeScriptNames
from ..domain.capability import is_pydantic_model, is_value_object
from ..domain.diagnostics import Diagnostics, Stage
from ..domain.locator import ValueObjectLocator
from ..domain.models import ValueObjectField
from ..domain.type_mapping import TypeMapper, accepts_none, describe_annotation
from ..exceptions import ValueObjectResolutionError


logger = logging.getLogger(__name__)

# Stage one: a whole ":param <type> <name>:" line
PARAM_LINE_PATTERN = re.compile(r"^\s*:param\s+(?P<spec>[^:]+?)\s*:")
# Stage two: split the captured text into type and trailing name
PARAM_SPEC_PATTERN = re.compile(r"^(?P<type>.+?)\s+(?P<name>[A-Za-z_]\w*)$")
TYPE_LINE_PATTERN = re.compile(r"^\s*:type\s+(?P<name>[A-Za-z_]\w*)\s*:\s*(?P<type>.+?)\s*$")


def parse_docstring_types(docstring: Optional[str]) -> Dict[str, str]:
    """
    Collect parameter types from a Sphinx-style docstring.

    Example:
        >>> parse_docstring_types(":param dict[int, str] labels: Labels")
        {'labels': 'dict[int, str]'}

    Lines that do not carry both a type and a name are ignored.
    """
    types_by_name: Dict[str, str] = {}
    if not docstring:
        return types_by_name

    for line in docstring.splitlines():
        param_match = PARAM_LINE_PATTERN.match(line)
        if param_match:
            spec_match = PARAM_SPEC_PATTERN.match(param_match.group("spec").strip())
            if spec_match:
                types_by_name[spec_match.group("name")] = spec_match.group("type").strip()
            continue

        type_match = TYPE_LINE_PATTERN.match(line)
        if type_match:
            types_by_name[type_match.group("name")] = type_match.group("type")
    return types_by_name


class DataObjectAnalyzer:
    """
    Extracts the property list of value objects.

    Args:
        type_mapper: Mapper used to turn parameter types into TypeScript
        locator: Locator that remembers nested value objects
        diagnostics: Collector for value objects that cannot be analyzed
    """

    def __init__(
        self,
        type_mapper: TypeMapper,
        locator: ValueObjectLocator,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.type_mapper = type_mapper
        self.locator = locator
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def is_value_object(self, cls: Any) -> bool:
        return is_value_object(cls)

    def docstring_types(self, cls: type) -> Dict[str, str]:
        """Docstring parameter types; the ``__init__`` docstring wins over the class one."""
        types_by_name = parse_docstring_types(cls.__dict__.get("__doc__"))
        init = cls.__dict__.get("__init__")
        if init is not None:
            types_by_name.update(parse_docstring_types(getattr(init, "__doc__", None)))
        return types_by_name

    def extract_fields(self, cls: type) -> List[ValueObjectField]:
        """
        Extract the properties of a value object in constructor order.

        Raises:
            ValueObjectResolutionError: If the class is not a value object or
                its constructor cannot be inspected
        """
        if not self.is_value_object(cls):
            raise ValueObjectResolutionError(
                f"{getattr(cls, '__name__', cls)!s} is not a value object",
                value_object=str(getattr(cls, "__qualname__", cls)),
            )

        self.locator.remember(cls)
        if is_pydantic_model(cls):
            parameters = self._model_field_parameters(cls)
        else:
            parameters = self._constructor_parameters(cls)

        doc_types = self.docstring_types(cls)
        context = cls.__module__
        fields = []
        for name, annotation, has_default in parameters:
            descriptor = doc_types.get(name)
            if descriptor is None and annotation is not inspect.Parameter.empty:
                descriptor = describe_annotation(annotation, self.locator)

            if descriptor:
                mapped_type = self.type_mapper.map_type(descriptor, context_module=context)
                references = self.type_mapper.value_object_references(
                    descriptor, context_module=context
                )
            else:
                mapped_type = TypeScriptNames.UNKNOWN
                references = []

            fields.append(
                ValueObjectField(
                    name=name,
                    mapped_type=mapped_type,
                    nullable=accepts_none(annotation),
                    has_default=has_default,
                    references=tuple(references),
                )
            )
        return fields

    def try_extract_fields(self, cls: type, subject: str) -> Optional[List[ValueObjectField]]:
        """``extract_fields`` that records a skip instead of raising."""
        try:
            return self.extract_fields(cls)
        except ValueObjectResolutionError as e:
            self.diagnostics.skip(Stage.VALUE_OBJECT, subject, e.message)
            return None

    def _constructor_parameters(self, cls: type) -> List[Tuple[str, Any, bool]]:
        try:
            signature = inspect.signature(cls.__init__)
        except (TypeError, ValueError) as e:
            raise ValueObjectResolutionError(
                f"Cannot inspect constructor of {cls.__name__}: {e}",
                value_object=cls.__qualname__,
            ) from e

        try:
            hints = typing.get_type_hints(cls.__init__)
        except Exception as e:
            # Unresolvable forward references keep their raw annotation text
            logger.debug(f"Type hints of {cls.__name__}.__init__ not resolvable: {e}")
            hints = {}

        parameters = []
        for index, parameter in enumerate(signature.parameters.values()):
            if index == 0 and parameter.name in ("self", "cls"):
                continue
            if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
                continue
            annotation = hints.get(parameter.name, parameter.annotation)
            has_default = parameter.default is not inspect.Parameter.empty
            parameters.append((parameter.name, annotation, has_default))
        return parameters

    def _model_field_parameters(self, cls: type) -> List[Tuple[str, Any, bool]]:
        parameters = []
        for name, info in cls.model_fields.items():
            annotation = info.annotation if info.annotation is not None else inspect.Parameter.empty
            parameters.append((name, annotation, not info.is_required()))
        return parameters
