"""
Type descriptor to TypeScript mapping.

Descriptors are type strings as they appear in Python annotations
(``list[AddressData] | None``, ``Optional[int]``, ``dict[str, Any]``) or in
the generic docstring dialect (``string|array<int, string>|null``). Both
square and angle brackets delimit generic arguments.

Mapping is total: anything that cannot be understood becomes ``unknown``.
"""

import inspect
import types
import typing
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..constants import RelationKinds, ScalarTypes, TypeScriptNames
from .capability import is_value_object
from .naming import interface_name, short_name


OPEN_BRACKETS = "[<("
CLOSE_BRACKETS = "]>)"
QUOTES = "'\""

UNKNOWN = TypeScriptNames.UNKNOWN


def scan_unquoted(text: str) -> Iterator[Tuple[int, str, bool]]:
    """
    Yield ``(position, char, quoted)`` for every character of ``text``.

    ``quoted`` is True inside a string literal such as ``'a, b'`` in
    ``Literal['a, b', 'c']``, quote characters included, so that brackets
    and separators written in literal values are not treated as syntax.
    """
    quote = None
    escaped = False
    for position, char in enumerate(text):
        if quote is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            yield position, char, True
        elif char in QUOTES:
            quote = char
            yield position, char, True
        else:
            yield position, char, False


def split_top_level(text: str, separator: str) -> List[str]:
    """
    Split ``text`` on ``separator`` where it is not nested in brackets.

    A single left-to-right scan keeps a bracket depth counter, so
    ``string|array<int, string>`` splits on ``|`` into two parts and
    ``int, string`` inside the angle brackets is left whole. Separators in
    quoted literal values never split.

    Args:
        text: Descriptor text
        separator: A single separator character (``|`` or ``,``)

    Returns:
        The stripped parts, in order
    """
    parts = []
    current = []
    depth = 0
    for _, char, quoted in scan_unquoted(text):
        if quoted:
            current.append(char)
            continue
        if char in OPEN_BRACKETS:
            depth += 1
        elif char in CLOSE_BRACKETS:
            depth = max(depth - 1, 0)
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return parts


def parse_generic(text: str) -> Optional[Tuple[str, List[str]]]:
    """
    Split ``Head[arg, ...]`` or ``head<arg, ...>`` into head and arguments.

    Returns None when the text is not a single generic application, for
    example ``X[]`` or ``list[int] | None``.
    """
    for index, char in enumerate(text):
        if char in "[<":
            break
    else:
        return None
    if index == 0:
        return None

    closer = "]" if char == "[" else ">"
    if not text.endswith(closer):
        return None

    depth = 0
    for position, current, quoted in scan_unquoted(text):
        if quoted or position < index:
            continue
        if current in OPEN_BRACKETS:
            depth += 1
        elif current in CLOSE_BRACKETS:
            depth -= 1
            if depth == 0 and position != len(text) - 1:
                return None

    inner = text[index + 1:-1]
    if not inner.strip():
        return None
    return text[:index].strip(), split_top_level(inner, ",")


def _is_parenthesized(text: str) -> bool:
    if not (text.startswith("(") and text.endswith(")")):
        return False
    depth = 0
    for position, char, quoted in scan_unquoted(text):
        if quoted:
            continue
        if char in OPEN_BRACKETS:
            depth += 1
        elif char in CLOSE_BRACKETS:
            depth -= 1
            if depth == 0 and position != len(text) - 1:
                return False
    return True


def _is_number(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def array_of(mapped: str) -> str:
    """Append the array suffix, parenthesizing unions."""
    if len(split_top_level(mapped, "|")) > 1:
        return f"({mapped}){TypeScriptNames.ARRAY_SUFFIX}"
    return f"{mapped}{TypeScriptNames.ARRAY_SUFFIX}"


class TypeMapper:
    """
    Maps type descriptors to TypeScript type text.

    Args:
        locator: Optional ValueObjectLocator; names it resolves become
            interface references (``AddressData`` -> ``IAddressData``)
        aliases: Short value-object names rendered as fixed TypeScript
            types instead of their own interface
    """

    def __init__(self, locator=None, aliases: Optional[Dict[str, str]] = None):
        self.locator = locator
        self.aliases = dict(aliases or {})

    def map_type(self, descriptor: Optional[str], context_module: Optional[str] = None) -> str:
        """
        Map a descriptor to TypeScript.

        Args:
            descriptor: Type descriptor text
            context_module: Module whose names are visible to the descriptor

        Returns:
            TypeScript type text; never contains a ``null`` union member
        """
        text = (descriptor or "").strip()
        if not text:
            return UNKNOWN
        return self._map(text, context_module)

    def value_object_references(
        self, descriptor: Optional[str], context_module: Optional[str] = None
    ) -> List[str]:
        """
        Qualified identifiers of every value object named by a descriptor.

        Walks the same structure ``map_type`` does, before any rendering.
        """
        references = []
        if self.locator is None:
            return references
        for name in self._leaf_names((descriptor or "").strip()):
            if name in ScalarTypes.NULL_NAMES or name in ScalarTypes.DESCRIPTOR_MAP:
                continue
            identifier = self.locator.resolve_identifier(name, context_module=context_module)
            if identifier and identifier not in references:
                references.append(identifier)
        return references

    def _map(self, text: str, context: Optional[str]) -> str:
        text = text.strip()
        if not text:
            return UNKNOWN

        branches = split_top_level(text, "|")
        if len(branches) > 1:
            return self._map_union(branches, context)

        if text.startswith("?"):
            return self._map_union([text[1:], "null"], context)
        if _is_parenthesized(text):
            return self._map(text[1:-1], context)
        if text.endswith(TypeScriptNames.ARRAY_SUFFIX):
            return array_of(self._map(text[:-2], context))

        generic = parse_generic(text)
        if generic is not None:
            head, args = generic
            return self._map_generic(head, args, context)
        return self._map_name(text, context)

    def _map_union(self, branches: List[str], context: Optional[str]) -> str:
        mapped = []
        for branch in branches:
            branch = branch.strip()
            if not branch or branch in ScalarTypes.NULL_NAMES:
                continue
            for part in split_top_level(self._map(branch, context), "|"):
                if part not in mapped:
                    mapped.append(part)
        if not mapped:
            return UNKNOWN
        return TypeScriptNames.UNION_SEPARATOR.join(mapped)

    def _map_generic(self, head: str, args: List[str], context: Optional[str]) -> str:
        head = short_name(head)

        if head in ScalarTypes.UNION_GENERICS:
            if head == "Optional":
                args = args + ["None"]
            return self._map_union(args, context)
        if head == "Literal":
            return self._map_literal(args)
        if head == "Annotated":
            return self._map(args[0], context)

        if head in ScalarTypes.MAPPING_GENERICS and len(args) == 2:
            key, value = args
            if key in ScalarTypes.INTEGER_KEYS:
                return array_of(self._map(value, context))
            if value in ScalarTypes.TOP_NAMES:
                return TypeScriptNames.UNKNOWN_RECORD
            return f"Record<string, {self._map(value, context)}>"

        if head in ("tuple", "Tuple"):
            if len(args) == 2 and args[1] == "...":
                return array_of(self._map(args[0], context))
            return "[" + ", ".join(self._map(arg, context) for arg in args) + "]"

        if head in ScalarTypes.SEQUENCE_GENERICS and len(args) == 1:
            return array_of(self._map(args[0], context))

        return self._map_name(head, context)

    def _map_literal(self, args: List[str]) -> str:
        values = []
        for arg in args:
            arg = arg.strip()
            if arg in ("True", "False"):
                value = arg.lower()
            elif len(arg) >= 2 and arg[0] == arg[-1] and arg[0] in "'\"":
                value = "'" + arg[1:-1].replace("'", "\\'") + "'"
            elif _is_number(arg):
                value = arg
            else:
                continue
            if value not in values:
                values.append(value)
        if not values:
            return UNKNOWN
        return TypeScriptNames.UNION_SEPARATOR.join(values)

    def _map_name(self, name: str, context: Optional[str]) -> str:
        name = name.strip()
        if name in self.aliases:
            return self.aliases[name]

        if self.locator is not None and name not in ScalarTypes.DESCRIPTOR_MAP:
            cls = self.locator.locate(name, context_module=context)
            if cls is not None:
                return self.aliases.get(cls.__name__, interface_name(cls.__name__))

        scalar = ScalarTypes.DESCRIPTOR_MAP.get(name)
        if scalar is None:
            scalar = ScalarTypes.DESCRIPTOR_MAP.get(short_name(name))
        return scalar or UNKNOWN

    def _leaf_names(self, text: str) -> Iterator[str]:
        text = text.strip()
        if not text:
            return

        branches = split_top_level(text, "|")
        if len(branches) > 1:
            for branch in branches:
                yield from self._leaf_names(branch)
            return

        if text.startswith("?"):
            yield from self._leaf_names(text[1:])
        elif _is_parenthesized(text):
            yield from self._leaf_names(text[1:-1])
        elif text.endswith(TypeScriptNames.ARRAY_SUFFIX):
            yield from self._leaf_names(text[:-2])
        else:
            generic = parse_generic(text)
            if generic is None:
                yield text
                return
            head, args = generic
            if short_name(head) == "Literal":
                return
            for arg in args:
                yield from self._leaf_names(arg)


def describe_annotation(annotation: Any, locator=None) -> str:
    """
    Turn a runtime annotation into descriptor text.

    Value-object classes met on the way are remembered by the locator so
    that their short names resolve later.

    Example:
        >>> describe_annotation(typing.Optional[typing.List[int]])
        'list[int] | None'
    """
    if annotation is None or annotation is type(None):
        return "None"
    if annotation is inspect.Parameter.empty:
        return ""
    if annotation is Ellipsis:
        return "..."
    if annotation is typing.Any:
        return "Any"
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is typing.Union or origin is types.UnionType:
        return " | ".join(describe_annotation(arg, locator) for arg in args)
    if origin is typing.Literal:
        return "Literal[" + ", ".join(repr(arg) for arg in args) + "]"
    if origin is typing.Annotated:
        return describe_annotation(args[0], locator)
    if origin is not None:
        name = getattr(origin, "__name__", None) or str(origin)
        if not args:
            return name
        return f"{name}[{', '.join(describe_annotation(arg, locator) for arg in args)}]"

    if inspect.isclass(annotation):
        if locator is not None and is_value_object(annotation):
            locator.remember(annotation)
        return annotation.__name__
    return getattr(annotation, "__name__", None) or str(annotation)


def accepts_none(annotation: Any) -> bool:
    """
    Check whether an annotation admits ``None``.

    A missing annotation accepts anything, ``None`` included.
    """
    if annotation is inspect.Parameter.empty or annotation is typing.Any:
        return True
    if annotation is None or annotation is type(None):
        return True
    if isinstance(annotation, str):
        return any(
            branch in ScalarTypes.NULL_NAMES or branch.startswith("Optional[")
            for branch in split_top_level(annotation, "|")
        )
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return any(arg is type(None) for arg in typing.get_args(annotation))
    if origin is typing.Annotated:
        return accepts_none(typing.get_args(annotation)[0])
    return False


def map_column_type(tag: Optional[str]) -> str:
    """
    Map a column tag (Django internal type or generic tag) to TypeScript.

    Example:
        >>> map_column_type("CharField")
        'string'
        >>> map_column_type("PointField")
        'unknown'
    """
    tag = (tag or "").strip()
    mapped = ScalarTypes.COLUMN_MAP.get(tag)
    if mapped is None:
        mapped = ScalarTypes.DESCRIPTOR_MAP.get(tag, UNKNOWN)
    return mapped


def map_relation_type(kind: str, related_model: str) -> str:
    """Map a relation kind tag to a model interface reference."""
    name = interface_name(related_model)
    if kind in RelationKinds.SINGULAR:
        return name
    if kind in RelationKinds.COLLECTION:
        return f"{name}{TypeScriptNames.ARRAY_SUFFIX}"
    return UNKNOWN


def build_type_mapper(locator=None, with_json_ld: bool = False) -> TypeMapper:
    """TypeMapper for one run; JsonLdData maps onto JsonLdRawNode[] when enabled."""
    aliases: Dict[str, str] = {}
    if with_json_ld:
        aliases[TypeScriptNames.JSON_LD_DATA] = (
            f"{TypeScriptNames.JSON_LD_NODE}{TypeScriptNames.ARRAY_SUFFIX}"
        )
    return TypeMapper(locator=locator, aliases=aliases)
