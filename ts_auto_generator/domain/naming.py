"""
Naming convention utilities for TS Auto Generator.

This module converts between the Python naming conventions found on models
and value objects and the names used in the generated TypeScript.
"""

import re

import inflect

from ..constants import TypeScriptNames


# Initialize inflect engine for pluralization
p = inflect.engine()


def to_snake_case(name: str) -> str:
    """
    Convert CamelCase or PascalCase to snake_case.

    Names that are already snake_case come back unchanged.

    Args:
        name: The string to convert to snake_case

    Returns:
        The converted snake_case string

    Example:
        >>> to_snake_case("blogPosts")
        'blog_posts'
        >>> to_snake_case("XMLHttpRequest")
        'xml_http_request'
    """
    if not isinstance(name, str):
        raise TypeError(f"Expected string, got {type(name).__name__}")

    name = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    name = re.sub("__([A-Z])", r"_\1", name)
    name = re.sub("([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def pluralize(name: str) -> str:
    """
    Pluralize the last word of a snake_case name.

    Example:
        >>> pluralize("blog_category")
        'blog_categories'
    """
    head, _, last = name.rpartition("_")
    plural = p.plural(last) if last else last
    return f"{head}_{plural}" if head else plural


def short_name(qualified_identifier: str) -> str:
    """Return the last dotted component of a qualified identifier."""
    return qualified_identifier.rsplit(".", 1)[-1]


def qualified_name(cls: type) -> str:
    """Return ``module.QualName`` for a class."""
    return f"{cls.__module__}.{cls.__qualname__}"


def interface_name(name: str) -> str:
    """
    Build the TypeScript interface name for a model or value object.

    Array markers and any dotted prefix are stripped first.

    Example:
        >>> interface_name("app.data_objects.AddressData[]")
        'IAddressData'
    """
    bare = short_name(name.replace(TypeScriptNames.ARRAY_SUFFIX, ""))
    return f"{TypeScriptNames.INTERFACE_PREFIX}{bare}"


def count_field_name(relation_field: str) -> str:
    """Name of the synthetic count field paired with a collection relation."""
    return f"{relation_field}{TypeScriptNames.COUNT_SUFFIX}"


def is_count_field(name: str) -> bool:
    return name.endswith(TypeScriptNames.COUNT_SUFFIX)
