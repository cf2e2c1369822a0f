"""
Centralized constants for TS Auto Generator.

This module contains the type lookup tables, relation kind tags, naming
conventions and default configuration values used by both the schema
extraction and the TypeScript generation pipelines.
"""

from typing import Dict, FrozenSet


# =============================================================================
# CORE CONFIGURATION
# =============================================================================

class DefaultConfig:
    """Default configuration values."""

    OUTPUT_PATH = "resources/js/types/interfaces.ts"
    SCHEMA_FILENAME = "schema.json"
    REGENERATE_COMMAND = "ts-auto-generator"
    VALUE_OBJECT_MODULES = ["app.data_objects"]
    NULLABLE_FIELDS = ["description"]
    WATCH_INTERVAL = 2.0

    WITH_COUNTS = True
    WITH_JSON_LD = False
    SAVE_SCHEMA = False


# =============================================================================
# TYPESCRIPT NAMING
# =============================================================================

class TypeScriptNames:
    """Fixed TypeScript type names and naming conventions."""

    INTERFACE_PREFIX = "I"
    ARRAY_SUFFIX = "[]"
    UNION_SEPARATOR = " | "

    UNKNOWN = "unknown"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"
    UNKNOWN_ARRAY = "unknown[]"
    UNKNOWN_RECORD = "Record<string, unknown>"

    # Reserved value object that maps onto the auxiliary interface
    JSON_LD_DATA = "JsonLdData"
    JSON_LD_NODE = "JsonLdRawNode"

    COUNT_SUFFIX = "_count"
    IMPORT_PREFIX = "@/"
    IMPORT_SEPARATOR = "|"
    GLOBAL_OVERRIDE_MARKER = "?"


# =============================================================================
# RELATION KINDS
# =============================================================================

class RelationKinds:
    """Relation kind tags used in field descriptors."""

    HAS_ONE = "HasOne"
    HAS_MANY = "HasMany"
    BELONGS_TO = "BelongsTo"
    BELONGS_TO_MANY = "BelongsToMany"
    MORPH_ONE = "MorphOne"
    MORPH_MANY = "MorphMany"
    MORPH_TO_MANY = "MorphToMany"

    SINGULAR: FrozenSet[str] = frozenset({HAS_ONE, BELONGS_TO, MORPH_ONE})
    COLLECTION: FrozenSet[str] = frozenset(
        {HAS_MANY, BELONGS_TO_MANY, MORPH_MANY, MORPH_TO_MANY}
    )

    PIVOT_ACCESSOR = "pivot"


# =============================================================================
# TYPE MAPPINGS
# =============================================================================

class ScalarTypes:
    """Lookup tables from descriptor names to TypeScript types."""

    # Python annotation names and the generic doc-comment dialect
    DESCRIPTOR_MAP: Dict[str, str] = {
        # numeric family
        "int": TypeScriptNames.NUMBER,
        "float": TypeScriptNames.NUMBER,
        "complex": TypeScriptNames.NUMBER,
        "Decimal": TypeScriptNames.NUMBER,
        "integer": TypeScriptNames.NUMBER,
        "double": TypeScriptNames.NUMBER,
        "number": TypeScriptNames.NUMBER,
        # string family
        "str": TypeScriptNames.STRING,
        "string": TypeScriptNames.STRING,
        "bytes": TypeScriptNames.STRING,
        "UUID": TypeScriptNames.STRING,
        "date": TypeScriptNames.STRING,
        "datetime": TypeScriptNames.STRING,
        "time": TypeScriptNames.STRING,
        "timedelta": TypeScriptNames.STRING,
        # boolean family
        "bool": TypeScriptNames.BOOLEAN,
        "boolean": TypeScriptNames.BOOLEAN,
        # untyped containers
        "list": TypeScriptNames.UNKNOWN_ARRAY,
        "List": TypeScriptNames.UNKNOWN_ARRAY,
        "tuple": TypeScriptNames.UNKNOWN_ARRAY,
        "Tuple": TypeScriptNames.UNKNOWN_ARRAY,
        "set": TypeScriptNames.UNKNOWN_ARRAY,
        "Set": TypeScriptNames.UNKNOWN_ARRAY,
        "array": TypeScriptNames.UNKNOWN_ARRAY,
        "dict": TypeScriptNames.UNKNOWN_RECORD,
        "Dict": TypeScriptNames.UNKNOWN_RECORD,
        "object": TypeScriptNames.UNKNOWN_RECORD,
        # top types
        "Any": TypeScriptNames.UNKNOWN,
        "mixed": TypeScriptNames.UNKNOWN,
    }

    NULL_NAMES: FrozenSet[str] = frozenset({"None", "NoneType", "null"})
    TOP_NAMES: FrozenSet[str] = frozenset({"Any", "mixed", "object"})

    MAPPING_GENERICS: FrozenSet[str] = frozenset(
        {"dict", "Dict", "Mapping", "MutableMapping", "OrderedDict", "array"}
    )
    SEQUENCE_GENERICS: FrozenSet[str] = frozenset(
        {
            "list", "List", "Sequence", "MutableSequence", "Iterable",
            "Collection", "set", "Set", "frozenset", "FrozenSet",
            "tuple", "Tuple", "array",
        }
    )
    UNION_GENERICS: FrozenSet[str] = frozenset({"Union", "Optional"})
    INTEGER_KEYS: FrozenSet[str] = frozenset({"int", "integer"})

    # Django internal field types and generic column tags
    COLUMN_MAP: Dict[str, str] = {
        # text family
        "CharField": TypeScriptNames.STRING,
        "TextField": TypeScriptNames.STRING,
        "EmailField": TypeScriptNames.STRING,
        "SlugField": TypeScriptNames.STRING,
        "URLField": TypeScriptNames.STRING,
        "UUIDField": TypeScriptNames.STRING,
        "GenericIPAddressField": TypeScriptNames.STRING,
        "IPAddressField": TypeScriptNames.STRING,
        "FilePathField": TypeScriptNames.STRING,
        "FileField": TypeScriptNames.STRING,
        "ImageField": TypeScriptNames.STRING,
        "BinaryField": TypeScriptNames.STRING,
        "string": TypeScriptNames.STRING,
        "text": TypeScriptNames.STRING,
        "char": TypeScriptNames.STRING,
        "uuid": TypeScriptNames.STRING,
        # numeric family
        "AutoField": TypeScriptNames.NUMBER,
        "BigAutoField": TypeScriptNames.NUMBER,
        "SmallAutoField": TypeScriptNames.NUMBER,
        "IntegerField": TypeScriptNames.NUMBER,
        "BigIntegerField": TypeScriptNames.NUMBER,
        "SmallIntegerField": TypeScriptNames.NUMBER,
        "PositiveIntegerField": TypeScriptNames.NUMBER,
        "PositiveBigIntegerField": TypeScriptNames.NUMBER,
        "PositiveSmallIntegerField": TypeScriptNames.NUMBER,
        "FloatField": TypeScriptNames.NUMBER,
        "DecimalField": TypeScriptNames.NUMBER,
        "DurationField": TypeScriptNames.NUMBER,
        "integer": TypeScriptNames.NUMBER,
        "bigInteger": TypeScriptNames.NUMBER,
        "number": TypeScriptNames.NUMBER,
        "decimal": TypeScriptNames.NUMBER,
        "float": TypeScriptNames.NUMBER,
        # boolean family
        "BooleanField": TypeScriptNames.BOOLEAN,
        "NullBooleanField": TypeScriptNames.BOOLEAN,
        "boolean": TypeScriptNames.BOOLEAN,
        # temporal values travel as ISO strings
        "DateField": TypeScriptNames.STRING,
        "DateTimeField": TypeScriptNames.STRING,
        "TimeField": TypeScriptNames.STRING,
        "date": TypeScriptNames.STRING,
        "datetime": TypeScriptNames.STRING,
        "timestamp": TypeScriptNames.STRING,
        # structured columns
        "JSONField": TypeScriptNames.UNKNOWN_RECORD,
        "json": TypeScriptNames.UNKNOWN_RECORD,
        "array": TypeScriptNames.UNKNOWN_RECORD,
    }


# =============================================================================
# GENERATED FILE
# =============================================================================

class OutputFormat:
    """Layout constants for the generated TypeScript file."""

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    HEADER_TITLE = "Generated TypeScript interfaces"
    ENCODING = "utf-8"
