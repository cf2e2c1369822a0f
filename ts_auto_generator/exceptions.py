"""
Custom exception hierarchy for TS Auto Generator.

Every error carries a context dictionary, recovery suggestions and an error
code. Extraction errors are raised inside the resolvers and turned into
diagnostics at the component seam; only configuration and output errors end
a run.
"""

from typing import Dict, Any, Optional, List


class TSAutoGeneratorError(Exception):
    """
    Base exception for all TS Auto Generator errors.

    Subclasses set ``default_code`` and ``default_suggestions``. Keyword
    arguments beyond the named ones (``model=``, ``path=``...) are added to the
    context when they are not None.
    """

    default_code: Optional[str] = None
    default_suggestions: List[str] = []

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None,
        **details: Any,
    ):
        """
        Args:
            message: Human-readable error message
            context: Additional context about where/why the error occurred
            suggestions: Potential fixes; the class defaults are used when empty
            error_code: Overrides the class error code
            **details: Extra context entries, skipped when None
        """
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})
        self.context.update({key: value for key, value in details.items() if value is not None})
        self.suggestions = list(suggestions or self.default_suggestions)
        self.error_code = error_code or self.default_code

    def __str__(self) -> str:
        lines = [self.message]

        if self.error_code:
            lines.append(f"Error Code: {self.error_code}")
        if self.context:
            lines.append("Context:")
            lines.extend(f"  {key}: {value}" for key, value in self.context.items())
        if self.suggestions:
            lines.append("Suggestions:")
            lines.extend(f"  • {suggestion}" for suggestion in self.suggestions)

        return "\n".join(lines)


class ConfigurationError(TSAutoGeneratorError):
    """Raised when configuration is invalid or missing."""

    default_code = "CONFIG_ERROR"
    default_suggestions = [
        "Check the configuration file syntax",
        "Verify custom_props keys: '?field' maps to a type, 'Model' maps to a dict",
        "Check that settings_module points to an importable Django settings module",
    ]


class ModelDiscoveryError(TSAutoGeneratorError):
    """Raised when a model class cannot be located or loaded."""

    default_code = "DISCOVERY_ERROR"
    default_suggestions = [
        "Check the dotted path in additional_models",
        "Verify the app label is listed in INSTALLED_APPS",
    ]


class RelationshipResolutionError(TSAutoGeneratorError):
    """Raised when a relation cannot be turned into a descriptor."""

    default_code = "RELATIONSHIP_ERROR"
    default_suggestions = [
        "Check that the related model is installed and importable",
        "Polymorphic GenericForeignKey targets cannot be typed; add a custom prop",
    ]


class CastResolutionError(TSAutoGeneratorError):
    """Raised when a custom model field cannot be analyzed."""

    default_code = "CAST_ERROR"
    default_suggestions = [
        "Annotate from_db_value with its return type",
        "Document list item types with ':rtype: list[ItemData]'",
    ]


class ValueObjectResolutionError(TSAutoGeneratorError):
    """Raised when a referenced value object cannot be located or analyzed."""

    default_code = "VALUE_OBJECT_ERROR"
    default_suggestions = [
        "Add the defining module to value_object_modules",
        "Subclass DataObject or pydantic.BaseModel",
    ]


class OutputWriteError(TSAutoGeneratorError):
    """Raised when the generated file or the schema dump cannot be written."""

    default_code = "OUTPUT_ERROR"
    default_suggestions = [
        "Check that the output directory is writable",
        "Check output_path in the configuration",
    ]
