# File: ts_auto_generator/config_validation.py
from argparse import Namespace
import sys
import logging
from typing import List, Optional, Dict, Any, Literal, Self
import yaml
from pathlib import Path

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
    ConfigDict,
)

from .constants import DefaultConfig, TypeScriptNames

logger = logging.getLogger(__name__)


# --- Pydantic Model for Configuration Schema ---
class GeneratorConfig(BaseModel):
    """Pydantic schema defining the expected structure and types for the configuration."""

    output_path: str = Field(
        DefaultConfig.OUTPUT_PATH,
        min_length=1,
        description="Destination file for the generated TypeScript interfaces.",
    )
    with_counts: bool = Field(
        default=DefaultConfig.WITH_COUNTS,
        description="Add a '<relation>_count' number field for every collection relation.",
    )
    with_json_ld: bool = Field(
        default=DefaultConfig.WITH_JSON_LD,
        description="Emit the JsonLdRawNode interface and map JsonLdData fields onto it.",
    )
    save_schema: bool = Field(
        default=DefaultConfig.SAVE_SCHEMA,
        description="Persist the normalized schema as JSON for debugging.",
    )
    schema_path: Optional[str] = Field(
        default=None,
        description="Destination of the schema JSON (defaults to schema.json next to the output).",
    )
    custom_props: Dict[str, Any] = Field(
        default_factory=dict,
        description="Field overrides: '?field' -> type for every model, 'Model' -> {field: type}.",
    )
    additional_models: List[str] = Field(
        default_factory=list,
        description="Dotted paths of models to include beyond the discovered apps.",
    )
    app_labels: List[str] = Field(
        default_factory=list,
        description="App labels whose models are discovered (empty: every non-django app).",
    )
    value_object_modules: List[str] = Field(
        default_factory=lambda: list(DefaultConfig.VALUE_OBJECT_MODULES),
        description="Modules searched for value objects referenced by short name.",
    )
    nullable_fields: List[str] = Field(
        default_factory=lambda: list(DefaultConfig.NULLABLE_FIELDS),
        description="Field names always rendered optional.",
    )
    nullable_from_schema: bool = Field(
        default=False,
        description="Also render columns declared with null=True as optional.",
    )
    reverse_accessor_style: Literal["django", "plural"] = Field(
        default="django",
        description="Naming of reverse relations without related_name ('django': comment_set, 'plural': comments).",
    )
    settings_module: Optional[str] = Field(
        default=None,
        description="Django settings module (defaults to DJANGO_SETTINGS_MODULE).",
    )
    regenerate_command: str = Field(
        default=DefaultConfig.REGENERATE_COMMAND,
        min_length=1,
        description="Command shown in the generated file header.",
    )
    watch_interval: float = Field(
        default=DefaultConfig.WATCH_INTERVAL,
        gt=0,
        description="Seconds between model source checks in watch mode.",
    )

    @property
    def global_overrides(self) -> Dict[str, str]:
        """'?field' entries keyed by the bare field name."""
        marker = TypeScriptNames.GLOBAL_OVERRIDE_MARKER
        return {
            key[len(marker):]: value
            for key, value in self.custom_props.items()
            if key.startswith(marker)
        }

    @property
    def model_overrides(self) -> Dict[str, Dict[str, str]]:
        """Per-model entries keyed by model short name."""
        marker = TypeScriptNames.GLOBAL_OVERRIDE_MARKER
        return {
            key: value
            for key, value in self.custom_props.items()
            if not key.startswith(marker)
        }

    def overrides_for(self, model_name: str) -> Dict[str, str]:
        return dict(self.model_overrides.get(model_name, {}))

    @property
    def resolved_schema_path(self) -> Path:
        if self.schema_path:
            return Path(self.schema_path)
        return Path(self.output_path).parent / DefaultConfig.SCHEMA_FILENAME

    # --- Custom Field Validators using @field_validator ---

    @field_validator("custom_props", mode="before")
    @classmethod
    def check_custom_props(cls, v: Any) -> Dict[str, Any]:
        """Global overrides map to a type string, model overrides to a field -> type mapping."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("custom_props must be a mapping.")
        marker = TypeScriptNames.GLOBAL_OVERRIDE_MARKER
        for key, value in v.items():
            if not isinstance(key, str) or not key.strip(marker).strip():
                raise ValueError(f"Invalid custom_props key: {key!r}")
            if key.startswith(marker):
                if not isinstance(value, str) or not value.strip():
                    raise ValueError(
                        f"Global override '{key}' must map to a non-empty type string."
                    )
                continue
            if not isinstance(value, dict):
                raise ValueError(
                    f"Model override '{key}' must map field names to type strings."
                )
            for field_name, field_type in value.items():
                if not isinstance(field_type, str) or not field_type.strip():
                    raise ValueError(
                        f"Override '{key}.{field_name}' must be a non-empty type string."
                    )
        return v

    @field_validator(
        "additional_models", "app_labels", "value_object_modules", "nullable_fields",
        mode="before",
    )
    @classmethod
    def check_name_list(cls, v: Optional[List[Any]]) -> List[str]:
        """Ensure items in name lists are non-empty strings."""
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("Expected a list of names.")
        processed_list = []
        for index, item in enumerate(v):
            if not isinstance(item, str):
                raise ValueError(
                    f"Item at index {index} must be a string, found: {type(item).__name__}"
                )
            stripped_item = item.strip()
            if not stripped_item:
                raise ValueError(
                    f"Item at index {index} cannot be empty or just whitespace."
                )
            processed_list.append(stripped_item)
        return processed_list

    @model_validator(mode="after")
    def check_schema_options(self) -> Self:
        """Perform cross-field validation checks."""
        if self.schema_path and not self.save_schema:
            logger.warning(
                "'schema_path' is set but 'save_schema' is False. The schema will not be written."
            )
        return self

    model_config = ConfigDict(
        extra="ignore",  # Allow and ignore extra fields from input dict
    )


# --- Validation Function ---
def validate_and_parse_config(config_dict: Dict[str, Any]) -> GeneratorConfig:
    """
    Validates a raw configuration dictionary against the GeneratorConfig.
    Exits with error messages if validation fails.
    """
    try:
        validated_config = GeneratorConfig.model_validate(config_dict)
        logger.debug(
            "Configuration dictionary parsed and validated successfully against schema."
        )
        return validated_config
    except ValidationError as e:
        logger.critical(
            "Configuration validation failed! Please check your config file or arguments."
        )
        print("\n--- Configuration Errors ---", file=sys.stderr)
        for error in e.errors():
            loc_parts = [str(loc_item) for loc_item in error.get("loc", ())]
            loc_str = " -> ".join(loc_parts) if loc_parts else "Model Level"
            msg = error.get("msg", "Unknown validation error")

            print(f"  - Location: '{loc_str}'", file=sys.stderr)
            print(f"    Error:    {msg}", file=sys.stderr)

            if "custom_props" in loc_parts:
                print(
                    "    Hint:     Use '?field: Type' for every model or 'Model: {field: Type}' for one.",
                    file=sys.stderr,
                )

        print("----------------------------", file=sys.stderr)
        sys.exit(1)


def read_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Read the YAML configuration file, returning an empty dict when absent."""
    raw_config: Dict[str, Any] = {}
    if not config_path:
        return raw_config

    try:
        config_file = Path(config_path)
        if config_file.is_file():
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
                if yaml_config and isinstance(yaml_config, dict):
                    raw_config.update(yaml_config)
                    logger.debug(f"Loaded configuration from {config_path}")
                elif yaml_config:
                    logger.warning(
                        f"Content in config file {config_path} is not a dictionary. Ignoring file content."
                    )
        else:
            logger.warning(
                f"Config file not found at {config_path}. Using defaults and CLI arguments."
            )
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML file {config_path}: {e}")
        logger.warning("Proceeding with defaults and CLI arguments only.")
    except OSError as e:
        logger.error(f"Error reading config file {config_path}: {e}")
        logger.warning("Proceeding with defaults and CLI arguments only.")
    return raw_config


def load_config(config_path: Optional[str], cli_args: Namespace) -> GeneratorConfig:
    """
    Loads configuration from YAML file, merges with CLI arguments,
    validates the result, and returns a validated Pydantic model instance.
    Exits with error messages if validation fails.
    """
    # 1. Load from YAML file if path is provided
    raw_config = read_config_file(config_path)

    # 2. Override with CLI arguments (only those explicitly provided)
    cli_dict = vars(cli_args)
    overridden_keys = set()
    for key, value in cli_dict.items():
        if value is not None and key in GeneratorConfig.model_fields:
            raw_config[key] = value
            overridden_keys.add(key)
    if overridden_keys:
        logger.debug(f"Overridden config keys from CLI arguments: {overridden_keys}")

    # 3. Validate
    logger.info("Validating final configuration...")
    validated_config: GeneratorConfig = validate_and_parse_config(raw_config)

    logger.info("Configuration loaded and validated successfully.")
    return validated_config
