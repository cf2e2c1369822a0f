"""
Schema assembly.

Wires discovery, relation and custom-field resolution and type extraction
together and applies the configured overrides to the result.
"""

import logging
from typing import Optional

from ..colored_logging import log_progress
from ..config_validation import GeneratorConfig
from ..domain.diagnostics import Diagnostics, Stage
from ..domain.locator import ValueObjectLocator
from ..domain.models import ModelSchema, RelationDescriptor, SchemaMap
from ..domain.naming import short_name
from ..domain.type_mapping import build_type_mapper
from .casts import CastTypeResolver
from .data_objects import DataObjectAnalyzer
from .discovery import ModelDiscovery
from .relationships import RelationshipResolver
from .type_extractor import TypeExtractor, override_descriptor


logger = logging.getLogger(__name__)


class SchemaBuilder:
    """
    Builds the SchemaMap for a Django project.

    Collaborators are created from the configuration unless given, which
    keeps the builder usable with fakes in tests.

    Example:
        >>> builder = SchemaBuilder(GeneratorConfig(app_labels=["blog"]))
        >>> schema = builder.build()
        >>> list(schema)
        ['User', 'Post']
    """

    def __init__(
        self,
        config: GeneratorConfig,
        diagnostics: Optional[Diagnostics] = None,
        locator: Optional[ValueObjectLocator] = None,
        discovery: Optional[ModelDiscovery] = None,
        extractor: Optional[TypeExtractor] = None,
    ):
        self.config = config
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.locator = locator or ValueObjectLocator(config.value_object_modules)
        self.type_mapper = build_type_mapper(self.locator, config.with_json_ld)
        self.analyzer = DataObjectAnalyzer(self.type_mapper, self.locator, self.diagnostics)

        self.discovery = discovery or ModelDiscovery(
            app_labels=config.app_labels,
            additional_models=config.additional_models,
            diagnostics=self.diagnostics,
        )
        self.extractor = extractor or TypeExtractor(
            config,
            CastTypeResolver(self.analyzer, self.locator, self.diagnostics),
            RelationshipResolver(config.reverse_accessor_style, self.diagnostics),
        )

    def build(self) -> SchemaMap:
        """
        Discover models, extract their fields and apply overrides.

        Returns:
            Model short name -> ModelSchema, in discovery order
        """
        log_progress(logger, "Discovering models...")
        schema: SchemaMap = {}
        for model in self.discovery.discover():
            model_schema = self.extractor.extract_schema(model)
            if model_schema.name in schema:
                self.diagnostics.skip(
                    Stage.DISCOVERY,
                    model_schema.qualified_identifier,
                    f"model name {model_schema.name} already taken by "
                    f"{schema[model_schema.name].qualified_identifier}",
                    level=logging.WARNING,
                )
                continue
            schema[model_schema.name] = model_schema

        self.apply_global_overrides(schema)
        self.apply_model_overrides(schema)
        self.warn_unknown_relation_targets(schema)
        log_progress(logger, f"Extracted schema for {len(schema)} models")
        return schema

    def apply_global_overrides(self, schema: SchemaMap) -> None:
        """Add every ``?field`` override to each model lacking that field."""
        for field_name, value in self.config.global_overrides.items():
            for model_schema in schema.values():
                model_schema.add_field(override_descriptor(field_name, value))

    def apply_model_overrides(self, schema: SchemaMap) -> None:
        """Add per-model overrides to the named models, skipping present fields."""
        for model_name, props in self.config.model_overrides.items():
            model_schema: Optional[ModelSchema] = schema.get(model_name)
            if model_schema is None:
                logger.debug(f"Override target {model_name} is not a discovered model")
                continue
            for field_name, value in props.items():
                model_schema.add_field(override_descriptor(field_name, value))

    def warn_unknown_relation_targets(self, schema: SchemaMap) -> None:
        """
        Warn about relations whose target model gets no interface.

        The relation is still rendered against the target's interface name,
        which the generated file does not declare. Adding the target's app to
        ``app_labels`` (or the model to ``additional_models``) or overriding
        the field fixes the output.
        """
        for model_schema in schema.values():
            for descriptor in model_schema.fields:
                if not isinstance(descriptor, RelationDescriptor):
                    continue
                if short_name(descriptor.related_model) in schema:
                    continue
                logger.warning(
                    f"{model_schema.name}.{descriptor.name} targets "
                    f"{descriptor.related_model}, which is not a discovered model"
                )
