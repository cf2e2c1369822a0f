"""
TypeScript file generation.

Concatenates, in order: the header comment, the import declarations, the
value-object interfaces, the model interfaces and, when enabled, the
JsonLdRawNode interface. The result is written to the output file in one
write.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from jinja2 import Environment

from ..colored_logging import log_progress, log_success
from ..config_validation import GeneratorConfig
from ..constants import OutputFormat
from ..domain.diagnostics import Diagnostics
from ..domain.locator import ValueObjectLocator
from ..domain.models import EmissionState, SchemaMap
from ..domain.type_mapping import build_type_mapper
from ..extraction.data_objects import DataObjectAnalyzer
from .base import render_template, setup_jinja_env, write_text
from .imports import ImportCollector
from .json_ld import AuxiliaryInterfaceEmitter
from .model_interfaces import ModelInterfaceEmitter
from .value_objects import ValueObjectEmitter


logger = logging.getLogger(__name__)


class Generator:
    """
    Generates the TypeScript interface file for a schema.

    Every call to :meth:`render` starts from a fresh EmissionState, so
    rendering the same schema twice gives the same text apart from the
    timestamp.

    Args:
        schema: Schema built by SchemaBuilder
        config: Generator configuration
        locator: Value-object locator used during extraction; reusing it
            lets nested value objects resolve by the classes already seen
        diagnostics: Collector for value objects dropped during emission
        clock: Returns the generation time (local time by default)
    """

    def __init__(
        self,
        schema: SchemaMap,
        config: GeneratorConfig,
        locator: Optional[ValueObjectLocator] = None,
        diagnostics: Optional[Diagnostics] = None,
        env: Optional[Environment] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.schema = schema
        self.config = config
        self.locator = locator or ValueObjectLocator(config.value_object_modules)
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.env = env or setup_jinja_env()
        self.clock = clock
        self.analyzer = DataObjectAnalyzer(
            build_type_mapper(self.locator, config.with_json_ld),
            self.locator,
            self.diagnostics,
        )

    def render(self) -> str:
        """Render the complete file text."""
        state = EmissionState()

        imports = ImportCollector(state, self.env)
        imports.collect(self.schema)

        value_objects = ValueObjectEmitter(
            self.analyzer,
            self.locator,
            state,
            env=self.env,
            with_json_ld=self.config.with_json_ld,
            diagnostics=self.diagnostics,
        )
        models = ModelInterfaceEmitter(
            state,
            env=self.env,
            nullable_fields=self.config.nullable_fields,
            nullable_from_schema=self.config.nullable_from_schema,
            with_json_ld=self.config.with_json_ld,
        )

        parts = [
            self.render_header(),
            imports.render(),
            value_objects.emit_all(self.schema),
            models.emit_all(self.schema),
        ]
        if self.config.with_json_ld:
            parts.append(AuxiliaryInterfaceEmitter(self.env).emit())

        return "".join(parts).rstrip() + "\n"

    def render_header(self) -> str:
        return render_template(
            self.env,
            "header.ts.j2",
            {
                "title": OutputFormat.HEADER_TITLE,
                "regenerate_command": self.config.regenerate_command,
                "generated_at": self.clock().strftime(OutputFormat.TIMESTAMP_FORMAT),
            },
        )

    def write(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Render and write the file.

        Args:
            output_path: Destination; defaults to ``config.output_path``

        Returns:
            The path written

        Raises:
            OutputWriteError: If the file cannot be written
        """
        path = Path(output_path or self.config.output_path)
        log_progress(logger, f"Generating TypeScript interfaces for {len(self.schema)} models...")
        content = self.render()
        write_text(path, content)
        log_success(logger, f"TypeScript interfaces written to {path}")
        return path
