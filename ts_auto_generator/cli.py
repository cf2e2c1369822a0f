import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from ts_auto_generator.colored_logging import (
    get_colored_logger,
    log_progress,
    log_section,
    log_success,
    setup_colored_logging,
)
from ts_auto_generator.config_validation import GeneratorConfig, load_config
from ts_auto_generator.domain.diagnostics import Diagnostics
from ts_auto_generator.exceptions import TSAutoGeneratorError
from ts_auto_generator.extraction import SchemaBuilder, setup_django
from ts_auto_generator.schema_io import save_schema
from ts_auto_generator.ts_codegen import Generator
from ts_auto_generator.watch import generation_command, model_source_paths, watch

logger = get_colored_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate TypeScript interfaces from Django models and their value objects."
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Watch the model sources and regenerate on every change.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "-o",
        "--output-path",
        help="File to write the interfaces to. Overrides config file setting.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose DEBUG logging for the generator tool.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (useful for CI/CD environments).",
    )
    return parser


def child_arguments(args: argparse.Namespace) -> List[str]:
    """CLI flags forwarded to the generation runs started by watch mode."""
    forwarded = []
    if args.output_path:
        forwarded.extend(["--output-path", args.output_path])
    if args.verbose:
        forwarded.append("--verbose")
    if args.no_color:
        forwarded.append("--no-color")
    return forwarded


def generate(config: GeneratorConfig, diagnostics: Optional[Diagnostics] = None) -> Path:
    """
    Run the whole pipeline once: Django setup, schema extraction and file generation.

    Returns:
        Path of the generated TypeScript file
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    # 1. Setup Django Environment
    log_progress(logger, "Loading Django project...")
    setup_django(config.settings_module)

    # 2. Build the schema
    log_section(logger, "Schema Extraction")
    builder = SchemaBuilder(config, diagnostics=diagnostics)
    schema = builder.build()
    if not schema:
        logger.warning("No models found. The generated file will only contain the header.")

    # 3. Optionally persist the schema for debugging
    if config.save_schema:
        save_schema(schema, config.resolved_schema_path)

    # 4. Generate the interfaces
    log_section(logger, "TypeScript Generation")
    generator = Generator(schema, config, locator=builder.locator, diagnostics=diagnostics)
    output_path = generator.write()

    logger.info(f"Diagnostics: {diagnostics.summary()}")
    return output_path


def main(argv: Optional[Sequence[str]] = None):
    args = build_parser().parse_args(argv)

    setup_colored_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        use_colors=not args.no_color,
    )
    logger.debug("Verbose mode enabled.")

    try:
        log_progress(logger, "Loading configuration...")
        config = load_config(args.config, args)
        logger.debug(f"Effective configuration loaded: {config}")

        if args.watch:
            setup_django(config.settings_module)
            roots = model_source_paths(config)
            command = generation_command(args.config, child_arguments(args))
            watch(roots, command, interval=config.watch_interval)
            return

        generate(config)
        log_success(logger, "TypeScript generation completed successfully.")

    except KeyboardInterrupt:
        logger.info("Stopped.")
        sys.exit(0)
    except TSAutoGeneratorError as e:
        logger.error(f"{type(e).__name__}: {e}", exc_info=args.verbose)
        sys.exit(1)
    except Exception as e:
        logger.error(f"An unexpected error occurred during generation: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
