import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

from jinja2 import (
    Environment,
    FileSystemLoader,
    select_autoescape,
)

from ..constants import OutputFormat
from ..domain.naming import interface_name
from ..exceptions import OutputWriteError


logger = logging.getLogger(__name__)

# Define the path to the templates directory relative to this file
TEMPLATE_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class InterfaceMember:
    """One rendered member line of a TypeScript interface."""

    name: str
    type: str
    optional: bool = False
    doc: Sequence[str] = field(default_factory=tuple)


def setup_jinja_env() -> Environment:
    """Sets up and returns the Jinja2 environment."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html", "xml"]),  # TypeScript output is never escaped
        trim_blocks=True,  # Remove first newline after a block tag
        lstrip_blocks=True,  # Strip leading whitespace from lines with block tags
        keep_trailing_newline=True,  # Templates end with the blank separator line
    )
    env.filters["interface_name"] = interface_name
    return env


def render_template(env: Environment, template_name: str, context: Dict[str, Any]) -> str:
    """Renders a Jinja template to a string."""
    template = env.get_template(template_name)
    return template.render(context)


def render_interface(env: Environment, name: str, members: List[InterfaceMember]) -> str:
    """Render ``export interface <name> { ... }`` followed by a blank line."""
    return render_template(env, "interface.ts.j2", {"name": name, "members": members})


def write_text(output_path: Path, content: str) -> None:
    """
    Write ``content`` to ``output_path`` in one go, creating parent directories.

    Raises:
        OutputWriteError: If the directory or file cannot be written
    """
    try:
        # Ensure the parent directory exists
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding=OutputFormat.ENCODING) as f:
            f.write(content)
    except OSError as e:
        raise OutputWriteError(f"Cannot write {output_path}: {e}", path=str(output_path)) from e
    logger.debug(f"Generated file: {output_path}")
