from typing import Optional

from jinja2 import Environment

from ..constants import TypeScriptNames
from .base import InterfaceMember, render_template, setup_jinja_env


JSON_LD_MEMBERS = (
    InterfaceMember(
        name="'@type'",
        type="string | string[]",
        optional=True,
        doc=(
            "The RDF type of the resource.",
            "Can be a single type or an array of types.",
        ),
    ),
    InterfaceMember(
        name="'@id'",
        type="string",
        optional=True,
        doc=(
            "The IRI (Internationalized Resource Identifier) of the resource.",
            "Uniquely identifies this JSON-LD node.",
        ),
    ),
    InterfaceMember(
        name="'@context'",
        type="string | Record<string, unknown> | Array<string | Record<string, unknown>>",
        optional=True,
        doc=(
            "The JSON-LD context.",
            "Defines how terms in the document map to IRIs.",
        ),
    ),
    InterfaceMember(
        name="'@graph'",
        type=f"{TypeScriptNames.JSON_LD_NODE}[]",
        optional=True,
        doc=(
            "A graph of related JSON-LD nodes.",
            "Used for representing multiple related resources.",
        ),
    ),
    InterfaceMember(
        name="[key: string]",
        type="unknown",
        doc=(
            "Index signature to allow any additional properties.",
            "JSON-LD nodes can contain arbitrary properties beyond the standard @ properties.",
        ),
    ),
)


class AuxiliaryInterfaceEmitter:
    """Renders the fixed ``JsonLdRawNode`` interface."""

    def __init__(self, env: Optional[Environment] = None):
        self.env = env or setup_jinja_env()

    def emit(self) -> str:
        return render_template(
            self.env,
            "json_ld.ts.j2",
            {"name": TypeScriptNames.JSON_LD_NODE, "members": JSON_LD_MEMBERS},
        )
