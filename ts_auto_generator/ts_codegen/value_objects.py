"""
Value-object interface emission.

Interfaces are emitted for every value object reachable from the schema:
first those attached to model fields, in schema order, then the nested ones
their properties reference, breadth first through a FIFO queue. Each name is
emitted once.
"""

import logging
from typing import List, Optional

from jinja2 import Environment

from ..constants import TypeScriptNames
from ..domain.diagnostics import Diagnostics, Stage
from ..domain.locator import ValueObjectLocator
from ..domain.models import EmissionState, SchemaMap, ValueObjectDescriptor
from ..domain.naming import interface_name, qualified_name
from ..extraction.data_objects import DataObjectAnalyzer
from .base import InterfaceMember, render_interface, setup_jinja_env


logger = logging.getLogger(__name__)


class ValueObjectEmitter:
    """
    Renders ``I<ValueObject>`` interfaces.

    Args:
        analyzer: Analyzer used for value objects reached only through nesting
        locator: Locator that resolves queued identifiers to classes
        state: Emission state shared with the other emitters of the run
        with_json_ld: When set, JsonLdData is never emitted as an interface
        diagnostics: Collector for queued value objects that cannot be emitted
    """

    def __init__(
        self,
        analyzer: DataObjectAnalyzer,
        locator: ValueObjectLocator,
        state: EmissionState,
        env: Optional[Environment] = None,
        with_json_ld: bool = False,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.analyzer = analyzer
        self.locator = locator
        self.state = state
        self.env = env or setup_jinja_env()
        self.with_json_ld = with_json_ld
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def emit_all(self, schema: SchemaMap) -> str:
        output = []
        for model_schema in schema.values():
            for descriptor in model_schema.fields:
                if descriptor.kind == ValueObjectDescriptor.kind and descriptor.properties:
                    output.append(self.emit_one(descriptor))
        output.extend(self.drain_pending())
        return "".join(output)

    def emit_one(self, descriptor: ValueObjectDescriptor) -> str:
        """
        Render one value-object interface and queue the value objects it references.

        Returns:
            The interface text, or ``""`` when the name was already emitted
        """
        canonical = descriptor.canonical_name
        name = interface_name(canonical)

        if self.with_json_ld and canonical == TypeScriptNames.JSON_LD_DATA:
            self.state.mark_processed(name)
            return ""
        if not self.state.mark_processed(name):
            return ""

        members = []
        for prop in descriptor.properties or []:
            members.append(InterfaceMember(name=prop.name, type=prop.mapped_type, optional=prop.is_optional))
            for identifier in prop.references:
                if self.state.enqueue(identifier, interface_name(identifier)):
                    logger.debug(f"Queued nested value object {identifier}")

        logger.debug(f"Emitting interface {name}")
        return render_interface(self.env, name, members)

    def drain_pending(self) -> List[str]:
        """Emit queued value objects in FIFO order until the queue is empty."""
        output = []
        while self.state.pending_value_objects:
            identifier = self.state.pending_value_objects.popleft()
            cls = self.locator.locate(identifier)
            if cls is None:
                self.diagnostics.skip(Stage.EMISSION, identifier, "value object class not found")
                continue
            if interface_name(cls.__name__) in self.state.processed_interface_names:
                continue

            properties = self.analyzer.try_extract_fields(cls, identifier)
            if properties is None:
                continue
            output.append(
                self.emit_one(
                    ValueObjectDescriptor(
                        name=cls.__name__,
                        declared_type=cls.__name__,
                        value_object_type=qualified_name(cls),
                        properties=properties,
                    )
                )
            )
        return output
