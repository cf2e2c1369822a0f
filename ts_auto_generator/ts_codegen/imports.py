import logging
from typing import Dict, List, Optional

from jinja2 import Environment

from ..domain.models import EmissionState, ImportDescriptor, SchemaMap
from .base import render_template, setup_jinja_env


logger = logging.getLogger(__name__)


class ImportCollector:
    """
    Collects the external TypeScript imports referenced by override fields.

    Type names are grouped per module path, deduplicated and kept in the order
    they were first seen.
    """

    def __init__(self, state: Optional[EmissionState] = None, env: Optional[Environment] = None):
        self.state = state if state is not None else EmissionState()
        self.env = env or setup_jinja_env()

    @property
    def imports(self) -> Dict[str, List[str]]:
        return self.state.import_table

    def collect(self, schema: SchemaMap) -> None:
        for model_schema in schema.values():
            for descriptor in model_schema.fields:
                if descriptor.kind == ImportDescriptor.kind:
                    self.add(descriptor.declared_type)

    def add(self, declared_type: str) -> str:
        """
        Register ``"<path>|<Name>"`` or ``"<path>"`` and return the imported name.
        """
        descriptor = ImportDescriptor(name="", declared_type=declared_type)
        path, name = descriptor.module_path, descriptor.import_name
        names = self.state.import_table.setdefault(path, [])
        if name not in names:
            names.append(name)
            logger.debug(f"Import {name} from {path}")
        return name

    def render(self) -> str:
        if not self.state.import_table:
            return ""
        return render_template(self.env, "imports.ts.j2", {"imports": self.state.import_table})
