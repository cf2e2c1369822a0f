"""
Value-object lookup by short name or qualified identifier.

Value objects are referenced in three ways: as runtime classes found on
annotations, as dotted paths, and as bare short names written in docstrings.
The locator remembers every class it has seen and falls back to importing
the configured value-object modules for names it has not.
"""

import importlib
import logging
from typing import Dict, Iterable, List, Optional, Set

from ..constants import DefaultConfig
from .capability import is_value_object
from .naming import qualified_name, short_name


logger = logging.getLogger(__name__)


class ValueObjectLocator:
    """
    Resolves value-object names to classes.

    Lookup order for a name:
    1. a class already remembered under that short name or identifier
    2. the name as an importable dotted path
    3. an attribute of the caller's module (``context_module``)
    4. an attribute of each configured value-object module
    """

    def __init__(self, modules: Optional[Iterable[str]] = None):
        if modules is None:
            modules = DefaultConfig.VALUE_OBJECT_MODULES
        self.modules: List[str] = list(modules)
        self._by_short_name: Dict[str, type] = {}
        self._by_identifier: Dict[str, type] = {}
        self._missing_modules: Set[str] = set()

    def remember(self, cls: type) -> str:
        """
        Register a value-object class and return its qualified identifier.
        """
        identifier = qualified_name(cls)
        self._by_identifier[identifier] = cls
        self._by_short_name.setdefault(cls.__name__, cls)
        return identifier

    def locate(self, name: str, context_module: Optional[str] = None) -> Optional[type]:
        """
        Find the value-object class for a name.

        Args:
            name: Short name (``AddressData``) or dotted path
            context_module: Module searched before the configured ones

        Returns:
            The class, or None when nothing resolves to a value object
        """
        name = (name or "").strip()
        cls = self._by_identifier.get(name) or self._by_short_name.get(name)
        if cls is not None:
            return cls
        if not name.replace(".", "").replace("_", "").isalnum():
            return None

        candidates = []
        if "." in name:
            candidates.append(self._import_attribute(*name.rsplit(".", 1)))
        search = [context_module] if context_module else []
        search.extend(self.modules)
        for module_path in search:
            candidates.append(self._import_attribute(module_path, short_name(name)))

        for candidate in candidates:
            if is_value_object(candidate):
                self.remember(candidate)
                return candidate
        return None

    def resolve_identifier(self, name: str, context_module: Optional[str] = None) -> Optional[str]:
        cls = self.locate(name, context_module=context_module)
        if cls is None:
            return None
        return qualified_name(cls)

    def _import_attribute(self, module_path: str, attribute: str) -> Optional[object]:
        if not module_path or module_path in self._missing_modules:
            return None
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            self._missing_modules.add(module_path)
            logger.debug(f"Value-object module {module_path} not importable: {e}")
            return None
        return getattr(module, attribute, None)
