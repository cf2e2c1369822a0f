"""
TS Auto Generator: TypeScript interfaces from Django models.

Value objects stored in model columns declare themselves by subclassing
:class:`DataObject` (or by being pydantic models).
"""

from .domain.capability import DataObject, is_value_object

__version__ = "0.1.0"

__all__ = ["DataObject", "is_value_object", "__version__"]
