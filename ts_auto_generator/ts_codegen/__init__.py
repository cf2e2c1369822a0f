"""
TypeScript code generation from a normalized schema.
"""

from .generator import Generator
from .imports import ImportCollector
from .json_ld import AuxiliaryInterfaceEmitter
from .model_interfaces import ModelInterfaceEmitter
from .value_objects import ValueObjectEmitter

__all__ = [
    "Generator",
    "ImportCollector",
    "AuxiliaryInterfaceEmitter",
    "ModelInterfaceEmitter",
    "ValueObjectEmitter",
]
