"""
Value-object capability marker.

A value object is a data-carrying class that can be built from and turned
back into a plain dictionary. Classes declare the capability explicitly,
either by subclassing :class:`DataObject`, by registering with it as a
virtual subclass, or by being a pydantic model.

Example:
    >>> class AddressData(DataObject):
    ...     def __init__(self, street: str, city: str):
    ...         self.street = street
    ...         self.city = city
    ...
    ...     @classmethod
    ...     def from_dict(cls, data):
    ...         return cls(**data)
    ...
    ...     def to_dict(self):
    ...         return {"street": self.street, "city": self.city}
    >>> is_value_object(AddressData)
    True
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Dict

from pydantic import BaseModel


class DataObject(ABC):
    """Base class for value objects stored inside model columns."""

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataObject":
        """Build an instance from a plain dictionary."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert the instance to a plain dictionary."""


def is_pydantic_model(cls: Any) -> bool:
    return inspect.isclass(cls) and issubclass(cls, BaseModel) and cls is not BaseModel


def is_value_object(cls: Any) -> bool:
    """
    Check whether a class declares the value-object capability.

    Args:
        cls: Any object; non-classes are never value objects

    Returns:
        True for DataObject subclasses (real or registered) and pydantic models
    """
    if not inspect.isclass(cls) or cls is DataObject:
        return False
    try:
        return issubclass(cls, DataObject) or is_pydantic_model(cls)
    except TypeError:
        return False
