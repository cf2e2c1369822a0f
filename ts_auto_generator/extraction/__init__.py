"""
Schema extraction from Django model metadata.
"""

from .casts import CastTypeResolver
from .data_objects import DataObjectAnalyzer
from .discovery import ModelDiscovery
from .django_setup import setup_django
from .relationships import RelationshipResolver
from .schema_builder import SchemaBuilder
from .type_extractor import TypeExtractor

__all__ = [
    "CastTypeResolver",
    "DataObjectAnalyzer",
    "ModelDiscovery",
    "setup_django",
    "RelationshipResolver",
    "SchemaBuilder",
    "TypeExtractor",
]
