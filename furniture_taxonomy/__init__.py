"""Furniture category taxonomy loaded from an RDF-S (Turtle) schema."""

__version__ = "0.1.0"

from .loader import RdfsTaxonomyLoader, TaxonomyCycleError, TaxonomyLoadError
from .model import (
    CategoryInfo,
    PropertyDefinition,
    PropertyType,
    TaxonomyStats,
    TaxonomyTree,
    classify_property_type,
)
from .service import TaxonomyService

__all__ = [
    "TaxonomyService",
    "RdfsTaxonomyLoader",
    "TaxonomyLoadError",
    "TaxonomyCycleError",
    "CategoryInfo",
    "PropertyDefinition",
    "PropertyType",
    "TaxonomyStats",
    "TaxonomyTree",
    "classify_property_type",
]
