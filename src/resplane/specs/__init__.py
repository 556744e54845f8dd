"""
Resource type definitions.

This module exports the property catalog and predicate expression types.
"""

from resplane.specs.catalog import (
    DEFAULT_CATALOG_PATH,
    PropertyCatalog,
    ResourceCatalogSpec,
    ResourceType,
    get_default_catalog,
)
from resplane.specs.predicate import (
    AndPredicate,
    ComparisonOperator,
    ComparisonPredicate,
    NotPredicate,
    OrPredicate,
    Predicate,
    PredicateNode,
    predicate_from_dict,
)

__all__ = [
    # Catalog
    "DEFAULT_CATALOG_PATH",
    "PropertyCatalog",
    "ResourceCatalogSpec",
    "ResourceType",
    "get_default_catalog",
    # Predicates
    "AndPredicate",
    "ComparisonOperator",
    "ComparisonPredicate",
    "NotPredicate",
    "OrPredicate",
    "Predicate",
    "PredicateNode",
    "predicate_from_dict",
]
