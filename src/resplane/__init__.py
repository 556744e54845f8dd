"""
resplane - resource providers for a cluster management plane.

Exposes backend entities (clusters, services, components, configurations)
as generic resources addressed by hierarchical property ids, with
predicate-driven create, read, update and delete.

This package provides:
- PropertyCatalog: per-type accepted, key and primary-key property ids
- ResourceProvider: validation, predicate matching and change events
- PredicateBuilder: fluent construction of predicate trees
- InMemoryController: dict-backed backend for tests and local use
"""

from resplane._version import get_version as _get_version

__version__ = _get_version()

from resplane.controller.memory import InMemoryController
from resplane.runtime.predicate_builder import PredicateBuilder
from resplane.runtime.property_helper import (
    get_create_request,
    get_read_request,
    get_update_request,
)
from resplane.runtime.provider import (
    ResourceProvider,
    create_providers,
    get_resource_provider,
)
from resplane.specs.catalog import PropertyCatalog, ResourceType

__all__ = [
    "InMemoryController",
    "PredicateBuilder",
    "PropertyCatalog",
    "ResourceProvider",
    "ResourceType",
    "create_providers",
    "get_create_request",
    "get_read_request",
    "get_resource_provider",
    "get_update_request",
]
