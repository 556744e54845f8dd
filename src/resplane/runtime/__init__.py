"""
resplane runtime.

This module provides:
- Property id helpers and request factories
- Predicate building and evaluation
- Per-type translators between property maps and backend messages
- ResourceProvider and its change events

Example usage:
    >>> from resplane.controller import InMemoryController
    >>> from resplane.runtime import PredicateBuilder, create_providers, get_read_request
    >>> from resplane.specs import ResourceType
    >>>
    >>> providers = create_providers(InMemoryController())
    >>> clusters = providers[ResourceType.CLUSTER]
    >>> predicate = PredicateBuilder().property("Clusters/cluster_name").equals("c1").to_predicate()
    >>> clusters.get_resources(get_read_request("Clusters"), predicate)
"""

from resplane.runtime.events import (
    ObserverRegistry,
    ResourceProviderEvent,
    ResourceProviderEventType,
    ResourceProviderObserver,
)
from resplane.runtime.predicate_builder import PredicateBuilder, PredicateProperty
from resplane.runtime.predicate_evaluator import (
    evaluate_predicate,
    extract_key_property_maps,
    filter_resources,
    get_equality_properties,
    get_predicate_property_ids,
)
from resplane.runtime.property_helper import (
    PropertyIdIndex,
    get_create_request,
    get_property_category,
    get_property_id,
    get_property_name,
    get_read_request,
    get_update_request,
    select_properties,
)
from resplane.runtime.provider import (
    ResourceProvider,
    create_providers,
    get_resource_provider,
)
from resplane.runtime.resource import (
    CreateRequest,
    ReadRequest,
    Request,
    RequestStatus,
    RequestStatusKind,
    Resource,
    UpdateRequest,
)

__all__ = [
    # Events
    "ObserverRegistry",
    "ResourceProviderEvent",
    "ResourceProviderEventType",
    "ResourceProviderObserver",
    # Predicates
    "PredicateBuilder",
    "PredicateProperty",
    "evaluate_predicate",
    "extract_key_property_maps",
    "filter_resources",
    "get_equality_properties",
    "get_predicate_property_ids",
    # Property ids
    "PropertyIdIndex",
    "get_create_request",
    "get_property_category",
    "get_property_id",
    "get_property_name",
    "get_read_request",
    "get_update_request",
    "select_properties",
    # Providers
    "ResourceProvider",
    "create_providers",
    "get_resource_provider",
    # Resources and requests
    "CreateRequest",
    "ReadRequest",
    "Request",
    "RequestStatus",
    "RequestStatusKind",
    "Resource",
    "UpdateRequest",
]
