"""
Resource providers.

A ResourceProvider exposes one resource type through create, read,
update and delete over generic property maps and predicates. It:

- validates requested property ids against the catalog before any
  backend call
- narrows backend lookups with the key values a predicate pins, then
  applies the full predicate to each returned resource
- publishes a ResourceProviderEvent after every successful mutation

Providers keep no per-call state, so one instance can serve concurrent
callers as long as the controller itself is thread-safe.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from resplane.controller.contract import ManagementController
from resplane.core.errors import (
    BackendError,
    BadPropertyIdsError,
    ResplaneError,
    UnsupportedOperationError,
)
from resplane.runtime.events import (
    ObserverRegistry,
    ResourceProviderEvent,
    ResourceProviderEventType,
    ResourceProviderObserver,
)
from resplane.runtime.logging import get_logger, log_with_context
from resplane.runtime.predicate_evaluator import (
    evaluate_predicate,
    extract_key_property_maps,
    get_predicate_property_ids,
)
from resplane.runtime.property_helper import PropertyIdIndex, select_properties
from resplane.runtime.resource import (
    CreateRequest,
    ReadRequest,
    RequestStatus,
    RequestStatusKind,
    Resource,
    UpdateRequest,
)
from resplane.runtime.translators import TRANSLATORS, ResourceTranslator
from resplane.specs.catalog import PropertyCatalog, ResourceType
from resplane.specs.predicate import PredicateNode

logger = get_logger("Provider")


class ResourceProvider:
    """Generic CRUD over one resource type, driven by a translator."""

    def __init__(
        self,
        resource_type: ResourceType,
        property_ids: Iterable[str],
        key_property_ids: Mapping[ResourceType, str],
        controller: ManagementController,
        translator: ResourceTranslator,
        pk_property_ids: Iterable[str] | None = None,
    ):
        self.resource_type = ResourceType(resource_type)
        self._index = PropertyIdIndex(property_ids)
        self._key_property_ids = dict(key_property_ids)
        self._pk_property_ids = (
            frozenset(pk_property_ids)
            if pk_property_ids is not None
            else frozenset(self._key_property_ids.values())
        )
        self._controller = controller
        self._translator = translator
        self._observers = ObserverRegistry()

    # =========================================================================
    # Introspection
    # =========================================================================

    def get_property_ids(self) -> frozenset[str]:
        """Every property id this provider accepts."""
        return self._index.property_ids

    def get_key_property_ids(self) -> dict[ResourceType, str]:
        return dict(self._key_property_ids)

    def get_pk_property_ids(self) -> frozenset[str]:
        return self._pk_property_ids

    def check_property_ids(self, property_ids: Iterable[str]) -> set[str]:
        """Return the ids from ``property_ids`` this provider does not support."""
        return self._index.unsupported(property_ids)

    def _validate(self, property_ids: Iterable[str]) -> None:
        unsupported = self.check_property_ids(property_ids)
        if unsupported:
            raise BadPropertyIdsError(self.resource_type.value, unsupported)

    def _require(self, operation: str) -> None:
        if not self._translator.supports(operation):
            raise UnsupportedOperationError(self.resource_type.value, operation)

    @property
    def _lookup_property_ids(self) -> frozenset[str]:
        return frozenset(self._key_property_ids.values()) | self._pk_property_ids

    # =========================================================================
    # Observers
    # =========================================================================

    def add_observer(self, observer: ResourceProviderObserver) -> None:
        self._observers.add(observer)

    def _notify(
        self,
        event_type: ResourceProviderEventType,
        request: CreateRequest | UpdateRequest | None,
        predicate: PredicateNode | None,
    ) -> None:
        event = ResourceProviderEvent(
            resource_type=self.resource_type,
            event_type=event_type,
            request=request,
            predicate=predicate,
        )
        self._observers.notify(event)

    # =========================================================================
    # Backend Calls
    # =========================================================================

    def _call_backend(self, operation: str, call: Any, requests: Sequence[Any]) -> Any:
        """Invoke a translator entry point, wrapping foreign errors as BackendError."""
        try:
            return call(self._controller, requests)
        except BackendError as e:
            log_with_context(
                logger,
                logging.WARNING,
                f"Backend {operation} failed for {self.resource_type.value}: {e}",
                resource_type=self.resource_type.value,
                operation=operation,
                requests=len(requests),
            )
            raise
        except ResplaneError:
            raise
        except Exception as e:
            log_with_context(
                logger,
                logging.WARNING,
                f"Backend {operation} raised {type(e).__name__} for {self.resource_type.value}",
                resource_type=self.resource_type.value,
                operation=operation,
            )
            raise BackendError(
                f"{operation} of {self.resource_type.value} resources failed: {e}",
                resource_type=self.resource_type.value,
                operation=operation,
            ) from e

    # =========================================================================
    # Create
    # =========================================================================

    def create_resources(self, request: CreateRequest) -> RequestStatus:
        """
        Create one backend entity per property map in the request.

        Raises:
            BadPropertyIdsError: If any map names an unsupported property
            BackendError: If the controller rejects the creation
        """
        self._require("create")
        for properties in request.property_sets:
            self._validate(properties.keys())

        backend_requests = [self._translator.to_request(p) for p in request.property_sets]
        self._call_backend("create", self._translator.create, backend_requests)

        log_with_context(
            logger,
            logging.INFO,
            f"Created {len(backend_requests)} {self.resource_type.value} resource(s)",
            resource_type=self.resource_type.value,
            count=len(backend_requests),
        )
        self._notify(ResourceProviderEventType.CREATE, request, None)
        return RequestStatus(status=RequestStatusKind.COMPLETE, affected=len(backend_requests))

    # =========================================================================
    # Read
    # =========================================================================

    def get_resources(
        self,
        request: ReadRequest,
        predicate: PredicateNode | None = None,
    ) -> set[Resource]:
        """
        Return the resources matching ``predicate`` (all of them for None),
        carrying only the requested properties.

        Raises:
            BadPropertyIdsError: If the request or predicate names an unsupported property
            BackendError: If the controller lookup fails
        """
        self._require("read")
        self._validate(request.property_ids | get_predicate_property_ids(predicate))
        return set(self._find_resources(request.property_ids, predicate))

    def _find_resources(
        self,
        requested_ids: Iterable[str],
        predicate: PredicateNode | None,
    ) -> list[Resource]:
        pins = extract_key_property_maps(predicate, self._lookup_property_ids)
        lookups = [self._translator.to_request(p) for p in pins]
        logger.debug(
            "Looking up %s resources with %d backend request(s)",
            self.resource_type.value,
            len(lookups),
        )
        responses = self._call_backend("read", self._translator.read, lookups)

        resources: list[Resource] = []
        seen: set[tuple[Any, ...]] = set()
        for response in responses:
            properties = self._translator.to_properties(response)
            identity = tuple(properties.get(p) for p in sorted(self._pk_property_ids))
            if identity and None not in identity:
                if identity in seen:
                    continue
                seen.add(identity)
            if not evaluate_predicate(predicate, properties):
                continue
            resources.append(
                Resource(self.resource_type, select_properties(properties, requested_ids))
            )
        return resources

    def _get_property_maps(
        self,
        request_properties: Mapping[str, Any],
        predicate: PredicateNode | None,
    ) -> list[dict[str, Any]]:
        """
        Resolve the entities a mutation applies to.

        Every mutation reads its matches first. Primary-key pins narrow that
        read to one entity, and an entity the backend does not return is
        simply not matched.
        """
        matches = self._find_resources(self._lookup_property_ids, predicate)
        return [{**resource.properties, **request_properties} for resource in matches]

    # =========================================================================
    # Update
    # =========================================================================

    def update_resources(
        self,
        request: UpdateRequest,
        predicate: PredicateNode | None = None,
    ) -> RequestStatus:
        """
        Apply the request's property diff to every resource matching ``predicate``.

        Zero matches is not an error: nothing is sent and no event is published.

        Raises:
            UnsupportedOperationError: If the resource type cannot be updated
            BadPropertyIdsError: If the request or predicate names an unsupported property
            BackendError: If a controller call fails
        """
        self._require("update")
        self._validate(request.property_ids | get_predicate_property_ids(predicate))

        property_maps = self._get_property_maps(request.properties, predicate)
        if not property_maps:
            logger.debug("Update matched no %s resources", self.resource_type.value)
            return RequestStatus(status=RequestStatusKind.NO_MATCH)

        backend_requests = [self._translator.to_request(p) for p in property_maps]
        handles = self._call_backend("update", self._translator.update, backend_requests)

        log_with_context(
            logger,
            logging.INFO,
            f"Updated {len(backend_requests)} {self.resource_type.value} resource(s)",
            resource_type=self.resource_type.value,
            count=len(backend_requests),
        )
        self._notify(ResourceProviderEventType.UPDATE, request, predicate)
        return RequestStatus(
            status=RequestStatusKind.COMPLETE,
            handles=tuple(h for h in handles if h is not None),
            affected=len(backend_requests),
        )

    # =========================================================================
    # Delete
    # =========================================================================

    def delete_resources(self, predicate: PredicateNode | None = None) -> RequestStatus:
        """
        Delete every resource matching ``predicate`` (all of them for None).

        Raises:
            UnsupportedOperationError: If the resource type cannot be deleted
            BadPropertyIdsError: If the predicate names an unsupported property
            BackendError: If a controller call fails
        """
        self._require("delete")
        self._validate(get_predicate_property_ids(predicate))

        property_maps = self._get_property_maps({}, predicate)
        if not property_maps:
            logger.debug("Delete matched no %s resources", self.resource_type.value)
            return RequestStatus(status=RequestStatusKind.NO_MATCH)

        backend_requests = [self._translator.to_request(p) for p in property_maps]
        self._call_backend("delete", self._translator.delete, backend_requests)

        log_with_context(
            logger,
            logging.INFO,
            f"Deleted {len(backend_requests)} {self.resource_type.value} resource(s)",
            resource_type=self.resource_type.value,
            count=len(backend_requests),
        )
        self._notify(ResourceProviderEventType.DELETE, None, predicate)
        return RequestStatus(status=RequestStatusKind.COMPLETE, affected=len(backend_requests))


# =============================================================================
# Factories
# =============================================================================


def get_resource_provider(
    resource_type: ResourceType,
    property_ids: Iterable[str],
    key_property_ids: Mapping[ResourceType, str],
    controller: ManagementController,
    pk_property_ids: Iterable[str] | None = None,
) -> ResourceProvider:
    """
    Build the provider for ``resource_type``.

    Args:
        resource_type: Resource type to serve
        property_ids: Accepted property ids
        key_property_ids: Key property id per identifying resource type
        controller: Backend controller
        pk_property_ids: Ids identifying one entity (defaults to the key ids)

    Raises:
        ValueError: If no translator exists for the resource type
    """
    try:
        translator_class = TRANSLATORS[ResourceType(resource_type)]
    except (KeyError, ValueError) as e:
        raise ValueError(f"No resource provider for type: {resource_type}") from e
    return ResourceProvider(
        resource_type,
        property_ids,
        key_property_ids,
        controller,
        translator_class(),
        pk_property_ids=pk_property_ids,
    )


def create_providers(
    controller: ManagementController,
    catalog: PropertyCatalog | None = None,
) -> dict[ResourceType, ResourceProvider]:
    """Build one provider per resource type in the catalog."""
    if catalog is None:
        from resplane.specs.catalog import get_default_catalog

        catalog = get_default_catalog()

    return {
        resource_type: get_resource_provider(
            resource_type,
            catalog.get_property_ids(resource_type),
            catalog.get_key_property_ids(resource_type),
            controller,
            pk_property_ids=catalog.get_pk_property_ids(resource_type),
        )
        for resource_type in catalog.resource_types()
    }
