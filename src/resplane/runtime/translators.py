"""
Per-resource-type translation strategies.

A translator knows how one resource type maps between generic property
maps and the backend's typed request/response messages, and which
controller entry points to call. Providers hold one translator each and
share everything else (validation, matching, notification).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from resplane.controller.contract import ManagementController
from resplane.controller.messages import (
    ClusterRequest,
    ClusterResponse,
    ComponentRequest,
    ComponentResponse,
    ConfigurationRequest,
    ConfigurationResponse,
    ServiceRequest,
    ServiceResponse,
)
from resplane.runtime.property_helper import SEPARATOR, get_property_id, is_under
from resplane.specs.catalog import ResourceType

# =============================================================================
# Property Ids
# =============================================================================

CLUSTER_ID_PROPERTY_ID = get_property_id("Clusters", "cluster_id")
CLUSTER_NAME_PROPERTY_ID = get_property_id("Clusters", "cluster_name")
CLUSTER_VERSION_PROPERTY_ID = get_property_id("Clusters", "version")
CLUSTER_HOSTS_PROPERTY_ID = get_property_id("Clusters", "hosts")
CLUSTER_DESIRED_CONFIGS_PROPERTY_ID = get_property_id("Clusters", "desired_configs")

SERVICE_CLUSTER_NAME_PROPERTY_ID = get_property_id("ServiceInfo", "cluster_name")
SERVICE_SERVICE_NAME_PROPERTY_ID = get_property_id("ServiceInfo", "service_name")
SERVICE_SERVICE_STATE_PROPERTY_ID = get_property_id("ServiceInfo", "state")
SERVICE_DESIRED_CONFIGS_PROPERTY_ID = get_property_id("ServiceInfo", "desired_configs")

COMPONENT_CLUSTER_NAME_PROPERTY_ID = get_property_id("ServiceComponentInfo", "cluster_name")
COMPONENT_SERVICE_NAME_PROPERTY_ID = get_property_id("ServiceComponentInfo", "service_name")
COMPONENT_COMPONENT_NAME_PROPERTY_ID = get_property_id("ServiceComponentInfo", "component_name")
COMPONENT_STATE_PROPERTY_ID = get_property_id("ServiceComponentInfo", "state")
COMPONENT_DESIRED_CONFIGS_PROPERTY_ID = get_property_id("ServiceComponentInfo", "desired_configs")

CONFIGURATION_CLUSTER_NAME_PROPERTY_ID = get_property_id("Config", "cluster_name")
CONFIGURATION_CONFIG_TYPE_PROPERTY_ID = get_property_id("Config", "type")
CONFIGURATION_CONFIG_TAG_PROPERTY_ID = get_property_id("Config", "tag")
CONFIGURATION_PROPERTIES_PROPERTY_ID = get_property_id("Config", "properties")


# =============================================================================
# Value Helpers
# =============================================================================


def _to_int(value: Any) -> Any:
    """Convert numeric strings to int; other values pass through unchanged."""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
    return value


def _collect_map(properties: Mapping[str, Any], property_id: str) -> dict[str, Any] | None:
    """
    Gather a map-valued property.

    The map may arrive whole (``Config/properties: {...}``), as individual
    entries (``Config/properties/dfs.replication: "3"``), or both.
    """
    collected: dict[str, Any] = {}
    found = False
    whole = properties.get(property_id)
    if isinstance(whole, Mapping):
        collected.update(whole)
        found = True
    for key, value in properties.items():
        if is_under(key, property_id):
            collected[key[len(property_id) + len(SEPARATOR) :]] = value
            found = True
    return collected if found else None


def _without_none(properties: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in properties.items() if v is not None}


# =============================================================================
# Translator Base
# =============================================================================


class ResourceTranslator(ABC):
    """Maps one resource type onto its backend messages and controller calls."""

    resource_type: ClassVar[ResourceType]
    supported_operations: ClassVar[frozenset[str]] = frozenset(
        {"create", "read", "update", "delete"}
    )

    def supports(self, operation: str) -> bool:
        return operation in self.supported_operations

    @abstractmethod
    def to_request(self, properties: Mapping[str, Any]) -> Any:
        """Build a backend request; key properties fill identifying fields."""
        ...

    @abstractmethod
    def to_properties(self, response: Any) -> dict[str, Any]:
        """Map a backend response onto property ids."""
        ...

    @abstractmethod
    def create(self, controller: ManagementController, requests: Sequence[Any]) -> None: ...

    @abstractmethod
    def read(self, controller: ManagementController, requests: Sequence[Any]) -> list[Any]: ...

    def update(self, controller: ManagementController, requests: Sequence[Any]) -> list[Any]:
        raise NotImplementedError(f"{self.resource_type} does not support update")

    def delete(self, controller: ManagementController, requests: Sequence[Any]) -> None:
        raise NotImplementedError(f"{self.resource_type} does not support delete")


# =============================================================================
# Cluster
# =============================================================================


class ClusterTranslator(ResourceTranslator):
    """Clusters are created, updated and deleted one request per call."""

    resource_type = ResourceType.CLUSTER

    def to_request(self, properties: Mapping[str, Any]) -> ClusterRequest:
        hosts = properties.get(CLUSTER_HOSTS_PROPERTY_ID)
        return ClusterRequest(
            cluster_id=_to_int(properties.get(CLUSTER_ID_PROPERTY_ID)),
            cluster_name=properties.get(CLUSTER_NAME_PROPERTY_ID),
            stack_version=properties.get(CLUSTER_VERSION_PROPERTY_ID),
            host_names=set(hosts) if hosts is not None else None,
            desired_configs=_collect_map(properties, CLUSTER_DESIRED_CONFIGS_PROPERTY_ID),
        )

    def to_properties(self, response: ClusterResponse) -> dict[str, Any]:
        return _without_none(
            {
                CLUSTER_ID_PROPERTY_ID: response.cluster_id,
                CLUSTER_NAME_PROPERTY_ID: response.cluster_name,
                CLUSTER_VERSION_PROPERTY_ID: response.stack_version,
                CLUSTER_HOSTS_PROPERTY_ID: (
                    sorted(response.host_names) if response.host_names is not None else None
                ),
                CLUSTER_DESIRED_CONFIGS_PROPERTY_ID: dict(response.desired_configs),
            }
        )

    def create(self, controller: ManagementController, requests: Sequence[ClusterRequest]) -> None:
        for request in requests:
            controller.create_cluster(request)

    def read(
        self, controller: ManagementController, requests: Sequence[ClusterRequest]
    ) -> list[ClusterResponse]:
        return list(controller.get_clusters(list(requests)))

    def update(self, controller: ManagementController, requests: Sequence[ClusterRequest]) -> list[Any]:
        return [controller.update_cluster(request) for request in requests]

    def delete(self, controller: ManagementController, requests: Sequence[ClusterRequest]) -> None:
        for request in requests:
            controller.delete_cluster(request)


# =============================================================================
# Service
# =============================================================================


class ServiceTranslator(ResourceTranslator):
    """Services go to the controller as one batch per call."""

    resource_type = ResourceType.SERVICE

    def to_request(self, properties: Mapping[str, Any]) -> ServiceRequest:
        return ServiceRequest(
            cluster_name=properties.get(SERVICE_CLUSTER_NAME_PROPERTY_ID),
            service_name=properties.get(SERVICE_SERVICE_NAME_PROPERTY_ID),
            config_versions=_collect_map(properties, SERVICE_DESIRED_CONFIGS_PROPERTY_ID),
            desired_state=properties.get(SERVICE_SERVICE_STATE_PROPERTY_ID),
        )

    def to_properties(self, response: ServiceResponse) -> dict[str, Any]:
        return _without_none(
            {
                SERVICE_CLUSTER_NAME_PROPERTY_ID: response.cluster_name,
                SERVICE_SERVICE_NAME_PROPERTY_ID: response.service_name,
                SERVICE_SERVICE_STATE_PROPERTY_ID: response.desired_state,
                SERVICE_DESIRED_CONFIGS_PROPERTY_ID: dict(response.config_versions),
            }
        )

    def create(self, controller: ManagementController, requests: Sequence[ServiceRequest]) -> None:
        controller.create_services(list(requests))

    def read(
        self, controller: ManagementController, requests: Sequence[ServiceRequest]
    ) -> list[ServiceResponse]:
        return list(controller.get_services(list(requests)))

    def update(self, controller: ManagementController, requests: Sequence[ServiceRequest]) -> list[Any]:
        return [controller.update_services(list(requests))]

    def delete(self, controller: ManagementController, requests: Sequence[ServiceRequest]) -> None:
        controller.delete_services(list(requests))


# =============================================================================
# Component
# =============================================================================


class ComponentTranslator(ResourceTranslator):
    resource_type = ResourceType.COMPONENT

    def to_request(self, properties: Mapping[str, Any]) -> ComponentRequest:
        return ComponentRequest(
            cluster_name=properties.get(COMPONENT_CLUSTER_NAME_PROPERTY_ID),
            service_name=properties.get(COMPONENT_SERVICE_NAME_PROPERTY_ID),
            component_name=properties.get(COMPONENT_COMPONENT_NAME_PROPERTY_ID),
            config_versions=_collect_map(properties, COMPONENT_DESIRED_CONFIGS_PROPERTY_ID),
            desired_state=properties.get(COMPONENT_STATE_PROPERTY_ID),
        )

    def to_properties(self, response: ComponentResponse) -> dict[str, Any]:
        return _without_none(
            {
                COMPONENT_CLUSTER_NAME_PROPERTY_ID: response.cluster_name,
                COMPONENT_SERVICE_NAME_PROPERTY_ID: response.service_name,
                COMPONENT_COMPONENT_NAME_PROPERTY_ID: response.component_name,
                COMPONENT_STATE_PROPERTY_ID: response.desired_state,
                COMPONENT_DESIRED_CONFIGS_PROPERTY_ID: dict(response.config_versions),
            }
        )

    def create(self, controller: ManagementController, requests: Sequence[ComponentRequest]) -> None:
        controller.create_components(list(requests))

    def read(
        self, controller: ManagementController, requests: Sequence[ComponentRequest]
    ) -> list[ComponentResponse]:
        return list(controller.get_components(list(requests)))

    def update(
        self, controller: ManagementController, requests: Sequence[ComponentRequest]
    ) -> list[Any]:
        return [controller.update_components(list(requests))]

    def delete(self, controller: ManagementController, requests: Sequence[ComponentRequest]) -> None:
        controller.delete_components(list(requests))


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationTranslator(ResourceTranslator):
    """Configurations are immutable: a new tag is created instead of an update."""

    resource_type = ResourceType.CONFIGURATION
    supported_operations = frozenset({"create", "read"})

    def to_request(self, properties: Mapping[str, Any]) -> ConfigurationRequest:
        return ConfigurationRequest(
            cluster_name=properties.get(CONFIGURATION_CLUSTER_NAME_PROPERTY_ID),
            type=properties.get(CONFIGURATION_CONFIG_TYPE_PROPERTY_ID),
            version_tag=properties.get(CONFIGURATION_CONFIG_TAG_PROPERTY_ID),
            configs=_collect_map(properties, CONFIGURATION_PROPERTIES_PROPERTY_ID),
        )

    def to_properties(self, response: ConfigurationResponse) -> dict[str, Any]:
        return {
            CONFIGURATION_CLUSTER_NAME_PROPERTY_ID: response.cluster_name,
            CONFIGURATION_CONFIG_TYPE_PROPERTY_ID: response.type,
            CONFIGURATION_CONFIG_TAG_PROPERTY_ID: response.version_tag,
            CONFIGURATION_PROPERTIES_PROPERTY_ID: dict(response.configs),
        }

    def create(
        self, controller: ManagementController, requests: Sequence[ConfigurationRequest]
    ) -> None:
        for request in requests:
            controller.create_configuration(request)

    def read(
        self, controller: ManagementController, requests: Sequence[ConfigurationRequest]
    ) -> list[ConfigurationResponse]:
        return list(controller.get_configurations(list(requests)))


TRANSLATORS: dict[ResourceType, type[ResourceTranslator]] = {
    ResourceType.CLUSTER: ClusterTranslator,
    ResourceType.SERVICE: ServiceTranslator,
    ResourceType.COMPONENT: ComponentTranslator,
    ResourceType.CONFIGURATION: ConfigurationTranslator,
}
