"""
In-memory management controller.

InMemoryController implements the ManagementController contract with
plain dicts guarded by a lock. It is the stub backend for tests and
local experiments: batches are validated before anything is applied,
reads never fail on a missing entity, and deleting a cluster or service
removes what lives under it.

NOT for production use - all state is lost on process exit.
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
from collections.abc import Sequence

from resplane.controller.messages import (
    ClusterRequest,
    ClusterResponse,
    ComponentRequest,
    ComponentResponse,
    ConfigurationRequest,
    ConfigurationResponse,
    RequestStatusResponse,
    ServiceRequest,
    ServiceResponse,
)
from resplane.core.errors import (
    ConstraintViolationError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

ServiceKey = tuple[str, str]
ComponentKey = tuple[str, str, str]
ConfigurationKey = tuple[str, str, str]


def _matches(value: object, wanted: object) -> bool:
    return wanted is None or value == wanted


class InMemoryController:
    """
    Dict-backed controller.

    Example:
        controller = InMemoryController()
        controller.create_cluster(ClusterRequest(cluster_name="c1", stack_version="HDP-0.1"))
        controller.get_clusters([ClusterRequest(cluster_name="c1")])
    """

    def __init__(self, first_cluster_id: int = 1) -> None:
        self._lock = threading.RLock()
        self._cluster_ids = itertools.count(first_cluster_id)
        self._request_ids = itertools.count(1)
        self._clusters: dict[int, ClusterResponse] = {}
        self._services: dict[ServiceKey, ServiceResponse] = {}
        self._components: dict[ComponentKey, ComponentResponse] = {}
        self._configurations: dict[ConfigurationKey, ConfigurationResponse] = {}

    # =========================================================================
    # Helpers
    # =========================================================================

    def _status(self) -> RequestStatusResponse:
        return RequestStatusResponse(request_id=next(self._request_ids))

    def _find_cluster(self, cluster_id: int | None, cluster_name: str | None) -> ClusterResponse | None:
        if cluster_id is None and cluster_name is None:
            return None
        for cluster in self._clusters.values():
            if _matches(cluster.cluster_id, cluster_id) and _matches(cluster.cluster_name, cluster_name):
                return cluster
        return None

    def _require_cluster(self, cluster_name: str | None) -> ClusterResponse:
        cluster = self._find_cluster(None, cluster_name)
        if cluster is None:
            raise ResourceNotFoundError(f"Cluster not found: {cluster_name}")
        return cluster

    def _service_key(self, request: ServiceRequest | ComponentRequest) -> ServiceKey:
        if not request.cluster_name or not request.service_name:
            raise ConstraintViolationError(
                "cluster_name and service_name are required", field="service_name"
            )
        return request.cluster_name, request.service_name

    def _component_key(self, request: ComponentRequest) -> ComponentKey:
        cluster_name, service_name = self._service_key(request)
        if not request.component_name:
            raise ConstraintViolationError("component_name is required", field="component_name")
        return cluster_name, service_name, request.component_name

    # =========================================================================
    # Clusters
    # =========================================================================

    def create_cluster(self, request: ClusterRequest) -> None:
        with self._lock:
            if not request.cluster_name:
                raise ConstraintViolationError("cluster_name is required", field="cluster_name")
            if self._find_cluster(None, request.cluster_name) is not None:
                raise ResourceAlreadyExistsError(f"Cluster already exists: {request.cluster_name}")
            if request.cluster_id is not None and request.cluster_id in self._clusters:
                raise ResourceAlreadyExistsError(f"Cluster id already in use: {request.cluster_id}")

            cluster_id = request.cluster_id if request.cluster_id is not None else next(self._cluster_ids)
            while request.cluster_id is None and cluster_id in self._clusters:
                cluster_id = next(self._cluster_ids)
            self._clusters[cluster_id] = ClusterResponse(
                cluster_id=cluster_id,
                cluster_name=request.cluster_name,
                stack_version=request.stack_version,
                host_names=set(request.host_names) if request.host_names else None,
                desired_configs=dict(request.desired_configs or {}),
            )
            logger.debug("Created cluster %s (%d)", request.cluster_name, cluster_id)

    def get_clusters(self, requests: Sequence[ClusterRequest]) -> list[ClusterResponse]:
        with self._lock:
            found: dict[int, ClusterResponse] = {}
            for request in requests or [ClusterRequest()]:
                for cluster in self._clusters.values():
                    if _matches(cluster.cluster_id, request.cluster_id) and _matches(
                        cluster.cluster_name, request.cluster_name
                    ):
                        found[cluster.cluster_id] = copy.deepcopy(cluster)
            return list(found.values())

    def update_cluster(self, request: ClusterRequest) -> RequestStatusResponse:
        with self._lock:
            cluster = self._find_cluster(request.cluster_id, request.cluster_name)
            if cluster is None:
                raise ResourceNotFoundError(
                    f"Cluster not found: id={request.cluster_id} name={request.cluster_name}"
                )
            if request.stack_version is not None:
                cluster.stack_version = request.stack_version
            if request.host_names is not None:
                cluster.host_names = set(request.host_names)
            if request.desired_configs is not None:
                cluster.desired_configs.update(request.desired_configs)
            return self._status()

    def delete_cluster(self, request: ClusterRequest) -> None:
        with self._lock:
            cluster = self._find_cluster(request.cluster_id, request.cluster_name)
            if cluster is None:
                raise ResourceNotFoundError(
                    f"Cluster not found: id={request.cluster_id} name={request.cluster_name}"
                )
            del self._clusters[cluster.cluster_id]
            name = cluster.cluster_name
            self._services = {k: v for k, v in self._services.items() if k[0] != name}
            self._components = {k: v for k, v in self._components.items() if k[0] != name}
            self._configurations = {k: v for k, v in self._configurations.items() if k[0] != name}

    # =========================================================================
    # Services
    # =========================================================================

    def create_services(self, requests: Sequence[ServiceRequest]) -> None:
        with self._lock:
            pending: dict[ServiceKey, ServiceResponse] = {}
            for request in requests:
                key = self._service_key(request)
                cluster = self._require_cluster(request.cluster_name)
                if key in self._services or key in pending:
                    raise ResourceAlreadyExistsError(f"Service already exists: {key[0]}/{key[1]}")
                pending[key] = ServiceResponse(
                    cluster_id=cluster.cluster_id,
                    cluster_name=key[0],
                    service_name=key[1],
                    config_versions=dict(request.config_versions or {}),
                    stack_version=cluster.stack_version,
                    desired_state=request.desired_state or "INIT",
                )
            self._services.update(pending)

    def get_services(self, requests: Sequence[ServiceRequest]) -> list[ServiceResponse]:
        with self._lock:
            found: dict[ServiceKey, ServiceResponse] = {}
            for request in requests or [ServiceRequest()]:
                for key, service in self._services.items():
                    if (
                        _matches(service.cluster_name, request.cluster_name)
                        and _matches(service.service_name, request.service_name)
                        and _matches(service.desired_state, request.desired_state)
                    ):
                        found[key] = copy.deepcopy(service)
            return list(found.values())

    def update_services(self, requests: Sequence[ServiceRequest]) -> RequestStatusResponse:
        with self._lock:
            keys = [self._service_key(request) for request in requests]
            missing = [k for k in keys if k not in self._services]
            if missing:
                raise ResourceNotFoundError(f"Service not found: {missing[0][0]}/{missing[0][1]}")
            for key, request in zip(keys, requests):
                service = self._services[key]
                if request.desired_state is not None:
                    service.desired_state = request.desired_state
                if request.config_versions is not None:
                    service.config_versions.update(request.config_versions)
            return self._status()

    def delete_services(self, requests: Sequence[ServiceRequest]) -> None:
        with self._lock:
            keys = [self._service_key(request) for request in requests]
            missing = [k for k in keys if k not in self._services]
            if missing:
                raise ResourceNotFoundError(f"Service not found: {missing[0][0]}/{missing[0][1]}")
            for key in keys:
                del self._services[key]
                self._components = {k: v for k, v in self._components.items() if k[:2] != key}

    # =========================================================================
    # Components
    # =========================================================================

    def create_components(self, requests: Sequence[ComponentRequest]) -> None:
        with self._lock:
            pending: dict[ComponentKey, ComponentResponse] = {}
            for request in requests:
                key = self._component_key(request)
                if key[:2] not in self._services:
                    raise ResourceNotFoundError(f"Service not found: {key[0]}/{key[1]}")
                if key in self._components or key in pending:
                    raise ResourceAlreadyExistsError(
                        f"Component already exists: {key[0]}/{key[1]}/{key[2]}"
                    )
                pending[key] = ComponentResponse(
                    cluster_id=self._services[key[:2]].cluster_id,
                    cluster_name=key[0],
                    service_name=key[1],
                    component_name=key[2],
                    config_versions=dict(request.config_versions or {}),
                    desired_state=request.desired_state or "INIT",
                )
            self._components.update(pending)

    def get_components(self, requests: Sequence[ComponentRequest]) -> list[ComponentResponse]:
        with self._lock:
            found: dict[ComponentKey, ComponentResponse] = {}
            for request in requests or [ComponentRequest()]:
                for key, component in self._components.items():
                    if (
                        _matches(component.cluster_name, request.cluster_name)
                        and _matches(component.service_name, request.service_name)
                        and _matches(component.component_name, request.component_name)
                        and _matches(component.desired_state, request.desired_state)
                    ):
                        found[key] = copy.deepcopy(component)
            return list(found.values())

    def update_components(self, requests: Sequence[ComponentRequest]) -> RequestStatusResponse:
        with self._lock:
            keys = [self._component_key(request) for request in requests]
            missing = [k for k in keys if k not in self._components]
            if missing:
                raise ResourceNotFoundError(f"Component not found: {'/'.join(missing[0])}")
            for key, request in zip(keys, requests):
                component = self._components[key]
                if request.desired_state is not None:
                    component.desired_state = request.desired_state
                if request.config_versions is not None:
                    component.config_versions.update(request.config_versions)
            return self._status()

    def delete_components(self, requests: Sequence[ComponentRequest]) -> None:
        with self._lock:
            keys = [self._component_key(request) for request in requests]
            missing = [k for k in keys if k not in self._components]
            if missing:
                raise ResourceNotFoundError(f"Component not found: {'/'.join(missing[0])}")
            for key in keys:
                del self._components[key]

    # =========================================================================
    # Configurations
    # =========================================================================

    def create_configuration(self, request: ConfigurationRequest) -> None:
        with self._lock:
            if not request.cluster_name or not request.type or not request.version_tag:
                raise ConstraintViolationError("cluster_name, type and tag are required", field="type")
            self._require_cluster(request.cluster_name)
            key = (request.cluster_name, request.type, request.version_tag)
            if key in self._configurations:
                raise ResourceAlreadyExistsError(
                    f"Configuration already exists: {request.type}/{request.version_tag}"
                )
            self._configurations[key] = ConfigurationResponse(
                cluster_name=request.cluster_name,
                type=request.type,
                version_tag=request.version_tag,
                configs=dict(request.configs or {}),
            )

    def get_configurations(
        self, requests: Sequence[ConfigurationRequest]
    ) -> list[ConfigurationResponse]:
        with self._lock:
            found: dict[ConfigurationKey, ConfigurationResponse] = {}
            for request in requests or [ConfigurationRequest()]:
                for key, config in self._configurations.items():
                    if (
                        _matches(config.cluster_name, request.cluster_name)
                        and _matches(config.type, request.type)
                        and _matches(config.version_tag, request.version_tag)
                    ):
                        found[key] = copy.deepcopy(config)
            return list(found.values())
