"""
Backend controller contract.

Providers depend only on this Protocol. Controllers perform the real
entity mutations, accept requests either one at a time (clusters,
configuration creates) or as a batch, and signal failure by raising
BackendError subclasses. Providers never retry a controller call.
"""

from collections.abc import Sequence
from typing import Protocol

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


class ManagementController(Protocol):
    """Operations a backend controller exposes to resource providers."""

    # Clusters
    def create_cluster(self, request: ClusterRequest) -> None: ...

    def get_clusters(self, requests: Sequence[ClusterRequest]) -> list[ClusterResponse]: ...

    def update_cluster(self, request: ClusterRequest) -> RequestStatusResponse | None: ...

    def delete_cluster(self, request: ClusterRequest) -> None: ...

    # Services
    def create_services(self, requests: Sequence[ServiceRequest]) -> None: ...

    def get_services(self, requests: Sequence[ServiceRequest]) -> list[ServiceResponse]: ...

    def update_services(
        self, requests: Sequence[ServiceRequest]
    ) -> RequestStatusResponse | None: ...

    def delete_services(self, requests: Sequence[ServiceRequest]) -> None: ...

    # Components
    def create_components(self, requests: Sequence[ComponentRequest]) -> None: ...

    def get_components(self, requests: Sequence[ComponentRequest]) -> list[ComponentResponse]: ...

    def update_components(
        self, requests: Sequence[ComponentRequest]
    ) -> RequestStatusResponse | None: ...

    def delete_components(self, requests: Sequence[ComponentRequest]) -> None: ...

    # Configurations
    def create_configuration(self, request: ConfigurationRequest) -> None: ...

    def get_configurations(
        self, requests: Sequence[ConfigurationRequest]
    ) -> list[ConfigurationResponse]: ...
