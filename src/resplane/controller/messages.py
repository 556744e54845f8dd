"""
Backend request and response messages.

One request/response pair per resource type. Request fields left as None
are unconstrained: a read request with only ``cluster_name`` set asks
for every entity in that cluster.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RequestStatusResponse:
    """Commit handle returned by backend updates."""

    request_id: int
    status: str = "COMPLETED"


# =============================================================================
# Cluster
# =============================================================================


@dataclass
class ClusterRequest:
    cluster_id: int | None = None
    cluster_name: str | None = None
    stack_version: str | None = None
    host_names: set[str] | None = None
    desired_configs: dict[str, str] | None = None


@dataclass
class ClusterResponse:
    cluster_id: int
    cluster_name: str
    stack_version: str | None = None
    host_names: set[str] | None = None
    desired_configs: dict[str, str] = field(default_factory=dict)


# =============================================================================
# Service
# =============================================================================


@dataclass
class ServiceRequest:
    cluster_name: str | None = None
    service_name: str | None = None
    config_versions: dict[str, str] | None = None
    desired_state: str | None = None


@dataclass
class ServiceResponse:
    cluster_id: int
    cluster_name: str
    service_name: str
    config_versions: dict[str, str] = field(default_factory=dict)
    stack_version: str | None = None
    desired_state: str | None = None


# =============================================================================
# Component
# =============================================================================


@dataclass
class ComponentRequest:
    cluster_name: str | None = None
    service_name: str | None = None
    component_name: str | None = None
    config_versions: dict[str, str] | None = None
    desired_state: str | None = None


@dataclass
class ComponentResponse:
    cluster_id: int
    cluster_name: str
    service_name: str
    component_name: str
    config_versions: dict[str, str] = field(default_factory=dict)
    desired_state: str | None = None


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class ConfigurationRequest:
    cluster_name: str | None = None
    type: str | None = None
    version_tag: str | None = None
    configs: dict[str, Any] | None = None


@dataclass
class ConfigurationResponse:
    cluster_name: str
    type: str
    version_tag: str
    configs: dict[str, Any] = field(default_factory=dict)
