"""
Backend controller contract, messages and the in-memory implementation.
"""

from resplane.controller.contract import ManagementController
from resplane.controller.memory import InMemoryController
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

__all__ = [
    "ClusterRequest",
    "ClusterResponse",
    "ComponentRequest",
    "ComponentResponse",
    "ConfigurationRequest",
    "ConfigurationResponse",
    "InMemoryController",
    "ManagementController",
    "RequestStatusResponse",
    "ServiceRequest",
    "ServiceResponse",
]
