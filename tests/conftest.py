"""Shared pytest fixtures for resplane tests."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import MagicMock

import pytest

from resplane.controller.memory import InMemoryController
from resplane.runtime.provider import ResourceProvider, create_providers, get_resource_provider
from resplane.specs.catalog import PropertyCatalog, ResourceType, get_default_catalog


class RecordingObserver:
    """Observer that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[Any] = []

    def update(self, event: Any) -> None:
        self.events.append(event)

    @property
    def last_event(self) -> Any:
        return self.events[-1] if self.events else None


@pytest.fixture
def catalog() -> PropertyCatalog:
    """The packaged property catalog."""
    return get_default_catalog()


@pytest.fixture
def controller() -> InMemoryController:
    return InMemoryController()


@pytest.fixture
def providers(
    controller: InMemoryController, catalog: PropertyCatalog
) -> dict[ResourceType, ResourceProvider]:
    """One provider per resource type over an empty in-memory backend."""
    return create_providers(controller, catalog)


@pytest.fixture
def mock_controller() -> MagicMock:
    return MagicMock()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def make_provider(catalog: PropertyCatalog):
    """Build a provider for a resource type over any controller."""

    def _make(resource_type: ResourceType, controller: Any) -> ResourceProvider:
        return get_resource_provider(
            resource_type,
            catalog.get_property_ids(resource_type),
            catalog.get_key_property_ids(resource_type),
            controller,
            pk_property_ids=catalog.get_pk_property_ids(resource_type),
        )

    return _make


@pytest.fixture(autouse=True)
def reset_resplane_logging():
    """Drop handlers a test attached to the resplane logger."""
    yield
    root = logging.getLogger("resplane")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
