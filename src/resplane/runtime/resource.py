"""
Resource and request value objects.

Resources are built fresh for every read and handed to the caller;
requests are immutable once constructed. Property maps are copied on
construction and exposed read-only.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from resplane.runtime.property_helper import get_property_category, get_property_name, lookup_value
from resplane.specs.catalog import ResourceType


def _freeze(properties: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(properties))


# =============================================================================
# Resource
# =============================================================================


@dataclass(frozen=True, eq=False)
class Resource:
    """
    A typed entity exposed as a bag of properties.

    Compared and hashed by identity, so a set of resources never
    collapses two distinct reads.
    """

    resource_type: ResourceType
    properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", _freeze(self.properties))

    def get_property_value(self, property_id: str) -> Any:
        """Value of a property (or map entry below one), None if absent."""
        _, value = lookup_value(self.properties, property_id)
        return value

    def has_property(self, property_id: str) -> bool:
        found, _ = lookup_value(self.properties, property_id)
        return found

    def get_properties_for_category(self, category: str | None) -> dict[str, Any]:
        """Return ``name -> value`` for the properties directly under a category."""
        return {
            get_property_name(property_id): value
            for property_id, value in self.properties.items()
            if get_property_category(property_id) == category
        }

    def __iter__(self) -> Iterator[str]:
        return iter(self.properties)

    def __repr__(self) -> str:
        return f"Resource({self.resource_type.value}, {dict(self.properties)!r})"


# =============================================================================
# Requests
# =============================================================================


class RequestKind(StrEnum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True)
class ReadRequest:
    """Ask for a set of property ids; an empty set asks for all of them."""

    property_ids: frozenset[str] = frozenset()

    kind = RequestKind.READ

    def __post_init__(self) -> None:
        object.__setattr__(self, "property_ids", frozenset(self.property_ids))


@dataclass(frozen=True)
class CreateRequest:
    """One property map per resource to create, in submission order."""

    property_sets: tuple[Mapping[str, Any], ...] = ()

    kind = RequestKind.CREATE

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "property_sets", tuple(_freeze(properties) for properties in self.property_sets)
        )

    @property
    def property_ids(self) -> frozenset[str]:
        return frozenset(p for properties in self.property_sets for p in properties)


@dataclass(frozen=True)
class UpdateRequest:
    """A partial property map applied to every matching resource."""

    properties: Mapping[str, Any] = field(default_factory=dict)

    kind = RequestKind.UPDATE

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", _freeze(self.properties))

    @property
    def property_ids(self) -> frozenset[str]:
        return frozenset(self.properties)


Request = ReadRequest | CreateRequest | UpdateRequest


# =============================================================================
# Request Status
# =============================================================================


class RequestStatusKind(StrEnum):
    COMPLETE = "complete"
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class RequestStatus:
    """Outcome of a mutating provider call."""

    status: RequestStatusKind
    handles: tuple[Any, ...] = ()
    affected: int = 0
