"""
Resource provider events.

Providers publish one event after each successful create, update or
delete. Observers are called synchronously, in registration order, and
all receive the same event instance. An observer that raises stops the
remaining notifications and the error reaches the provider's caller.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from resplane.specs.catalog import ResourceType

if TYPE_CHECKING:
    from resplane.runtime.resource import CreateRequest, UpdateRequest
    from resplane.specs.predicate import PredicateNode

logger = logging.getLogger(__name__)


# =============================================================================
# Event Types
# =============================================================================


class ResourceProviderEventType(StrEnum):
    """Mutating operations that produce events."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, eq=False)
class ResourceProviderEvent:
    """A committed mutation on one resource type."""

    resource_type: ResourceType
    event_type: ResourceProviderEventType
    request: CreateRequest | UpdateRequest | None = None  # None for delete
    predicate: PredicateNode | None = None  # None for create


# =============================================================================
# Observers
# =============================================================================


class ResourceProviderObserver(Protocol):
    """Anything with an ``update(event)`` method can observe a provider."""

    def update(self, event: ResourceProviderEvent) -> None: ...


@dataclass
class ObserverRegistry:
    """
    Ordered observer list scoped to one provider.

    Registration is guarded by a lock; notification iterates over a
    snapshot so observers added during dispatch see the next event only.
    """

    _observers: list[ResourceProviderObserver] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def add(self, observer: ResourceProviderObserver) -> None:
        """Register an observer (duplicates are called once per registration)."""
        with self._lock:
            self._observers.append(observer)

    def snapshot(self) -> tuple[ResourceProviderObserver, ...]:
        with self._lock:
            return tuple(self._observers)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._observers)

    def notify(self, event: ResourceProviderEvent) -> None:
        """Deliver ``event`` to every observer, in registration order."""
        observers = self.snapshot()
        logger.debug(
            "Notifying %d observer(s) of %s %s",
            len(observers),
            event.resource_type.value,
            event.event_type.value,
        )
        for observer in observers:
            observer.update(event)
