"""
Property id helpers.

Property ids are slash-separated paths (``category/subcategory/name``).
The hierarchy is only a naming convention: ids compare as plain strings.
This module provides the path helpers, the segment index used to validate
requested ids against a catalog, and factories for provider requests.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from resplane.runtime.resource import CreateRequest, ReadRequest, UpdateRequest

SEPARATOR = "/"


# =============================================================================
# Path Helpers
# =============================================================================


def get_property_id(category: str | None, name: str) -> str:
    """Join a category and a name into a property id."""
    if not category:
        return name
    return f"{category}{SEPARATOR}{name}"


def get_property_category(property_id: str) -> str | None:
    """Return the category of a property id, or None for a top-level id."""
    index = property_id.rfind(SEPARATOR)
    if index == -1:
        return None
    return property_id[:index]


def get_property_name(property_id: str) -> str:
    """Return the last path segment of a property id."""
    return property_id.rsplit(SEPARATOR, 1)[-1]


def get_ancestors(property_id: str) -> list[str]:
    """Return the ancestor paths of an id, nearest first (never the empty path)."""
    ancestors = []
    category = get_property_category(property_id)
    while category:
        ancestors.append(category)
        category = get_property_category(category)
    return ancestors


def get_categories(property_ids: Iterable[str]) -> set[str]:
    """Return every category path used by the given ids."""
    categories: set[str] = set()
    for property_id in property_ids:
        categories.update(get_ancestors(property_id))
    return categories


def is_under(property_id: str, category: str) -> bool:
    """True if ``property_id`` lives somewhere below ``category``."""
    return property_id.startswith(category + SEPARATOR)


# =============================================================================
# Property Id Index
# =============================================================================


class _Node:
    __slots__ = ("children", "registered")

    def __init__(self) -> None:
        self.children: dict[str, _Node] = {}
        self.registered = False


class PropertyIdIndex:
    """
    Segment trie over a set of accepted property ids.

    An id is supported when it is registered verbatim, when one of its
    ancestors is registered (entries of a map-valued property such as
    ``cat5/subcat5/map/key``), or when it is a category of a registered
    id (``cat1`` with ``cat1/foo`` registered).
    """

    def __init__(self, property_ids: Iterable[str]):
        self._root = _Node()
        self._property_ids = frozenset(property_ids)
        for property_id in self._property_ids:
            node = self._root
            for segment in property_id.split(SEPARATOR):
                node = node.children.setdefault(segment, _Node())
            node.registered = True

    @property
    def property_ids(self) -> frozenset[str]:
        return self._property_ids

    def is_supported(self, property_id: str) -> bool:
        if not property_id:
            return False
        node = self._root
        for segment in property_id.split(SEPARATOR):
            child = node.children.get(segment)
            if child is None:
                return False
            if child.registered:
                return True
            node = child
        # Walked the whole id without passing a registered id: it is a category
        return True

    def unsupported(self, property_ids: Iterable[str]) -> set[str]:
        """Return the ids from ``property_ids`` that are not supported."""
        return {p for p in property_ids if not self.is_supported(p)}


# =============================================================================
# Property Map Helpers
# =============================================================================


def lookup_value(properties: Mapping[str, Any], property_id: str) -> tuple[bool, Any]:
    """
    Resolve a property id against a flat property map.

    Literal keys win. Otherwise the nearest ancestor holding a dict is
    descended into, one segment at a time.

    Returns:
        (found, value)
    """
    if property_id in properties:
        return True, properties[property_id]

    for ancestor in get_ancestors(property_id):
        if ancestor not in properties:
            continue
        value = properties[ancestor]
        remainder = property_id[len(ancestor) + 1 :].split(SEPARATOR)
        for segment in remainder:
            if not isinstance(value, Mapping) or segment not in value:
                return False, None
            value = value[segment]
        return True, value

    return False, None


def select_properties(
    properties: Mapping[str, Any],
    requested_ids: Iterable[str],
) -> dict[str, Any]:
    """
    Project a property map onto the requested ids.

    An empty request selects everything. A requested category selects
    every property below it; a requested map entry selects just that
    entry out of its map-valued parent.
    """
    requested = set(requested_ids)
    if not requested:
        return dict(properties)

    selected: dict[str, Any] = {}
    for property_id, value in properties.items():
        if property_id in requested or any(is_under(property_id, r) for r in requested):
            selected[property_id] = value

    for property_id in requested - selected.keys():
        if any(is_under(p, property_id) for p in properties):
            continue
        found, value = lookup_value(properties, property_id)
        if found:
            selected[property_id] = value

    return selected


# =============================================================================
# Request Factories
# =============================================================================


def get_read_request(*property_ids: str | Iterable[str]) -> ReadRequest:
    """
    Build a read request.

    Accepts ids as positional strings, iterables of ids, or a mix.
    No ids means every property.
    """
    from resplane.runtime.resource import ReadRequest

    ids: set[str] = set()
    for item in property_ids:
        if isinstance(item, str):
            ids.add(item)
        else:
            ids.update(item)
    return ReadRequest(property_ids=frozenset(ids))


def get_create_request(property_sets: Iterable[Mapping[str, Any]]) -> CreateRequest:
    """Build a create request from one property map per resource."""
    from resplane.runtime.resource import CreateRequest

    return CreateRequest(property_sets=tuple(property_sets))


def get_update_request(properties: Mapping[str, Any]) -> UpdateRequest:
    """Build an update request from a partial property map."""
    from resplane.runtime.resource import UpdateRequest

    return UpdateRequest(properties=properties)
