"""
Predicate evaluator.

Evaluates predicate trees against resource property maps and derives
the key-property pins a backend controller can filter on. Backends only
understand exact key values, so a read narrows the backend call with the
pins and applies the full predicate to each returned resource afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from resplane.runtime.property_helper import lookup_value
from resplane.runtime.resource import Resource
from resplane.specs.predicate import (
    AndPredicate,
    ComparisonOperator,
    ComparisonPredicate,
    NotPredicate,
    OrPredicate,
    PredicateNode,
)

_TRUE_STRINGS = ("true", "yes", "1")
_FALSE_STRINGS = ("false", "no", "0")

# =============================================================================
# Predicate Evaluation
# =============================================================================


def evaluate_predicate(
    predicate: PredicateNode | None,
    resource: Resource | Mapping[str, Any],
) -> bool:
    """
    Evaluate a predicate against a resource or a raw property map.

    Args:
        predicate: Predicate tree; None matches everything
        resource: Resource or flat property map

    Returns:
        True if the predicate is satisfied
    """
    if predicate is None:
        return True

    properties = resource.properties if isinstance(resource, Resource) else resource

    if isinstance(predicate, ComparisonPredicate):
        return _evaluate_comparison(predicate, properties)
    if isinstance(predicate, AndPredicate):
        return all(evaluate_predicate(child, properties) for child in predicate.children)
    if isinstance(predicate, OrPredicate):
        return any(evaluate_predicate(child, properties) for child in predicate.children)
    if isinstance(predicate, NotPredicate):
        return not evaluate_predicate(predicate.child, properties)

    raise TypeError(f"Unknown predicate node: {type(predicate).__name__}")


def _evaluate_comparison(comparison: ComparisonPredicate, properties: Mapping[str, Any]) -> bool:
    found, record_value = lookup_value(properties, comparison.property_id)

    if comparison.operator == ComparisonOperator.UNSET:
        return not found or record_value is None

    if not found or record_value is None:
        return False

    return _compare(record_value, comparison.operator, comparison.value)


def _to_number(value: Any) -> Decimal | None:
    try:
        return Decimal(value.strip())
    except (InvalidOperation, AttributeError):
        return None


def _to_bool(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float | Decimal) and not isinstance(value, bool)


def _coerce(record_value: Any, value: Any) -> tuple[Any, Any] | None:
    """
    Bring both sides to one comparable kind.

    Returns None when the kinds cannot be compared.
    """
    if isinstance(record_value, bool) or isinstance(value, bool):
        if isinstance(record_value, bool) and isinstance(value, bool):
            return record_value, value
        if isinstance(record_value, str):
            coerced = _to_bool(record_value)
            return None if coerced is None else (coerced, value)
        if isinstance(value, str):
            coerced = _to_bool(value)
            return None if coerced is None else (record_value, coerced)
        return None

    if _is_number(record_value) and _is_number(value):
        return record_value, value
    if isinstance(record_value, str) and isinstance(value, str):
        return record_value, value

    # Numeric strings compare numerically against numbers
    if _is_number(record_value) and isinstance(value, str):
        number = _to_number(value)
        return None if number is None else (Decimal(str(record_value)), number)
    if isinstance(record_value, str) and _is_number(value):
        number = _to_number(record_value)
        return None if number is None else (number, Decimal(str(value)))

    if type(record_value) is type(value):
        return record_value, value
    return None


def _compare(record_value: Any, operator: ComparisonOperator, value: Any) -> bool:
    """
    Perform a comparison operation.

    Args:
        record_value: Value from the resource (never None)
        operator: Comparison operator
        value: Literal from the predicate

    Returns:
        True if comparison passes; incompatible kinds never pass
    """
    if operator == ComparisonOperator.LIKE:
        if not isinstance(record_value, str) or not isinstance(value, str):
            return False
        return value.lower() in record_value.lower()

    if value is None:
        return False

    coerced = _coerce(record_value, value)
    if coerced is None:
        return False
    left, right = coerced

    try:
        if operator == ComparisonOperator.EQ:
            return bool(left == right)
        if operator == ComparisonOperator.NE:
            return bool(left != right)
        if operator == ComparisonOperator.GT:
            return bool(left > right)
        if operator == ComparisonOperator.GE:
            return bool(left >= right)
        if operator == ComparisonOperator.LT:
            return bool(left < right)
        if operator == ComparisonOperator.LE:
            return bool(left <= right)
    except TypeError:
        # Same Python type without an ordering (dicts, lists)
        return False

    return False


def filter_resources(
    resources: Iterable[Resource],
    predicate: PredicateNode | None,
) -> list[Resource]:
    """Keep the resources that satisfy ``predicate``."""
    return [r for r in resources if evaluate_predicate(predicate, r)]


# =============================================================================
# Predicate Inspection
# =============================================================================


def get_predicate_property_ids(predicate: PredicateNode | None) -> set[str]:
    """Return every property id referenced by a predicate."""
    if predicate is None:
        return set()
    if isinstance(predicate, ComparisonPredicate):
        return {predicate.property_id}
    if isinstance(predicate, AndPredicate | OrPredicate):
        ids: set[str] = set()
        for child in predicate.children:
            ids |= get_predicate_property_ids(child)
        return ids
    if isinstance(predicate, NotPredicate):
        return get_predicate_property_ids(predicate.child)
    raise TypeError(f"Unknown predicate node: {type(predicate).__name__}")


def get_equality_properties(predicate: PredicateNode | None) -> dict[str, Any] | None:
    """
    Return ``property_id -> value`` when the predicate is a pure conjunction
    of equalities (one value per property), else None.
    """
    if predicate is None:
        return None
    if isinstance(predicate, ComparisonPredicate):
        if predicate.operator != ComparisonOperator.EQ or predicate.value is None:
            return None
        return {predicate.property_id: predicate.value}
    if isinstance(predicate, AndPredicate):
        merged: dict[str, Any] = {}
        for child in predicate.children:
            child_props = get_equality_properties(child)
            if child_props is None:
                return None
            for property_id, value in child_props.items():
                if property_id in merged and merged[property_id] != value:
                    return None
                merged[property_id] = value
        return merged
    return None


def extract_key_property_maps(
    predicate: PredicateNode | None,
    key_property_ids: Iterable[str],
) -> list[dict[str, Any]]:
    """
    Derive backend lookups from the key pins in a predicate.

    Each returned dict pins key properties to exact values; the caller
    issues one narrow backend request per dict. A single empty dict means
    the predicate cannot be narrowed and an unfiltered lookup is needed.

    Args:
        predicate: Predicate tree (None pins nothing)
        key_property_ids: Property ids the backend can filter on

    Returns:
        Distinct pin maps (never empty)
    """
    keys = frozenset(key_property_ids)
    maps = _key_maps(predicate, keys)

    distinct: list[dict[str, Any]] = []
    for pins in maps:
        if not pins:
            return [{}]
        if pins not in distinct:
            distinct.append(pins)
    return distinct


def _key_maps(predicate: PredicateNode | None, keys: frozenset[str]) -> list[dict[str, Any]]:
    if predicate is None or isinstance(predicate, NotPredicate):
        return [{}]

    if isinstance(predicate, ComparisonPredicate):
        if (
            predicate.operator == ComparisonOperator.EQ
            and predicate.property_id in keys
            and predicate.value is not None
        ):
            return [{predicate.property_id: predicate.value}]
        return [{}]

    if isinstance(predicate, OrPredicate):
        branches: list[dict[str, Any]] = []
        for child in predicate.children:
            child_maps = _key_maps(child, keys)
            if any(not pins for pins in child_maps):
                # One unpinned branch forces a full lookup
                return [{}]
            branches.extend(child_maps)
        return branches

    if isinstance(predicate, AndPredicate):
        combined: list[dict[str, Any]] = [{}]
        for child in predicate.children:
            child_maps = _key_maps(child, keys)
            combined = [_merge_pins(left, right) for left in combined for right in child_maps]
        return combined

    raise TypeError(f"Unknown predicate node: {type(predicate).__name__}")


def _merge_pins(left: dict[str, Any], right: dict[str, Any]) -> dict[str, Any]:
    merged = dict(left)
    for property_id, value in right.items():
        if property_id in merged and merged[property_id] != value:
            # Conflicting pins: leave the key unpinned and let evaluation decide
            del merged[property_id]
            continue
        merged[property_id] = value
    return merged
