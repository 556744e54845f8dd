"""Tests for predicate evaluation and key pin extraction."""

from __future__ import annotations

import pytest

from resplane.runtime.predicate_builder import PredicateBuilder
from resplane.runtime.predicate_evaluator import (
    evaluate_predicate,
    extract_key_property_maps,
    filter_resources,
    get_equality_properties,
    get_predicate_property_ids,
)
from resplane.runtime.resource import Resource
from resplane.specs.catalog import ResourceType
from resplane.specs.predicate import (
    AndPredicate,
    ComparisonOperator,
    ComparisonPredicate,
    NotPredicate,
    OrPredicate,
)


def _cmp(property_id: str, operator: str, value: object = None) -> ComparisonPredicate:
    return ComparisonPredicate(
        property_id=property_id, operator=ComparisonOperator(operator), value=value
    )


RECORD = {
    "Clusters/cluster_id": 102,
    "Clusters/cluster_name": "Cluster102",
    "Clusters/version": "HDP-0.1",
    "Clusters/desired_configs": {"core-site": "v1"},
    "flags/enabled": True,
    "stats/count": "42",
    "stats/empty": None,
}


class TestComparisons:
    """Single comparison leaves."""

    @pytest.mark.parametrize(
        ("operator", "value", "expected"),
        [
            ("eq", 102, True),
            ("eq", 101, False),
            ("ne", 101, True),
            ("gt", 101, True),
            ("gt", 102, False),
            ("ge", 102, True),
            ("lt", 103, True),
            ("le", 101, False),
        ],
    )
    def test_numeric(self, operator: str, value: int, expected: bool) -> None:
        assert evaluate_predicate(_cmp("Clusters/cluster_id", operator, value), RECORD) is expected

    def test_string_equality(self) -> None:
        assert evaluate_predicate(_cmp("Clusters/cluster_name", "eq", "Cluster102"), RECORD)
        assert not evaluate_predicate(_cmp("Clusters/cluster_name", "eq", "cluster102"), RECORD)

    def test_string_ordering(self) -> None:
        assert evaluate_predicate(_cmp("Clusters/cluster_name", "lt", "Cluster103"), RECORD)

    def test_like_is_case_insensitive_substring(self) -> None:
        assert evaluate_predicate(_cmp("Clusters/cluster_name", "like", "cluster1"), RECORD)
        assert not evaluate_predicate(_cmp("Clusters/cluster_name", "like", "other"), RECORD)

    def test_like_on_non_string_is_false(self) -> None:
        assert not evaluate_predicate(_cmp("Clusters/cluster_id", "like", "10"), RECORD)


class TestCoercion:
    """Mixed-kind comparisons."""

    def test_numeric_string_against_number(self) -> None:
        assert evaluate_predicate(_cmp("stats/count", "eq", 42), RECORD)
        assert evaluate_predicate(_cmp("stats/count", "gt", 9), RECORD)

    def test_number_against_numeric_string(self) -> None:
        assert evaluate_predicate(_cmp("Clusters/cluster_id", "eq", "102"), RECORD)
        assert evaluate_predicate(_cmp("Clusters/cluster_id", "lt", "1000"), RECORD)

    def test_bool_against_string(self) -> None:
        assert evaluate_predicate(_cmp("flags/enabled", "eq", "true"), RECORD)
        assert not evaluate_predicate(_cmp("flags/enabled", "eq", "false"), RECORD)

    def test_incompatible_kinds_are_false(self) -> None:
        assert not evaluate_predicate(_cmp("Clusters/cluster_name", "eq", 5), RECORD)
        assert not evaluate_predicate(_cmp("Clusters/cluster_name", "ne", 5), RECORD)
        assert not evaluate_predicate(_cmp("Clusters/cluster_id", "eq", "abc"), RECORD)

    def test_unordered_values_are_false(self) -> None:
        assert not evaluate_predicate(
            _cmp("Clusters/desired_configs", "gt", {"core-site": "v0"}), RECORD
        )


class TestMissingValues:
    """Missing and None values."""

    def test_missing_property_fails_every_operator(self) -> None:
        for operator in ("eq", "ne", "gt", "ge", "lt", "le", "like"):
            assert not evaluate_predicate(_cmp("Clusters/missing", operator, "x"), RECORD)

    def test_none_value_counts_as_missing(self) -> None:
        assert not evaluate_predicate(_cmp("stats/empty", "ne", "x"), RECORD)

    def test_unset(self) -> None:
        assert evaluate_predicate(_cmp("Clusters/missing", "unset"), RECORD)
        assert evaluate_predicate(_cmp("stats/empty", "unset"), RECORD)
        assert not evaluate_predicate(_cmp("Clusters/cluster_id", "unset"), RECORD)

    def test_map_entry_lookup(self) -> None:
        assert evaluate_predicate(_cmp("Clusters/desired_configs/core-site", "eq", "v1"), RECORD)
        assert not evaluate_predicate(_cmp("Clusters/desired_configs/hdfs-site", "eq", "v1"), RECORD)


class TestCompoundPredicates:
    """AND/OR/NOT composition."""

    def test_and(self) -> None:
        predicate = AndPredicate(
            children=(_cmp("Clusters/cluster_id", "eq", 102), _cmp("Clusters/version", "eq", "HDP-0.1"))
        )
        assert evaluate_predicate(predicate, RECORD)

    def test_or(self) -> None:
        predicate = OrPredicate(
            children=(_cmp("Clusters/cluster_id", "eq", 1), _cmp("Clusters/cluster_id", "eq", 102))
        )
        assert evaluate_predicate(predicate, RECORD)

    def test_not(self) -> None:
        assert evaluate_predicate(NotPredicate(child=_cmp("Clusters/cluster_id", "eq", 1)), RECORD)

    def test_not_of_missing_is_true(self) -> None:
        assert evaluate_predicate(NotPredicate(child=_cmp("Clusters/missing", "eq", 1)), RECORD)

    def test_none_predicate_matches(self) -> None:
        assert evaluate_predicate(None, RECORD)

    def test_accepts_resource(self) -> None:
        resource = Resource(ResourceType.CLUSTER, RECORD)
        assert evaluate_predicate(_cmp("Clusters/cluster_id", "eq", 102), resource)

    def test_filter_resources(self) -> None:
        resources = [
            Resource(ResourceType.CLUSTER, {"Clusters/cluster_id": i}) for i in range(100, 105)
        ]
        matched = filter_resources(resources, _cmp("Clusters/cluster_id", "ge", 103))
        assert [r.get_property_value("Clusters/cluster_id") for r in matched] == [103, 104]


class TestPredicateInspection:
    """Property ids and equality conjunctions."""

    def test_property_ids(self) -> None:
        predicate = (
            PredicateBuilder()
            .property("a").equals(1)
            .and_()
            .not_()
            .begin()
            .property("b").equals(2)
            .or_()
            .property("c").is_unset()
            .end()
            .to_predicate()
        )
        assert get_predicate_property_ids(predicate) == {"a", "b", "c"}
        assert get_predicate_property_ids(None) == set()

    def test_equality_conjunction(self) -> None:
        predicate = AndPredicate(children=(_cmp("a", "eq", 1), _cmp("b", "eq", "x")))
        assert get_equality_properties(predicate) == {"a": 1, "b": "x"}

    def test_single_equality(self) -> None:
        assert get_equality_properties(_cmp("a", "eq", 1)) == {"a": 1}

    @pytest.mark.parametrize(
        "predicate",
        [
            None,
            _cmp("a", "gt", 1),
            OrPredicate(children=(_cmp("a", "eq", 1), _cmp("b", "eq", 2))),
            NotPredicate(child=_cmp("a", "eq", 1)),
            AndPredicate(children=(_cmp("a", "eq", 1), _cmp("a", "eq", 2))),
            AndPredicate(children=(_cmp("a", "eq", 1), _cmp("b", "like", "x"))),
        ],
    )
    def test_not_an_equality_conjunction(self, predicate: object) -> None:
        assert get_equality_properties(predicate) is None  # type: ignore[arg-type]


class TestKeyPropertyMaps:
    """Deriving narrowed backend lookups from key pins."""

    KEYS = {"ServiceInfo/cluster_name", "ServiceInfo/service_name"}

    def test_no_predicate_is_full_lookup(self) -> None:
        assert extract_key_property_maps(None, self.KEYS) == [{}]

    def test_single_pin(self) -> None:
        predicate = _cmp("ServiceInfo/service_name", "eq", "HDFS")
        assert extract_key_property_maps(predicate, self.KEYS) == [
            {"ServiceInfo/service_name": "HDFS"}
        ]

    def test_non_key_comparison_is_full_lookup(self) -> None:
        predicate = _cmp("ServiceInfo/state", "eq", "STARTED")
        assert extract_key_property_maps(predicate, self.KEYS) == [{}]

    def test_and_merges_pins(self) -> None:
        predicate = AndPredicate(
            children=(
                _cmp("ServiceInfo/cluster_name", "eq", "c1"),
                _cmp("ServiceInfo/service_name", "eq", "HDFS"),
                _cmp("ServiceInfo/state", "eq", "STARTED"),
            )
        )
        assert extract_key_property_maps(predicate, self.KEYS) == [
            {"ServiceInfo/cluster_name": "c1", "ServiceInfo/service_name": "HDFS"}
        ]

    def test_or_yields_one_lookup_per_branch(self) -> None:
        predicate = OrPredicate(
            children=(
                _cmp("ServiceInfo/service_name", "eq", "HDFS"),
                _cmp("ServiceInfo/service_name", "eq", "YARN"),
            )
        )
        assert extract_key_property_maps(predicate, self.KEYS) == [
            {"ServiceInfo/service_name": "HDFS"},
            {"ServiceInfo/service_name": "YARN"},
        ]

    def test_or_with_unpinned_branch_is_full_lookup(self) -> None:
        predicate = OrPredicate(
            children=(
                _cmp("ServiceInfo/service_name", "eq", "HDFS"),
                _cmp("ServiceInfo/state", "eq", "STARTED"),
            )
        )
        assert extract_key_property_maps(predicate, self.KEYS) == [{}]

    def test_and_over_or_distributes(self) -> None:
        predicate = AndPredicate(
            children=(
                _cmp("ServiceInfo/cluster_name", "eq", "c1"),
                OrPredicate(
                    children=(
                        _cmp("ServiceInfo/service_name", "eq", "HDFS"),
                        _cmp("ServiceInfo/service_name", "eq", "YARN"),
                    )
                ),
            )
        )
        assert extract_key_property_maps(predicate, self.KEYS) == [
            {"ServiceInfo/cluster_name": "c1", "ServiceInfo/service_name": "HDFS"},
            {"ServiceInfo/cluster_name": "c1", "ServiceInfo/service_name": "YARN"},
        ]

    def test_not_pins_nothing(self) -> None:
        predicate = NotPredicate(child=_cmp("ServiceInfo/service_name", "eq", "HDFS"))
        assert extract_key_property_maps(predicate, self.KEYS) == [{}]

    def test_duplicate_branches_collapse(self) -> None:
        predicate = OrPredicate(
            children=(
                _cmp("ServiceInfo/service_name", "eq", "HDFS"),
                _cmp("ServiceInfo/service_name", "eq", "HDFS"),
            )
        )
        assert extract_key_property_maps(predicate, self.KEYS) == [
            {"ServiceInfo/service_name": "HDFS"}
        ]

    def test_conflicting_pins_are_dropped(self) -> None:
        predicate = AndPredicate(
            children=(
                _cmp("ServiceInfo/cluster_name", "eq", "c1"),
                _cmp("ServiceInfo/service_name", "eq", "HDFS"),
                _cmp("ServiceInfo/service_name", "eq", "YARN"),
            )
        )
        assert extract_key_property_maps(predicate, self.KEYS) == [
            {"ServiceInfo/cluster_name": "c1"}
        ]
