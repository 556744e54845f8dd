"""
Fluent predicate builder.

    predicate = (
        PredicateBuilder()
        .property("ServiceInfo/cluster_name").equals("c1")
        .and_()
        .begin()
            .property("ServiceInfo/state").equals("STARTED")
            .or_()
            .not_().property("ServiceInfo/service_name").like("hdfs")
        .end()
        .to_predicate()
    )

Precedence follows the usual rules: NOT binds tighter than AND, which
binds tighter than OR. ``begin()``/``end()`` group terms explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from resplane.specs.predicate import (
    AndPredicate,
    ComparisonOperator,
    ComparisonPredicate,
    NotPredicate,
    OrPredicate,
    PredicateNode,
)


@dataclass
class _Frame:
    """Terms collected between a begin()/end() pair (or at top level)."""

    or_groups: list[list[PredicateNode]] = field(default_factory=lambda: [[]])
    expect_term: bool = True
    negate_next: bool = False
    negated: bool = False  # set when the group itself was preceded by not_()

    def build(self) -> PredicateNode:
        if self.expect_term:
            raise ValueError("Predicate ends with a dangling operator or is empty")
        groups: list[PredicateNode] = []
        for terms in self.or_groups:
            groups.append(terms[0] if len(terms) == 1 else AndPredicate(children=tuple(terms)))
        return groups[0] if len(groups) == 1 else OrPredicate(children=tuple(groups))


class PredicateBuilder:
    """Accumulates comparison terms and combinators into a predicate tree."""

    def __init__(self) -> None:
        self._frames: list[_Frame] = [_Frame()]

    @property
    def _frame(self) -> _Frame:
        return self._frames[-1]

    def _add_term(self, node: PredicateNode) -> PredicateBuilder:
        frame = self._frame
        if not frame.expect_term:
            raise ValueError("Terms must be joined with and_() or or_()")
        if frame.negate_next:
            node = NotPredicate(child=node)
            frame.negate_next = False
        frame.or_groups[-1].append(node)
        frame.expect_term = False
        return self

    def _expect_connector(self, name: str) -> None:
        if self._frame.expect_term:
            raise ValueError(f"{name}() must follow a term")

    # -------------------------------------------------------------------------
    # Terms
    # -------------------------------------------------------------------------

    def property(self, property_id: str) -> PredicateProperty:
        """Start a comparison on ``property_id``."""
        return PredicateProperty(self, property_id)

    def compare(self, property_id: str, operator: ComparisonOperator, value: Any = None) -> PredicateBuilder:
        return self._add_term(
            ComparisonPredicate(property_id=property_id, operator=operator, value=value)
        )

    def predicate(self, predicate: PredicateNode) -> PredicateBuilder:
        """Add an already-built predicate as a single term."""
        return self._add_term(predicate)

    # -------------------------------------------------------------------------
    # Combinators
    # -------------------------------------------------------------------------

    def and_(self) -> PredicateBuilder:
        self._expect_connector("and_")
        self._frame.expect_term = True
        return self

    def or_(self) -> PredicateBuilder:
        self._expect_connector("or_")
        self._frame.or_groups.append([])
        self._frame.expect_term = True
        return self

    def not_(self) -> PredicateBuilder:
        if not self._frame.expect_term:
            raise ValueError("not_() must precede a term")
        self._frame.negate_next = not self._frame.negate_next
        return self

    def begin(self) -> PredicateBuilder:
        parent = self._frame
        if not parent.expect_term:
            raise ValueError("begin() must follow and_(), or_() or not_()")
        frame = _Frame(negated=parent.negate_next)
        parent.negate_next = False
        self._frames.append(frame)
        return self

    def end(self) -> PredicateBuilder:
        if len(self._frames) == 1:
            raise ValueError("end() without matching begin()")
        frame = self._frames.pop()
        node = frame.build()
        if frame.negated:
            node = NotPredicate(child=node)
        return self._add_term(node)

    def to_predicate(self) -> PredicateNode:
        if len(self._frames) != 1:
            raise ValueError("begin() without matching end()")
        return self._frame.build()


class PredicateProperty:
    """Comparison step returned by PredicateBuilder.property()."""

    def __init__(self, builder: PredicateBuilder, property_id: str):
        self._builder = builder
        self._property_id = property_id

    def _compare(self, operator: ComparisonOperator, value: Any = None) -> PredicateBuilder:
        return self._builder.compare(self._property_id, operator, value)

    def equals(self, value: Any) -> PredicateBuilder:
        return self._compare(ComparisonOperator.EQ, value)

    def not_equals(self, value: Any) -> PredicateBuilder:
        return self._compare(ComparisonOperator.NE, value)

    def greater_than(self, value: Any) -> PredicateBuilder:
        return self._compare(ComparisonOperator.GT, value)

    def greater_than_equal_to(self, value: Any) -> PredicateBuilder:
        return self._compare(ComparisonOperator.GE, value)

    def less_than(self, value: Any) -> PredicateBuilder:
        return self._compare(ComparisonOperator.LT, value)

    def less_than_equal_to(self, value: Any) -> PredicateBuilder:
        return self._compare(ComparisonOperator.LE, value)

    def like(self, value: str) -> PredicateBuilder:
        return self._compare(ComparisonOperator.LIKE, value)

    def is_unset(self) -> PredicateBuilder:
        return self._compare(ComparisonOperator.UNSET)
