"""Tests for src/core/types.py — status reduction, health states, messages."""

from __future__ import annotations

import itertools

from src.core.types import AggregatedMessage, HealthState, Status, pretty_join, worst


class TestWorst:
    def test_empty_is_ok(self) -> None:
        assert worst() == Status.OK

    def test_is_max_by_ordinal(self) -> None:
        for a, b in itertools.product(Status, repeat=2):
            assert worst(a, b) == max(a, b)

    def test_commutative_and_associative(self) -> None:
        for a, b, c in itertools.product(Status, repeat=3):
            assert worst(a, b) == worst(b, a)
            assert worst(worst(a, b), c) == worst(a, worst(b, c))

    def test_adding_never_lowers(self) -> None:
        statuses = [Status.WARNING, Status.CRITICAL]
        before = worst(*statuses)
        for extra in Status:
            assert worst(*statuses, extra) >= before

    def test_unknown_is_worst(self) -> None:
        assert worst(Status.CRITICAL, Status.UNKNOWN) == Status.UNKNOWN

    def test_exit_codes(self) -> None:
        assert [int(s) for s in Status] == [0, 1, 2, 3]


class TestHealthState:
    def test_ordinals_increase_with_health(self) -> None:
        assert HealthState.RED.ordinal < HealthState.YELLOW.ordinal < HealthState.GREEN.ordinal

    def test_values(self) -> None:
        assert HealthState("red") is HealthState.RED


class TestPrettyJoin:
    def test_empty(self) -> None:
        assert pretty_join([]) == ""

    def test_single(self) -> None:
        assert pretty_join(["a"]) == "a"

    def test_two(self) -> None:
        assert pretty_join(["a", "b"]) == "a & b"

    def test_three(self) -> None:
        assert pretty_join(["a", "b", "c"]) == "a, b & c"

    def test_duplicates_are_not_collapsed(self) -> None:
        assert pretty_join(["a", "a"]) == "a & a"


class TestAggregatedMessage:
    def test_text(self) -> None:
        msg = AggregatedMessage(
            status=Status.WARNING,
            names=("bulk", "search"),
            prefix="Breakers tripped: ",
        )
        assert msg.text == "Breakers tripped: bulk & search"

    def test_detail_is_appended(self) -> None:
        msg = AggregatedMessage(
            status=Status.UNKNOWN,
            names=("search",),
            prefix="Pools: ",
            detail="bad threshold",
        )
        assert msg.text == "Pools: search (bad threshold)"
