"""Tests for per-entity threshold overrides."""

from __future__ import annotations

import pytest

from src.thresholds.exceptions import ThresholdSyntaxError
from src.thresholds.overrides import (
    EntityThresholds,
    parse_entity_thresholds,
    split_overrides,
)
from src.thresholds.ranges import parse_range


class TestSplitOverrides:
    def test_plain_expression(self) -> None:
        assert split_overrides("@5:") == ("@5:", {})

    def test_override_and_global(self) -> None:
        global_text, overrides = split_overrides("search;@100000:,@5:")
        assert global_text == "@5:"
        assert overrides == {"search": "@100000:"}

    def test_only_overrides(self) -> None:
        global_text, overrides = split_overrides("search;@10:,bulk;@20:")
        assert global_text == ""
        assert overrides == {"search": "@10:", "bulk": "@20:"}

    def test_empty_text(self) -> None:
        assert split_overrides("") == ("", {})


class TestParseEntityThresholds:
    def test_default_used_when_text_missing(self) -> None:
        thresholds = parse_entity_thresholds(None, "@1:")
        assert thresholds.default == parse_range("@1:")
        assert thresholds.overrides == {}

    def test_default_kept_when_only_overrides_given(self) -> None:
        thresholds = parse_entity_thresholds("search;@10:", "@1:")
        assert thresholds.for_entity("search") == parse_range("@10:")
        assert thresholds.for_entity("bulk") == parse_range("@1:")

    def test_global_expression_replaces_default(self) -> None:
        thresholds = parse_entity_thresholds("@3:", "@1:")
        assert thresholds.for_entity("anything") == parse_range("@3:")

    def test_no_default_and_no_text(self) -> None:
        assert parse_entity_thresholds(None, None).for_entity("x") is None

    def test_invalid_global_raises(self) -> None:
        with pytest.raises(ThresholdSyntaxError):
            parse_entity_thresholds("nonsense", "@1:")

    def test_invalid_override_only_affects_its_entity(self) -> None:
        thresholds = parse_entity_thresholds("search;bogus,@2:", "@1:")
        assert thresholds.for_entity("bulk") == parse_range("@2:")
        with pytest.raises(ThresholdSyntaxError):
            thresholds.for_entity("search")

    def test_is_immutable(self) -> None:
        thresholds = EntityThresholds(default=parse_range("5"))
        with pytest.raises(ValueError):
            thresholds.default = None  # type: ignore[misc]
