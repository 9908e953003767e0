"""Threshold expressions — parsing, evaluation and per-entity overrides."""

from src.thresholds.exceptions import ThresholdBaseError, ThresholdError, ThresholdSyntaxError
from src.thresholds.overrides import EntityThresholds, parse_entity_thresholds, split_overrides
from src.thresholds.ranges import (
    Bound,
    ThresholdRange,
    evaluate,
    parse_health_state,
    parse_optional_range,
    parse_range,
    state_range,
)

__all__ = [
    "Bound",
    "EntityThresholds",
    "ThresholdBaseError",
    "ThresholdError",
    "ThresholdRange",
    "ThresholdSyntaxError",
    "evaluate",
    "parse_entity_thresholds",
    "parse_health_state",
    "parse_optional_range",
    "parse_range",
    "split_overrides",
    "state_range",
]
