"""Evaluate thresholds across a collection of named entities.

The same routine serves thread pools, circuit breakers and the shards of a
failing index: callers pass selector functions that pull the value, the
thresholds and (optionally) the percentage base out of each record.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import TypeVar

import structlog
from pydantic import BaseModel, Field

from src.core.types import AggregatedMessage, CheckResult, Status, worst
from src.thresholds import EntityThresholds, ThresholdError, ThresholdRange, evaluate

logger = structlog.stdlib.get_logger()

RecordT = TypeVar("RecordT")

Number = Decimal | int | float

# Selector type aliases
ValueSelector = Callable[[RecordT], Number]
ThresholdSelector = Callable[[RecordT, str], ThresholdRange | None]
BaseSelector = Callable[[RecordT], Number | None]


class Aggregation(BaseModel):
    """Per-entity results plus one message per non-OK status."""

    results: list[CheckResult] = Field(default_factory=list)
    messages: list[AggregatedMessage] = Field(default_factory=list)

    @property
    def status(self) -> Status:
        return worst(*(r.status for r in self.results))

    def names(self, status: Status) -> list[str]:
        return [r.name for r in self.results if r.status == status]


def by_name(thresholds: EntityThresholds) -> ThresholdSelector[object]:
    """Selector that resolves per-entity overrides, else the default."""

    def select(record: object, name: str) -> ThresholdRange | None:
        return thresholds.for_entity(name)

    return select


def fixed(threshold: ThresholdRange | None) -> ThresholdSelector[object]:
    """Selector that applies the same range to every entity."""

    def select(record: object, name: str) -> ThresholdRange | None:
        return threshold

    return select


def group_results(results: list[CheckResult], prefix: str) -> list[AggregatedMessage]:
    """Build one message per non-OK status, worst status first."""
    names: dict[Status, set[str]] = {}
    errors: dict[Status, set[str]] = {}
    for result in results:
        names.setdefault(result.status, set()).add(result.name)
        if result.error:
            errors.setdefault(result.status, set()).add(result.error)

    messages: list[AggregatedMessage] = []
    for status in sorted(names, reverse=True):
        if status == Status.OK:
            continue
        messages.append(AggregatedMessage(
            status=status,
            names=tuple(sorted(names[status])),
            prefix=prefix,
            detail="; ".join(sorted(errors.get(status, set()))),
        ))
    return messages


def check_each(
    entities: Mapping[str, RecordT],
    value_of: ValueSelector[RecordT],
    warning_of: ThresholdSelector[RecordT],
    critical_of: ThresholdSelector[RecordT],
    prefix: str,
    base_of: BaseSelector[RecordT] | None = None,
) -> Aggregation:
    """Evaluate every entity and group the names by resulting status.

    A threshold error only turns the entity it concerns UNKNOWN.
    """
    results: list[CheckResult] = []
    for name in sorted(entities):
        record = entities[name]
        value = Decimal(str(value_of(record)))
        try:
            status = evaluate(
                value,
                warning=warning_of(record, name),
                critical=critical_of(record, name),
                base=base_of(record) if base_of is not None else None,
            )
        except ThresholdError as exc:
            logger.warning("threshold_invalid", entity=name, error=str(exc))
            results.append(CheckResult(
                name=name, value=value, status=Status.UNKNOWN, error=str(exc),
            ))
            continue

        logger.debug("entity_checked", entity=name, value=str(value), status=status.name)
        results.append(CheckResult(name=name, value=value, status=status))

    return Aggregation(results=results, messages=group_results(results, prefix))
