"""Domain types shared by both probes — statuses, health states, results."""

from __future__ import annotations

from decimal import Decimal
from enum import IntEnum, StrEnum

from pydantic import BaseModel, ConfigDict, Field


def pretty_join(items: list[str]) -> str:
    """Join items as ``"first, second & last"``."""
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " & " + items[-1]


class Status(IntEnum):
    """Plugin status — the value doubles as the process exit code."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


def worst(*statuses: Status) -> Status:
    """Reduce statuses to the worst one (max by ordinal); OK when empty."""
    return max(statuses, default=Status.OK)


class HealthState(StrEnum):
    """Cluster / index / shard health colour."""

    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"

    @property
    def ordinal(self) -> int:
        """Comparison scale — higher is healthier."""
        return _HEALTH_ORDINALS[self]


_HEALTH_ORDINALS: dict[HealthState, int] = {
    HealthState.RED: 1,
    HealthState.YELLOW: 2,
    HealthState.GREEN: 3,
}


class CheckResult(BaseModel):
    """Outcome of evaluating one entity (a shard, a thread pool, a breaker)."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Decimal | None = None
    status: Status = Status.OK
    error: str = ""


class AggregatedMessage(BaseModel):
    """One message for every entity that ended up with the same status."""

    model_config = ConfigDict(frozen=True)

    status: Status
    names: tuple[str, ...] = Field(default_factory=tuple)
    prefix: str = ""
    detail: str = ""

    @property
    def text(self) -> str:
        text = self.prefix + pretty_join(list(self.names))
        if self.detail:
            text = f"{text} ({self.detail})"
        return text
