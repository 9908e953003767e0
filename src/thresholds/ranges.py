"""Nagios-style threshold ranges — parsing and evaluation.

Grammar::

    [@][low:][high]

- ``10``      alert when the value is outside ``0..10``
- ``10:``     alert when the value is below 10
- ``~:10``    alert when the value is above 10 (``~`` is negative infinity)
- ``10:20``   alert when the value is outside ``10..20``
- ``@10:20``  alert when the value is inside ``10..20`` (inclusive)

Either bound may carry a trailing ``%``; it is then a percentage of a base
value supplied at evaluation time (``80%`` with base 1000 is ``800``).
Percentage bounds resolve to whole units, rounded down. Checks whose
thresholds are always percentages parse with ``percent=True`` so plain
numbers are read as percentages as well.
"""

from __future__ import annotations

import re
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict

from src.core.types import HealthState, Status
from src.thresholds.exceptions import ThresholdBaseError, ThresholdSyntaxError

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)%?"

_RANGE_RE = re.compile(
    rf"^(?P<inside>@)?(?:(?P<low>~|{_NUMBER})?(?P<colon>:))?(?P<high>{_NUMBER})?$"
)

_HUNDRED = Decimal(100)


class Bound(BaseModel):
    """One side of a range — an absolute number or a percentage of a base."""

    model_config = ConfigDict(frozen=True)

    value: Decimal
    percent: bool = False

    def resolve(self, base: Decimal | None) -> Decimal:
        if not self.percent:
            return self.value
        if base is None:
            raise ThresholdBaseError(
                f"Percentage bound {self.value}% needs a base value"
            )
        return (base * self.value / _HUNDRED).to_integral_value(rounding=ROUND_FLOOR)


class ThresholdRange(BaseModel):
    """A parsed threshold expression. ``None`` bounds are unbounded."""

    model_config = ConfigDict(frozen=True)

    text: str
    low: Bound | None = None
    high: Bound | None = None
    inside: bool = False

    @property
    def uses_percent(self) -> bool:
        return any(b is not None and b.percent for b in (self.low, self.high))

    def triggers(self, value: Decimal, base: Decimal | None = None) -> bool:
        """Return True when *value* should raise this threshold's level."""
        low = self.low.resolve(base) if self.low is not None else None
        high = self.high.resolve(base) if self.high is not None else None
        if low is not None and high is not None and low > high:
            raise ThresholdSyntaxError(
                f"Threshold '{self.text}' has its lower bound above its upper bound"
            )

        within = (low is None or value >= low) and (high is None or value <= high)
        return within if self.inside else not within


def _parse_bound(raw: str, percent: bool) -> Bound:
    marked = raw.endswith("%")
    number = raw[:-1] if marked else raw
    try:
        return Bound(value=Decimal(number), percent=marked or percent)
    except InvalidOperation as exc:
        raise ThresholdSyntaxError(f"Invalid threshold bound '{raw}'") from exc


def parse_range(text: str, percent: bool = False) -> ThresholdRange:
    """Parse a threshold expression into a ThresholdRange.

    With *percent* set, bounds written without ``%`` are percentages too,
    so ``80:`` and ``80%:`` mean the same thing.

    Raises:
        ThresholdSyntaxError: the expression is malformed or has no bounds.
    """
    stripped = text.strip()
    match = _RANGE_RE.match(stripped)
    if match is None:
        raise ThresholdSyntaxError(f"Invalid threshold '{text}'")

    raw_low = match.group("low")
    raw_high = match.group("high")
    has_colon = match.group("colon") is not None

    if has_colon:
        low = None if raw_low in (None, "~") else _parse_bound(raw_low, percent)
        if low is None and raw_high is None:
            raise ThresholdSyntaxError(f"Threshold '{text}' has no bounds")
    else:
        if raw_high is None:
            raise ThresholdSyntaxError(f"Threshold '{text}' has no bounds")
        # A bare number is the upper bound of a range starting at zero.
        low = Bound(value=Decimal(0))

    high = _parse_bound(raw_high, percent) if raw_high is not None else None

    if (
        low is not None
        and high is not None
        and low.percent == high.percent
        and low.value > high.value
    ):
        raise ThresholdSyntaxError(
            f"Threshold '{text}' has its lower bound above its upper bound"
        )

    return ThresholdRange(
        text=stripped,
        low=low,
        high=high,
        inside=match.group("inside") is not None,
    )


def parse_optional_range(text: str | None, percent: bool = False) -> ThresholdRange | None:
    """Parse *text*, treating None or a blank string as "not configured"."""
    if text is None or not text.strip():
        return None
    return parse_range(text, percent=percent)


def parse_health_state(text: str) -> HealthState:
    """Parse a health state name (case-insensitive)."""
    try:
        return HealthState(text.strip().lower())
    except ValueError as exc:
        valid = ", ".join(s.value for s in HealthState)
        raise ThresholdSyntaxError(
            f"Unknown health state '{text}' (valid: {valid})"
        ) from exc


def state_range(state: HealthState) -> ThresholdRange:
    """Range that triggers for *state* and every state worse than it."""
    return parse_range(f"@{state.ordinal}")


def evaluate(
    value: Decimal | int | float,
    warning: ThresholdRange | None = None,
    critical: ThresholdRange | None = None,
    base: Decimal | int | float | None = None,
) -> Status:
    """Classify *value* against the warning and critical ranges.

    Critical is checked first. A level whose range is None is skipped.

    Raises:
        ThresholdError: a bound is invalid for this value/base.
    """
    number = Decimal(str(value))
    base_number = Decimal(str(base)) if base is not None else None

    if critical is not None and critical.triggers(number, base_number):
        return Status.CRITICAL
    if warning is not None and warning.triggers(number, base_number):
        return Status.WARNING
    return Status.OK
