"""Per-entity threshold overrides, e.g. ``--critical "search;@100000:,@5:"``."""

from __future__ import annotations

import structlog
from pydantic import BaseModel, ConfigDict, Field

from src.thresholds.exceptions import ThresholdSyntaxError
from src.thresholds.ranges import ThresholdRange, parse_optional_range, parse_range

logger = structlog.stdlib.get_logger()


class EntityThresholds(BaseModel):
    """Immutable threshold lookup: a default range plus per-name overrides.

    Overrides that failed to parse are kept in *invalid* so only the entity
    they name is affected.
    """

    model_config = ConfigDict(frozen=True)

    default: ThresholdRange | None = None
    overrides: dict[str, ThresholdRange] = Field(default_factory=dict)
    invalid: dict[str, str] = Field(default_factory=dict)

    def for_entity(self, name: str) -> ThresholdRange | None:
        """Return the range that applies to *name*.

        Raises:
            ThresholdSyntaxError: the override given for *name* is malformed.
        """
        if name in self.invalid:
            raise ThresholdSyntaxError(self.invalid[name])
        return self.overrides.get(name, self.default)


def split_overrides(text: str) -> tuple[str, dict[str, str]]:
    """Split ``"name;expr"`` items out of a comma-separated threshold string.

    Returns:
        (global expression, {name: expression})
    """
    overrides: dict[str, str] = {}
    rest: list[str] = []
    for item in text.split(","):
        if ";" in item:
            name, _, expr = item.partition(";")
            overrides[name.strip()] = expr.strip()
        else:
            rest.append(item.strip())
    return "".join(rest), overrides


def parse_entity_thresholds(
    text: str | None,
    default: str | None,
    percent: bool = False,
) -> EntityThresholds:
    """Build an EntityThresholds from user text, falling back to *default*.

    The default applies whenever the text carries no global expression, so
    ``"search;@10:"`` alone keeps the default for every other entity.
    *percent* is passed on to ``parse_range`` for every expression.

    Raises:
        ThresholdSyntaxError: the global expression is malformed.
    """
    global_text, raw_overrides = split_overrides(text or "")
    default_range = parse_optional_range(global_text or default, percent=percent)

    overrides: dict[str, ThresholdRange] = {}
    invalid: dict[str, str] = {}
    for name, expr in raw_overrides.items():
        try:
            overrides[name] = parse_range(expr, percent=percent)
        except ThresholdSyntaxError as exc:
            logger.warning("threshold_override_invalid", entity=name, error=str(exc))
            invalid[name] = str(exc)

    return EntityThresholds(default=default_range, overrides=overrides, invalid=invalid)
