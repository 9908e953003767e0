"""Core module — config, types, logging."""

from src.core.config import Settings, get_settings, load_settings, reset_settings
from src.core.logging import setup_logging
from src.core.types import (
    AggregatedMessage,
    CheckResult,
    HealthState,
    Status,
    pretty_join,
    worst,
)

__version__ = "1.3.1"

__all__ = [
    "AggregatedMessage",
    "CheckResult",
    "HealthState",
    "Settings",
    "Status",
    "__version__",
    "get_settings",
    "load_settings",
    "pretty_join",
    "reset_settings",
    "setup_logging",
    "worst",
]
