"""Exception hierarchy for threshold parsing and evaluation."""

from __future__ import annotations


class ThresholdError(Exception):
    """Base exception for all threshold errors."""


class ThresholdSyntaxError(ThresholdError):
    """A threshold expression could not be parsed."""


class ThresholdBaseError(ThresholdError):
    """A percentage bound was used without a base value to scale it by."""
