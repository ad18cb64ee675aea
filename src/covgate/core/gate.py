"""Threshold gate: compare the aggregate percentage against the required minimum."""

from __future__ import annotations

from dataclasses import dataclass

from covgate.core.types import FULL_COVERAGE, OutcomeStatus
from covgate.errors import ConfigError
from covgate.exit_codes import EXIT_OK, EXIT_THRESHOLD

DEFAULT_MINIMUM = 90.0

# Display precision bounds for percentages.
_MIN_DIGITS = 1
_MAX_DIGITS = 6


def format_percent(value: float, reference: float | None = None) -> str:
    """Format *value* with at least one decimal digit.

    When *reference* is given, extra digits are added until the displayed
    number sits on the same side of *reference* as the true value, so that
    e.g. 89.96 against a 90.0 minimum shows as ``89.96`` rather than ``90.0``.
    """
    text = f"{value:.{_MIN_DIGITS}f}"
    if reference is None:
        return text
    for digits in range(_MIN_DIGITS, _MAX_DIGITS + 1):
        text = f"{value:.{digits}f}"
        if (float(text) >= reference) == (value >= reference):
            return text
    # repr round-trips, so it always lands on the right side.
    return repr(float(value))


def format_threshold(value: float) -> str:
    """Format a configured minimum without losing any of its digits."""
    text = f"{value:.{_MAX_DIGITS}f}".rstrip("0")
    return text + "0" if text.endswith(".") else text


def validate_minimum(minimum: float) -> float:
    minimum = float(minimum)
    if not 0.0 <= minimum <= FULL_COVERAGE:
        msg = f"minimum coverage must be between 0 and 100, got {minimum}"
        raise ConfigError(msg)
    return minimum


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Terminal value of the pipeline: the decision plus the numbers behind it."""

    status: OutcomeStatus
    percent: float
    minimum: float

    @property
    def passed(self) -> bool:
        return self.status is OutcomeStatus.PASS

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.passed else EXIT_THRESHOLD

    @property
    def percent_text(self) -> str:
        return format_percent(self.percent, self.minimum) + "%"

    @property
    def minimum_text(self) -> str:
        return format_threshold(self.minimum) + "%"

    @property
    def message(self) -> str:
        if self.passed:
            return f"Coverage is good: {self.percent_text} >= {self.minimum_text} (expected)"
        return f"Coverage is too low: {self.percent_text} < {self.minimum_text} (expected)"


def decide(percent: float, minimum: float) -> RunOutcome:
    """Return ``pass`` iff *percent* >= *minimum* (compared unrounded)."""
    status = OutcomeStatus.PASS if percent >= minimum else OutcomeStatus.FAIL
    return RunOutcome(status=status, percent=percent, minimum=minimum)


__all__ = [
    "DEFAULT_MINIMUM",
    "RunOutcome",
    "decide",
    "format_percent",
    "format_threshold",
    "validate_minimum",
]
