"""Centralised exception hierarchy for covgate."""

from __future__ import annotations


class CovgateError(Exception):
    """Base class for all custom covgate exceptions."""


class ConfigError(CovgateError):
    """Invalid configuration (bad option value, malformed ``[tool.covgate]`` table)."""


class ExecutionError(CovgateError):
    """The instrumented test run failed; no coverage judgment can be made."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class ExecutionCancelledError(ExecutionError):
    """The instrumented test run was interrupted before it completed."""


class ReportingError(CovgateError):
    """The coverage profile could not be turned into an aggregate percentage."""


class ProfileNotFoundError(ReportingError):
    """Coverage profile file could not be located on disk."""


class ProfileFormatError(ReportingError):
    """Coverage profile was found but is not a valid cover profile."""


class EmptyProfileError(ReportingError):
    """No coverage records remain, so the aggregate percentage is undefined."""


class ReportArtifactError(CovgateError):
    """The browsable report artifact could not be rendered."""


__all__ = [
    "ConfigError",
    "CovgateError",
    "EmptyProfileError",
    "ExecutionCancelledError",
    "ExecutionError",
    "ProfileFormatError",
    "ProfileNotFoundError",
    "ReportArtifactError",
    "ReportingError",
]
