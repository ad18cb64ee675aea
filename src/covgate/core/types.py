"""Shared type aliases and enumerations used across covgate."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import TypeAlias

# ---------------------------------------------------------------------------
# Common type aliases
# ---------------------------------------------------------------------------

FilePath: TypeAlias = Path
"""Canonical file path object used throughout the code base."""

CoveragePercent: TypeAlias = float
"""Unrounded percentage value in the inclusive range ``0`` to ``100``."""

FULL_COVERAGE = 100.0


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CoverMode(StrEnum):
    """Counting modes understood by ``go test -covermode``."""

    SET = "set"
    COUNT = "count"
    ATOMIC = "atomic"


class PatternSyntax(StrEnum):
    """How exclusion patterns are matched against record paths."""

    SUBSTRING = "substring"
    GLOB = "glob"


class ReporterKind(StrEnum):
    """Available coverage reporters."""

    GO = "go"
    PROFILE = "profile"


class OutcomeStatus(StrEnum):
    """Terminal decision of the threshold gate."""

    PASS = "pass"
    FAIL = "fail"


class Format(StrEnum):
    """Supported output formats."""

    HUMAN = "human"
    JSON = "json"


__all__ = [
    "FULL_COVERAGE",
    "CoverMode",
    "CoveragePercent",
    "FilePath",
    "Format",
    "OutcomeStatus",
    "PatternSyntax",
    "ReporterKind",
]
