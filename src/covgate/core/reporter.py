"""Coverage reporters: turn a cover profile into per-unit and total statistics.

Two implementations are provided:

* :class:`GoCoverReporter` shells out to ``go tool cover`` (``-func`` for
  statistics, ``-html`` for the browsable report).
* :class:`ProfileReporter` computes statement coverage directly from the
  profile, for environments where only the profile is available.
"""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from covgate._meta import logger
from covgate.core.gate import DEFAULT_MINIMUM
from covgate.core.profile import read_profile
from covgate.core.types import FULL_COVERAGE, CoverMode
from covgate.errors import ReportArtifactError, ReportingError

if TYPE_CHECKING:  # pragma: no cover
    from pathlib import Path

    from covgate.core.profile import CoverageProfile


@dataclass(frozen=True, slots=True)
class UnitCoverage:
    """Coverage of one reported unit (a function, or a file for profile-only reports)."""

    location: str
    name: str
    percent: float


@dataclass(frozen=True, slots=True)
class FunctionReport:
    rows: tuple[UnitCoverage, ...]
    total: float


class CoverageReporter(Protocol):
    def function_report(self, profile_path: Path) -> FunctionReport: ...

    def render_html(self, profile_path: Path, output: Path) -> Path: ...


# --------------------------- go tool cover -----------------------------------
_TOTAL_RE = re.compile(r"^total:\s+\(statements\)\s+(?P<pct>\d+(?:\.\d+)?)%$")
_FUNC_RE = re.compile(r"^(?P<loc>\S+):\s+(?P<name>\S+)\s+(?P<pct>\d+(?:\.\d+)?)%$")


def parse_func_output(text: str) -> FunctionReport:
    """Parse the output of ``go tool cover -func``."""
    rows: list[UnitCoverage] = []
    total: float | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        m = _TOTAL_RE.match(line)
        if m:
            total = float(m.group("pct"))
            continue
        m = _FUNC_RE.match(line)
        if m:
            rows.append(UnitCoverage(m.group("loc"), m.group("name"), float(m.group("pct"))))
        else:
            logger.debug("ignoring unrecognised cover output line: %r", line)

    if total is None:
        msg = "coverage reporter output has no 'total: (statements)' line"
        raise ReportingError(msg)
    return FunctionReport(rows=tuple(rows), total=total)


@dataclass(frozen=True, slots=True)
class GoCoverReporter:
    go: str = "go"
    workdir: Path | None = None

    def _cover(self, *args: str) -> subprocess.CompletedProcess[str]:
        cmd = [self.go, "tool", "cover", *args]
        logger.debug("running %s", " ".join(cmd))
        return subprocess.run(  # noqa: S603 - command is built from configuration, not shell input
            cmd,
            cwd=self.workdir,
            capture_output=True,
            text=True,
            check=False,
        )

    def function_report(self, profile_path: Path) -> FunctionReport:
        try:
            proc = self._cover(f"-func={profile_path}")
        except OSError as exc:
            msg = f"could not start coverage reporter {self.go!r}: {exc}"
            raise ReportingError(msg) from exc
        if proc.returncode != 0:
            msg = f"go tool cover -func failed (exit status {proc.returncode}): {proc.stderr.strip()}"
            raise ReportingError(msg)
        return parse_func_output(proc.stdout)

    def render_html(self, profile_path: Path, output: Path) -> Path:
        try:
            proc = self._cover(f"-html={profile_path}", "-o", str(output))
        except OSError as exc:
            msg = f"could not start coverage reporter {self.go!r}: {exc}"
            raise ReportArtifactError(msg) from exc
        if proc.returncode != 0:
            msg = f"go tool cover -html failed (exit status {proc.returncode}): {proc.stderr.strip()}"
            raise ReportArtifactError(msg)
        return output


# --------------------------- profile-only ------------------------------------
@dataclass(frozen=True, slots=True)
class StatementTotals:
    total: int = 0
    covered: int = 0

    @property
    def missed(self) -> int:
        return self.total - self.covered

    @property
    def percent(self) -> float | None:
        if self.total == 0:
            return None
        return self.covered * FULL_COVERAGE / self.total


def merge_blocks(profile: CoverageProfile) -> dict[tuple[str, int, int, int, int], tuple[int, int]]:
    """Merge duplicate source ranges the way ``go tool cover`` does.

    Returns ``location -> (statements, count)``. In ``set`` mode counts are
    combined with max, otherwise they are summed.
    """
    merged: dict[tuple[str, int, int, int, int], tuple[int, int]] = {}
    for block in profile:
        prev = merged.get(block.location)
        if prev is None:
            merged[block.location] = (block.statements, block.count)
            continue
        if profile.mode is CoverMode.SET:
            count = max(prev[1], block.count)
        else:
            count = prev[1] + block.count
        merged[block.location] = (prev[0], count)
    return merged


def statement_totals(profile: CoverageProfile) -> dict[str, StatementTotals]:
    """Return per-file statement totals, in first-seen file order."""
    acc: dict[str, StatementTotals] = {}
    for (path, *_), (stmts, count) in merge_blocks(profile).items():
        prev = acc.get(path, StatementTotals())
        acc[path] = StatementTotals(
            total=prev.total + stmts,
            covered=prev.covered + (stmts if count > 0 else 0),
        )
    return acc


def summarize_profile(profile: CoverageProfile) -> FunctionReport:
    """Compute per-file and total statement coverage from *profile*."""
    per_file = statement_totals(profile)
    total = StatementTotals(
        total=sum(t.total for t in per_file.values()),
        covered=sum(t.covered for t in per_file.values()),
    )
    if total.percent is None:
        msg = "coverage profile contains no statements"
        raise ReportingError(msg)
    rows = tuple(
        UnitCoverage(location=path, name="", percent=t.percent if t.percent is not None else FULL_COVERAGE)
        for path, t in per_file.items()
    )
    return FunctionReport(rows=rows, total=total.percent)


@dataclass(frozen=True, slots=True)
class ProfileReporter:
    title: str = "Coverage Report"
    minimum: float = DEFAULT_MINIMUM

    def function_report(self, profile_path: Path) -> FunctionReport:
        return summarize_profile(read_profile(profile_path))

    def render_html(self, profile_path: Path, output: Path) -> Path:
        from covgate.render.html import format_html  # noqa: PLC0415 - render imports core

        try:
            report = self.function_report(profile_path)
        except ReportingError as exc:
            msg = f"cannot render HTML report: {exc}"
            raise ReportArtifactError(msg) from exc
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(format_html(report, title=self.title, minimum=self.minimum), encoding="utf-8")
        except OSError as exc:
            msg = f"could not write HTML report to {output}: {exc}"
            raise ReportArtifactError(msg) from exc
        return output


__all__ = [
    "CoverageReporter",
    "FunctionReport",
    "GoCoverReporter",
    "ProfileReporter",
    "StatementTotals",
    "UnitCoverage",
    "merge_blocks",
    "parse_func_output",
    "statement_totals",
    "summarize_profile",
]
