from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from click.testing import CliRunner

from covgate.core.reporter import FunctionReport, UnitCoverage
from covgate.errors import ExecutionError, ReportArtifactError

# path -> (statements, covered statements)
ProfileSpec = Mapping[str, tuple[int, int]]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def profile_text() -> Callable[..., str]:
    """Build cover profile text with one single-statement block per line."""

    def build(mapping: ProfileSpec, *, mode: str = "set") -> str:
        lines = [f"mode: {mode}"]
        for path, (total, covered) in mapping.items():
            for n in range(1, total + 1):
                hits = 1 if n <= covered else 0
                lines.append(f"{path}:{n}.2,{n}.20 1 {hits}")
        return "\n".join(lines) + "\n"

    return build


@pytest.fixture
def profile_file(tmp_path: Path, profile_text: Callable[..., str]) -> Callable[..., Path]:
    def write(mapping: ProfileSpec, *, mode: str = "set", filename: str = "coverage.out") -> Path:
        path = tmp_path / filename
        path.write_text(profile_text(mapping, mode=mode), encoding="utf-8")
        return path

    return write


@dataclass
class FakeRunner:
    """Stands in for ``go test``: writes a canned profile or fails."""

    text: str | None = None
    error: ExecutionError | None = None
    calls: list[tuple[tuple[str, ...], Path]] = field(default_factory=list)

    def run(self, targets: tuple[str, ...], profile_path: Path) -> Path:
        self.calls.append((tuple(targets), profile_path))
        if self.error is not None:
            raise self.error
        assert self.text is not None
        profile_path.write_text(self.text, encoding="utf-8")
        return profile_path


@dataclass
class FakeReporter:
    """Stands in for ``go tool cover`` with a fixed total."""

    total: float
    rows: tuple[UnitCoverage, ...] = ()
    html_error: str | None = None
    func_calls: list[Path] = field(default_factory=list)
    html_calls: list[tuple[Path, Path]] = field(default_factory=list)

    def function_report(self, profile_path: Path) -> FunctionReport:
        self.func_calls.append(profile_path)
        return FunctionReport(rows=self.rows, total=self.total)

    def render_html(self, profile_path: Path, output: Path) -> Path:
        self.html_calls.append((profile_path, output))
        if self.html_error is not None:
            raise ReportArtifactError(self.html_error)
        output.write_text("<html></html>", encoding="utf-8")
        return output


@pytest.fixture
def fake_runner() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture
def fake_reporter() -> Callable[..., FakeReporter]:
    return FakeReporter
