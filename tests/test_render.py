from __future__ import annotations

import json
from pathlib import Path

import pytest
from jsonschema import validate

from covgate.core.aggregate import AggregateResult
from covgate.core.config import get_schema
from covgate.core.gate import decide
from covgate.core.pipeline import PipelineResult
from covgate.core.reporter import FunctionReport, UnitCoverage
from covgate.render.html import format_html
from covgate.render.human import format_status, render_result
from covgate.render.json import format_json

UNITS = (
    UnitCoverage("github.com/expr-lang/expr/vm/vm.go:32", "Run", 100.0),
    UnitCoverage("github.com/expr-lang/expr/vm/vm.go:60", "Step", 62.5),
)


def _result(percent: float, *, html: Path | None = None, artifact_error: str | None = None) -> PipelineResult:
    return PipelineResult(
        profile_path=Path("coverage.out"),
        records_total=12,
        records_kept=10,
        aggregate=AggregateResult(percent=percent, units=UNITS, html_path=html, artifact_error=artifact_error),
        outcome=decide(percent, 90.0),
    )


def test_status_markup() -> None:
    assert format_status(decide(95.0, 90.0)) == "Coverage is good: [green]95.0%[/green] >= 90.0% (expected)"
    assert format_status(decide(50.0, 90.0)) == "[red]Coverage is too low: 50.0% < 90.0% (expected)[/red]"


def test_render_result_plain() -> None:
    text = render_result(_result(89.96, html=Path("coverage.html")), color=False)
    assert text.splitlines() == [
        "Excluded 2 of 12 coverage records",
        "HTML report: coverage.html",
        "Coverage is too low: 89.96% < 90.0% (expected)",
    ]


def test_render_result_color(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")
    text = render_result(_result(95.0), color=True)
    assert "\x1b[" in text
    assert "95.0%" in text


def test_render_result_with_table() -> None:
    text = render_result(_result(81.25), color=False, show_units=True)
    assert "Coverage Report" in text
    assert "Step" in text
    assert "62.5%" in text
    assert "Overall" in text
    assert "81.2%" in text


def test_format_json_validates() -> None:
    payload = json.loads(format_json(_result(91.0, artifact_error="go tool cover -html failed")))
    validate(payload, get_schema())
    assert payload["tool"]["name"] == "covgate"
    assert payload["status"] == "pass"
    assert payload["minimum"] == 90.0
    assert payload["artifact_error"] == "go tool cover -html failed"
    assert "html_report" not in payload
    assert payload["units"][0] == {"location": "github.com/expr-lang/expr/vm/vm.go:32", "name": "Run", "percent": 100.0}


def test_format_html_is_standalone_page() -> None:
    html = format_html(FunctionReport(rows=UNITS, total=81.25), title="expr coverage")
    assert "<html>" in html.lower() or "<!doctype html>" in html.lower()
    assert "expr coverage" in html
    assert "Step" in html
