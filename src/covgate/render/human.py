from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from covgate.core.gate import DEFAULT_MINIMUM, format_percent

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covgate.core.gate import RunOutcome
    from covgate.core.pipeline import PipelineResult
    from covgate.core.reporter import UnitCoverage

# Below the minimum but at least this close to it renders yellow instead of red.
_YELLOW_MARGIN = 15.0


def _style_percent(pct: float, minimum: float) -> str:
    text = f"{format_percent(pct, minimum)}%"
    if pct >= minimum:
        return f"[green]{text}[/green]"
    if pct >= minimum - _YELLOW_MARGIN:
        return f"[yellow]{text}[/yellow]"
    return f"[red]{text}[/red]"


def build_units_table(
    rows: Sequence[UnitCoverage],
    *,
    total: float,
    title: str = "Coverage Report",
    minimum: float = DEFAULT_MINIMUM,
) -> Table:
    """Return a Rich table listing per-unit coverage with an overall row."""
    table = Table(title=title, box=box.SIMPLE_HEAVY, header_style="bold", expand=True)
    table.add_column("Location", style="cyan", overflow="fold")
    table.add_column("Function", overflow="fold")
    table.add_column("Cov.", justify="right")

    for r in rows:
        table.add_row(escape(r.location), escape(r.name), _style_percent(r.percent, minimum))

    table.add_section()
    table.add_row("[bold]Overall[/bold]", "", f"[bold]{_style_percent(total, minimum)}[/bold]")
    return table


def format_status(outcome: RunOutcome) -> str:
    """Return the Rich-markup status line for *outcome*."""
    if outcome.passed:
        return (
            f"Coverage is good: [green]{outcome.percent_text}[/green]"
            f" >= {outcome.minimum_text} (expected)"
        )
    return f"[red]{escape(outcome.message)}[/red]"


def render_result(result: PipelineResult, *, color: bool = True, show_units: bool = False) -> str:
    """Render the status line (and optionally the per-unit table) as text."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=color, no_color=not color, highlight=False)
    if show_units:
        console.print(
            build_units_table(
                result.aggregate.units,
                total=result.aggregate.percent,
                minimum=result.outcome.minimum,
            )
        )
    if result.records_excluded:
        console.print(f"Excluded {result.records_excluded} of {result.records_total} coverage records")
    if result.aggregate.html_path is not None:
        console.print(f"HTML report: {escape(str(result.aggregate.html_path))}")
    console.print(format_status(result.outcome))
    return buf.getvalue().rstrip()


__all__ = ["build_units_table", "format_status", "render_result"]
