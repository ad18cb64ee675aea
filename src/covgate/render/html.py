from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console

from covgate.core.gate import DEFAULT_MINIMUM
from covgate.render.human import build_units_table

if TYPE_CHECKING:
    from covgate.core.reporter import FunctionReport


def format_html(report: FunctionReport, *, title: str = "Coverage Report", minimum: float = DEFAULT_MINIMUM) -> str:
    """Return a standalone HTML page with the per-unit coverage table."""
    console = Console(record=True, file=StringIO(), width=120, force_terminal=True, color_system="truecolor")
    console.print(build_units_table(report.rows, total=report.total, title=title, minimum=minimum))
    return console.export_html(inline_styles=True)


__all__ = ["format_html"]
