from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Annotated

import typer

from covgate.cli._shared import (
    ExcludeFromOpt,
    ExcludeOpt,
    GlobOpt,
    QuietOpt,
    VerboseOpt,
    collect_patterns,
    color_allowed,
    configure_logging,
    pattern_syntax,
    resolve_use_color,
    run_or_exit,
)
from covgate.core.config import GateConfig, load_config
from covgate.core.pipeline import PipelineResult, run_pipeline
from covgate.core.types import Format, ReporterKind
from covgate.io import write_output
from covgate.render.human import render_result
from covgate.render.json import format_json

_BOOL_FALSE = False

MinimumOpt = Annotated[
    float | None,
    typer.Option("-m", "--minimum", help="Fail if total statement coverage % is below this value [default: 90.0]."),
]
ProfileOpt = Annotated[
    Path | None,
    typer.Option("--profile", help="Cover profile path [default: coverage.out]."),
]
HtmlOpt = Annotated[
    Path | None,
    typer.Option("--html", help="Write the browsable HTML report to PATH [default: coverage.html]."),
]
NoHtmlOpt = Annotated[bool, typer.Option("--no-html", help="Do not render the HTML report.")]
ReporterOpt = Annotated[
    ReporterKind | None,
    typer.Option(
        "--reporter",
        help="Coverage reporter: 'go' (go tool cover) or 'profile' (built in).",
        case_sensitive=False,
    ),
]
GoOpt = Annotated[str | None, typer.Option("--go", help="Go executable [default: go].")]
ConfigOpt = Annotated[
    Path | None,
    typer.Option("--config", help="pyproject.toml holding a [tool.covgate] table [default: ./pyproject.toml]."),
]
WorkdirOpt = Annotated[
    Path | None,
    typer.Option("--workdir", help="Directory to run in [default: current directory].", file_okay=False),
]
FormatOpt = Annotated[Format, typer.Option("--format", help="Output format.", case_sensitive=False)]
TableOpt = Annotated[bool, typer.Option("--table", help="Show the per-function coverage table.")]
OutputOpt = Annotated[Path | None, typer.Option("--output", help="Write output to PATH (use '-' for stdout).")]
ColorOpt = Annotated[bool, typer.Option("--color", help="Force color output")]
NoColorOpt = Annotated[bool, typer.Option("--no-color", help="Disable color output")]


def _build_config(
    *,
    config: Path | None,
    workdir: Path | None,
    minimum: float | None,
    exclude: list[str] | None,
    exclude_from: list[Path] | None,
    glob: bool,
    profile: Path | None,
    html: Path | None,
    no_html: bool,
    reporter: ReporterKind | None,
    go: str | None,
    targets: list[str] | None = None,
    coverpkg: list[str] | None = None,
) -> GateConfig:
    cfg = load_config(
        config,
        workdir=workdir,
        minimum=minimum,
        targets=tuple(targets) if targets else None,
        coverpkg=tuple(coverpkg) if coverpkg else None,
        pattern_syntax=pattern_syntax(glob=glob),
        profile_path=profile,
        html_path=html,
        reporter=reporter,
        go=go,
    )
    extra = collect_patterns(exclude, exclude_from)
    if extra:
        cfg = dataclasses.replace(cfg, exclude=(*cfg.exclude, *extra))
    if no_html:
        cfg = dataclasses.replace(cfg, html_path=None)
    return cfg


def _emit(
    result: PipelineResult,
    *,
    format_: Format,
    table: bool,
    output: Path | None,
    color: bool,
    no_color: bool,
) -> None:
    if format_ is Format.JSON:
        text = format_json(result)
    else:
        use_color = resolve_use_color(color=color, no_color=no_color, color_allowed=color_allowed(output))
        text = render_result(result, color=use_color, show_units=table)
    write_output(text, output)
    raise typer.Exit(code=result.outcome.exit_code)


def run_cmd(
    target: Annotated[
        list[str] | None,
        typer.Option("-t", "--target", help="Package pattern passed to 'go test' (repeatable) [default: ./...]."),
    ] = None,
    coverpkg: Annotated[
        list[str] | None,
        typer.Option("--coverpkg", help="Package pattern to instrument, passed as -coverpkg (repeatable)."),
    ] = None,
    minimum: MinimumOpt = None,
    exclude: ExcludeOpt = None,
    exclude_from: ExcludeFromOpt = None,
    glob: GlobOpt = _BOOL_FALSE,
    profile: ProfileOpt = None,
    html: HtmlOpt = None,
    no_html: NoHtmlOpt = _BOOL_FALSE,
    reporter: ReporterOpt = None,
    go: GoOpt = None,
    config: ConfigOpt = None,
    workdir: WorkdirOpt = None,
    format_: FormatOpt = Format.HUMAN,
    table: TableOpt = _BOOL_FALSE,
    output: OutputOpt = None,
    color: ColorOpt = _BOOL_FALSE,
    no_color: NoColorOpt = _BOOL_FALSE,
    quiet: QuietOpt = _BOOL_FALSE,
    verbose: VerboseOpt = _BOOL_FALSE,
) -> None:
    """Run the test suite with coverage and fail if coverage is below the minimum."""
    configure_logging(quiet=quiet, verbose=verbose)
    cfg = run_or_exit(
        lambda: _build_config(
            config=config,
            workdir=workdir,
            minimum=minimum,
            exclude=exclude,
            exclude_from=exclude_from,
            glob=glob,
            profile=profile,
            html=html,
            no_html=no_html,
            reporter=reporter,
            go=go,
            targets=target,
            coverpkg=coverpkg,
        )
    )
    result = run_or_exit(lambda: run_pipeline(cfg))
    _emit(result, format_=format_, table=table, output=output, color=color, no_color=no_color)


def check_cmd(
    minimum: MinimumOpt = None,
    exclude: ExcludeOpt = None,
    exclude_from: ExcludeFromOpt = None,
    glob: GlobOpt = _BOOL_FALSE,
    profile: ProfileOpt = None,
    html: HtmlOpt = None,
    no_html: NoHtmlOpt = _BOOL_FALSE,
    reporter: ReporterOpt = None,
    go: GoOpt = None,
    config: ConfigOpt = None,
    workdir: WorkdirOpt = None,
    format_: FormatOpt = Format.HUMAN,
    table: TableOpt = _BOOL_FALSE,
    output: OutputOpt = None,
    color: ColorOpt = _BOOL_FALSE,
    no_color: NoColorOpt = _BOOL_FALSE,
    quiet: QuietOpt = _BOOL_FALSE,
    verbose: VerboseOpt = _BOOL_FALSE,
) -> None:
    """Judge an existing cover profile without running the tests."""
    configure_logging(quiet=quiet, verbose=verbose)
    cfg = run_or_exit(
        lambda: _build_config(
            config=config,
            workdir=workdir,
            minimum=minimum,
            exclude=exclude,
            exclude_from=exclude_from,
            glob=glob,
            profile=profile,
            html=html,
            no_html=no_html,
            reporter=reporter,
            go=go,
        )
    )
    result = run_or_exit(lambda: run_pipeline(cfg, run_tests=False))
    _emit(result, format_=format_, table=table, output=output, color=color, no_color=no_color)


def register(app: typer.Typer) -> None:
    app.command("run")(run_cmd)
    app.command("check")(check_cmd)


__all__ = ["register"]
