from __future__ import annotations

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
    configure_logging,
    pattern_syntax,
    run_or_exit,
)
from covgate.core.config import DEFAULT_PROFILE
from covgate.core.path_filter import ExclusionPolicy
from covgate.core.profile import read_profile, write_profile
from covgate.core.types import PatternSyntax
from covgate.exit_codes import EXIT_OK

_BOOL_FALSE = False


def _filter(profile: Path, output: Path, policy: ExclusionPolicy) -> tuple[int, int]:
    raw = read_profile(profile)
    filtered = policy.filter(raw)
    write_profile(filtered, output)
    return len(raw), len(filtered)


def filter_cmd(
    profile: Annotated[
        Path,
        typer.Argument(help="Cover profile to filter."),
    ] = DEFAULT_PROFILE,
    exclude: ExcludeOpt = None,
    exclude_from: ExcludeFromOpt = None,
    glob: GlobOpt = _BOOL_FALSE,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write the filtered profile to PATH [default: overwrite PROFILE]."),
    ] = None,
    quiet: QuietOpt = _BOOL_FALSE,
    verbose: VerboseOpt = _BOOL_FALSE,
) -> None:
    """Drop excluded records from a cover profile."""
    configure_logging(quiet=quiet, verbose=verbose)
    policy = run_or_exit(
        lambda: ExclusionPolicy(
            collect_patterns(exclude, exclude_from),
            syntax=pattern_syntax(glob=glob) or PatternSyntax.SUBSTRING,
        )
    )
    destination = output or profile
    total, kept = run_or_exit(lambda: _filter(profile, destination, policy))
    typer.echo(f"kept {kept} of {total} coverage records -> {destination}", err=True)
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("filter")(filter_cmd)


__all__ = ["register"]
