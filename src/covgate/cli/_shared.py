from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, TypeVar

import click.utils as click_utils
import typer

from covgate._meta import logger
from covgate.core.config import LOG_FORMAT
from covgate.core.path_filter import load_patterns
from covgate.core.types import PatternSyntax
from covgate.errors import (
    ConfigError,
    ExecutionCancelledError,
    ExecutionError,
    ProfileNotFoundError,
    ReportingError,
)
from covgate.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_INTERRUPTED,
    EXIT_NOINPUT,
    EXIT_SOFTWARE,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

T = TypeVar("T")

# --------------------------------------------------------------------------- #
# Shared option declarations                                                  #
# --------------------------------------------------------------------------- #
ExcludeOpt = Annotated[
    list[str] | None,
    typer.Option("-x", "--exclude", help="Drop records whose path contains PATTERN (repeatable)."),
]
ExcludeFromOpt = Annotated[
    list[Path] | None,
    typer.Option("--exclude-from", help="Read exclusion patterns from FILE, one per line (repeatable)."),
]
GlobOpt = Annotated[
    bool,
    typer.Option("--glob", help="Match exclusion patterns as gitwildmatch globs instead of substrings."),
]
QuietOpt = Annotated[bool, typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors.")]
VerboseOpt = Annotated[bool, typer.Option("-v", "--verbose", help="Emit diagnostic logging.")]


def configure_logging(*, quiet: bool, verbose: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)


def resolve_use_color(*, color: bool, no_color: bool, color_allowed: bool) -> bool:
    # CLI flags take precedence over the IO policy default.
    if no_color:
        return False
    if color:
        return True
    return color_allowed


def color_allowed(output: Path | None) -> bool:
    if output not in {None, Path("-")}:
        return False
    try:
        is_tty = bool(getattr(sys.stdout, "isatty", lambda: False)())
    except OSError:
        return False
    return is_tty and not click_utils.should_strip_ansi(sys.stdout)


def collect_patterns(exclude: Sequence[str] | None, exclude_from: Sequence[Path] | None) -> tuple[str, ...]:
    patterns = list(exclude or ())
    for path in exclude_from or ():
        patterns.extend(load_patterns(path))
    return tuple(patterns)


def pattern_syntax(*, glob: bool) -> PatternSyntax | None:
    return PatternSyntax.GLOB if glob else None


_ERROR_EXIT_CODES: tuple[tuple[type[Exception], int], ...] = (
    (ConfigError, EXIT_CONFIG),
    (ExecutionCancelledError, EXIT_INTERRUPTED),
    (ExecutionError, EXIT_SOFTWARE),
    (ProfileNotFoundError, EXIT_NOINPUT),
    (ReportingError, EXIT_DATAERR),
    (OSError, EXIT_GENERIC),
)


def exit_code_for(exc: Exception) -> int:
    for kind, code in _ERROR_EXIT_CODES:
        if isinstance(exc, kind):
            return code
    return EXIT_GENERIC


def run_or_exit(fn: Callable[[], T]) -> T:
    """Call *fn*, turning known failures into an ``ERROR:`` line and exit code."""
    try:
        return fn()
    except (ConfigError, ExecutionError, ReportingError, OSError) as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=exit_code_for(exc)) from exc


__all__ = [
    "ExcludeFromOpt",
    "ExcludeOpt",
    "GlobOpt",
    "QuietOpt",
    "VerboseOpt",
    "collect_patterns",
    "color_allowed",
    "configure_logging",
    "exit_code_for",
    "pattern_syntax",
    "resolve_use_color",
    "run_or_exit",
]
