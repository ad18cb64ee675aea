from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from covgate._meta import __version__
from covgate.cli import filter as filter_
from covgate.cli import man, run


def _show_version(value: bool) -> None:  # noqa: FBT001 - typer callback signature
    if value:
        typer.echo(f"covgate {__version__}")
        raise typer.Exit


def create_app() -> typer.Typer:
    app = typer.Typer(help="Run Go tests with coverage and gate the build on a minimum percentage.")

    @app.callback()
    def _root(
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit", callback=_show_version, is_eager=True),
        ] = False,
    ) -> None:
        """covgate - coverage gate for Go test suites."""

    run.register(app)
    filter_.register(app)
    man.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
