"""Utility helpers for generating CLI documentation artefacts."""

from __future__ import annotations

import click

_EXIT_STATUS = """\
0   coverage meets the minimum
1   generic error (unexpected failure)
2   coverage below the minimum
65  coverage profile or reporter output invalid, or every record excluded
66  coverage profile not found
70  test run failed (failing tests or instrumentation error)
78  configuration error
130 test run interrupted
"""


def _plain(command: click.Command, name: str) -> click.Command:
    """Return a plain Click command mirroring *command*.

    Typer renders help through Rich straight to the terminal; for the man page
    we only need a stable, plain-text help string.
    """
    return click.Command(
        name=name,
        params=command.params,
        help=command.help,
        epilog=command.epilog,
        context_settings=command.context_settings,
    )


def _help_text(command: click.Command, name: str, parent: click.Context | None = None) -> str:
    plain = _plain(command, name)
    return plain.get_help(click.Context(plain, info_name=name, parent=parent)).strip()


def _subcommand_help(group: click.Command, ctx: click.Context) -> list[str]:
    if not isinstance(group, click.Group):
        return []
    parts: list[str] = []
    for name in group.list_commands(ctx):
        sub = group.get_command(ctx, name)
        if sub is None or sub.hidden:
            continue
        title = f"covgate {name}"
        parts.append(f"{title}\n{'~' * len(title)}\n{_help_text(sub, name, ctx)}\n\n")
    return parts


def build_man_page(command: click.Command) -> str:
    """Return a plain-text manual page for the ``covgate`` command group."""
    ctx = click.Context(command, info_name="covgate")
    sections = [
        "COVGATE(1)\n\n",
        "NAME\n----\ncovgate - coverage gate for Go test suites\n\n",
        "SYNOPSIS\n--------\ncovgate COMMAND [OPTIONS]\n\n",
        "DESCRIPTION\n-----------\n",
        _help_text(command, "covgate"),
        "\n\nCOMMANDS\n--------\n",
        *_subcommand_help(command, ctx),
        "EXIT STATUS\n-----------\n",
        _EXIT_STATUS.strip(),
        "\n",
    ]
    return "".join(sections)


__all__ = ["build_man_page"]
