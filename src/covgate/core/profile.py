"""Reading and writing Go cover profiles (``go test -coverprofile``).

A profile is a ``mode:`` header followed by one block per line::

    mode: set
    example.com/pkg/file.go:12.34,15.2 3 1

Each block names a source range, the number of statements in it, and how
often it executed. Parsing and formatting are pure; the same profile always
formats to the same bytes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from covgate.core.types import CoverMode
from covgate.errors import ProfileFormatError, ProfileNotFoundError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterator
    from pathlib import Path

_MODE_PREFIX = "mode:"
_BLOCK_RE = re.compile(r"^(?P<path>.+):(\d+)\.(\d+),(\d+)\.(\d+) (\d+) (\d+)$")


@dataclass(frozen=True, slots=True)
class ProfileBlock:
    """One coverage record: a source range with its statement and hit counts."""

    path: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    statements: int
    count: int

    @property
    def location(self) -> tuple[str, int, int, int, int]:
        """Identity of the source range, ignoring counts."""
        return (self.path, self.start_line, self.start_col, self.end_line, self.end_col)

    @property
    def covered(self) -> bool:
        return self.count > 0

    def to_line(self) -> str:
        return (
            f"{self.path}:{self.start_line}.{self.start_col},{self.end_line}.{self.end_col}"
            f" {self.statements} {self.count}"
        )


@dataclass(frozen=True, slots=True)
class CoverageProfile:
    """An ordered, immutable sequence of :class:`ProfileBlock` records."""

    mode: CoverMode = CoverMode.SET
    blocks: tuple[ProfileBlock, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[ProfileBlock]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def is_empty(self) -> bool:
        return not self.blocks

    @property
    def files(self) -> tuple[str, ...]:
        """Distinct source paths in first-seen order."""
        return tuple(dict.fromkeys(b.path for b in self.blocks))


def _parse_mode(line: str) -> CoverMode:
    raw = line[len(_MODE_PREFIX) :].strip()
    try:
        return CoverMode(raw)
    except ValueError as exc:
        msg = f"unknown cover mode: {raw!r}"
        raise ProfileFormatError(msg) from exc


def _parse_block(line: str, lineno: int) -> ProfileBlock:
    m = _BLOCK_RE.match(line)
    if not m:
        msg = f"line {lineno}: malformed profile block: {line!r}"
        raise ProfileFormatError(msg)
    sl, sc, el, ec, stmts, count = (int(g) for g in m.groups()[1:])
    return ProfileBlock(m.group("path"), sl, sc, el, ec, stmts, count)


def parse_profile(text: str) -> CoverageProfile:
    """Parse cover profile *text* into a :class:`CoverageProfile`."""
    mode: CoverMode | None = None
    blocks: list[ProfileBlock] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if mode is None:
            if not line.startswith(_MODE_PREFIX):
                msg = f"line {lineno}: expected 'mode:' header, got {line!r}"
                raise ProfileFormatError(msg)
            mode = _parse_mode(line)
            continue
        blocks.append(_parse_block(line, lineno))

    if mode is None:
        msg = "profile is empty (missing 'mode:' header)"
        raise ProfileFormatError(msg)
    return CoverageProfile(mode=mode, blocks=tuple(blocks))


def format_profile(profile: CoverageProfile) -> str:
    """Return the cover profile text for *profile*."""
    lines = [f"{_MODE_PREFIX} {profile.mode.value}"]
    lines.extend(block.to_line() for block in profile.blocks)
    return "\n".join(lines) + "\n"


def read_profile(path: Path) -> CoverageProfile:
    """Read and parse the cover profile stored at *path*."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"coverage profile not found: {path}"
        raise ProfileNotFoundError(msg) from exc
    try:
        return parse_profile(text)
    except ProfileFormatError as exc:
        msg = f"{path}: {exc}"
        raise ProfileFormatError(msg) from exc


def write_profile(profile: CoverageProfile, path: Path) -> Path:
    """Write *profile* to *path* and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_profile(profile), encoding="utf-8")
    return path


__all__ = [
    "CoverageProfile",
    "ProfileBlock",
    "format_profile",
    "parse_profile",
    "read_profile",
    "write_profile",
]
