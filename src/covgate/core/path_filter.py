from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from pathspec import GitIgnoreSpec

from covgate._meta import logger
from covgate.core.types import PatternSyntax
from covgate.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from covgate.core.profile import CoverageProfile


def load_patterns(p: Path) -> list[str]:
    """Load exclusion patterns from a file (one per line). Supports # comments and blank lines."""
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"cannot read exclusion patterns from {p}: {exc}"
        raise ConfigError(msg) from exc
    out: list[str] = []
    for raw in text.splitlines():
        s = raw.strip()
        if not s or s.startswith("#"):
            continue
        out.append(s)
    return out


def _coerce_patterns(items: Iterable[str]) -> tuple[str, ...]:
    # de-dupe, preserve order; empty patterns would match every path
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        s = str(item)
        if not s:
            msg = "exclusion patterns must be non-empty"
            raise ConfigError(msg)
        if s not in seen:
            seen.add(s)
            out.append(s)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class ExclusionPolicy:
    """Ordered set of path patterns whose matching records are dropped.

    With the default ``substring`` syntax a path is excluded when it contains
    any pattern verbatim (case-sensitive). ``glob`` syntax matches
    gitwildmatch patterns instead.
    """

    patterns: tuple[str, ...]
    syntax: PatternSyntax

    def __init__(
        self,
        patterns: Iterable[str] = (),
        *,
        syntax: PatternSyntax = PatternSyntax.SUBSTRING,
    ) -> None:
        object.__setattr__(self, "patterns", _coerce_patterns(patterns))
        object.__setattr__(self, "syntax", PatternSyntax(syntax))

    def _spec(self) -> GitIgnoreSpec:
        return GitIgnoreSpec.from_lines(self.patterns)

    def matching(self, path: str) -> tuple[str, ...]:
        """Return the patterns that match *path*."""
        if self.syntax is PatternSyntax.GLOB:
            return tuple(pat for pat in self.patterns if GitIgnoreSpec.from_lines([pat]).match_file(path))
        return tuple(pat for pat in self.patterns if pat in path)

    def excludes(self, path: str) -> bool:
        if not self.patterns:
            return False
        if self.syntax is PatternSyntax.GLOB:
            return self._spec().match_file(path)
        return any(pat in path for pat in self.patterns)

    def filter(self, profile: CoverageProfile) -> CoverageProfile:
        """Return a new profile holding only the records no pattern excludes."""
        if not self.patterns:
            return profile

        decisions: dict[str, bool] = {}
        used: set[str] = set()
        if self.syntax is PatternSyntax.GLOB:
            spec = self._spec()

            def excluded(path: str) -> bool:
                return spec.match_file(path)
        else:

            def excluded(path: str) -> bool:
                return any(pat in path for pat in self.patterns)

        for path in profile.files:
            decisions[path] = excluded(path)
            if decisions[path]:
                used.update(self.matching(path))

        kept = tuple(block for block in profile.blocks if not decisions[block.path])
        for pat in self.patterns:
            if pat not in used:
                logger.debug("exclusion pattern %r matched no records", pat)
        logger.info(
            "excluded %d of %d coverage records (%d patterns)",
            len(profile.blocks) - len(kept),
            len(profile.blocks),
            len(self.patterns),
        )
        return replace(profile, blocks=kept)


__all__ = ["ExclusionPolicy", "load_patterns"]
