"""Central configuration and constants for ``covgate``.

Settings come from the ``[tool.covgate]`` table of ``pyproject.toml`` and are
overridden by command-line options. The result is a single immutable
:class:`GateConfig` handed to the pipeline.
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field, fields
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

from covgate._meta import logger
from covgate.core.gate import DEFAULT_MINIMUM, validate_minimum
from covgate.core.path_filter import ExclusionPolicy, load_patterns
from covgate.core.types import PatternSyntax, ReporterKind
from covgate.errors import ConfigError

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

DEFAULT_TARGETS = ("./...",)
DEFAULT_PROFILE = Path("coverage.out")
DEFAULT_HTML = Path("coverage.html")

_SCHEMA_FILES: dict[str, str] = {
    "v1": "schema.json",
}


@cache
def get_schema(version: str = "v1") -> dict[str, object]:
    """Load and cache the JSON schema for structured output."""
    try:
        filename = _SCHEMA_FILES[version]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema version: {version!r}. Available versions: {choices}"
        raise ValueError(msg) from exc
    return json.loads(resources.files("covgate.data").joinpath(filename).read_text(encoding="utf-8"))


@dataclass(frozen=True, slots=True)
class GateConfig:
    """Everything one invocation needs; fixed for the whole run."""

    targets: tuple[str, ...] = DEFAULT_TARGETS
    coverpkg: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    pattern_syntax: PatternSyntax = PatternSyntax.SUBSTRING
    minimum: float = DEFAULT_MINIMUM
    profile_path: Path = DEFAULT_PROFILE
    filtered_path: Path | None = None
    html_path: Path | None = DEFAULT_HTML
    go: str = "go"
    reporter: ReporterKind = ReporterKind.GO
    workdir: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        object.__setattr__(self, "minimum", validate_minimum(self.minimum))

    def resolve(self, path: Path) -> Path:
        """Return *path* anchored at the working directory."""
        return path if path.is_absolute() else self.workdir / path

    @property
    def raw_profile(self) -> Path:
        return self.resolve(self.profile_path)

    @property
    def filtered_profile(self) -> Path:
        return self.resolve(self.filtered_path or self.profile_path)

    @property
    def html_report(self) -> Path | None:
        return self.resolve(self.html_path) if self.html_path is not None else None

    def policy(self) -> ExclusionPolicy:
        return ExclusionPolicy(self.exclude, syntax=self.pattern_syntax)


# --------------------------- [tool.covgate] ----------------------------------
def _str_list(key: str, value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(s.strip() for s in value.split(",") if s.strip())
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    msg = f"[tool.covgate] {key} must be a string or a list of strings"
    raise ConfigError(msg)


def _str(key: str, value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        msg = f"[tool.covgate] {key} must be a non-empty string"
        raise ConfigError(msg)
    return value


def _number(key: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"[tool.covgate] {key} must be a number"
        raise ConfigError(msg)
    return float(value)


def _enum(key: str, value: object, kind: type[PatternSyntax] | type[ReporterKind]) -> Any:
    try:
        return kind(_str(key, value))
    except ValueError as exc:
        choices = ", ".join(m.value for m in kind)
        msg = f"[tool.covgate] {key} must be one of: {choices}"
        raise ConfigError(msg) from exc


def _html(key: str, value: object) -> Path | None:
    if value is False:
        return None
    return Path(_str(key, value))


def settings_from_table(table: dict[str, object], *, base: Path) -> dict[str, object]:
    """Translate a ``[tool.covgate]`` table into :class:`GateConfig` keyword arguments."""
    out: dict[str, object] = {}
    exclude: list[str] = []
    for key, value in table.items():
        if key == "minimum":
            out["minimum"] = _number(key, value)
        elif key == "targets":
            out["targets"] = _str_list(key, value)
        elif key == "coverpkg":
            out["coverpkg"] = _str_list(key, value)
        elif key == "exclude":
            exclude.extend(_str_list(key, value))
        elif key == "exclude-from":
            exclude.extend(load_patterns(base / _str(key, value)))
        elif key == "pattern-syntax":
            out["pattern_syntax"] = _enum(key, value, PatternSyntax)
        elif key == "profile":
            out["profile_path"] = Path(_str(key, value))
        elif key == "filtered-profile":
            out["filtered_path"] = Path(_str(key, value))
        elif key == "html":
            out["html_path"] = _html(key, value)
        elif key == "go":
            out["go"] = _str(key, value)
        elif key == "reporter":
            out["reporter"] = _enum(key, value, ReporterKind)
        else:
            msg = f"unknown [tool.covgate] setting: {key!r}"
            raise ConfigError(msg)
    if exclude:
        out["exclude"] = tuple(exclude)
    return out


def read_pyproject_settings(pyproject: Path) -> dict[str, object]:
    """Return settings from *pyproject*; an absent file or table yields none."""
    if not pyproject.exists():
        return {}
    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        msg = f"failed to parse {pyproject}: {e}"
        raise ConfigError(msg) from e

    table = data.get("tool", {}).get("covgate")
    if table is None:
        return {}
    if not isinstance(table, dict):
        msg = f"{pyproject}: [tool.covgate] must be a table"
        raise ConfigError(msg)
    logger.debug("using settings from %s", pyproject)
    return settings_from_table(table, base=pyproject.parent)


_FIELD_NAMES = frozenset(f.name for f in fields(GateConfig))


def load_config(
    pyproject: Path | None = None,
    *,
    workdir: Path | None = None,
    **overrides: object,
) -> GateConfig:
    """Build a :class:`GateConfig` from *pyproject* plus explicit *overrides*.

    Overrides set to ``None`` are ignored so CLI options that were not given
    fall through to the file (and then to the defaults).
    """
    workdir = (workdir or Path.cwd()).resolve()
    pyproject = pyproject or workdir / "pyproject.toml"
    settings = read_pyproject_settings(pyproject)

    unknown = set(overrides) - _FIELD_NAMES
    if unknown:
        msg = f"unknown configuration fields: {', '.join(sorted(unknown))}"
        raise TypeError(msg)
    settings.update({k: v for k, v in overrides.items() if v is not None})
    return GateConfig(workdir=workdir, **settings)  # type: ignore[arg-type]


__all__ = [
    "DEFAULT_HTML",
    "DEFAULT_PROFILE",
    "DEFAULT_TARGETS",
    "LOG_FORMAT",
    "GateConfig",
    "get_schema",
    "load_config",
    "read_pyproject_settings",
    "settings_from_table",
]
