"""Run orchestration: invoke the instrumented test suite to obtain a raw profile."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from covgate._meta import logger
from covgate.errors import ConfigError, ExecutionCancelledError, ExecutionError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence


class SuiteRunner(Protocol):
    """Anything able to run the test suite and leave a cover profile behind."""

    def run(self, targets: Sequence[str], profile_path: Path) -> Path: ...


def _discard_stale(profile_path: Path) -> None:
    try:
        profile_path.unlink()
    except FileNotFoundError:
        return
    logger.debug("removed stale profile %s", profile_path)


@dataclass(frozen=True, slots=True)
class GoTestRunner:
    """Run ``go test`` with ``-coverprofile``.

    Test output streams straight to the console unless *capture* is set, in
    which case it is only logged at DEBUG level (or attached to the error).
    """

    go: str = "go"
    coverpkg: tuple[str, ...] = ()
    workdir: Path | None = None
    capture: bool = False
    extra_args: tuple[str, ...] = field(default_factory=tuple)

    def command(self, targets: Sequence[str], profile_path: Path) -> list[str]:
        cmd = [self.go, "test", f"-coverprofile={profile_path}"]
        if self.coverpkg:
            cmd.append(f"-coverpkg={','.join(self.coverpkg)}")
        cmd.extend(self.extra_args)
        cmd.extend(targets)
        return cmd

    def run(self, targets: Sequence[str], profile_path: Path) -> Path:
        if not targets:
            msg = "no test targets configured"
            raise ConfigError(msg)

        profile_path = profile_path if profile_path.is_absolute() else (self.workdir or Path.cwd()) / profile_path
        _discard_stale(profile_path)
        cmd = self.command(targets, profile_path)
        logger.info("running tests: %s", " ".join(cmd))

        try:
            proc = subprocess.run(  # noqa: S603 - command is built from configuration, not shell input
                cmd,
                cwd=self.workdir,
                capture_output=self.capture,
                text=True,
                check=False,
            )
        except KeyboardInterrupt as exc:
            _discard_stale(profile_path)
            msg = "test run interrupted"
            raise ExecutionCancelledError(msg) from exc
        except OSError as exc:
            msg = f"could not start test runner {self.go!r}: {exc}"
            raise ExecutionError(msg) from exc

        if self.capture and proc.stdout:
            logger.debug("test output:\n%s", proc.stdout)

        if proc.returncode != 0:
            _discard_stale(profile_path)
            msg = f"tests failed (exit status {proc.returncode})"
            if self.capture and proc.stderr:
                msg = f"{msg}:\n{proc.stderr.strip()}"
            raise ExecutionError(msg, returncode=proc.returncode)

        if not profile_path.exists():
            msg = f"test runner exited cleanly but wrote no profile at {profile_path}"
            raise ExecutionError(msg)
        return profile_path


__all__ = ["GoTestRunner", "SuiteRunner"]
