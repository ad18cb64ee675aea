"""The coverage verification pipeline.

Run the instrumented tests, drop excluded records, aggregate, and judge::

    runner -> raw profile -> ExclusionPolicy -> filtered profile
           -> Aggregator -> percent -> decide() -> RunOutcome

Every stage consumes the previous stage's output and nothing else. Errors
propagate unchanged; nothing is retried and no fallback percentage is
ever substituted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate._meta import logger
from covgate.core.aggregate import AggregateResult, Aggregator
from covgate.core.gate import RunOutcome, decide
from covgate.core.profile import read_profile, write_profile
from covgate.core.reporter import GoCoverReporter, ProfileReporter
from covgate.core.runner import GoTestRunner
from covgate.core.types import ReporterKind

if TYPE_CHECKING:
    from pathlib import Path

    from covgate.core.config import GateConfig
    from covgate.core.reporter import CoverageReporter
    from covgate.core.runner import SuiteRunner


@dataclass(frozen=True, slots=True)
class PipelineResult:
    profile_path: Path
    records_total: int
    records_kept: int
    aggregate: AggregateResult
    outcome: RunOutcome

    @property
    def records_excluded(self) -> int:
        return self.records_total - self.records_kept


def make_runner(config: GateConfig) -> GoTestRunner:
    return GoTestRunner(go=config.go, coverpkg=config.coverpkg, workdir=config.workdir)


def make_reporter(config: GateConfig) -> CoverageReporter:
    if config.reporter is ReporterKind.PROFILE:
        return ProfileReporter(minimum=config.minimum)
    return GoCoverReporter(go=config.go, workdir=config.workdir)


def _discard_artifact(path: Path | None) -> None:
    if path is not None and path.exists():
        logger.debug("removing previous report artifact %s", path)
        path.unlink()


def run_pipeline(
    config: GateConfig,
    *,
    runner: SuiteRunner | None = None,
    reporter: CoverageReporter | None = None,
    run_tests: bool = True,
) -> PipelineResult:
    """Run the whole pipeline for *config* and return its outcome.

    With ``run_tests=False`` the profile already at ``config.profile_path`` is
    judged instead of running the test suite.
    """
    html_path = config.html_report
    _discard_artifact(html_path)

    raw_path = config.raw_profile
    if run_tests:
        runner = runner or make_runner(config)
        raw_path = runner.run(config.targets, raw_path)

    raw = read_profile(raw_path)
    filtered = config.policy().filter(raw)
    filtered_path = write_profile(filtered, config.filtered_profile)

    aggregator = Aggregator(reporter or make_reporter(config))
    aggregate = aggregator.aggregate(filtered, filtered_path, html_path=html_path)

    outcome = decide(aggregate.percent, config.minimum)
    logger.debug("gate decision %s (%r vs %r)", outcome.status, outcome.percent, outcome.minimum)
    return PipelineResult(
        profile_path=filtered_path,
        records_total=len(raw),
        records_kept=len(filtered),
        aggregate=aggregate,
        outcome=outcome,
    )


__all__ = ["PipelineResult", "make_reporter", "make_runner", "run_pipeline"]
