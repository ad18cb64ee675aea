from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate._meta import logger
from covgate.core.reporter import summarize_profile
from covgate.core.types import FULL_COVERAGE
from covgate.errors import EmptyProfileError, ReportArtifactError, ReportingError

if TYPE_CHECKING:
    from pathlib import Path

    from covgate.core.profile import CoverageProfile
    from covgate.core.reporter import CoverageReporter, UnitCoverage

# go tool cover prints its total to one decimal.
_REPORTED_TOTAL_TOLERANCE = 0.05 + 1e-9


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """Aggregate coverage of a filtered profile.

    ``html_path`` is set only when the report artifact was written;
    ``artifact_error`` carries the reason when rendering it failed.
    """

    percent: float
    units: tuple[UnitCoverage, ...] = ()
    html_path: Path | None = None
    artifact_error: str | None = None


@dataclass(frozen=True, slots=True)
class Aggregator:
    reporter: CoverageReporter

    def aggregate(
        self,
        profile: CoverageProfile,
        profile_path: Path,
        *,
        html_path: Path | None = None,
    ) -> AggregateResult:
        """Compute the aggregate percentage for *profile* (already written to *profile_path*).

        The percentage is computed from the profile's statement counts, never
        from the reporter's printed total, which may be rounded. The reporter's
        total is only checked against it.
        """
        if profile.is_empty():
            msg = "no coverage records left after exclusions; aggregate coverage is undefined"
            raise EmptyProfileError(msg)

        percent = summarize_profile(profile).total
        report = self.reporter.function_report(profile_path)
        if not 0.0 <= report.total <= FULL_COVERAGE:
            msg = f"coverage reporter returned an out-of-range total: {report.total}"
            raise ReportingError(msg)
        if abs(report.total - percent) > _REPORTED_TOTAL_TOLERANCE:
            msg = f"coverage reporter total {report.total}% disagrees with the profile's {percent}%"
            raise ReportingError(msg)
        logger.debug("aggregate coverage %.4f%% over %d units", percent, len(report.rows))

        if html_path is None:
            return AggregateResult(percent=percent, units=report.rows)

        try:
            written = self.reporter.render_html(profile_path, html_path)
        except ReportArtifactError as exc:
            logger.warning("coverage report artifact not written: %s", exc)
            return AggregateResult(percent=percent, units=report.rows, artifact_error=str(exc))
        logger.info("wrote coverage report %s", written)
        return AggregateResult(percent=percent, units=report.rows, html_path=written)


__all__ = ["AggregateResult", "Aggregator"]
