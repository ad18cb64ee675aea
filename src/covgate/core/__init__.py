from covgate.core.aggregate import AggregateResult, Aggregator
from covgate.core.config import LOG_FORMAT, GateConfig, get_schema, load_config
from covgate.core.gate import DEFAULT_MINIMUM, RunOutcome, decide, format_percent, format_threshold
from covgate.core.path_filter import ExclusionPolicy, load_patterns
from covgate.core.pipeline import PipelineResult, make_reporter, make_runner, run_pipeline
from covgate.core.profile import (
    CoverageProfile,
    ProfileBlock,
    format_profile,
    parse_profile,
    read_profile,
    write_profile,
)
from covgate.core.reporter import (
    CoverageReporter,
    FunctionReport,
    GoCoverReporter,
    ProfileReporter,
    UnitCoverage,
    parse_func_output,
    summarize_profile,
)
from covgate.core.runner import GoTestRunner, SuiteRunner
from covgate.core.types import CoverMode, Format, OutcomeStatus, PatternSyntax, ReporterKind
from covgate.errors import (
    ConfigError,
    CovgateError,
    EmptyProfileError,
    ExecutionCancelledError,
    ExecutionError,
    ProfileFormatError,
    ProfileNotFoundError,
    ReportArtifactError,
    ReportingError,
)

__all__ = [
    "DEFAULT_MINIMUM",
    "LOG_FORMAT",
    "AggregateResult",
    "Aggregator",
    "ConfigError",
    "CoverMode",
    "CoverageProfile",
    "CoverageReporter",
    "CovgateError",
    "EmptyProfileError",
    "ExclusionPolicy",
    "ExecutionCancelledError",
    "ExecutionError",
    "Format",
    "FunctionReport",
    "GateConfig",
    "GoCoverReporter",
    "GoTestRunner",
    "OutcomeStatus",
    "PatternSyntax",
    "PipelineResult",
    "ProfileBlock",
    "ProfileFormatError",
    "ProfileNotFoundError",
    "ProfileReporter",
    "ReportArtifactError",
    "ReporterKind",
    "ReportingError",
    "RunOutcome",
    "SuiteRunner",
    "UnitCoverage",
    "decide",
    "format_percent",
    "format_profile",
    "format_threshold",
    "get_schema",
    "load_config",
    "load_patterns",
    "make_reporter",
    "make_runner",
    "parse_func_output",
    "parse_profile",
    "read_profile",
    "run_pipeline",
    "summarize_profile",
    "write_profile",
]
