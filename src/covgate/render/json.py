from __future__ import annotations

import json
from typing import TYPE_CHECKING

from jsonschema import validate

from covgate._meta import __version__
from covgate.core.config import get_schema

if TYPE_CHECKING:
    from covgate.core.pipeline import PipelineResult


def _prune_none(obj: dict[str, object]) -> dict[str, object]:
    return {k: v for k, v in obj.items() if v is not None}


def format_json(result: PipelineResult, *, schema_version: str = "v1") -> str:
    """Render a pipeline result as validated JSON according to the selected schema version."""
    agg = result.aggregate
    payload: dict[str, object] = _prune_none({
        "schema": str(get_schema(schema_version)["$id"]),
        "schema_version": 1,
        "tool": {"name": "covgate", "version": __version__},
        "status": result.outcome.status.value,
        "message": result.outcome.message,
        "coverage": result.outcome.percent,
        "minimum": result.outcome.minimum,
        "profile": str(result.profile_path),
        "html_report": str(agg.html_path) if agg.html_path is not None else None,
        "artifact_error": agg.artifact_error,
        "records": {
            "total": result.records_total,
            "kept": result.records_kept,
            "excluded": result.records_excluded,
        },
        "units": [
            _prune_none({"location": u.location, "name": u.name or None, "percent": u.percent}) for u in agg.units
        ],
    })

    validate(payload, get_schema(schema_version))
    return json.dumps(payload, indent=2, sort_keys=True)


__all__ = ["format_json"]
