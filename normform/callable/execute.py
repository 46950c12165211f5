"""Execute interface for the normform callable protocol.

Provides the in-process execute() function that form and report services
call directly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from normform.callable.result import CallableResult
from normform.config import get_norm_registry_path, get_schema_dir
from normform.diagnostics.models import ProcessingStatus
from normform.pipeline import Pipeline, PipelineConfig

logger = logging.getLogger(__name__)


def execute(params: dict[str, Any]) -> dict[str, Any]:
    """Score assessment records for one instrument.

    Args:
        params: Dictionary containing:
            - instrument: str - The instrument ID (e.g., "cfit")
            - items: dict | list[dict] - One assessment record or a list of
              them, e.g. {"record_id": "...", "subject": {"name": "...",
              "sex": "..."}, "raw_score": 22}
            - config: dict - Optional configuration overrides:
                - instrument_version: str - Specific version (default latest)
                - norm_registry_path: str - Override norm registry path
                - schema_dir: str - Override schema directory

    Returns:
        CallableResult dict with:
            - schema_version: "1.0"
            - items: list[dict] - Scored AssessmentResults
            - stats: dict - input/output/not_assessed/errors counts
            - diagnostics: list[dict] - Diagnostics of unscored records

    Raises:
        ValueError: If required parameters are missing or invalid.
        NormNotFoundError: If the instrument is not in the registry.
    """
    instrument = params.get("instrument")
    if not instrument:
        raise ValueError("'instrument' is required in params")

    items = params.get("items")
    if items is None:
        raise ValueError("'items' is required in params")

    if isinstance(items, dict):
        records = [items]
    elif isinstance(items, list) and all(isinstance(item, dict) for item in items):
        records = items
    else:
        raise ValueError("'items' must be an assessment record dict or a list of them")

    config = params.get("config") or {}

    pipeline_config = PipelineConfig(
        norm_registry_path=Path(config.get("norm_registry_path", get_norm_registry_path())),
        instrument_id=instrument,
        instrument_version=config.get("instrument_version"),
        schema_dir=Path(config.get("schema_dir", get_schema_dir())),
    )
    pipeline = Pipeline(pipeline_config)
    results = pipeline.process_batch(records)

    scored: list[dict[str, Any]] = []
    diagnostics: list[dict[str, Any]] = []
    not_assessed_count = 0
    error_count = 0

    for result in results:
        if result.success:
            scored.append(result.model_dump(mode="json"))
            continue

        diagnostics.append(result.diagnostics.model_dump(mode="json"))
        if result.status == ProcessingStatus.NOT_ASSESSED:
            not_assessed_count += 1
        else:
            error_count += 1

    stats = {
        "input": len(records),
        "output": len(scored),
        "not_assessed": not_assessed_count,
        "errors": error_count,
    }
    logger.debug("execute(%s): %s", instrument, stats)

    return CallableResult(
        schema_version="1.0",
        items=scored,
        stats=stats,
        diagnostics=diagnostics,
    ).to_dict()
