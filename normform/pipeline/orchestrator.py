"""Pipeline for assessment record processing.

Loads the instrument from the norm registry and routes each record to the
processor for the instrument's kind.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from normform.diagnostics.models import (
    DiagnosticError,
    ProcessingStatus,
    RecordDiagnostic,
    stage_for,
    status_for,
)
from normform.errors import InvalidInput, NormformError
from normform.interpretation.context import InterpretationContext
from normform.pipeline.processors import create_processor
from normform.registry.norms import NormRegistry

logger = logging.getLogger(__name__)


class PipelineConfig(BaseModel):
    """Configuration for the processing pipeline."""

    norm_registry_path: Path
    instrument_id: str
    instrument_version: str | None = None
    schema_dir: Path | None = None


class AssessmentResult(BaseModel):
    """Result of processing one assessment record."""

    record_id: str
    instrument_id: str
    instrument_version: str
    status: ProcessingStatus
    result: dict[str, Any] | None = None
    diagnostics: RecordDiagnostic

    @property
    def success(self) -> bool:
        return self.status == ProcessingStatus.SUCCESS


def record_id_for(record: dict[str, Any]) -> str:
    """Stable ID for a record: its own record_id, or a hash of its content."""
    record_id = record.get("record_id")
    if record_id:
        return str(record_id)
    digest = hashlib.sha256(
        json.dumps(record, sort_keys=True, ensure_ascii=False, default=str).encode("utf-8")
    ).hexdigest()
    return f"rec_{digest[:16]}"


def subject_context(record: dict[str, Any]) -> InterpretationContext:
    """Interpretation context from a record's subject block.

    Raises:
        InvalidInput: If the subject block is not an object, or its name or
            sex is not text.
    """
    subject = record.get("subject")
    if subject is None:
        subject = {}
    if not isinstance(subject, dict):
        raise InvalidInput(
            f"Subject must be an object with name and sex, got {type(subject).__name__}",
            field="subject",
        )
    return InterpretationContext.from_subject(subject.get("name"), subject.get("sex"))


class Pipeline:
    """Loads an instrument and processes assessment records against it."""

    def __init__(self, config: PipelineConfig, registry: NormRegistry | None = None) -> None:
        """Initialize the pipeline.

        Args:
            config: Pipeline configuration specifying registry and instrument.
            registry: Optional pre-built registry (shares its cache).
        """
        self.config = config
        self.registry = registry or NormRegistry(
            config.norm_registry_path,
            schema_dir=config.schema_dir,
        )
        self.instrument = self.registry.get_instrument(
            config.instrument_id,
            config.instrument_version,
        )
        self.processor = create_processor(self.instrument, self.registry)
        logger.debug(
            "Pipeline ready for %s@%s (%s)",
            self.instrument.instrument_id,
            self.instrument.version,
            self.instrument.kind,
        )

    def process(self, record: dict[str, Any]) -> AssessmentResult:
        """Process one assessment record.

        Never raises for bad input: NoInput, InvalidInput and
        MissingInterpretation are reported in the result's diagnostics.
        """
        record_id = record_id_for(record)

        try:
            context = subject_context(record)
            payload = self.processor.process(record, context)
        except NormformError as e:
            status = status_for(e)
            if status == ProcessingStatus.FAILED:
                logger.warning("Record %s failed: %s", record_id, e.message)
            return self._result(
                record_id,
                status,
                None,
                [DiagnosticError.from_exception(stage_for(e), e)],
            )

        return self._result(
            record_id,
            ProcessingStatus.SUCCESS,
            payload.model_dump(mode="json"),
            [],
        )

    def process_batch(self, records: list[dict[str, Any]]) -> list[AssessmentResult]:
        """Process a batch of assessment records."""
        return [self.process(r) for r in records]

    def _result(
        self,
        record_id: str,
        status: ProcessingStatus,
        payload: dict[str, Any] | None,
        errors: list[DiagnosticError],
    ) -> AssessmentResult:
        return AssessmentResult(
            record_id=record_id,
            instrument_id=self.instrument.instrument_id,
            instrument_version=self.instrument.version,
            status=status,
            result=payload,
            diagnostics=RecordDiagnostic(
                record_id=record_id,
                instrument_id=self.instrument.instrument_id,
                instrument_version=self.instrument.version,
                status=status,
                errors=errors,
            ),
        )
