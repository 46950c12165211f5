"""Data models for processing diagnostics.

Tracks the status and errors of each assessment record through the
pipeline.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from normform.errors import NormformError

Stage = Literal["input", "normalization", "interpretation"]


class ProcessingStatus(str, Enum):
    """Status of record processing."""

    SUCCESS = "success"  # Result produced
    NOT_ASSESSED = "not_assessed"  # No input entered yet
    FAILED = "failed"  # Invalid input or missing authored content


class DiagnosticError(BaseModel):
    """An error that occurred during processing."""

    stage: Stage
    code: str  # Error code like "INVALID_INPUT"
    message: str
    field: str | None = None
    details: dict | None = None

    @classmethod
    def from_exception(cls, stage: Stage, error: NormformError) -> "DiagnosticError":
        details = None
        scale_key = getattr(error, "scale_key", None)
        value = getattr(error, "value", None)
        if scale_key is not None or value is not None:
            details = {"scale_key": scale_key, "value": value}
        return cls(
            stage=stage,
            code=error.code,
            message=error.message,
            field=error.field,
            details=details,
        )


class RecordDiagnostic(BaseModel):
    """Diagnostics for one assessment record."""

    record_id: str
    instrument_id: str
    instrument_version: str
    status: ProcessingStatus
    errors: list[DiagnosticError] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0


def status_for(error: NormformError) -> ProcessingStatus:
    """Map an error to the record status it implies."""
    if error.code == "NO_INPUT":
        return ProcessingStatus.NOT_ASSESSED
    return ProcessingStatus.FAILED


def stage_for(error: NormformError) -> Stage:
    """Map an error to the processing stage it belongs to."""
    if error.code in ("NO_INPUT", "INVALID_INPUT"):
        return "input"
    if error.code == "MISSING_INTERPRETATION":
        return "interpretation"
    return "normalization"
