"""Processing diagnostics for assessment records."""

from normform.diagnostics.models import (
    DiagnosticError,
    ProcessingStatus,
    RecordDiagnostic,
    stage_for,
    status_for,
)

__all__ = [
    "DiagnosticError",
    "ProcessingStatus",
    "RecordDiagnostic",
    "stage_for",
    "status_for",
]
