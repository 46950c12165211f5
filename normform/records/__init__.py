"""Record helpers: immutable state updates, editable text and session variants."""

from normform.records.editable import EditableText
from normform.records.progress import (
    LegacyObservations,
    LegacyProgress,
    Observations,
    Progress,
    StructuredObservations,
    StructuredProgress,
    summarize_progress,
    upgrade_observations,
    upgrade_progress,
)
from normform.records.state import apply_change, apply_changes, get_path

__all__ = [
    "EditableText",
    "LegacyObservations",
    "LegacyProgress",
    "Observations",
    "Progress",
    "StructuredObservations",
    "StructuredProgress",
    "summarize_progress",
    "upgrade_observations",
    "upgrade_progress",
    "apply_change",
    "apply_changes",
    "get_path",
]
