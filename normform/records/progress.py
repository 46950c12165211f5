"""Session progress and observation records.

Stored sessions hold either legacy free text or a structured object for
these fields. Records are upgraded once at load time into tagged variants
so renderers never branch on the stored shape.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

PROGRESS_CELLS = 10
SUMMARY_LENGTH = 50
NOT_RECORDED = "Not recorded"


class LegacyProgress(BaseModel):
    """Progress recorded as free text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["legacy"] = "legacy"
    text: str


class StructuredProgress(BaseModel):
    """Progress recorded as ten trial cells plus notes."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["structured"] = "structured"
    cells: tuple[bool, ...] = (False,) * PROGRESS_CELLS
    notes: str = ""

    @field_validator("cells")
    @classmethod
    def check_cells(cls, cells: tuple[bool, ...]) -> tuple[bool, ...]:
        if len(cells) != PROGRESS_CELLS:
            raise ValueError(f"progress needs {PROGRESS_CELLS} cells, got {len(cells)}")
        return cells

    @property
    def filled(self) -> int:
        return sum(self.cells)


Progress = Annotated[LegacyProgress | StructuredProgress, Field(discriminator="kind")]


class LegacyObservations(BaseModel):
    """Observations recorded as free text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["legacy"] = "legacy"
    text: str


class StructuredObservations(BaseModel):
    """Observations recorded as a fixed table."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["structured"] = "structured"
    appearance: str = ""
    speech: str = ""
    eye_contact: str = ""
    motor_activity: str = ""
    affect: str = ""

    def rows(self) -> list[tuple[str, str]]:
        """(label, value) rows for display, with blanks shown as not recorded."""
        return [
            ("APPEARANCE", self.appearance or NOT_RECORDED),
            ("SPEECH", self.speech or NOT_RECORDED),
            ("EYE CONTACT", self.eye_contact or NOT_RECORDED),
            ("MOTOR ACTIVITY", self.motor_activity or NOT_RECORDED),
            ("AFFECT", self.affect or NOT_RECORDED),
        ]


Observations = Annotated[
    LegacyObservations | StructuredObservations, Field(discriminator="kind")
]

_progress_adapter: TypeAdapter = TypeAdapter(Progress)
_observations_adapter: TypeAdapter = TypeAdapter(Observations)

_OBSERVATION_FIELDS = ("appearance", "speech", "eye_contact", "motor_activity", "affect")


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def upgrade_progress(raw: Any) -> LegacyProgress | StructuredProgress | None:
    """Normalize a stored progress value.

    Accepts None, legacy strings, objects with cell1..cell10 keys and
    notes, or already-tagged objects. Returns None when nothing was recorded.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        return LegacyProgress(text=raw) if raw.strip() else None
    if not isinstance(raw, dict):
        raise ValueError(f"Unsupported progress value: {type(raw).__name__}")
    if "kind" in raw:
        return _progress_adapter.validate_python(raw)

    cells = tuple(bool(raw.get(f"cell{i}")) for i in range(1, PROGRESS_CELLS + 1))
    return StructuredProgress(cells=cells, notes=_text(raw.get("notes")))


def upgrade_observations(raw: Any) -> LegacyObservations | StructuredObservations | None:
    """Normalize a stored observations value."""
    if raw is None:
        return None
    if isinstance(raw, str):
        return LegacyObservations(text=raw) if raw.strip() else None
    if not isinstance(raw, dict):
        raise ValueError(f"Unsupported observations value: {type(raw).__name__}")
    if "kind" in raw:
        return _observations_adapter.validate_python(raw)

    return StructuredObservations(**{key: _text(raw.get(key)) for key in _OBSERVATION_FIELDS})


def _truncate(text: str) -> str:
    return f"{text[:SUMMARY_LENGTH]}..." if len(text) > SUMMARY_LENGTH else text


def summarize_progress(progress: LegacyProgress | StructuredProgress | None) -> str:
    """One-line summary for session lists."""
    if progress is None:
        return "No progress recorded"
    if isinstance(progress, LegacyProgress):
        return _truncate(progress.text)
    if progress.notes:
        return _truncate(progress.notes)
    return f"{progress.filled}/{PROGRESS_CELLS} cells filled"
