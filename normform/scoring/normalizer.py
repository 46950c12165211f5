"""Raw score normalization through conversion tables.

The normalizer never trusts upstream input masking: every raw value is
re-parsed and re-clamped here.
"""

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from normform.errors import InvalidInput, NoInput
from normform.registry.models import ConversionTable, ScoreDomain


class NormalizedScore(BaseModel):
    """Percentile and standard score for one raw score."""

    model_config = ConfigDict(frozen=True)

    raw_score: int
    percentile: int
    standard_score: int
    clamped: Literal["floor", "ceiling"] | None = None


def parse_raw_score(value: Any, field: str | None = None) -> int:
    """Parse a raw score as entered on a form.

    Raises:
        NoInput: If the value is None or an empty/blank string.
        InvalidInput: If the value is not a whole number.
    """
    if value is None:
        raise NoInput("No raw score entered", field=field)

    if isinstance(value, bool):
        raise InvalidInput(f"Raw score must be a number, got {value!r}", field=field)

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise InvalidInput(f"Raw score must be a whole number, got {value!r}", field=field)
        return int(value)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise NoInput("No raw score entered", field=field)
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise InvalidInput(f"Raw score must be a number, got {value!r}", field=field) from None
        if not math.isfinite(number) or not number.is_integer():
            raise InvalidInput(f"Raw score must be a whole number, got {value!r}", field=field)
        return int(number)

    raise InvalidInput(f"Raw score must be a number, got {type(value).__name__}", field=field)


def normalize(
    raw_score: Any,
    table: ConversionTable,
    domain: ScoreDomain | None = None,
) -> NormalizedScore:
    """Convert a raw score to (percentile, standard score).

    Raw scores below the domain take the table's floor policy and scores
    above it take the ceiling policy. Scores inside the domain return the
    stored entry verbatim, with no interpolation.

    Args:
        raw_score: The raw value as entered.
        table: The conversion table.
        domain: Optional domain override, defaults to the table's domain.

    Raises:
        NoInput: If no raw score was entered.
        InvalidInput: If the raw score is not a whole number, or the
            override domain reaches outside the table.
    """
    score = parse_raw_score(raw_score, field=table.table_id)
    domain = domain or table.domain

    if score < domain.min:
        row = table.floor_row if domain.min == table.domain.min else _entry(table, domain.min)
        clamped: Literal["floor", "ceiling"] | None = "floor"
    elif score > domain.max:
        row = table.ceiling_row if domain.max == table.domain.max else _entry(table, domain.max)
        clamped = "ceiling"
    else:
        row = _entry(table, score)
        clamped = None

    return NormalizedScore(
        raw_score=score,
        percentile=row.percentile,
        standard_score=row.standard_score,
        clamped=clamped,
    )


def _entry(table: ConversionTable, score: int):
    row = table.entries.get(score)
    if row is None:
        raise InvalidInput(
            f"Raw score {score} is not covered by conversion table {table.table_id}",
            field=table.table_id,
        )
    return row
