"""Scoring engine combining normalization, classification and interpretation.

The engine is generic - it reads all conversion and banding rules from the
tables it is given. No per-instrument code is allowed.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from normform.interpretation.context import InterpretationContext
from normform.interpretation.generator import generate
from normform.registry.models import Band, BandTable, ConversionTable, ScoreDomain
from normform.scoring.classifier import classify
from normform.scoring.normalizer import normalize


class SubjectResult(BaseModel):
    """Normalized score, classification and proposed interpretation.

    Always rebuilt in full from its inputs, never partially updated.
    """

    model_config = ConfigDict(frozen=True)

    raw_score: int
    normalized_score: int
    percentile: int
    classification: str
    band_key: str
    interpretation_text: str
    clamped: Literal["floor", "ceiling"] | None = None


class ScoringEngine:
    """Computes a SubjectResult from a raw score and fixed tables.

    Steps:
    - Normalize the raw score through the conversion table (with clamping)
    - Classify the standard score on the band table
    - Generate the band's interpretation for the subject

    Holds no state between calls; it is safe to share across threads.
    """

    def score(
        self,
        raw_score: Any,
        table: ConversionTable,
        bands: BandTable | list[Band],
        context: InterpretationContext | None = None,
        domain: ScoreDomain | None = None,
    ) -> SubjectResult:
        """Score one raw value.

        Args:
            raw_score: The raw value as entered.
            table: The conversion table.
            bands: Bands carrying interpretation templates.
            context: Subject name and pronouns.
            domain: Optional domain override.

        Returns:
            SubjectResult for the raw score.

        Raises:
            NoInput: If no raw score was entered.
            InvalidInput: If the raw score is not a whole number.
            MissingInterpretation: If the selected band has no template.
        """
        normalized = normalize(raw_score, table, domain)
        band = classify(normalized.standard_score, bands)
        text = generate(band, context)

        return SubjectResult(
            raw_score=normalized.raw_score,
            normalized_score=normalized.standard_score,
            percentile=normalized.percentile,
            classification=band.label,
            band_key=band.key,
            interpretation_text=text,
            clamped=normalized.clamped,
        )
