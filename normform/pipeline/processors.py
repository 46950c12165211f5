"""Per-kind processors for assessment records.

Each processor turns one record into a result payload and raises a
NormformError when the record cannot be scored.
"""

from typing import Any

from pydantic import BaseModel

from normform.errors import InvalidInput, NoInput
from normform.interpretation.categorical import ScaleInterpretation, interpret_all
from normform.interpretation.composite import (
    composite_rating,
    composite_summary,
    require_subscores,
    score_composite,
)
from normform.interpretation.context import InterpretationContext
from normform.registry.models import (
    CategoricalInstrument,
    CompositeInstrument,
    ConversionInstrument,
)
from normform.registry.norms import NormRegistry
from normform.scoring.classifier import bind_templates
from normform.scoring.engine import ScoringEngine


class CategoricalResult(BaseModel):
    """Interpretations of every scale of a categorical instrument."""

    instrument_id: str
    scales: list[ScaleInterpretation]
    composite_rating: str | None = None
    summary: str | None = None


class ConversionProcessor:
    """Scores raw values through a conversion table and IQ-style bands."""

    def __init__(self, spec: ConversionInstrument, registry: NormRegistry) -> None:
        self.spec = spec
        self.table = registry.resolve_table(spec.conversion_table)
        self.bands = bind_templates(registry.resolve_bands(spec.band_table), spec.templates)
        self.engine = ScoringEngine()

    def process(self, record: dict[str, Any], context: InterpretationContext) -> BaseModel:
        if "raw_score" not in record:
            raise NoInput(f"No {self.spec.name} raw score entered", field="raw_score")
        return self.engine.score(record["raw_score"], self.table, self.bands, context)


class CategoricalProcessor:
    """Looks up authored sentences for categorical scale values."""

    def __init__(self, spec: CategoricalInstrument, registry: NormRegistry) -> None:
        self.spec = spec

    def process(self, record: dict[str, Any], context: InterpretationContext) -> BaseModel:
        values = record.get("values")
        if not values:
            raise NoInput(f"No {self.spec.name} ratings entered", field="values")
        if not isinstance(values, dict):
            raise InvalidInput(
                f"{self.spec.name} ratings must be an object keyed by scale", field="values"
            )

        scales = interpret_all(values, self.spec, context)

        rating = None
        summary = None
        if self.spec.rating_groups and self.spec.summaries:
            rating = composite_rating(values, self.spec)
            summary = composite_summary(values, self.spec, context)

        return CategoricalResult(
            instrument_id=self.spec.instrument_id,
            scales=scales,
            composite_rating=rating,
            summary=summary,
        )


class CompositeProcessor:
    """Sums bounded sub-scores and classifies the total."""

    def __init__(self, spec: CompositeInstrument, registry: NormRegistry) -> None:
        self.spec = spec
        self.bands = registry.resolve_bands(spec.band_table)

    def process(self, record: dict[str, Any], context: InterpretationContext) -> BaseModel:
        subscores = require_subscores(record.get("subscores"), self.spec)
        return score_composite(subscores, self.spec, self.bands, context)


PROCESSORS = {
    "conversion": ConversionProcessor,
    "categorical": CategoricalProcessor,
    "composite": CompositeProcessor,
}


def create_processor(spec, registry: NormRegistry):
    """Create the processor for an instrument's kind."""
    processor_class = PROCESSORS.get(spec.kind)
    if processor_class is None:
        raise ValueError(f"No processor registered for instrument kind: {spec.kind}")
    return processor_class(spec, registry)
