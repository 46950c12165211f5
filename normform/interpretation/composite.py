"""Composite ratings built from several sub-scale results.

Covers the workplace-skills composite rating and the MMSE total.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from normform.errors import InvalidInput, MissingInterpretation, NoInput
from normform.interpretation.context import InterpretationContext
from normform.interpretation.generator import generate, render_template
from normform.registry.models import BandTable, CategoricalInstrument, CompositeInstrument
from normform.scoring.classifier import bind_templates, classify
from normform.scoring.normalizer import parse_raw_score

ABOVE_AVERAGE = "above_average"
AVERAGE = "average"
BELOW_AVERAGE = "below_average"


def composite_rating(ratings: dict[str, Any], spec: CategoricalInstrument) -> str:
    """Collapse per-skill ratings into one composite rating.

    Values are grouped through the spec's rating_groups. Above average
    wins when it outnumbers below average and is at least the average
    count; below average wins symmetrically; anything else is average.
    Unrated skills are ignored.
    """
    if not spec.rating_groups:
        raise MissingInterpretation(
            f"{spec.instrument_id} has no rating groups for a composite rating"
        )

    counts = {ABOVE_AVERAGE: 0, AVERAGE: 0, BELOW_AVERAGE: 0}
    for scale in spec.scales:
        value = ratings.get(scale.scale_key)
        if value is None or value == "":
            continue
        group = spec.rating_groups.get(value)
        if group is None:
            raise InvalidInput(
                f"Value {value!r} for {scale.scale_key} is not one of: {', '.join(spec.values)}",
                field=scale.scale_key,
            )
        counts[group] += 1

    above, average, below = counts[ABOVE_AVERAGE], counts[AVERAGE], counts[BELOW_AVERAGE]
    if above > below and above >= average:
        return ABOVE_AVERAGE
    if below > above and below >= average:
        return BELOW_AVERAGE
    return AVERAGE


def composite_summary(
    ratings: dict[str, Any],
    spec: CategoricalInstrument,
    context: InterpretationContext | None = None,
) -> str:
    """Summary sentence for the composite rating, personalized for the subject."""
    rating = composite_rating(ratings, spec)
    template = spec.summaries.get(rating)
    if template is None or not template.strip():
        raise MissingInterpretation(
            f"No summary authored for {spec.instrument_id} composite rating {rating!r}",
            value=rating,
        )
    return render_template(template, context or InterpretationContext())


class SubscaleResult(BaseModel):
    """One scored subscale of a composite instrument."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    score: int
    max: int
    adequate: bool
    interpretation: str


class CompositeResult(BaseModel):
    """Total, classification and per-subscale results of a composite instrument."""

    model_config = ConfigDict(frozen=True)

    instrument_id: str
    subscales: list[SubscaleResult]
    total_score: int
    total_max: int
    classification: str
    band_key: str
    interpretation_text: str


def score_composite(
    subscores: dict[str, Any],
    spec: CompositeInstrument,
    bands: BandTable,
    context: InterpretationContext | None = None,
) -> CompositeResult:
    """Score a composite instrument such as the MMSE.

    Every subscale must be present and inside its [min, max] range.

    Raises:
        NoInput: If any subscale has no score.
        InvalidInput: If a subscale score is not a whole number or is out
            of range.
        MissingInterpretation: If the total's band has no template.
    """
    results: list[SubscaleResult] = []
    for subscale in spec.subscales:
        score = parse_raw_score(subscores.get(subscale.key), field=subscale.key)
        if score < subscale.min or score > subscale.max:
            raise InvalidInput(
                f"{subscale.name} score {score} is outside {subscale.min}-{subscale.max}",
                field=subscale.key,
            )
        adequate = score >= subscale.threshold
        results.append(
            SubscaleResult(
                key=subscale.key,
                name=subscale.name,
                score=score,
                max=subscale.max,
                adequate=adequate,
                interpretation=subscale.adequate if adequate else subscale.impaired,
            )
        )

    total = sum(result.score for result in results)
    band = classify(total, bind_templates(bands, spec.templates))

    return CompositeResult(
        instrument_id=spec.instrument_id,
        subscales=results,
        total_score=total,
        total_max=spec.total_max,
        classification=band.label,
        band_key=band.key,
        interpretation_text=generate(band, context),
    )


def require_subscores(subscores: Any, spec: CompositeInstrument) -> dict[str, Any]:
    """Check that a record carries a subscore mapping at all."""
    if subscores is None or subscores == {}:
        raise NoInput(f"No {spec.name} subscores entered", field=spec.instrument_id)
    if not isinstance(subscores, dict):
        raise InvalidInput(
            f"{spec.name} subscores must be an object keyed by subscale",
            field=spec.instrument_id,
        )
    return subscores
