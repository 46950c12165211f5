"""Interpreter for categorical (non-numeric) scales.

Each (scale_key, value) pair maps to one authored sentence. A gap in the
authored content is an explicit failure, never an empty string.
"""

from typing import Any

from pydantic import BaseModel

from normform.errors import InvalidInput, MissingInterpretation, NoInput
from normform.interpretation.context import InterpretationContext
from normform.interpretation.generator import render_template
from normform.registry.models import CategoricalInstrument
from normform.scoring.normalizer import parse_raw_score


class ScaleInterpretation(BaseModel):
    """Interpretation of one categorical sub-scale."""

    scale_key: str
    name: str
    value: str
    text: str
    score: int | None = None


def interpret(
    scale_key: str,
    value: Any,
    spec: CategoricalInstrument,
    context: InterpretationContext | None = None,
) -> str:
    """Look up the sentence for a scale value.

    Args:
        scale_key: The sub-scale key (e.g., 'depression').
        value: The selected value (e.g., 'high').
        spec: The categorical instrument spec.
        context: Subject name and pronouns. Defaults to "the client".

    Raises:
        NoInput: If no value was selected.
        InvalidInput: If the value is not one the instrument accepts.
        MissingInterpretation: If the scale is unknown or the sentence is
            missing or blank.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise NoInput(f"No value selected for {scale_key}", field=scale_key)

    if not isinstance(value, str) or value not in spec.values:
        raise InvalidInput(
            f"Value {value!r} for {scale_key} is not one of: {', '.join(spec.values)}",
            field=scale_key,
        )

    scale = spec.get_scale(scale_key)
    if scale is None:
        raise MissingInterpretation(
            f"No scale {scale_key!r} in {spec.instrument_id}",
            field=scale_key,
            scale_key=scale_key,
            value=value,
        )

    sentence = scale.interpretations.get(value)
    if sentence is None or not sentence.strip():
        raise MissingInterpretation(
            f"No interpretation authored for {spec.instrument_id}.{scale_key}={value!r}",
            field=scale_key,
            scale_key=scale_key,
            value=value,
        )

    try:
        return render_template(sentence, context or InterpretationContext())
    except MissingInterpretation as e:
        raise MissingInterpretation(
            f"{spec.instrument_id}.{scale_key}={value!r}: {e.message}",
            field=scale_key,
            scale_key=scale_key,
            value=value,
        ) from e


def score_level(scale_key: str, score: Any, spec: CategoricalInstrument) -> tuple[int, str]:
    """Map a numeric scale score to its enumerated value.

    Returns:
        (parsed score, value)

    Raises:
        NoInput: If no score was entered.
        InvalidInput: If the score is not a whole number inside the
            instrument's score domain, or the instrument is not score-rated.
    """
    if spec.score_domain is None:
        raise InvalidInput(
            f"{spec.instrument_id} is rated by value, not by score", field=scale_key
        )

    parsed = parse_raw_score(score, field=scale_key)
    domain = spec.score_domain
    if parsed < domain.min or parsed > domain.max:
        raise InvalidInput(
            f"{scale_key} score {parsed} is outside {domain.min}-{domain.max}",
            field=scale_key,
        )
    return parsed, spec.level_for(parsed)


def interpret_score(
    scale_key: str,
    score: Any,
    spec: CategoricalInstrument,
    context: InterpretationContext | None = None,
) -> str:
    """Look up the sentence for a numeric score on a score-rated scale."""
    _, value = score_level(scale_key, score, spec)
    return interpret(scale_key, value, spec, context)


def interpret_all(
    values: dict[str, Any],
    spec: CategoricalInstrument,
    context: InterpretationContext | None = None,
) -> list[ScaleInterpretation]:
    """Interpret every rated scale, in the order the spec lists them.

    Scales present in `values` but unknown to the spec raise
    MissingInterpretation; scales the spec lists but `values` omits
    raise NoInput. Score-rated instruments take numeric scores here.
    """
    known = {scale.scale_key for scale in spec.scales}
    unknown = sorted(set(values) - known)
    if unknown:
        raise MissingInterpretation(
            f"No scale {unknown[0]!r} in {spec.instrument_id}",
            field=unknown[0],
            scale_key=unknown[0],
        )

    results: list[ScaleInterpretation] = []
    for scale in spec.scales:
        value = values.get(scale.scale_key)
        score = None
        if spec.score_levels:
            score, value = score_level(scale.scale_key, value, spec)
        text = interpret(scale.scale_key, value, spec, context)
        results.append(
            ScaleInterpretation(
                scale_key=scale.scale_key,
                name=scale.name,
                value=value,
                text=text,
                score=score,
            )
        )
    return results


def check_completeness(spec: CategoricalInstrument) -> list[tuple[str, str]]:
    """List every (scale_key, value) pair without a usable sentence."""
    missing: list[tuple[str, str]] = []
    for scale in spec.scales:
        for value in spec.values:
            try:
                interpret(scale.scale_key, value, spec)
            except MissingInterpretation:
                missing.append((scale.scale_key, value))
    return missing
