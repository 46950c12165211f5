"""Interpretation layer: personalization, band templates and categorical lookups."""

from normform.interpretation.context import (
    InterpretationContext,
    Pronouns,
    derive_pronouns,
    extract_display_name,
)
from normform.interpretation.generator import generate, render_template, template_fields
from normform.interpretation.categorical import (
    ScaleInterpretation,
    check_completeness,
    interpret,
    interpret_all,
    interpret_score,
    score_level,
)
from normform.interpretation.composite import (
    CompositeResult,
    SubscaleResult,
    composite_rating,
    composite_summary,
    score_composite,
)

__all__ = [
    "InterpretationContext",
    "Pronouns",
    "derive_pronouns",
    "extract_display_name",
    "generate",
    "render_template",
    "template_fields",
    "ScaleInterpretation",
    "check_completeness",
    "interpret",
    "interpret_all",
    "interpret_score",
    "score_level",
    "CompositeResult",
    "SubscaleResult",
    "composite_rating",
    "composite_summary",
    "score_composite",
]
