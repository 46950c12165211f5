"""Interpretation text generation from band templates."""

import string

from normform.errors import MissingInterpretation
from normform.interpretation.context import InterpretationContext
from normform.registry.models import Band

_FORMATTER = string.Formatter()


def template_fields(template: str) -> set[str]:
    """Get the placeholder names used by a template."""
    return {field for _, field, _, _ in _FORMATTER.parse(template) if field is not None}


def render_template(template: str, context: InterpretationContext) -> str:
    """Substitute the subject's name and pronouns into a template.

    Raises:
        MissingInterpretation: If the template is blank, malformed or
            uses an unknown placeholder.
    """
    if not template or not template.strip():
        raise MissingInterpretation("Interpretation template is empty")

    substitutions = context.substitutions()
    try:
        fields = template_fields(template)
    except ValueError as e:
        raise MissingInterpretation(f"Interpretation template is malformed: {e}") from e

    unknown = sorted(fields - set(substitutions))
    if unknown:
        raise MissingInterpretation(
            f"Template uses unknown placeholders: {', '.join(repr(u) for u in unknown)}"
        )

    try:
        return template.format_map(substitutions)
    except ValueError as e:
        raise MissingInterpretation(f"Interpretation template is malformed: {e}") from e


def generate(band: Band, context: InterpretationContext | None = None) -> str:
    """Produce the interpretation paragraph for a band.

    Args:
        band: The classified band, carrying its template.
        context: Subject name and pronouns. Defaults to "the client".

    Returns:
        A single plain-text paragraph.

    Raises:
        MissingInterpretation: If the band has no template.
    """
    if band.template is None:
        raise MissingInterpretation(
            f"No interpretation template for band {band.key!r}", field=band.key
        )
    return render_template(band.template, context or InterpretationContext())
