"""Band classification over the standard-score line."""

from normform.registry.models import Band, BandTable, order_bands


def classify(standard_score: int, bands: BandTable | list[Band]) -> Band:
    """Select the band for a standard score.

    Bands are checked from highest lower bound to lowest; the first band
    whose lower bound is at or below the score wins. The unbounded-below
    band catches everything else, so every integer gets exactly one band.
    """
    ordered = bands.ordered() if isinstance(bands, BandTable) else order_bands(bands)
    if not ordered:
        raise ValueError("Cannot classify against an empty band list")

    for band in ordered:
        if band.lower is None or band.lower <= standard_score:
            return band

    # No unbounded band: scores under the lowest bound still land in it.
    return ordered[-1]


def bind_templates(bands: BandTable, templates: dict[str, str]) -> list[Band]:
    """Attach an instrument's templates to a shared band table.

    Returns copies; the band table itself is left untouched. Bands without
    a template keep template=None and fail at generation time.
    """
    return [
        band.model_copy(update={"template": templates.get(band.key, band.template)})
        for band in bands.ordered()
    ]
