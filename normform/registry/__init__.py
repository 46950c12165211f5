"""Registry modules for loading norm tables and instrument specifications."""

from normform.registry.models import (
    Band,
    BandTable,
    CategoricalInstrument,
    CategoricalScale,
    CompositeInstrument,
    ConversionInstrument,
    ConversionTable,
    InstrumentSpec,
    ScoreDomain,
    ScoreLevel,
    ScoreRow,
    SpecRef,
    Subscale,
)
from normform.registry.norms import NormNotFoundError, NormRegistry, NormValidationError

__all__ = [
    "NormRegistry",
    "NormNotFoundError",
    "NormValidationError",
    "Band",
    "BandTable",
    "CategoricalInstrument",
    "CategoricalScale",
    "CompositeInstrument",
    "ConversionInstrument",
    "ConversionTable",
    "InstrumentSpec",
    "ScoreDomain",
    "ScoreLevel",
    "ScoreRow",
    "SpecRef",
    "Subscale",
]
