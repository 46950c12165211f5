"""normform: Score normalization and interpretation engine for psychological instruments."""

__version__ = "0.1.0"

# Imports must come after __version__; the CLI reads it back from here
from normform.callable import CallableResult, execute
from normform.errors import InvalidInput, MissingInterpretation, NoInput, NormformError
from normform.interpretation import (
    InterpretationContext,
    derive_pronouns,
    extract_display_name,
    generate,
    interpret,
)
from normform.scoring import classify, normalize

__all__ = [
    "__version__",
    "CallableResult",
    "execute",
    "InvalidInput",
    "MissingInterpretation",
    "NoInput",
    "NormformError",
    "InterpretationContext",
    "derive_pronouns",
    "extract_display_name",
    "generate",
    "interpret",
    "classify",
    "normalize",
]
