"""Scoring modules for normalizing and classifying raw scores."""

from normform.scoring.classifier import bind_templates, classify
from normform.scoring.engine import ScoringEngine, SubjectResult
from normform.scoring.normalizer import NormalizedScore, normalize, parse_raw_score

__all__ = [
    "ScoringEngine",
    "SubjectResult",
    "NormalizedScore",
    "normalize",
    "parse_raw_score",
    "classify",
    "bind_templates",
]
