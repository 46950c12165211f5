"""Processing pipeline for assessment records."""

from normform.pipeline.orchestrator import (
    AssessmentResult,
    Pipeline,
    PipelineConfig,
    record_id_for,
    subject_context,
)
from normform.pipeline.processors import CategoricalResult, create_processor

__all__ = [
    "AssessmentResult",
    "CategoricalResult",
    "Pipeline",
    "PipelineConfig",
    "create_processor",
    "record_id_for",
    "subject_context",
]
