"""Extraction package: job-posting URL → company / job title / location."""

from backend.extraction.errors import (
    BrowserLaunchError,
    ConfigurationError,
    DecodeError,
    LlmCallError,
    MarkupExtractionError,
    NavigationError,
    PipelineError,
    Stage,
    ValidationError,
)
from backend.extraction.models import ExtractionResult
from backend.extraction.pipeline import extract_job_info, validate_request

__all__ = [
    "extract_job_info",
    "validate_request",
    "ExtractionResult",
    "Stage",
    "PipelineError",
    "ValidationError",
    "ConfigurationError",
    "BrowserLaunchError",
    "NavigationError",
    "MarkupExtractionError",
    "LlmCallError",
    "DecodeError",
]
