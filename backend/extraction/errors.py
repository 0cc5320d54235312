"""Typed failures for the extraction pipeline.

Every stage raises exactly one :class:`PipelineError` subclass, tagged with
the :class:`Stage` it came from, a human-readable message and (where safe)
a diagnostic ``detail`` payload.  The HTTP layer turns these into JSON via
:meth:`PipelineError.to_payload` using :attr:`PipelineError.status_code`.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional


class Stage(str, Enum):
    """Pipeline stage a failure is attributed to."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    BROWSER_LAUNCH = "browser_launch"
    NAVIGATION = "navigation"
    MARKUP_EXTRACTION = "markup_extraction"
    LLM_CALL = "llm_call"
    DECODING = "decoding"


class PipelineError(Exception):
    """Base class for every failure the pipeline reports to its caller."""

    stage: Stage = Stage.VALIDATION
    status_code: int = 500

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def details_text(self) -> Optional[str]:
        """Return ``detail`` as a string, JSON-encoding structured payloads."""
        if self.detail is None:
            return None
        if isinstance(self.detail, str):
            return self.detail
        try:
            return json.dumps(self.detail, default=str)
        except (TypeError, ValueError):
            return repr(self.detail)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "stage": self.stage.value}
        details = self.details_text()
        if details is not None:
            payload["details"] = details
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(stage={self.stage.value!r}, message={self.message!r})"


class ValidationError(PipelineError):
    """The caller sent a missing or malformed URL."""

    stage = Stage.VALIDATION
    status_code = 400


class ConfigurationError(PipelineError):
    """The deployment is misconfigured (missing API key, no browser binary)."""

    stage = Stage.CONFIGURATION
    status_code = 500


class BrowserLaunchError(PipelineError):
    stage = Stage.BROWSER_LAUNCH
    status_code = 502


class NavigationError(PipelineError):
    """DNS failure, timeout, malformed target or non-HTTP scheme."""

    stage = Stage.NAVIGATION
    status_code = 502


class MarkupExtractionError(PipelineError):
    stage = Stage.MARKUP_EXTRACTION
    status_code = 502


class LlmCallError(PipelineError):
    stage = Stage.LLM_CALL
    status_code = 502


class DecodeError(PipelineError):
    """The model answered, but not with a parseable JSON object."""

    stage = Stage.DECODING
    status_code = 502
