"""Prompt construction and the Gemini ``generateContent`` call.

Request shape::

    POST {GEMINI_BASE_URL}/models/{GEMINI_MODEL}:generateContent
    x-goog-api-key: <GEMINI_API_KEY>

    {"contents": [{"parts": [{"text": "<prompt>"}]}]}

The response is returned as parsed JSON without interpretation; see
:mod:`backend.extraction.decoder` for how the answer is recovered.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from backend.config import Settings, settings
from backend.extraction.errors import ConfigurationError, LlmCallError

logger = logging.getLogger(__name__)

_PROMPT_TEMPLATE = """\
Extract the company name, job title, and location from this job posting text.

Respond with a single JSON object with exactly these keys and nothing else:
{{"company": "...", "jobTitle": "...", "location": "..."}}

Hints:
- The company is often next to labels like "Company", "Employer", "About us",
  "Join", or in the page footer / copyright line.
- The job title is usually the main heading, or follows "Position", "Role",
  "Job Title" or "We are hiring".
- The location often follows "Location", "Based in", "Office", or says
  "Remote" / "Hybrid"; include city and country when both are given.
- Use an empty string for any field you cannot find.

Job posting text:
{text}"""


def truncate_text(text: str, limit: int) -> str:
    """Return the first *limit* characters of *text* (no-op when shorter)."""
    if limit <= 0:
        return ""
    return text[:limit]


def build_prompt(text: str, limit: int) -> str:
    """Embed the truncated page *text* into the extraction instruction."""
    return _PROMPT_TEMPLATE.format(text=truncate_text(text, limit))


def require_api_key(config: Settings) -> str:
    """Return the configured API key or raise :class:`ConfigurationError`."""
    if not config.has_api_key:
        raise ConfigurationError(
            "GEMINI_API_KEY is not set. Add it to your environment or .env file."
        )
    return config.gemini_api_key.strip()


def _endpoint(config: Settings) -> str:
    return f"{config.gemini_base_url.rstrip('/')}/models/{config.gemini_model}:generateContent"


def request_extraction(text: str, config: Optional[Settings] = None) -> Any:
    """Ask the model to extract the job fields from *text*.

    A single attempt is made; there is no retry.

    Returns:
        The parsed JSON response body, untouched.

    Raises:
        ConfigurationError: If ``GEMINI_API_KEY`` is missing (no request is
            sent).
        LlmCallError: On transport failure, a non-2xx status or a body that
            is not JSON.
    """
    config = config or settings
    api_key = require_api_key(config)
    prompt = build_prompt(text, config.max_prompt_chars)
    body = {"contents": [{"parts": [{"text": prompt}]}]}

    try:
        with httpx.Client(timeout=config.llm_timeout) as client:
            response = client.post(
                _endpoint(config),
                headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
                json=body,
            )
    except httpx.HTTPError as exc:
        raise LlmCallError(f"LLM request failed: {exc}", detail=type(exc).__name__) from exc

    logger.info("Gemini API status: %s", response.status_code)

    if response.is_error:
        raise LlmCallError(
            f"LLM endpoint returned HTTP {response.status_code}.",
            detail=response.text[:2000],
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise LlmCallError(
            "LLM endpoint returned a body that is not JSON.",
            detail=response.text[:2000],
        ) from exc

    logger.debug("Gemini API response: %r", payload)
    return payload
