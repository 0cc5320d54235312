"""Job-posting URL → ``{company, jobTitle, location}``.

Stages run strictly in order and the first failure short-circuits::

    validating → rendering → reducing → prompting → decoding

The API key is checked during validation so a misconfigured deployment
fails before any browser is started.  Browser teardown is handled inside
:func:`backend.extraction.renderer.render`, which has returned (and closed
its browser) before reduction starts.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as UrlValidationError

from backend.config import Settings, settings
from backend.extraction.decoder import decode_response
from backend.extraction.errors import PipelineError, ValidationError
from backend.extraction.models import ExtractionRequest, ExtractionResult
from backend.extraction.prompter import request_extraction, require_api_key
from backend.extraction.reducer import reduce_html
from backend.extraction.renderer import render

logger = logging.getLogger(__name__)

_DEBUG_HTML_CHARS = 1000

_URL_ADAPTER = TypeAdapter(AnyUrl)


def validate_request(url: Any) -> ExtractionRequest:
    """Return an :class:`ExtractionRequest` for *url* or raise :class:`ValidationError`.

    *url* must be a non-blank string that pydantic parses as an absolute
    URL.  Scheme support is checked later, at navigation.
    """
    if url is None:
        raise ValidationError("Missing URL")
    if not isinstance(url, str):
        raise ValidationError(f"URL must be a string, got {type(url).__name__}.")
    url = url.strip()
    if not url:
        raise ValidationError("Missing URL")
    try:
        _URL_ADAPTER.validate_python(url)
    except UrlValidationError as exc:
        raise ValidationError(f"Malformed URL: {url!r}", detail=str(exc)) from exc
    return ExtractionRequest(url=url)


def extract_job_info(url: Any, config: Optional[Settings] = None) -> ExtractionResult:
    """Run the full pipeline for one job-posting *url*.

    Args:
        url: Caller-supplied value; validated before anything else happens.
        config: Settings to use.  Defaults to the module-level ``settings``.

    Returns:
        The decoded model answer.  When the model returned no text at all,
        ``result.data`` is the raw model payload.

    Raises:
        PipelineError: The first stage failure, one of its subclasses.
    """
    config = config or settings
    try:
        return _run(url, config)
    except PipelineError as exc:
        logger.warning("[failed:%s] %s", exc.stage.value, exc.message)
        raise


def _run(url: Any, config: Settings) -> ExtractionResult:
    logger.info("[validating] %r", url)
    request = validate_request(url)
    require_api_key(config)

    logger.info("[rendering] %s", request.url)
    page = render(request.url, config)

    logger.info("[reducing] %d chars of markup", len(page.html))
    reduced = reduce_html(page.html)

    logger.info("[prompting] %d chars of text", len(reduced.text))
    raw = request_extraction(reduced.text, config)

    logger.info("[decoding] model response")
    data = decode_response(raw)

    logger.info("[succeeded] %s", request.url)
    return ExtractionResult(
        data=data,
        debug={"html": page.html[:_DEBUG_HTML_CHARS], "llm_response": raw},
    )
