"""Job-info extraction endpoint.

Routes
------
POST /api/fetch-job-info    Body: {"url": "https://..."}    → extract_job_info

Success returns the decoded object (``company``, ``jobTitle``,
``location``).  Failure returns ``{"error", "details"?, "stage"}`` with the
status code of the failing stage: 400 for a bad request, 5xx for
configuration and upstream failures.  Bodies that do not match
:class:`FetchJobInfoRequest` are answered with 400 by the app-level
``RequestValidationError`` handler.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from backend.config import settings
from backend.extraction import PipelineError, extract_job_info

logger = logging.getLogger(__name__)

router = APIRouter()

_GENERIC_ERROR = "Failed to fetch or parse job posting."


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class FetchJobInfoRequest(BaseModel):
    # Left optional so a missing url reaches the pipeline's own validation.
    url: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/fetch-job-info")
def fetch_job_info_endpoint(body: FetchJobInfoRequest) -> JSONResponse:
    """Render the posting at ``url`` and extract company, title and location.

    Declared as a plain ``def`` so FastAPI runs it in its threadpool; the
    Playwright sync API refuses to run on the event loop.
    """
    try:
        result = extract_job_info(body.url, settings)
    except PipelineError as exc:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    except Exception as exc:
        logger.exception("Job info extraction error")
        return JSONResponse(
            status_code=500,
            content={"error": _GENERIC_ERROR, "details": str(exc)},
        )
    return JSONResponse(status_code=200, content=result.to_dict(include_debug=settings.include_debug))
