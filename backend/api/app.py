"""FastAPI application factory.

Routers
-------
    /api/fetch-job-info  : job-posting URL → company / job title / location
    /health              : liveness probe

Request bodies that are invalid JSON or do not match the request schema are answered
in the same ``{"error", "details", "stage"}`` shape the pipeline uses.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.api.routers import jobs as jobs_router
from backend.extraction import ValidationError


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError("Request body must be a JSON object with a 'url' field.", detail=str(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Job Info Extraction API",
        description=(
            "Renders a job-posting URL in a headless browser and extracts the "
            "company, job title and location with an LLM."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.include_router(jobs_router.router, prefix="/api", tags=["jobs"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
