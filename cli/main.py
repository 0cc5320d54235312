"""Job-info CLI: entry-point for operating the extraction pipeline by hand.

Usage:
    python cli/main.py --help

Commands:
    fetch            → full pipeline, prints the JSON the API would return
    text             → render + reduce only, prints the visible page text
    browser install  → download the managed Chromium used in hosted mode
    serve            → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import dataclasses
import json
import logging
from typing import NoReturn, Optional

import typer

from backend.config import Settings, settings
from backend.extraction import PipelineError
from cli.commands.browser import browser_app

app = typer.Typer(
    name="jobtrack",
    help="Job-posting extraction CLI.",
    no_args_is_help=True,
)
app.add_typer(browser_app, name="browser")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _settings_for(context: Optional[str], browser_path: Optional[str]) -> Settings:
    """Return the global settings with any command-line overrides applied."""
    overrides = {}
    if context:
        overrides["execution_context"] = context.strip().lower()
    if browser_path:
        overrides["local_browser_path"] = browser_path
    return dataclasses.replace(settings, **overrides) if overrides else settings


def _fail(exc: PipelineError) -> NoReturn:
    typer.echo(json.dumps(exc.to_payload(), indent=2))
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Pipeline commands
# ---------------------------------------------------------------------------
@app.command("fetch")
def fetch(
    url: str = typer.Argument(..., help="Job-posting URL."),
    context: Optional[str] = typer.Option(None, "--context", help="Execution context: local | hosted."),
    browser_path: Optional[str] = typer.Option(None, "--browser-path", help="Local Chrome/Chromium binary."),
    debug: bool = typer.Option(False, "--debug", help="Include the markup excerpt and raw model response."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every pipeline stage to stderr."),
) -> None:
    """Extract company, job title and location from a job posting."""
    from backend.extraction import extract_job_info

    _configure_logging(verbose)
    config = _settings_for(context, browser_path)
    try:
        result = extract_job_info(url, config)
    except PipelineError as exc:
        _fail(exc)
    typer.echo(json.dumps(result.to_dict(include_debug=debug), indent=2))


@app.command("text")
def text(
    url: str = typer.Argument(..., help="Page URL."),
    context: Optional[str] = typer.Option(None, "--context", help="Execution context: local | hosted."),
    browser_path: Optional[str] = typer.Option(None, "--browser-path", help="Local Chrome/Chromium binary."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log render progress to stderr."),
) -> None:
    """Render a page and print the visible text the model would see."""
    from backend.extraction.pipeline import validate_request
    from backend.extraction.reducer import reduce_html
    from backend.extraction.renderer import render

    _configure_logging(verbose)
    config = _settings_for(context, browser_path)
    try:
        request = validate_request(url)
        page = render(request.url, config)
    except PipelineError as exc:
        _fail(exc)
    reduced = reduce_html(page.html)
    typer.echo(f"[text] Words  : {len(reduced.text.split())}", err=True)
    typer.echo(reduced.text)


# ---------------------------------------------------------------------------
# HTTP API
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Serve the extraction API with uvicorn."""
    import uvicorn

    uvicorn.run("backend.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
