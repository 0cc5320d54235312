"""Browser commands for preparing the hosted execution context."""

from __future__ import annotations

from typing import Optional

import typer

from backend.config import settings
from backend.extraction import ConfigurationError
from backend.extraction.environment import install_managed_browser

browser_app = typer.Typer(help="Manage the headless browser binary.", no_args_is_help=True)


@browser_app.command("install")
def browser_install(
    timeout: Optional[float] = typer.Option(
        None, help="Seconds to wait for the download (default: BROWSER_INSTALL_TIMEOUT)."
    ),
) -> None:
    """Download the Playwright-managed Chromium ahead of the first request."""
    typer.echo("[browser install] Downloading Chromium …")
    try:
        install_managed_browser(timeout or settings.browser_install_timeout)
    except ConfigurationError as exc:
        typer.echo(f"[browser install] ❌ {exc.message}")
        if exc.detail:
            typer.echo(str(exc.detail))
        raise typer.Exit(code=1)
    typer.echo("[browser install] ✓ Chromium is ready.")
