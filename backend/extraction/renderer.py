"""Headless-browser render session: one browser, one page, one URL.

``render`` owns the whole browser lifetime for a single request::

    launch → new page → goto → settle → page.content() → close

The browser is acquired in one place and released in a ``finally`` block,
so it is closed exactly once on every exit path.  A failing ``close`` is
logged and never replaces the error that is already propagating.

Settle wait
-----------
``page.goto`` returns as soon as ``NAVIGATION_WAIT_UNTIL`` fires, which on
client-rendered job boards is often before the description has painted.
After navigation we always pause ``SETTLE_MIN`` seconds, then race
``document.readyState === "complete"`` against the rest of the
``SETTLE_MAX`` budget.  Whichever finishes first wins; a timeout here is
not an error.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlsplit

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from backend.config import Settings, settings
from backend.extraction.environment import resolve_launch_options
from backend.extraction.errors import (
    BrowserLaunchError,
    MarkupExtractionError,
    NavigationError,
)
from backend.extraction.models import LaunchOptions, RenderedPage

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = ("http", "https")
_READY_EXPRESSION = "() => document.readyState === 'complete'"


def _launch(browser_type: Any, options: LaunchOptions) -> Any:
    try:
        return browser_type.launch(**options.launch_kwargs())
    except PlaywrightError as exc:
        raise BrowserLaunchError(f"Browser failed to launch: {exc.message}", detail=str(exc)) from exc


def _open_page(browser: Any, options: LaunchOptions) -> Any:
    try:
        return browser.new_page(viewport=options.viewport)
    except PlaywrightError as exc:
        raise BrowserLaunchError(f"Could not open a browser page: {exc.message}", detail=str(exc)) from exc


def _navigate(page: Any, url: str, config: Settings) -> None:
    timeout_ms = config.navigation_timeout * 1000
    try:
        response = page.goto(url, wait_until=config.navigation_wait_until, timeout=timeout_ms)
    except PlaywrightTimeoutError as exc:
        raise NavigationError(
            f"Navigation to {url} timed out after {config.navigation_timeout:.0f}s.",
            detail=str(exc),
        ) from exc
    except PlaywrightError as exc:
        raise NavigationError(f"Navigation to {url} failed: {exc.message}", detail=str(exc)) from exc

    if response is not None and response.status >= 400:
        # The body of an error page is still handed to the model.
        logger.warning("Navigation to %s returned HTTP %s", url, response.status)


def _settle(page: Any, config: Settings) -> None:
    min_ms = max(config.settle_min, 0.0) * 1000
    remaining_ms = max(config.settle_max - config.settle_min, 0.0) * 1000

    try:
        page.wait_for_timeout(min_ms)
        if remaining_ms > 0:
            page.wait_for_function(_READY_EXPRESSION, timeout=remaining_ms)
    except PlaywrightTimeoutError:
        logger.debug("Settle wait hit its %.0fms ceiling; continuing.", remaining_ms)
    except PlaywrightError as exc:
        raise NavigationError(f"Page became unusable while settling: {exc.message}", detail=str(exc)) from exc


def _read_markup(page: Any) -> str:
    try:
        return page.content()
    except PlaywrightError as exc:
        raise MarkupExtractionError(
            f"Could not read the rendered markup: {exc.message}", detail=str(exc)
        ) from exc


def _close_browser(browser: Any) -> None:
    try:
        browser.close()
    except Exception:
        logger.warning("Browser close failed", exc_info=True)


def _stop_driver(pw: Any) -> None:
    try:
        pw.stop()
    except Exception:
        logger.warning("Playwright driver stop failed", exc_info=True)


def check_scheme(url: str) -> None:
    """Refuse targets the browser should never be pointed at (``file:``, ``javascript:`` …)."""
    scheme = urlsplit(url).scheme.lower()
    if scheme not in _ALLOWED_SCHEMES:
        raise NavigationError(f"Unsupported URL scheme {scheme!r}; only http and https are rendered.")


def render(url: str, config: Optional[Settings] = None) -> RenderedPage:
    """Render *url* in a headless browser and return its final markup.

    Raises:
        ConfigurationError: No browser binary for the execution context.
        BrowserLaunchError: The driver, browser or page could not start.
        NavigationError: Bad scheme, DNS/connection failure or timeout.
        MarkupExtractionError: ``page.content()`` failed.
    """
    config = config or settings
    check_scheme(url)

    try:
        pw = sync_playwright().start()
    except PlaywrightError as exc:
        raise BrowserLaunchError(f"Playwright driver failed to start: {exc.message}", detail=str(exc)) from exc

    try:
        browser_type = pw.chromium
        options = resolve_launch_options(config, browser_type)
        browser = _launch(browser_type, options)
        logger.info("Browser launched (context=%s)", config.execution_context)
        try:
            page = _open_page(browser, options)
            _navigate(page, url, config)
            _settle(page, config)
            html = _read_markup(page)
        finally:
            _close_browser(browser)
    finally:
        _stop_driver(pw)

    logger.info("Rendered %s (%d chars of markup)", url, len(html))
    return RenderedPage(url=url, html=html)
