"""Browser binary and launch-argument resolution.

Two execution contexts are supported:

``local``
    A developer machine.  The browser is whatever binary ``CHROME_PATH``
    points at; it must be set and must exist.

``hosted``
    A constrained container with no pre-installed browser.  The
    Playwright-managed Chromium is used, downloaded once via
    ``playwright install chromium`` if it is not on disk yet.  Sandboxing
    is disabled because container runtimes rarely allow it.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import Any

from backend.config import Settings
from backend.extraction.errors import ConfigurationError
from backend.extraction.models import LaunchOptions

logger = logging.getLogger(__name__)

_VIEWPORT = {"width": 1280, "height": 800}

_LOCAL_ARGS = ["--disable-blink-features=AutomationControlled"]

_HOSTED_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


def install_managed_browser(timeout: float) -> None:
    """Download the Playwright-managed Chromium build.

    Raises:
        ConfigurationError: If the installer cannot be run, times out, or
            exits non-zero.
    """
    cmd = [sys.executable, "-m", "playwright", "install", "chromium"]
    logger.info("Installing managed Chromium: %s", " ".join(cmd))
    try:
        completed = subprocess.run(
            cmd, capture_output=True, text=True, timeout=timeout, check=False
        )
    except subprocess.TimeoutExpired as exc:
        raise ConfigurationError(
            f"Chromium download did not finish within {timeout:.0f}s."
        ) from exc
    except OSError as exc:
        raise ConfigurationError(f"Could not run the Playwright installer: {exc}") from exc

    if completed.returncode != 0:
        raise ConfigurationError(
            "Playwright could not install Chromium.",
            detail=(completed.stderr or completed.stdout or "").strip()[-2000:],
        )


def _resolve_local(config: Settings) -> LaunchOptions:
    path = config.local_browser_path
    if not path:
        raise ConfigurationError(
            "CHROME_PATH is not set. Point it at a local Chrome/Chromium binary "
            "or set EXECUTION_CONTEXT=hosted to use the managed browser."
        )
    if not Path(path).exists():
        raise ConfigurationError(f"Browser binary not found at CHROME_PATH={path!r}.")
    return LaunchOptions(
        executable_path=path,
        args=list(_LOCAL_ARGS),
        headless=config.browser_headless,
        viewport=dict(_VIEWPORT),
    )


def _resolve_hosted(config: Settings, browser_type: Any) -> LaunchOptions:
    path = browser_type.executable_path
    if not path or not Path(path).exists():
        logger.info("Managed Chromium missing at %r; acquiring it once.", path)
        install_managed_browser(config.browser_install_timeout)
        path = browser_type.executable_path
        if not path or not Path(path).exists():
            raise ConfigurationError(
                "Managed Chromium is still unavailable after installation.",
                detail=path,
            )
    return LaunchOptions(
        executable_path=path,
        args=list(_HOSTED_ARGS),
        headless=True,
        viewport=dict(_VIEWPORT),
    )


def resolve_launch_options(config: Settings, browser_type: Any) -> LaunchOptions:
    """Return the :class:`LaunchOptions` for *config*'s execution context.

    Args:
        config: Active settings; ``execution_context`` picks the strategy.
        browser_type: A Playwright ``BrowserType`` (e.g. ``pw.chromium``),
            consulted for the managed binary location in hosted mode.

    Raises:
        ConfigurationError: If no usable browser binary exists for the
            current context.
    """
    config.validate()
    if config.is_hosted:
        return _resolve_hosted(config, browser_type)
    return _resolve_local(config)
