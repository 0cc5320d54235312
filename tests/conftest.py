"""Shared fixtures: fixed settings and an in-memory stand-in for Playwright.

The fake mirrors the slice of ``playwright.sync_api`` the renderer uses
(``sync_playwright().start()``, ``chromium.launch``, ``new_page``, ``goto``,
``wait_for_timeout``, ``wait_for_function``, ``content``, ``close``,
``stop``) and counts launches and closes so tests can assert that no
browser is leaked.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest

from backend.config import Settings


class FakePage:
    def __init__(self, html: str = "<html><body><h1>Engineer</h1></body></html>") -> None:
        self.html = html
        self.goto_error: Optional[Exception] = None
        self.pause_error: Optional[Exception] = None
        self.ready_error: Optional[Exception] = None
        self.content_error: Optional[Exception] = None
        self.status = 200
        self.goto_calls: list[tuple[str, dict[str, Any]]] = []
        self.timeouts: list[float] = []
        self.ready_waits: list[float] = []

    def goto(self, url: str, **kwargs: Any) -> Any:
        self.goto_calls.append((url, kwargs))
        if self.goto_error is not None:
            raise self.goto_error
        return type("Response", (), {"status": self.status})()

    def wait_for_timeout(self, timeout: float) -> None:
        self.timeouts.append(timeout)
        if self.pause_error is not None:
            raise self.pause_error

    def wait_for_function(self, expression: str, timeout: float) -> None:
        self.ready_waits.append(timeout)
        if self.ready_error is not None:
            raise self.ready_error

    def content(self) -> str:
        if self.content_error is not None:
            raise self.content_error
        return self.html


class FakeBrowser:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.close_calls = 0
        self.close_error: Optional[Exception] = None
        self.new_page_error: Optional[Exception] = None
        self.viewport: Optional[dict[str, int]] = None

    def new_page(self, viewport: Optional[dict[str, int]] = None) -> FakePage:
        if self.new_page_error is not None:
            raise self.new_page_error
        self.viewport = viewport
        return self.page

    def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class FakeBrowserType:
    def __init__(self, browser: FakeBrowser, executable_path: str = "") -> None:
        self.browser = browser
        self.executable_path = executable_path
        self.launch_calls: list[dict[str, Any]] = []
        self.launch_error: Optional[Exception] = None

    def launch(self, **kwargs: Any) -> FakeBrowser:
        self.launch_calls.append(kwargs)
        if self.launch_error is not None:
            raise self.launch_error
        return self.browser


class FakePlaywright:
    def __init__(self, chromium: FakeBrowserType) -> None:
        self.chromium = chromium
        self.stop_calls = 0

    def start(self) -> "FakePlaywright":
        return self

    def stop(self) -> None:
        self.stop_calls += 1


@pytest.fixture()
def fake_browser_binary(tmp_path: Path) -> str:
    """An existing file standing in for a local Chrome binary."""
    binary = tmp_path / "chrome"
    binary.write_text("#!/bin/sh\n")
    return str(binary)


@pytest.fixture()
def config(fake_browser_binary: str) -> Settings:
    """Local-context settings with fast settle timings and an API key."""
    return Settings(
        gemini_api_key="test-key",
        gemini_model="gemini-2.0-flash",
        gemini_base_url="https://llm.test/v1beta",
        llm_timeout=5.0,
        max_prompt_chars=6000,
        execution_context="local",
        local_browser_path=fake_browser_binary,
        browser_headless=True,
        browser_install_timeout=10.0,
        navigation_timeout=30.0,
        navigation_wait_until="domcontentloaded",
        settle_min=1.0,
        settle_max=5.0,
        include_debug=False,
    )


@pytest.fixture()
def fake_playwright(monkeypatch: pytest.MonkeyPatch) -> FakePlaywright:
    """Patch the renderer's ``sync_playwright`` with an in-memory fake."""
    page = FakePage()
    browser = FakeBrowser(page)
    pw = FakePlaywright(FakeBrowserType(browser))
    monkeypatch.setattr("backend.extraction.renderer.sync_playwright", lambda: pw)
    return pw
