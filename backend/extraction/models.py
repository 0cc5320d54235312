"""Data models for the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ExtractionRequest:
    """A validated, absolute job-posting URL."""

    url: str


@dataclass(frozen=True)
class LaunchOptions:
    """Browser binary and launch arguments for the current execution context."""

    executable_path: Optional[str]
    args: list[str] = field(default_factory=list)
    headless: bool = True
    viewport: dict[str, int] = field(default_factory=lambda: {"width": 1280, "height": 800})

    def launch_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``BrowserType.launch``."""
        kwargs: dict[str, Any] = {"headless": self.headless, "args": list(self.args)}
        if self.executable_path:
            kwargs["executable_path"] = self.executable_path
        return kwargs


@dataclass
class RenderedPage:
    """Fully rendered markup of one page, as produced by the browser."""

    url: str
    html: str


@dataclass
class ReducedText:
    """Visible text of a :class:`RenderedPage`."""

    text: str


@dataclass
class ExtractionResult:
    """The decoded model answer plus diagnostics.

    ``data`` is the decoded JSON object as-is: the expected keys are
    ``company``, ``jobTitle`` and ``location`` but any of them may be
    absent, and extra keys are passed through untouched.
    """

    data: dict[str, Any]
    debug: dict[str, Any] = field(default_factory=dict)

    @property
    def company(self) -> Optional[str]:
        return self.data.get("company")

    @property
    def job_title(self) -> Optional[str]:
        return self.data.get("jobTitle")

    @property
    def location(self) -> Optional[str]:
        return self.data.get("location")

    def to_dict(self, include_debug: bool = False) -> dict[str, Any]:
        payload = dict(self.data)
        if include_debug:
            payload["_debug"] = self.debug
        return payload
