"""Centralised settings for the job-info extraction backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The pipeline never reads ``os.environ`` directly: every entry point takes
an explicit :class:`Settings` and falls back to the module-level
``settings`` singleton, so tests can pass fixed configurations.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (one level up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

EXECUTION_CONTEXTS = ("local", "hosted")


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # LLM (Gemini generateContent)
    # ------------------------------------------------------------------
    gemini_api_key: str = field(
        default_factory=lambda: os.environ.get("GEMINI_API_KEY", "")
    )
    gemini_model: str = field(
        default_factory=lambda: os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")
    )
    gemini_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
    )
    llm_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TIMEOUT", "30.0"))
    )
    max_prompt_chars: int = field(
        default_factory=lambda: int(os.environ.get("MAX_PROMPT_CHARS", "6000"))
    )

    # ------------------------------------------------------------------
    # Execution environment / browser binary
    # ------------------------------------------------------------------
    execution_context: str = field(
        default_factory=lambda: os.environ.get("EXECUTION_CONTEXT", "local").strip().lower()
    )
    local_browser_path: Optional[str] = field(
        default_factory=lambda: os.environ.get("CHROME_PATH") or None
    )
    browser_headless: bool = field(
        default_factory=lambda: _env_bool("BROWSER_HEADLESS", "true")
    )
    browser_install_timeout: float = field(
        default_factory=lambda: float(os.environ.get("BROWSER_INSTALL_TIMEOUT", "300.0"))
    )

    # ------------------------------------------------------------------
    # Render session
    # ------------------------------------------------------------------
    navigation_timeout: float = field(
        default_factory=lambda: float(os.environ.get("NAVIGATION_TIMEOUT", "30.0"))
    )
    navigation_wait_until: str = field(
        default_factory=lambda: os.environ.get("NAVIGATION_WAIT_UNTIL", "domcontentloaded")
    )
    settle_min: float = field(
        default_factory=lambda: float(os.environ.get("SETTLE_MIN", "1.0"))
    )
    settle_max: float = field(
        default_factory=lambda: float(os.environ.get("SETTLE_MAX", "5.0"))
    )

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------
    include_debug: bool = field(
        default_factory=lambda: _env_bool("INCLUDE_DEBUG", "false")
    )

    @property
    def is_hosted(self) -> bool:
        return self.execution_context == "hosted"

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` for settings no strategy can use."""
        from backend.extraction.errors import ConfigurationError

        if self.execution_context not in EXECUTION_CONTEXTS:
            raise ConfigurationError(
                f"Unknown EXECUTION_CONTEXT {self.execution_context!r}; "
                f"expected one of {', '.join(EXECUTION_CONTEXTS)}."
            )
        if self.settle_max < self.settle_min:
            raise ConfigurationError(
                f"SETTLE_MAX ({self.settle_max}) must not be lower than "
                f"SETTLE_MIN ({self.settle_min})."
            )


# Module-level singleton, import this everywhere:
#   from backend.config import settings
settings = Settings()
