"""Tests for browser binary / launch-argument resolution."""

from __future__ import annotations

import subprocess
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from backend.extraction.environment import install_managed_browser, resolve_launch_options
from backend.extraction.errors import ConfigurationError, Stage


class TestLocalContext:
    def test_uses_configured_binary(self, config) -> None:
        options = resolve_launch_options(config, browser_type=None)
        assert options.executable_path == config.local_browser_path
        assert "--no-sandbox" not in options.args
        assert options.viewport == {"width": 1280, "height": 800}

    def test_launch_kwargs(self, config) -> None:
        kwargs = resolve_launch_options(config, browser_type=None).launch_kwargs()
        assert kwargs["executable_path"] == config.local_browser_path
        assert kwargs["headless"] is True
        assert isinstance(kwargs["args"], list)

    def test_headful_allowed_locally(self, config) -> None:
        config.browser_headless = False
        assert resolve_launch_options(config, browser_type=None).headless is False

    def test_unset_path_is_configuration_error(self, config) -> None:
        config.local_browser_path = None
        with pytest.raises(ConfigurationError, match="CHROME_PATH") as excinfo:
            resolve_launch_options(config, browser_type=None)
        assert excinfo.value.stage is Stage.CONFIGURATION

    def test_nonexistent_path_is_configuration_error(self, config, tmp_path) -> None:
        config.local_browser_path = str(tmp_path / "missing-chrome")
        with pytest.raises(ConfigurationError, match="not found"):
            resolve_launch_options(config, browser_type=None)

    def test_unknown_context_is_configuration_error(self, config) -> None:
        config.execution_context = "lambda"
        with pytest.raises(ConfigurationError, match="EXECUTION_CONTEXT"):
            resolve_launch_options(config, browser_type=None)


class TestHostedContext:
    def test_uses_managed_binary_with_sandbox_disabled(self, config, fake_browser_binary) -> None:
        config.execution_context = "hosted"
        config.browser_headless = False
        browser_type = SimpleNamespace(executable_path=fake_browser_binary)

        with patch("backend.extraction.environment.install_managed_browser") as mock_install:
            options = resolve_launch_options(config, browser_type)

        mock_install.assert_not_called()
        assert options.executable_path == fake_browser_binary
        assert "--no-sandbox" in options.args
        assert "--disable-setuid-sandbox" in options.args
        assert options.headless is True

    def test_missing_binary_is_installed_once(self, config, tmp_path) -> None:
        config.execution_context = "hosted"
        binary = tmp_path / "chromium"
        browser_type = SimpleNamespace(executable_path=str(binary))

        def _install(timeout: float) -> None:
            binary.write_text("")

        with patch(
            "backend.extraction.environment.install_managed_browser", side_effect=_install
        ) as mock_install:
            options = resolve_launch_options(config, browser_type)

        mock_install.assert_called_once_with(config.browser_install_timeout)
        assert options.executable_path == str(binary)

    def test_still_missing_after_install(self, config, tmp_path) -> None:
        config.execution_context = "hosted"
        browser_type = SimpleNamespace(executable_path=str(tmp_path / "never"))

        with patch("backend.extraction.environment.install_managed_browser"):
            with pytest.raises(ConfigurationError, match="still unavailable"):
                resolve_launch_options(config, browser_type)


class TestInstallManagedBrowser:
    def test_success(self) -> None:
        completed = MagicMock(returncode=0, stdout="ok", stderr="")
        with patch("backend.extraction.environment.subprocess.run", return_value=completed) as mock_run:
            install_managed_browser(timeout=12.0)

        cmd = mock_run.call_args.args[0]
        assert cmd[1:] == ["-m", "playwright", "install", "chromium"]
        assert mock_run.call_args.kwargs["timeout"] == 12.0

    def test_nonzero_exit(self) -> None:
        completed = MagicMock(returncode=1, stdout="", stderr="download failed")
        with patch("backend.extraction.environment.subprocess.run", return_value=completed):
            with pytest.raises(ConfigurationError) as excinfo:
                install_managed_browser(timeout=12.0)
        assert excinfo.value.detail == "download failed"

    def test_timeout(self) -> None:
        with patch(
            "backend.extraction.environment.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="playwright", timeout=12.0),
        ):
            with pytest.raises(ConfigurationError, match="did not finish"):
                install_managed_browser(timeout=12.0)
