"""Shared configuration for the JWT Pizza UI tests.

Each value is resolved in order:
1. environment variable
2. ``.env.defaults`` at the repository root
3. built-in default

Set UI_BASE_URL to point the scenarios at a running frontend.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urljoin

from pizza_ui_tests.env_defaults import get_env_default

BROWSER_TYPES = {"chromium", "firefox", "webkit"}


def _setting(key: str, default: str) -> str:
    value = os.getenv(key)
    if value is None or value == "":
        value = get_env_default(key)
    return value if value not in (None, "") else default


def _flag(key: str, default: str) -> bool:
    return _setting(key, default).lower() in {"true", "1", "yes"}


@dataclass
class UiTestConfig:
    """Settings for the browser scenarios and the standalone mock API."""

    base_url: str
    playwright_headless: bool = True
    browser_type: str = "chromium"
    timeout_ms: int = 10000
    collect_coverage: bool = False
    coverage_dir: Path = Path(".nyc_output")
    mock_api_host: str = "127.0.0.1"
    mock_api_port: int = 5555

    @classmethod
    def from_env(cls) -> "UiTestConfig":
        browser_type = _setting("PLAYWRIGHT_BROWSER", "chromium").lower()
        if browser_type not in BROWSER_TYPES:
            raise RuntimeError(
                f"PLAYWRIGHT_BROWSER={browser_type!r} is not supported; "
                f"use one of {', '.join(sorted(BROWSER_TYPES))}"
            )
        try:
            timeout_ms = int(_setting("UI_TIMEOUT_MS", "10000"))
            mock_api_port = int(_setting("MOCK_API_PORT", "5555"))
        except ValueError as exc:
            raise RuntimeError(f"Invalid numeric UI test setting: {exc}") from exc

        config = cls(
            base_url=_setting("UI_BASE_URL", "http://localhost:5173"),
            playwright_headless=_flag("PLAYWRIGHT_HEADLESS", "true"),
            browser_type=browser_type,
            timeout_ms=timeout_ms,
            collect_coverage=_flag("UI_COLLECT_COVERAGE", "0"),
            coverage_dir=Path(_setting("UI_COVERAGE_DIR", ".nyc_output")),
            mock_api_host=_setting("MOCK_API_HOST", "127.0.0.1"),
            mock_api_port=mock_api_port,
        )
        if os.getenv("UI_DEBUG_CONFIG"):
            print(f"[CONFIG] base_url={config.base_url} browser={config.browser_type} "
                  f"headless={config.playwright_headless} coverage={config.collect_coverage}")
        return config

    # ---- utility helpers --------------------------------------------------------
    def url(self, path: str = "") -> str:
        """Return an absolute URL for the provided path."""
        return urljoin(self.base_url.rstrip("/") + "/", path.lstrip("/"))

    @property
    def mock_api_url(self) -> str:
        return f"http://{self.mock_api_host}:{self.mock_api_port}"


# Singleton instance - initialized on first import
settings = UiTestConfig.from_env()
