"""Tests for UI test settings resolution."""
from pathlib import Path

import pytest

from pizza_ui_tests import config as config_module
from pizza_ui_tests.config import UiTestConfig
from pizza_ui_tests.env_defaults import parse_env_file

SETTING_KEYS = [
    "UI_BASE_URL",
    "PLAYWRIGHT_HEADLESS",
    "PLAYWRIGHT_BROWSER",
    "UI_TIMEOUT_MS",
    "UI_COLLECT_COVERAGE",
    "UI_COVERAGE_DIR",
    "MOCK_API_HOST",
    "MOCK_API_PORT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in SETTING_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config_module, "get_env_default", lambda key: None)
    return monkeypatch


def test_builtin_defaults(clean_env):
    config = UiTestConfig.from_env()

    assert config.base_url == "http://localhost:5173"
    assert config.playwright_headless is True
    assert config.browser_type == "chromium"
    assert config.timeout_ms == 10000
    assert config.collect_coverage is False
    assert config.coverage_dir == Path(".nyc_output")
    assert config.mock_api_url == "http://127.0.0.1:5555"


def test_environment_overrides(clean_env):
    clean_env.setenv("UI_BASE_URL", "http://pizza.test:4173")
    clean_env.setenv("PLAYWRIGHT_HEADLESS", "false")
    clean_env.setenv("PLAYWRIGHT_BROWSER", "Firefox")
    clean_env.setenv("UI_TIMEOUT_MS", "2500")
    clean_env.setenv("UI_COLLECT_COVERAGE", "1")

    config = UiTestConfig.from_env()

    assert config.base_url == "http://pizza.test:4173"
    assert config.playwright_headless is False
    assert config.browser_type == "firefox"
    assert config.timeout_ms == 2500
    assert config.collect_coverage is True


def test_env_defaults_file_is_used_when_env_missing(clean_env):
    defaults = {"UI_BASE_URL": "http://from-defaults:8080", "MOCK_API_PORT": "6000"}
    clean_env.setattr(config_module, "get_env_default", defaults.get)

    config = UiTestConfig.from_env()

    assert config.base_url == "http://from-defaults:8080"
    assert config.mock_api_port == 6000


def test_environment_wins_over_env_defaults(clean_env):
    clean_env.setattr(config_module, "get_env_default", {"UI_BASE_URL": "http://from-defaults"}.get)
    clean_env.setenv("UI_BASE_URL", "http://from-env")

    assert UiTestConfig.from_env().base_url == "http://from-env"


def test_unsupported_browser_is_rejected(clean_env):
    clean_env.setenv("PLAYWRIGHT_BROWSER", "netscape")

    with pytest.raises(RuntimeError, match="PLAYWRIGHT_BROWSER"):
        UiTestConfig.from_env()


def test_non_numeric_timeout_is_rejected(clean_env):
    clean_env.setenv("UI_TIMEOUT_MS", "soon")

    with pytest.raises(RuntimeError, match="numeric"):
        UiTestConfig.from_env()


@pytest.mark.parametrize("base,path,expected", [
    ("http://localhost:5173", "/menu", "http://localhost:5173/menu"),
    ("http://localhost:5173/", "menu", "http://localhost:5173/menu"),
    ("http://host/app", "/diner-dashboard", "http://host/app/diner-dashboard"),
])
def test_url_joins_paths(base, path, expected):
    assert UiTestConfig(base_url=base).url(path) == expected


def test_parse_env_file(tmp_path):
    env_file = tmp_path / ".env.defaults"
    env_file.write_text(
        "# comment\n"
        "\n"
        "UI_BASE_URL=http://localhost:5173\n"
        "QUOTED=\"with spaces\"\n"
        "SINGLE='x'\n"
        "not a setting\n",
        encoding="utf-8",
    )

    assert parse_env_file(env_file) == {
        "UI_BASE_URL": "http://localhost:5173",
        "QUOTED": "with spaces",
        "SINGLE": "x",
    }


def test_parse_missing_env_file(tmp_path):
    assert parse_env_file(tmp_path / "missing") == {}


def test_repository_env_defaults_match_builtin_defaults():
    defaults = parse_env_file(Path(__file__).resolve().parents[2] / ".env.defaults")

    assert defaults["UI_BASE_URL"] == "http://localhost:5173"
    assert defaults["MOCK_API_PORT"] == "5555"
