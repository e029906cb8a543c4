from __future__ import annotations

import pytest

from coverscan.analysis.config import (
    DEFAULT_CATALOG_URL,
    DEFAULT_OPENROUTER_BASE_URL,
    DEFAULT_SUMMARY_LANGUAGE,
    DEFAULT_VISION_MODEL,
    AnalysisSettings,
)


def test_settings_load_from_env_with_defaults() -> None:
    settings = AnalysisSettings.from_env({"OPENROUTER_API_KEY": "sk-or-v1-test"})

    assert settings.api_key == "sk-or-v1-test"
    assert settings.vision_model == DEFAULT_VISION_MODEL
    assert settings.base_url == DEFAULT_OPENROUTER_BASE_URL
    assert settings.catalog_url == DEFAULT_CATALOG_URL
    assert settings.catalog_api_key is None
    assert settings.http_timeout_seconds == 30.0
    assert settings.summary_language == DEFAULT_SUMMARY_LANGUAGE


def test_settings_read_overrides_and_strip_trailing_slashes() -> None:
    settings = AnalysisSettings.from_env(
        {
            "OPENROUTER_API_KEY": "sk-or-v1-test",
            "OPENROUTER_VISION_MODEL": "google/gemini-2.0-flash-001",
            "OPENROUTER_SUMMARY_MODEL": "anthropic/claude-3.5-haiku",
            "OPENROUTER_BASE_URL": "https://proxy.local/api/v1/",
            "COVERSCAN_CATALOG_URL": "http://catalog.local/volumes/",
            "GOOGLE_BOOKS_API_KEY": " books-key ",
            "COVERSCAN_HTTP_TIMEOUT_SECONDS": "12.5",
            "COVERSCAN_SUMMARY_LANGUAGE": "French",
        }
    )

    assert settings.vision_model == "google/gemini-2.0-flash-001"
    assert settings.summary_model == "anthropic/claude-3.5-haiku"
    assert settings.base_url == "https://proxy.local/api/v1"
    assert settings.catalog_url == "http://catalog.local/volumes"
    assert settings.catalog_api_key == "books-key"
    assert settings.http_timeout_seconds == 12.5
    assert settings.summary_language == "French"


def test_settings_missing_api_key_fails_fast() -> None:
    with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
        AnalysisSettings.from_env({"OPENROUTER_VISION_MODEL": "openai/gpt-4o-mini"})


def test_settings_reject_empty_model() -> None:
    with pytest.raises(ValueError, match="OPENROUTER_SUMMARY_MODEL"):
        AnalysisSettings.from_env({"OPENROUTER_API_KEY": "sk-or-v1-test", "OPENROUTER_SUMMARY_MODEL": "  "})


def test_settings_validate_urls() -> None:
    with pytest.raises(ValueError, match="OPENROUTER_BASE_URL"):
        AnalysisSettings.from_env({"OPENROUTER_API_KEY": "sk-or-v1-test", "OPENROUTER_BASE_URL": "openrouter.ai/api/v1"})

    with pytest.raises(ValueError, match="COVERSCAN_CATALOG_URL"):
        AnalysisSettings.from_env({"OPENROUTER_API_KEY": "sk-or-v1-test", "COVERSCAN_CATALOG_URL": "ftp://books"})


def test_settings_validate_timeout_minimum() -> None:
    with pytest.raises(ValueError, match="COVERSCAN_HTTP_TIMEOUT_SECONDS"):
        AnalysisSettings.from_env({"OPENROUTER_API_KEY": "sk-or-v1-test", "COVERSCAN_HTTP_TIMEOUT_SECONDS": "0.01"})
