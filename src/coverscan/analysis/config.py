"""Runtime configuration for cover analysis."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping


DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_VISION_MODEL = "openai/gpt-4o-mini"
DEFAULT_SUMMARY_MODEL = "openai/gpt-4o-mini"
DEFAULT_CATALOG_URL = "https://www.googleapis.com/books/v1/volumes"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
DEFAULT_SUMMARY_LANGUAGE = "English"


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    value = float(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _validate_http_url(*, name: str, value: str) -> str:
    if not value:
        raise ValueError(f"{name} cannot be empty")
    if not (value.startswith("http://") or value.startswith("https://")):
        raise ValueError(f"{name} must start with http:// or https://")
    return value.rstrip("/")


@dataclass(frozen=True, slots=True)
class AnalysisSettings:
    """Validated OpenRouter and catalog settings used by the analysis pipeline."""

    api_key: str
    vision_model: str = DEFAULT_VISION_MODEL
    summary_model: str = DEFAULT_SUMMARY_MODEL
    base_url: str = DEFAULT_OPENROUTER_BASE_URL
    catalog_url: str = DEFAULT_CATALOG_URL
    catalog_api_key: str | None = None
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    summary_language: str = DEFAULT_SUMMARY_LANGUAGE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AnalysisSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        api_key = source.get("OPENROUTER_API_KEY", "").strip()
        if not api_key:
            raise ValueError("Missing required analysis environment variable: OPENROUTER_API_KEY")

        vision_model = source.get("OPENROUTER_VISION_MODEL", DEFAULT_VISION_MODEL).strip()
        summary_model = source.get("OPENROUTER_SUMMARY_MODEL", DEFAULT_SUMMARY_MODEL).strip()
        base_url_raw = source.get("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL).strip()
        catalog_url_raw = source.get("COVERSCAN_CATALOG_URL", DEFAULT_CATALOG_URL).strip()
        catalog_api_key = source.get("GOOGLE_BOOKS_API_KEY", "").strip() or None
        timeout_raw = source.get("COVERSCAN_HTTP_TIMEOUT_SECONDS", str(DEFAULT_HTTP_TIMEOUT_SECONDS)).strip()
        summary_language = source.get("COVERSCAN_SUMMARY_LANGUAGE", DEFAULT_SUMMARY_LANGUAGE).strip()

        if not vision_model:
            raise ValueError("OPENROUTER_VISION_MODEL cannot be empty")
        if not summary_model:
            raise ValueError("OPENROUTER_SUMMARY_MODEL cannot be empty")
        if not timeout_raw:
            raise ValueError("COVERSCAN_HTTP_TIMEOUT_SECONDS cannot be empty")
        if not summary_language:
            raise ValueError("COVERSCAN_SUMMARY_LANGUAGE cannot be empty")

        base_url = _validate_http_url(name="OPENROUTER_BASE_URL", value=base_url_raw)
        catalog_url = _validate_http_url(name="COVERSCAN_CATALOG_URL", value=catalog_url_raw)
        http_timeout_seconds = _parse_positive_float(
            name="COVERSCAN_HTTP_TIMEOUT_SECONDS",
            raw_value=timeout_raw,
            minimum=0.1,
        )

        return cls(
            api_key=api_key,
            vision_model=vision_model,
            summary_model=summary_model,
            base_url=base_url,
            catalog_url=catalog_url,
            catalog_api_key=catalog_api_key,
            http_timeout_seconds=http_timeout_seconds,
            summary_language=summary_language,
        )
