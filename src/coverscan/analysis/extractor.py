"""Vision extraction of a book's title and author from a cover photo."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from coverscan.analysis.models import (
    PLACEHOLDER_AUTHOR,
    PLACEHOLDER_IDENTITY,
    PLACEHOLDER_TITLE,
    ExtractedIdentity,
)


logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = (
    "Analyze this book cover and identify the title and the author. "
    'Reply ONLY with JSON in this format: {"title": "book title", "author": "author name"}'
)


class _ImageTextGenerator(Protocol):
    async def generate_from_image(self, *, image_url: str, prompt: str, model: str) -> str:
        ...


def _field_or_placeholder(payload: dict[str, Any], key: str, placeholder: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        return placeholder
    return value.strip()


def parse_identity(raw_text: str) -> ExtractedIdentity:
    """Parse the model's JSON reply, substituting placeholders for anything unusable."""
    try:
        payload = json.loads(raw_text.strip())
    except (ValueError, RecursionError):
        return PLACEHOLDER_IDENTITY

    if not isinstance(payload, dict):
        return PLACEHOLDER_IDENTITY

    return ExtractedIdentity(
        title=_field_or_placeholder(payload, "title", PLACEHOLDER_TITLE),
        author=_field_or_placeholder(payload, "author", PLACEHOLDER_AUTHOR),
    )


class VisionExtractor:
    """Asks a vision-capable model for the title and author printed on a cover."""

    def __init__(self, generator: _ImageTextGenerator, *, model: str) -> None:
        self._generator = generator
        self._model = model

    async def extract(self, image_url: str) -> ExtractedIdentity:
        raw_text = await self._generator.generate_from_image(
            image_url=image_url,
            prompt=EXTRACTION_PROMPT,
            model=self._model,
        )
        logger.debug("Extraction raw response: %r", raw_text)

        identity = parse_identity(raw_text)
        if identity == PLACEHOLDER_IDENTITY:
            logger.warning("Extraction response was not usable JSON, searching with placeholders")
        return identity
