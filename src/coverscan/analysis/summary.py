"""Prose summary generation conditioned on catalog description availability."""

from __future__ import annotations

import logging
from typing import Protocol

from coverscan.analysis.config import DEFAULT_SUMMARY_LANGUAGE
from coverscan.analysis.models import BookMetadata, BookSummary


logger = logging.getLogger(__name__)


class _TextGenerator(Protocol):
    async def generate_text(self, *, prompt: str, model: str, system_prompt: str | None = None) -> str:
        ...


def build_summary_prompt(metadata: BookMetadata) -> str:
    """Pick the description-grounded or background-knowledge prompt variant."""
    opening = f'Write a concise summary of the book "{metadata.title}" by {metadata.author} in about 10 lines.'
    closing = "Make the summary clear, well structured and faithful to the book."

    if metadata.description:
        return f"{opening} Here is the official description: {metadata.description}. {closing}"
    return (
        f"{opening} No official description is available, so rely on your own knowledge of the book. "
        f"{closing}"
    )


def build_language_instruction(language: str) -> str:
    return f"Respond in {language}."


class SummaryGenerator:
    def __init__(
        self,
        generator: _TextGenerator,
        *,
        model: str,
        language: str = DEFAULT_SUMMARY_LANGUAGE,
    ) -> None:
        self._generator = generator
        self._model = model
        self._language = language

    async def summarize(self, metadata: BookMetadata) -> BookSummary:
        prompt = build_summary_prompt(metadata)
        logger.debug(
            "Summary prompt variant: %s",
            "description" if metadata.description else "background knowledge",
        )
        summary = await self._generator.generate_text(
            prompt=prompt,
            model=self._model,
            system_prompt=build_language_instruction(self._language),
        )
        return BookSummary.from_metadata(metadata, summary=summary)
