from __future__ import annotations

import pytest

from coverscan.analysis.extractor import EXTRACTION_PROMPT, VisionExtractor, parse_identity
from coverscan.analysis.models import (
    PLACEHOLDER_AUTHOR,
    PLACEHOLDER_IDENTITY,
    PLACEHOLDER_TITLE,
    ExtractedIdentity,
)


class _FakeVisionGenerator:
    def __init__(self, reply: str) -> None:
        self._reply = reply
        self.calls: list[dict[str, str]] = []

    async def generate_from_image(self, *, image_url: str, prompt: str, model: str) -> str:
        self.calls.append({"image_url": image_url, "prompt": prompt, "model": model})
        return self._reply


def test_parse_identity_accepts_strict_json_object() -> None:
    identity = parse_identity('{"title": "Dune", "author": "Frank Herbert"}')

    assert identity == ExtractedIdentity(title="Dune", author="Frank Herbert")


def test_parse_identity_tolerates_surrounding_whitespace() -> None:
    identity = parse_identity('\n  {"title": " Dune ", "author": "Frank Herbert"}  \n')

    assert identity == ExtractedIdentity(title="Dune", author="Frank Herbert")


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "",
        'The cover says {"title": "Dune", "author": "Frank Herbert"}',
        '["Dune", "Frank Herbert"]',
        "{}",
        '{"name": "Dune"}',
        "[" * 100000,
        '{"title": "Dune", "author": "Frank Herbert", "isbn": ' + "9" * 5000 + "}",
    ],
)
def test_parse_identity_falls_back_to_placeholder_pair(raw: str) -> None:
    assert parse_identity(raw) == PLACEHOLDER_IDENTITY


def test_parse_identity_replaces_unusable_fields_individually() -> None:
    assert parse_identity('{"title": "Dune", "author": ""}') == ExtractedIdentity(
        title="Dune",
        author=PLACEHOLDER_AUTHOR,
    )
    assert parse_identity('{"title": 42, "author": "Frank Herbert"}') == ExtractedIdentity(
        title=PLACEHOLDER_TITLE,
        author="Frank Herbert",
    )


@pytest.mark.asyncio
async def test_extractor_sends_image_with_fixed_instruction() -> None:
    generator = _FakeVisionGenerator('{"title": "Dune", "author": "Frank Herbert"}')
    extractor = VisionExtractor(generator, model="openai/gpt-4o-mini")

    identity = await extractor.extract("data:image/jpeg;base64,AAAA")

    assert identity == ExtractedIdentity(title="Dune", author="Frank Herbert")
    assert generator.calls == [
        {
            "image_url": "data:image/jpeg;base64,AAAA",
            "prompt": EXTRACTION_PROMPT,
            "model": "openai/gpt-4o-mini",
        }
    ]


@pytest.mark.asyncio
async def test_extractor_degrades_to_placeholder_on_prose_reply() -> None:
    extractor = VisionExtractor(_FakeVisionGenerator("I think this is Dune."), model="openai/gpt-4o-mini")

    assert await extractor.extract("data:image/jpeg;base64,AAAA") == PLACEHOLDER_IDENTITY
