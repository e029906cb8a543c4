"""Immutable data carried between cover analysis stages."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum


INLINE_SCHEME = "data:"
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"

PLACEHOLDER_TITLE = "title not identified"
PLACEHOLDER_AUTHOR = "unknown author"

FAILURE_MESSAGE = "Could not analyze the cover. Please retry with a clearer image."


@dataclass(frozen=True, slots=True)
class ImageRef:
    """Caller-supplied handle to image bytes: an inline data URL or a locator to fetch."""

    value: str

    @property
    def is_inline(self) -> bool:
        return self.value.startswith(INLINE_SCHEME)


@dataclass(frozen=True, slots=True)
class EncodedImage:
    """Self-describing image payload rendered as a base64 data URL."""

    mime_type: str
    data: bytes

    def to_data_url(self) -> str:
        payload = base64.b64encode(self.data).decode("ascii")
        return f"{INLINE_SCHEME}{self.mime_type};base64,{payload}"


@dataclass(frozen=True, slots=True)
class ExtractedIdentity:
    title: str
    author: str


PLACEHOLDER_IDENTITY = ExtractedIdentity(title=PLACEHOLDER_TITLE, author=PLACEHOLDER_AUTHOR)


@dataclass(frozen=True, slots=True)
class BookMetadata:
    """Catalog-resolved book identity; cover and description stay None without a match."""

    title: str
    author: str
    cover_url: str | None = None
    description: str | None = None

    @classmethod
    def from_identity(cls, identity: ExtractedIdentity) -> "BookMetadata":
        return cls(title=identity.title, author=identity.author)

    def to_dict(self) -> dict[str, str | None]:
        return {
            "title": self.title,
            "author": self.author,
            "coverUrl": self.cover_url,
            "description": self.description,
        }


@dataclass(frozen=True, slots=True)
class BookSummary:
    title: str
    author: str
    summary: str
    cover_url: str | None = None
    description: str | None = None

    @classmethod
    def from_metadata(cls, metadata: BookMetadata, *, summary: str) -> "BookSummary":
        return cls(
            title=metadata.title,
            author=metadata.author,
            summary=summary,
            cover_url=metadata.cover_url,
            description=metadata.description,
        )

    def to_dict(self) -> dict[str, str | None]:
        return {
            "title": self.title,
            "author": self.author,
            "coverUrl": self.cover_url,
            "description": self.description,
            "summary": self.summary,
        }


class AnalysisStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SETTLED = "settled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class AnalysisFailure:
    """Tagged pipeline-level failure; never carries partial metadata."""

    stage: str
    error: str
    message: str = FAILURE_MESSAGE

    def to_dict(self) -> dict[str, str]:
        return {
            "stage": self.stage,
            "error": self.error,
            "message": self.message,
        }
