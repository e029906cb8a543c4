"""Normalize caller image references into inline base64 data URLs."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import mimetypes
from pathlib import Path
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import httpx

from coverscan.analysis.models import DEFAULT_IMAGE_MIME_TYPE, EncodedImage, ImageRef


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImageFetchError(RuntimeError):
    """Domain error raised when an image reference cannot be loaded or encoded."""

    locator: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (locator={self.locator})"


def _resolve_mime_type(content_type: str | None, locator: str) -> str:
    if content_type:
        declared = content_type.split(";", 1)[0].strip().lower()
        if declared.startswith("image/"):
            return declared

    guessed, _ = mimetypes.guess_type(locator)
    if guessed and guessed.startswith("image/"):
        return guessed
    return DEFAULT_IMAGE_MIME_TYPE


def _local_path(locator: str) -> Path:
    parsed = urlparse(locator)
    if parsed.scheme == "file":
        return Path(url2pathname(unquote(parsed.path)))
    return Path(locator).expanduser()


async def _fetch_remote(locator: str, client: httpx.AsyncClient) -> EncodedImage:
    try:
        response = await client.get(locator, follow_redirects=True)
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise ImageFetchError(locator=locator, message=f"Image download failed: {exc}") from exc

    if not response.content:
        raise ImageFetchError(locator=locator, message="Image download returned no bytes")

    mime_type = _resolve_mime_type(response.headers.get("content-type"), locator)
    return EncodedImage(mime_type=mime_type, data=response.content)


async def _read_local(locator: str) -> EncodedImage:
    try:
        path = _local_path(locator)
        data = await asyncio.to_thread(path.read_bytes)
    except (OSError, ValueError) as exc:
        raise ImageFetchError(locator=locator, message=f"Image file could not be read: {exc}") from exc

    if not data:
        raise ImageFetchError(locator=locator, message="Image file is empty")

    return EncodedImage(mime_type=_resolve_mime_type(None, path.name), data=data)


async def normalize_image(ref: ImageRef, *, client: httpx.AsyncClient) -> str:
    """Return the inline data URL for ``ref``, fetching and encoding locators first.

    Inline references are returned unchanged.
    """
    if ref.is_inline:
        return ref.value

    locator = ref.value.strip()
    if not locator:
        raise ImageFetchError(locator=ref.value, message="Image reference is empty")

    try:
        parsed = urlparse(locator)
    except ValueError as exc:
        raise ImageFetchError(locator=locator, message=f"Image locator is malformed: {exc}") from exc

    if parsed.scheme.lower() in {"http", "https"}:
        if not parsed.hostname:
            raise ImageFetchError(locator=locator, message="Image locator is malformed: missing host")
        image = await _fetch_remote(locator, client)
    else:
        image = await _read_local(locator)

    logger.debug("Encoded %s bytes from %s as %s", len(image.data), locator, image.mime_type)
    return image.to_data_url()
