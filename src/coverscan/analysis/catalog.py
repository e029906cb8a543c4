"""Google Books lookup that turns an extracted identity into book metadata."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from coverscan.analysis.config import DEFAULT_CATALOG_URL
from coverscan.analysis.models import BookMetadata, ExtractedIdentity


logger = logging.getLogger(__name__)

# Larger thumbnails first.
_THUMBNAIL_KEYS = ("thumbnail", "smallThumbnail")


def build_search_query(identity: ExtractedIdentity) -> str:
    return f"{identity.title} {identity.author}"


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first_author(value: Any) -> str | None:
    if not isinstance(value, list) or not value:
        return None
    return _optional_text(value[0])


def _cover_url(image_links: Any) -> str | None:
    if not isinstance(image_links, dict):
        return None
    for key in _THUMBNAIL_KEYS:
        url = _optional_text(image_links.get(key))
        if url is not None:
            return url
    return None


def metadata_from_volume(volume_info: Any, identity: ExtractedIdentity) -> BookMetadata:
    """Map one catalog ``volumeInfo`` object, keeping extracted values for missing fields."""
    if not isinstance(volume_info, dict):
        return BookMetadata.from_identity(identity)

    return BookMetadata(
        title=_optional_text(volume_info.get("title")) or identity.title,
        author=_first_author(volume_info.get("authors")) or identity.author,
        cover_url=_cover_url(volume_info.get("imageLinks")),
        description=_optional_text(volume_info.get("description")),
    )


def metadata_from_payload(payload: Any, identity: ExtractedIdentity) -> BookMetadata:
    if not isinstance(payload, dict):
        return BookMetadata.from_identity(identity)

    items = payload.get("items")
    if not isinstance(items, list) or not items:
        return BookMetadata.from_identity(identity)

    first = items[0]
    volume_info = first.get("volumeInfo") if isinstance(first, dict) else None
    return metadata_from_volume(volume_info, identity)


class CatalogResolver:
    """Resolves identities against the catalog, falling back to them on any failure."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        catalog_url: str = DEFAULT_CATALOG_URL,
        api_key: str | None = None,
    ) -> None:
        self._client = client
        self._catalog_url = catalog_url
        self._api_key = api_key

    async def resolve(self, identity: ExtractedIdentity) -> BookMetadata:
        params = {"q": build_search_query(identity), "maxResults": "1"}
        if self._api_key:
            params["key"] = self._api_key

        try:
            response = await self._client.get(self._catalog_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Catalog lookup failed for %r, using extracted identity: %s", params["q"], exc)
            return BookMetadata.from_identity(identity)

        metadata = metadata_from_payload(payload, identity)
        logger.info("Catalog resolved %r to %r by %r", params["q"], metadata.title, metadata.author)
        return metadata
