"""Unsplash API provider.

API Documentation: https://unsplash.com/documentation

Authentication: Client-ID header (Authorization: Client-ID ACCESS_KEY)

Attribution Required:
- Must credit photographer and Unsplash
- Hotlinking is required (use returned URLs directly)
"""

from __future__ import annotations

from typing import Any

from mediaproxy.providers.base import MediaResult, ProviderAuthType, ProviderConfig

FALLBACK_ALT = "Unsplash image"

# Served size limit, aspect ratio kept
RESIZE_PARAMS = "w=800&h=600&fit=max"


def resize_url(raw_url: str | None) -> str | None:
    """Append the resize parameters to a raw Unsplash image URL."""
    if not raw_url:
        return raw_url
    separator = "&" if "?" in raw_url else "?"
    return f"{raw_url}{separator}{RESIZE_PARAMS}"


def parse_photo(photo: dict[str, Any]) -> MediaResult:
    """Parse Unsplash photo response to unified format."""
    urls = photo.get("urls") or {}
    user = photo.get("user") or {}
    resized = resize_url(urls.get("raw"))

    return MediaResult(
        id=photo.get("id", ""),
        url=resized,
        thumb=urls.get("thumb"),
        full=resized,
        alt=photo.get("alt_description") or photo.get("description") or FALLBACK_ALT,
        link=(photo.get("links") or {}).get("html"),
        photographer=user.get("name"),
        photographerUrl=(user.get("links") or {}).get("html"),
    )


UNSPLASH_CONFIG = ProviderConfig(
    id="unsplash",
    name="Unsplash",
    url="https://api.unsplash.com/search/photos",
    route="/unsplash/search",
    auth_type=ProviderAuthType.CLIENT_ID,
    key_setting="unsplash_access_key",
    key_env="UNSPLASH_ACCESS_KEY",
    max_per_page=30,
    error_message="Failed to fetch Unsplash images",
    items=lambda data: data.get("results") or [],
    parse=parse_photo,
    total=lambda data: data.get("total"),
    total_pages=lambda data: data.get("total_pages"),
)
