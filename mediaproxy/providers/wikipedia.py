"""Wikipedia page image search.

Uses the MediaWiki query API with a search generator. Public, but requests
without a descriptive User-Agent are rejected with 403.
"""

from __future__ import annotations

import re
from typing import Any

from mediaproxy.providers.base import MediaResult, ProviderAuthType, ProviderConfig

_THUMB_WIDTH = re.compile(r"/\d+px-")


def full_size_url(thumb_url: str) -> str:
    """Rewrite a thumbnail URL to the 800px rendition."""
    return _THUMB_WIDTH.sub("/800px-", thumb_url, count=1)


def pages_with_thumbnails(data: dict[str, Any]) -> list[dict[str, Any]]:
    pages = (data.get("query") or {}).get("pages") or {}
    return [
        page for page in pages.values()
        if (page.get("thumbnail") or {}).get("source")
    ]


def parse_page(page: dict[str, Any]) -> MediaResult:
    """Parse a Wikipedia page with a thumbnail to unified format."""
    source = page["thumbnail"]["source"]
    return MediaResult(
        id=page.get("pageid", ""),
        url=source,
        thumb=source,
        full=full_size_url(source),
        alt=page.get("title") or "Wikipedia image",
        link=page.get("fullurl"),
    )


WIKIPEDIA_CONFIG = ProviderConfig(
    id="wikipedia",
    name="Wikipedia",
    url="https://en.wikipedia.org/w/api.php",
    route="/wikipedia/search",
    auth_type=ProviderAuthType.NONE,
    query_param="gsrsearch",
    page_param=None,
    per_page_param=None,
    extra_params={
        "action": "query",
        "generator": "search",
        "gsrlimit": 6,
        "prop": "pageimages|info",
        "inprop": "url",
        "pithumbsize": 400,
        "format": "json",
        "pilicense": "free",
        "origin": "*",
    },
    send_user_agent=True,
    error_message="Failed to fetch Wikipedia images",
    items=pages_with_thumbnails,
    parse=parse_page,
)
