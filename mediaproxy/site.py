"""Website metadata extraction and writing-style detection.

``extract_metadata`` is the only place that looks at markup. It parses with
BeautifulSoup's lenient ``html.parser`` backend, so broken or partial pages
still yield whatever title, description and heading they carry.
"""

from __future__ import annotations

import html as html_lib
import logging
import re
from typing import Any
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup
from pydantic import BaseModel

from mediaproxy.errors import ProxyError, UpstreamError, UpstreamTimeoutError, ValidationError

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5
UNKNOWN_TITLE = "Unknown Site"

PROFESSIONAL_WORDS = [
    "enterprise", "professional", "corporate", "business",
    "industry", "solution", "services",
]
CASUAL_WORDS = [
    "friendly", "easy", "simple", "fun", "awesome", "cool", "hey", "you'll love",
]

# Hits one side needs beyond the other to win
STYLE_MARGIN = 2

_TAG = re.compile(r"<[^>]*>")

_STATUS_DETAILS = {
    404: "Site not found. Please check the URL.",
    403: "Access denied. The site may be blocking automated requests.",
}
GENERIC_DETAILS = "Unable to access the site. Please check the URL and try again."


class SiteMetadata(BaseModel):
    title: str | None = None
    description: str | None = None
    heading: str | None = None


def clean_text(fragment: str | None) -> str:
    """Strip embedded tags and entities, collapse whitespace."""
    if not fragment:
        return ""
    text = html_lib.unescape(_TAG.sub("", fragment))
    return " ".join(text.split())


def _meta_tags(soup: BeautifulSoup) -> dict[str, str]:
    """Map of lower-cased meta name/property -> content, first occurrence wins."""
    tags: dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = (meta.get("property") or meta.get("name") or "").lower()
        content = meta.get("content")
        if key and content is not None and key not in tags:
            tags[key] = content
    return tags


def extract_metadata(document: str) -> SiteMetadata:
    """Extract title, description and main heading from an HTML document.

    og:title wins over <title>, og:description over meta description.
    """
    soup = BeautifulSoup(document, "html.parser")
    meta = _meta_tags(soup)
    title_tag = soup.find("title")
    h1_tag = soup.find("h1")

    # <title> may come back as raw text holding markup, depending on the parser
    title = clean_text(meta.get("og:title")) or clean_text(title_tag.get_text() if title_tag else None)
    description = clean_text(meta.get("og:description")) or clean_text(meta.get("description"))
    heading = clean_text(h1_tag.get_text() if h1_tag else None)

    return SiteMetadata(
        title=title or None,
        description=description or None,
        heading=heading or None,
    )


def classify_style(text: str) -> str:
    """Classify writing style as professional, casual or balanced.

    Counts how many keywords of each list occur (case-insensitive substring).
    """
    lowered = text.lower()
    professional = sum(1 for word in PROFESSIONAL_WORDS if word in lowered)
    casual = sum(1 for word in CASUAL_WORDS if word in lowered)

    if professional > casual + STYLE_MARGIN:
        return "professional"
    if casual > professional + STYLE_MARGIN:
        return "casual"
    return "balanced"


class SiteAnalyzer:
    """Fetches a web page and summarizes its metadata and style."""

    provider = "site"
    error_message = "Failed to analyze site"

    def __init__(
        self,
        *,
        user_agent: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> str:
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            return response.text
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(self.provider, self.error_message, GENERIC_DETAILS) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamError(
                self.provider,
                self.error_message,
                _STATUS_DETAILS.get(status, GENERIC_DETAILS),
                status_code=status,
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(self.provider, self.error_message, GENERIC_DETAILS) from e

    async def analyze(self, url: str | None) -> dict[str, Any]:
        """Analyze a site.

        Raises:
            ValidationError: URL missing or not http(s)
            UpstreamError: page could not be fetched
        """
        if not url or not url.strip():
            raise ValidationError("URL parameter is required", "Missing 'url' parameter")
        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError("Invalid URL", f"Expected an http(s) URL, got {url!r}")

        try:
            document = await self.fetch(url)
        except ProxyError as e:
            logger.warning(f"Site analysis failed for {url} ({e.status_code}): {e.__cause__}")
            raise

        metadata = extract_metadata(document)
        return {
            "url": url,
            "title": metadata.title or UNKNOWN_TITLE,
            "description": metadata.description or "",
            "mainHeading": metadata.heading or "",
            "style": classify_style(document),
            "supportsSearch": True,  # WordPress sites always expose search
        }
