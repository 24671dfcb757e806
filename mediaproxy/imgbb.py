"""imgBB image upload adapter.

Images are uploaded with a fixed expiration, so hosted copies disappear
after three hours.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from mediaproxy.errors import ConfigurationError, UpstreamError, ValidationError, translate_http_error

logger = logging.getLogger(__name__)

UPLOAD_URL = "https://api.imgbb.com/1/upload"
EXPIRATION_SECONDS = 10800  # 3 hours

_DATA_URI = re.compile(r"^data:image/[\w.+-]+;base64,(.+)$", re.DOTALL)


def parse_image_data(image_data: str | None) -> str:
    """Return the base64 payload of raw base64 or an image data URI.

    Raises:
        ValidationError: input missing, or a data URI that is not base64 image data
    """
    if image_data is None or not image_data.strip():
        raise ValidationError("Image data is required", "Missing 'imageData' in request body")
    image_data = image_data.strip()
    if not image_data.startswith("data:"):
        return image_data

    match = _DATA_URI.match(image_data)
    if not match:
        raise ValidationError(
            "Invalid image data URL format",
            "Expected data:image/<type>;base64,<data>",
        )
    return match.group(1)


class ImgBBUploader:
    """Client for the imgBB upload API."""

    provider = "imgbb"
    error_message = "Failed to upload image to imgBB"

    def __init__(
        self,
        api_key: str = "",
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def upload(self, image_data: str | None) -> dict[str, Any]:
        """Upload an image and return its hosted URL and expiration."""
        payload = parse_image_data(image_data)
        if not self.api_key:
            raise ConfigurationError(
                self.error_message, "imgBB API key not found. Set IMGBB_KEY environment variable."
            )

        form = {
            "key": self.api_key,
            "image": payload,
            "expiration": str(EXPIRATION_SECONDS),
        }
        try:
            response = await self.client.post(UPLOAD_URL, data=form)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            error = translate_http_error(e, self.provider, self.error_message)
            logger.warning(f"imgBB upload failed ({error.status_code}): {error.details}")
            raise error from e

        data = body.get("data") if isinstance(body, dict) else None
        if not (isinstance(body, dict) and body.get("success") and isinstance(data, dict) and data.get("url")):
            raise UpstreamError(self.provider, self.error_message, "Invalid response from imgBB")

        return {"url": data["url"], "expiration": data.get("expiration")}
