"""AI image generation adapter.

The generator endpoint takes a JSON prompt and answers with raw image bytes,
which are returned to the caller inline as a base64 data URI.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from mediaproxy.errors import ConfigurationError, ValidationError, translate_http_error

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/png"
DEFAULT_MODEL = "default"

AI_IMAGE_MODELS: list[dict[str, str]] = [
    {
        "id": DEFAULT_MODEL,
        "name": "Default Model",
        "description": "SitesOrbit AI Image Generation",
    },
]


def model_ids() -> list[str]:
    return [m["id"] for m in AI_IMAGE_MODELS]


def to_data_uri(content: bytes, content_type: str | None) -> str:
    """Encode image bytes as a data URI."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type or DEFAULT_CONTENT_TYPE};base64,{encoded}"


class AIImageGenerator:
    """Client for the image generation endpoint."""

    provider = "ai-image"
    error_message = "Failed to generate AI image"

    def __init__(
        self,
        api_url: str,
        api_token: str = "",
        *,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self.api_token = api_token
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

    async def generate(self, prompt: str | None, model: str | None = None) -> dict[str, Any]:
        """Generate an image for a prompt.

        Returns:
            ``imageUrl`` (data URI), the echoed ``prompt`` and ``model``, and
            ``format`` (upstream content type, image/png when absent)

        Raises:
            ValidationError: prompt missing or unknown model
            UpstreamError: generator call failed or timed out
        """
        if prompt is None or not prompt.strip():
            raise ValidationError("Prompt is required", "Missing 'prompt' in request body")
        model = model or DEFAULT_MODEL
        if model not in model_ids():
            raise ValidationError(
                "Unknown model",
                f"Model {model!r} is not available; choose one of {', '.join(model_ids())}",
            )
        if not self.api_url:
            raise ConfigurationError(self.error_message, "Set AI_IMAGE_API_URL environment variable.")

        payload: dict[str, Any] = {"prompt": prompt}
        if model != DEFAULT_MODEL:
            payload["model"] = model

        headers = {"Authorization": f"Bearer {self.api_token}"} if self.api_token else {}

        try:
            response = await self.client.post(self.api_url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            error = translate_http_error(e, self.provider, self.error_message)
            logger.warning(f"AI image generation failed ({error.status_code}): {error.details}")
            raise error from e

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        return {
            "imageUrl": to_data_uri(response.content, content_type),
            "prompt": prompt,
            "model": model,
            "format": content_type,
        }
