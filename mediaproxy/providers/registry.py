"""Provider registry.

Builds one ``APIProvider`` per endpoint descriptor with credentials and
timeouts taken from ``Settings``.
"""

from __future__ import annotations

import httpx

from mediaproxy.config import Settings
from mediaproxy.providers.base import APIProvider, ProviderConfig
from mediaproxy.providers.pexels import PEXELS_CONFIG, PEXELS_VIDEOS_CONFIG
from mediaproxy.providers.pixabay import PIXABAY_CONFIG, PIXABAY_VIDEOS_CONFIG
from mediaproxy.providers.unsplash import UNSPLASH_CONFIG
from mediaproxy.providers.wikipedia import WIKIPEDIA_CONFIG


# Built-in search endpoints, in route order
PROVIDER_CONFIGS: list[ProviderConfig] = [
    UNSPLASH_CONFIG,
    PEXELS_CONFIG,
    PEXELS_VIDEOS_CONFIG,
    PIXABAY_CONFIG,
    PIXABAY_VIDEOS_CONFIG,
    WIKIPEDIA_CONFIG,
]


class ProviderRegistry:
    """Registry of all search providers."""

    def __init__(
        self,
        settings: Settings,
        configs: list[ProviderConfig] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize registry.

        Args:
            settings: Source of API keys, timeouts and User-Agent
            configs: Endpoint descriptors (defaults to all built-in providers)
            transport: Optional httpx transport shared by every provider client
        """
        self.settings = settings
        self._providers: dict[str, APIProvider] = {}

        for config in configs if configs is not None else PROVIDER_CONFIGS:
            api_key = getattr(settings, config.key_setting, "") if config.key_setting else ""
            self._providers[config.id] = APIProvider(
                config,
                api_key,
                timeout=settings.request_timeout,
                user_agent=settings.user_agent,
                transport=transport,
            )

    def get(self, provider_id: str) -> APIProvider | None:
        """Get a specific provider by ID."""
        return self._providers.get(provider_id)

    def __getitem__(self, provider_id: str) -> APIProvider:
        return self._providers[provider_id]

    def list_providers(self) -> list[str]:
        """List all provider IDs."""
        return list(self._providers.keys())

    def describe(self) -> list[dict]:
        """Provider summaries (no API keys)."""
        return [p.describe() for p in self._providers.values()]

    async def close(self) -> None:
        """Close all provider connections."""
        for provider in self._providers.values():
            await provider.close()
