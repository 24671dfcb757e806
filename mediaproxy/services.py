"""Server object holding every adapter for the lifetime of the app."""

from __future__ import annotations

import logging

import httpx

from mediaproxy.ai_image import AIImageGenerator
from mediaproxy.config import Settings
from mediaproxy.imgbb import ImgBBUploader
from mediaproxy.providers.registry import ProviderRegistry
from mediaproxy.site import SiteAnalyzer
from mediaproxy.youtube import TranscriptFetcher, YouTubeExtractor

logger = logging.getLogger(__name__)


class MediaProxyServer:
    """Adapters configured from one ``Settings`` instance.

    Constructed once at startup and closed on shutdown. Handlers hold no
    other state.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        transcript_fetcher: TranscriptFetcher | None = None,
    ) -> None:
        self.settings = settings
        self.registry = ProviderRegistry(settings, transport=transport)
        self.youtube = YouTubeExtractor(
            timeout=settings.youtube_timeout,
            transport=transport,
            transcript_fetcher=transcript_fetcher,
        )
        self.site_analyzer = SiteAnalyzer(
            user_agent=settings.user_agent,
            timeout=settings.site_timeout,
            transport=transport,
        )
        self.ai_image = AIImageGenerator(
            settings.ai_image_api_url,
            settings.ai_image_api_token,
            timeout=settings.ai_image_timeout,
            transport=transport,
        )
        self.imgbb = ImgBBUploader(
            settings.imgbb_key,
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close all upstream connections."""
        await self.registry.close()
        for adapter in (self.youtube, self.site_analyzer, self.ai_image, self.imgbb):
            await adapter.close()
        logger.info("Upstream clients closed")
