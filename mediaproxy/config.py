"""Configuration via environment variables.

Every field maps to the upper-cased environment variable of the same name
(``pexels_key`` -> ``PEXELS_KEY``). A ``.env`` file in the working directory
is read as well.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = "SitesOrbit/1.0 (https://sitesorbit.com; webmaster@sitesorbit.com)"


class Settings(BaseSettings):
    """Runtime configuration for the proxy server."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Provider credentials (never exposed through the API)
    unsplash_access_key: str = ""
    pexels_key: str = ""
    pixabay_key: str = ""
    imgbb_key: str = ""
    ai_image_api_url: str = "https://sitesorbit-image-api.power-mvs.workers.dev/"
    ai_image_api_token: str = ""

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: str = Field(
        default="https://sitesorbit.io,null",
        description="Comma-separated list of origins allowed for CORS",
    )
    log_level: str = "INFO"

    # Timeouts in seconds
    request_timeout: float = 30.0
    site_timeout: float = 15.0
    youtube_timeout: float = 10.0
    ai_image_timeout: float = 120.0

    user_agent: str = DEFAULT_USER_AGENT

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
