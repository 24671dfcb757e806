"""Generic search provider driven by an endpoint descriptor.

Each upstream search API is described by a ``ProviderConfig``: where to send
the request, how to authenticate, how the query and paging parameters are
named, and which pure functions pull items and totals out of the response.
A single ``APIProvider`` class executes any descriptor.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Callable, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field

from mediaproxy.errors import ConfigurationError, ValidationError, translate_http_error

logger = logging.getLogger(__name__)


class MediaKind(str, Enum):
    """Type of media returned by a search endpoint."""
    IMAGE = "image"
    VIDEO = "video"


class ProviderAuthType(str, Enum):
    """How the provider authenticates requests."""
    QUERY_PARAM = "query_param"  # API key in URL query string
    HEADER = "header"  # API key as the value of a header
    BEARER = "bearer"  # Bearer token in Authorization header
    CLIENT_ID = "client_id"  # Authorization: Client-ID <key>
    NONE = "none"  # Public API


class MediaResult(BaseModel):
    """Uniform image result from any provider."""
    id: Union[int, str]
    url: str | None = None
    thumb: str | None = None
    full: str | None = None
    alt: str
    link: str | None = None
    photographer: str | None = None
    photographerUrl: str | None = None
    views: int | None = None
    downloads: int | None = None
    likes: int | None = None


class VideoFile(BaseModel):
    """A single rendition of a video."""
    id: Union[int, str, None] = None
    quality: str | None = None
    file_type: str | None = None
    link: str | None = None
    width: int | None = None
    height: int | None = None


class VideoUser(BaseModel):
    """Uploader of a video."""
    id: Union[int, str, None] = None
    name: str | None = None
    url: str | None = None


class VideoResult(BaseModel):
    """Uniform video result from any provider."""
    id: Union[int, str]
    width: int | None = None
    height: int | None = None
    duration: int | None = None
    image: str | None = None  # Thumbnail
    url: str | None = None  # Provider page URL
    video_files: list[VideoFile] = Field(default_factory=list)
    user: VideoUser = Field(default_factory=VideoUser)
    tags: str | None = None
    views: int | None = None
    downloads: int | None = None
    likes: int | None = None


class SearchResult(BaseModel):
    """Normalized result of one search call."""
    provider: str
    kind: MediaKind
    page: int
    per_page: int
    total: int | None = None
    total_pages: int | None = None
    results: list[MediaResult] = Field(default_factory=list)
    videos: list[VideoResult] = Field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        """Serialize to the public JSON envelope."""
        body: dict[str, Any] = {"success": True}
        if self.kind == MediaKind.VIDEO:
            body["videos"] = [v.model_dump(exclude_none=True) for v in self.videos]
        else:
            body["results"] = [r.model_dump(exclude_none=True) for r in self.results]
        if self.total is not None:
            body["total"] = self.total
            body["totalPages"] = self.total_pages
        return body


Item = dict[str, Any]
Parsed = Union[MediaResult, VideoResult]


class ProviderConfig(BaseModel):
    """Endpoint descriptor for a search API."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    name: str
    url: str
    route: str  # Path below /api
    kind: MediaKind = MediaKind.IMAGE
    auth_type: ProviderAuthType
    auth_param: str = "key"  # Query param name or header name
    key_setting: str | None = None  # Settings field holding the key
    key_env: str | None = None  # Environment variable, for messages only
    query_param: str = "query"
    page_param: str | None = "page"
    per_page_param: str | None = "per_page"
    default_per_page: int = 10
    max_per_page: int = 80
    extra_params: dict[str, Any] = Field(default_factory=dict)
    send_user_agent: bool = False
    error_message: str
    items: Callable[[dict[str, Any]], list[Item]]
    parse: Callable[[Item], Parsed]
    total: Callable[[dict[str, Any]], int | None] | None = None
    total_pages: Callable[[dict[str, Any]], int | None] | None = None

    @property
    def paginated(self) -> bool:
        return self.page_param is not None


class APIProvider:
    """Executes searches against one endpoint descriptor.

    The HTTP client is created lazily and reused across requests; call
    ``close()`` on shutdown.
    """

    def __init__(
        self,
        config: ProviderConfig,
        api_key: str = "",
        *,
        timeout: float = 30.0,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.timeout = timeout
        self.user_agent = user_agent
        self._api_key = api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def requires_key(self) -> bool:
        return self.config.auth_type != ProviderAuthType.NONE

    @property
    def api_key(self) -> str:
        """Configured API key. Never store in source."""
        if self.requires_key and not self._api_key:
            raise ConfigurationError(
                self.config.error_message,
                f"{self.config.name} API key not found. Set {self.config.key_env} environment variable.",
            )
        return self._api_key

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = self.get_auth_headers()
            if self.config.send_user_agent and self.user_agent:
                headers["User-Agent"] = self.user_agent
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def get_auth_headers(self) -> dict[str, str]:
        """Get authentication headers for requests."""
        if self.config.auth_type == ProviderAuthType.HEADER:
            return {self.config.auth_param: self.api_key}
        elif self.config.auth_type == ProviderAuthType.BEARER:
            return {"Authorization": f"Bearer {self.api_key}"}
        elif self.config.auth_type == ProviderAuthType.CLIENT_ID:
            return {"Authorization": f"Client-ID {self.api_key}"}
        return {}

    def get_auth_params(self) -> dict[str, str]:
        """Get authentication query parameters."""
        if self.config.auth_type == ProviderAuthType.QUERY_PARAM:
            return {self.config.auth_param: self.api_key}
        return {}

    def build_params(self, query: str, page: int, per_page: int) -> dict[str, Any]:
        params: dict[str, Any] = {self.config.query_param: query}
        if self.config.page_param:
            params[self.config.page_param] = page
        if self.config.per_page_param:
            params[self.config.per_page_param] = per_page
        params.update(self.config.extra_params)
        params.update(self.get_auth_params())
        return params

    async def _request(self, params: dict[str, Any]) -> dict[str, Any]:
        """Issue the single upstream call for a search."""
        try:
            response = await self.client.get(self.config.url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            error = translate_http_error(e, self.config.id, self.config.error_message)
            logger.warning(f"{self.config.name} request failed ({error.status_code}): {error.details}")
            raise error from e

        if not isinstance(data, dict):
            raise translate_http_error(
                ValueError("Unexpected response shape"), self.config.id, self.config.error_message
            )
        return data

    async def search(
        self,
        query: str | None,
        *,
        page: int = 1,
        per_page: int | None = None,
    ) -> SearchResult:
        """Search the provider and normalize the response.

        Args:
            query: Search term (required, non-blank)
            page: Page number, starting at 1
            per_page: Results per page (provider default when omitted)

        Raises:
            ValidationError: query missing or paging out of range
            ConfigurationError: provider key not configured
            UpstreamError: upstream call failed
        """
        if query is None or not query.strip():
            raise ValidationError("Query parameter is required", "Missing 'query' parameter")
        if per_page is None:
            per_page = self.config.default_per_page
        if page < 1 or per_page < 1:
            raise ValidationError("Invalid pagination", "'page' and 'per_page' must be positive integers")
        per_page = min(per_page, self.config.max_per_page)

        params = self.build_params(query.strip(), page, per_page)
        data = await self._request(params)

        try:
            parsed = [self.config.parse(item) for item in self.config.items(data)]
            total = self.config.total(data) if self.config.total else None
        except (KeyError, TypeError, ValueError) as e:
            error = translate_http_error(ValueError(str(e)), self.config.id, self.config.error_message)
            logger.warning(f"{self.config.name} response could not be normalized: {e!r}")
            raise error from e

        if self.config.total_pages:
            total_pages = self.config.total_pages(data)
        elif total is not None:
            total_pages = math.ceil(total / per_page)
        else:
            total_pages = None

        result = SearchResult(
            provider=self.config.id,
            kind=self.config.kind,
            page=page,
            per_page=per_page,
            total=total,
            total_pages=total_pages,
        )
        if self.config.kind == MediaKind.VIDEO:
            result.videos = [p for p in parsed if isinstance(p, VideoResult)]
        else:
            result.results = [p for p in parsed if isinstance(p, MediaResult)]
        return result

    def describe(self) -> dict[str, Any]:
        """Provider summary for listings (excludes API key)."""
        return {
            "id": self.config.id,
            "name": self.config.name,
            "route": self.config.route,
            "kind": self.config.kind.value,
            "authType": self.config.auth_type.value,
            "keyEnv": self.config.key_env,
            "configured": bool(self._api_key) or not self.requires_key,
            "timeout": self.timeout,
        }
