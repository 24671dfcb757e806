"""FastAPI routes for the search providers.

One GET route per endpoint descriptor, e.g. ``/api/unsplash/search``.

Usage:
    from fastapi import FastAPI
    from mediaproxy.providers.routes import create_provider_router

    app = FastAPI()
    app.include_router(create_provider_router(prefix="/api"))
"""

from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Depends, Query

from mediaproxy.api.dependencies import get_server
from mediaproxy.providers.base import ProviderConfig
from mediaproxy.providers.registry import PROVIDER_CONFIGS


def _search_endpoint(config: ProviderConfig) -> Callable[..., Any]:
    provider_id = config.id

    async def search(
        query: str | None = Query(default=None, description="Search query"),
        page: int = Query(default=1),
        per_page: int | None = Query(default=None),
        server=Depends(get_server),
    ) -> dict[str, Any]:
        provider = server.registry[provider_id]
        result = await provider.search(query, page=page, per_page=per_page)
        return result.to_response()

    search.__name__ = f"search_{provider_id.replace('-', '_')}"
    search.__doc__ = f"Search {config.name}."
    return search


def create_provider_router(
    prefix: str = "/api",
    tags: list[str] | None = None,
    configs: list[ProviderConfig] | None = None,
) -> APIRouter:
    """Create FastAPI router for provider search.

    Args:
        prefix: URL prefix for routes (default: /api)
        tags: OpenAPI tags
        configs: Endpoint descriptors to expose (default: all built-in)

    Returns:
        APIRouter to include in FastAPI app
    """
    if tags is None:
        tags = ["search"]

    router = APIRouter(prefix=prefix, tags=tags)

    for config in configs if configs is not None else PROVIDER_CONFIGS:
        router.add_api_route(config.route, _search_endpoint(config), methods=["GET"])

    return router
