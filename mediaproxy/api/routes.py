"""FastAPI routes for health, YouTube, site analysis and image endpoints.

Usage:
    from fastapi import FastAPI
    from mediaproxy.api import create_router

    app = FastAPI()
    app.include_router(create_router(prefix="/api"))
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from mediaproxy.ai_image import AI_IMAGE_MODELS
from mediaproxy.api.dependencies import get_server
from mediaproxy.services import MediaProxyServer

Server = Annotated[MediaProxyServer, Depends(get_server)]


# Request models
class GenerateImageRequest(BaseModel):
    prompt: str | None = None
    model: str | None = None


class UploadImageRequest(BaseModel):
    imageData: str | None = None


# Response models
class HealthResponse(BaseModel):
    status: str
    message: str


class ModelInfo(BaseModel):
    id: str
    name: str
    description: str


class ModelsResponse(BaseModel):
    success: bool
    models: list[ModelInfo]


class UploadResponse(BaseModel):
    success: bool
    url: str
    expiration: int | str | None = None


def create_router(prefix: str = "/api", tags: list[str] | None = None) -> APIRouter:
    """Create the router for the non-search endpoints.

    Args:
        prefix: URL prefix for routes (default: /api)
        tags: OpenAPI tags

    Returns:
        APIRouter to include in FastAPI app
    """
    if tags is None:
        tags = ["media"]

    router = APIRouter(prefix=prefix, tags=tags)

    @router.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Liveness check."""
        return HealthResponse(status="ok", message="Media proxy API is running")

    @router.get("/youtube/extract")
    async def youtube_extract(
        server: Server,
        url: str | None = Query(default=None, description="YouTube video URL"),
    ) -> dict[str, Any]:
        """Video metadata plus transcript when one is available."""
        data = await server.youtube.extract(url)
        return {"success": True, "data": data}

    @router.get("/analyze-site")
    async def analyze_site(
        server: Server,
        url: str | None = Query(default=None, description="Site URL"),
    ) -> dict[str, Any]:
        """Title, description, main heading and writing style of a site."""
        site = await server.site_analyzer.analyze(url)
        return {"success": True, "site": site}

    @router.post("/ai-image/generate")
    async def generate_image(request: GenerateImageRequest, server: Server) -> dict[str, Any]:
        """Generate an image and return it as a data URI."""
        result = await server.ai_image.generate(request.prompt, request.model)
        return {"success": True, **result}

    @router.get("/ai-image/models", response_model=ModelsResponse)
    async def list_models() -> ModelsResponse:
        """Available image generation models."""
        return ModelsResponse(
            success=True,
            models=[ModelInfo(**m) for m in AI_IMAGE_MODELS],
        )

    @router.post("/imgbb/upload", response_model=UploadResponse)
    async def upload_image(request: UploadImageRequest, server: Server) -> UploadResponse:
        """Upload base64 image data to imgBB."""
        result = await server.imgbb.upload(request.imageData)
        return UploadResponse(success=True, **result)

    return router
