"""Pixabay API provider (images and videos).

API Documentation: https://pixabay.com/api/docs/

Authentication: API key as query parameter
"""

from __future__ import annotations

from typing import Any

from mediaproxy.providers.base import (
    MediaKind,
    MediaResult,
    ProviderAuthType,
    ProviderConfig,
    VideoFile,
    VideoResult,
    VideoUser,
)

FALLBACK_ALT = "Pixabay image"

# Pixabay rendition name -> exposed quality label, best first
VIDEO_QUALITIES = [
    ("large", "hd"),
    ("medium", "sd"),
    ("small", "low"),
    ("tiny", "tiny"),
]

DEFAULT_VIDEO_WIDTH = 1920
DEFAULT_VIDEO_HEIGHT = 1080


def user_url(hit: dict[str, Any]) -> str | None:
    """Profile page of the uploader, None when the hit lacks user or user_id."""
    if not hit.get("user") or hit.get("user_id") is None:
        return None
    return f"https://pixabay.com/users/{hit['user']}-{hit['user_id']}/"


def parse_image(hit: dict[str, Any]) -> MediaResult:
    """Parse Pixabay image response to unified format."""
    return MediaResult(
        id=hit.get("id", ""),
        url=hit.get("webformatURL"),
        thumb=hit.get("previewURL"),
        full=hit.get("largeImageURL") or hit.get("webformatURL"),
        alt=hit.get("tags") or FALLBACK_ALT,
        link=hit.get("pageURL"),
        views=hit.get("views"),
        downloads=hit.get("downloads"),
        likes=hit.get("likes"),
    )


def parse_video(hit: dict[str, Any]) -> VideoResult:
    """Parse Pixabay video response to unified format."""
    renditions = hit.get("videos") or {}

    video_files = []
    for name, quality in VIDEO_QUALITIES:
        rendition = renditions.get(name)
        if rendition:
            video_files.append(
                VideoFile(
                    quality=quality,
                    link=rendition.get("url"),
                    width=rendition.get("width"),
                    height=rendition.get("height"),
                )
            )

    large = renditions.get("large") or {}
    medium = renditions.get("medium") or {}
    thumbnail = (
        (renditions.get("tiny") or {}).get("thumbnail")
        or (renditions.get("small") or {}).get("thumbnail")
        or hit.get("userImageURL")
    )

    return VideoResult(
        id=hit.get("id", ""),
        width=large.get("width") or medium.get("width") or DEFAULT_VIDEO_WIDTH,
        height=large.get("height") or medium.get("height") or DEFAULT_VIDEO_HEIGHT,
        duration=hit.get("duration"),
        image=thumbnail,
        url=hit.get("pageURL"),
        video_files=video_files,
        user=VideoUser(id=hit.get("user_id"), name=hit.get("user"), url=user_url(hit)),
        tags=hit.get("tags"),
        views=hit.get("views"),
        downloads=hit.get("downloads"),
        likes=hit.get("likes"),
    )


PIXABAY_CONFIG = ProviderConfig(
    id="pixabay",
    name="Pixabay",
    url="https://pixabay.com/api/",
    route="/pixabay/search",
    auth_type=ProviderAuthType.QUERY_PARAM,
    auth_param="key",
    key_setting="pixabay_key",
    key_env="PIXABAY_KEY",
    query_param="q",
    max_per_page=200,
    extra_params={"image_type": "photo", "safesearch": "true"},
    error_message="Failed to fetch Pixabay images",
    items=lambda data: data.get("hits") or [],
    parse=parse_image,
    total=lambda data: data.get("totalHits", 0),
)

PIXABAY_VIDEOS_CONFIG = ProviderConfig(
    id="pixabay-videos",
    name="Pixabay Videos",
    url="https://pixabay.com/api/videos/",
    route="/pixabay/videos",
    kind=MediaKind.VIDEO,
    auth_type=ProviderAuthType.QUERY_PARAM,
    auth_param="key",
    key_setting="pixabay_key",
    key_env="PIXABAY_KEY",
    query_param="q",
    default_per_page=12,
    max_per_page=200,
    extra_params={"video_type": "all", "safesearch": "true"},
    error_message="Failed to fetch Pixabay videos",
    items=lambda data: data.get("hits") or [],
    parse=parse_video,
    total=lambda data: data.get("totalHits", 0),
)
