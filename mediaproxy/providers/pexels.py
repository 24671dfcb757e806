"""Pexels API provider (photos and videos).

API Documentation: https://www.pexels.com/api/documentation/

Authentication: API key in Authorization header

Attribution Required:
- Must show "Photos provided by Pexels" with link
- Credit photographers when possible
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

FALLBACK_ALT = "Pexels image"


def parse_photo(photo: dict[str, Any]) -> MediaResult:
    """Parse Pexels photo response to unified format."""
    src = photo.get("src") or {}

    return MediaResult(
        id=photo.get("id", ""),
        url=src.get("medium"),
        thumb=src.get("small"),
        full=src.get("large"),
        alt=photo.get("alt") or FALLBACK_ALT,
        link=photo.get("url"),
        photographer=photo.get("photographer"),
        photographerUrl=photo.get("photographer_url"),
    )


def parse_video(video: dict[str, Any]) -> VideoResult:
    """Parse Pexels video response to unified format."""
    user = video.get("user") or {}

    return VideoResult(
        id=video.get("id", ""),
        width=video.get("width"),
        height=video.get("height"),
        duration=video.get("duration"),
        image=video.get("image"),
        url=video.get("url"),
        video_files=[
            VideoFile(
                id=vf.get("id"),
                quality=vf.get("quality"),
                file_type=vf.get("file_type"),
                width=vf.get("width"),
                height=vf.get("height"),
                link=vf.get("link"),
            )
            for vf in video.get("video_files") or []
        ],
        user=VideoUser(id=user.get("id"), name=user.get("name"), url=user.get("url")),
    )


PEXELS_CONFIG = ProviderConfig(
    id="pexels",
    name="Pexels",
    url="https://api.pexels.com/v1/search",
    route="/pexels/search",
    auth_type=ProviderAuthType.HEADER,
    auth_param="Authorization",
    key_setting="pexels_key",
    key_env="PEXELS_KEY",
    max_per_page=80,
    error_message="Failed to fetch Pexels images",
    items=lambda data: data.get("photos") or [],
    parse=parse_photo,
    total=lambda data: data.get("total_results", 0),
)

PEXELS_VIDEOS_CONFIG = ProviderConfig(
    id="pexels-videos",
    name="Pexels Videos",
    url="https://api.pexels.com/videos/search",
    route="/pexels/videos",
    kind=MediaKind.VIDEO,
    auth_type=ProviderAuthType.HEADER,
    auth_param="Authorization",
    key_setting="pexels_key",
    key_env="PEXELS_KEY",
    default_per_page=12,
    max_per_page=80,
    error_message="Failed to fetch Pexels videos",
    items=lambda data: data.get("videos") or [],
    parse=parse_video,
    total=lambda data: data.get("total_results", 0),
)
