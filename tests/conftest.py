"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable, Generator, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from mediaproxy.config import Settings
from mediaproxy.server import create_app

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class UpstreamStub:
    """Stand-in for every upstream API, recording the requests it receives."""

    def __init__(self) -> None:
        self.routes: list[tuple[str, Responder]] = []
        self.requests: list[httpx.Request] = []

    def add(self, url_fragment: str, responder: Responder) -> None:
        """Answer requests whose URL contains ``url_fragment``."""
        self.routes.insert(0, (url_fragment, responder))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for fragment, responder in self.routes:
            if fragment in str(request.url):
                if callable(responder):
                    return responder(request)
                return responder
        return httpx.Response(404, json={"error": f"No stub for {request.url}"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @staticmethod
    def timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    @staticmethod
    def connect_error(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture
def settings() -> Settings:
    """Settings with test keys, isolated from the environment's .env file."""
    return Settings(
        _env_file=None,
        unsplash_access_key="test_unsplash_key",
        pexels_key="test_pexels_key",
        pixabay_key="test_pixabay_key",
        imgbb_key="test_imgbb_key",
        ai_image_api_url="https://image-api.test/",
        ai_image_api_token="test_ai_token",
        allowed_origins="https://sitesorbit.io,null",
    )


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def mock_unsplash_response() -> dict:
    """Sample Unsplash API response."""
    return {
        "total": 500,
        "total_pages": 50,
        "results": [
            {
                "id": "abc123xyz",
                "width": 4000,
                "height": 3000,
                "description": "Beautiful mountain landscape",
                "alt_description": "snow covered mountain under blue sky",
                "urls": {
                    "raw": "https://images.unsplash.com/photo-abc123?ixlib=rb-4.0.3",
                    "full": "https://images.unsplash.com/photo-abc123?q=85&w=2000",
                    "regular": "https://images.unsplash.com/photo-abc123?q=80&w=1080",
                    "small": "https://images.unsplash.com/photo-abc123?q=80&w=400",
                    "thumb": "https://images.unsplash.com/photo-abc123?q=80&w=200"
                },
                "links": {
                    "self": "https://api.unsplash.com/photos/abc123xyz",
                    "html": "https://unsplash.com/photos/abc123xyz",
                },
                "likes": 1234,
                "user": {
                    "id": "user123",
                    "username": "naturephotographer",
                    "name": "John Nature",
                    "links": {"html": "https://unsplash.com/@naturephotographer"}
                }
            },
            {
                "id": "def456",
                "description": None,
                "alt_description": None,
                "urls": {
                    "raw": "https://images.unsplash.com/photo-def456",
                    "thumb": "https://images.unsplash.com/photo-def456?w=200"
                },
                "links": {"html": "https://unsplash.com/photos/def456"},
                "user": {"name": "Jane Doe", "links": {"html": "https://unsplash.com/@jane"}}
            }
        ]
    }


@pytest.fixture
def mock_pexels_response() -> dict:
    """Sample Pexels API response."""
    return {
        "total_results": 1000,
        "page": 1,
        "per_page": 10,
        "photos": [
            {
                "id": 2014422,
                "width": 3024,
                "height": 4032,
                "url": "https://www.pexels.com/photo/2014422/",
                "photographer": "Joey Bautista",
                "photographer_url": "https://www.pexels.com/@joey-bautista",
                "photographer_id": 680914,
                "avg_color": "#978E82",
                "src": {
                    "original": "https://images.pexels.com/photos/original.jpeg",
                    "large": "https://images.pexels.com/photos/large.jpeg",
                    "medium": "https://images.pexels.com/photos/medium.jpeg",
                    "small": "https://images.pexels.com/photos/small.jpeg",
                    "tiny": "https://images.pexels.com/photos/tiny.jpeg"
                },
                "liked": False,
                "alt": "Brown Rocks During Golden Hour"
            },
            {
                "id": 2014423,
                "url": "https://www.pexels.com/photo/2014423/",
                "photographer": "Ana",
                "photographer_url": "https://www.pexels.com/@ana",
                "src": {
                    "large": "https://images.pexels.com/photos/large2.jpeg",
                    "medium": "https://images.pexels.com/photos/medium2.jpeg",
                    "small": "https://images.pexels.com/photos/small2.jpeg"
                },
                "alt": ""
            }
        ],
        "next_page": "https://api.pexels.com/v1/search/?page=2&per_page=10&query=nature"
    }


@pytest.fixture
def mock_pexels_videos_response() -> dict:
    """Sample Pexels video search response."""
    return {
        "total_results": 25,
        "page": 1,
        "per_page": 12,
        "videos": [
            {
                "id": 1448735,
                "width": 4096,
                "height": 2160,
                "duration": 32,
                "url": "https://www.pexels.com/video/video-of-forest-1448735/",
                "image": "https://images.pexels.com/videos/1448735/free-video-1448735.jpg",
                "user": {
                    "id": 574687,
                    "name": "Ruvim Miksanskiy",
                    "url": "https://www.pexels.com/@digitech"
                },
                "video_files": [
                    {
                        "id": 58649,
                        "quality": "sd",
                        "file_type": "video/mp4",
                        "width": 640,
                        "height": 338,
                        "link": "https://player.vimeo.com/external/291648067.sd.mp4"
                    },
                    {
                        "id": 58650,
                        "quality": "hd",
                        "file_type": "video/mp4",
                        "width": 1920,
                        "height": 1014,
                        "link": "https://player.vimeo.com/external/291648067.hd.mp4"
                    }
                ]
            }
        ]
    }


@pytest.fixture
def mock_pixabay_response() -> dict:
    """Sample Pixabay API response."""
    return {
        "total": 500,
        "totalHits": 45,
        "hits": [
            {
                "id": 195893,
                "pageURL": "https://pixabay.com/photos/blossom-bloom-flower-195893/",
                "type": "photo",
                "tags": "blossom, bloom, flower",
                "previewURL": "https://cdn.pixabay.com/photo/preview.jpg",
                "webformatURL": "https://cdn.pixabay.com/photo/webformat.jpg",
                "largeImageURL": "https://cdn.pixabay.com/photo/large.jpg",
                "imageWidth": 4000,
                "imageHeight": 2250,
                "views": 7671,
                "downloads": 6439,
                "likes": 5,
                "comments": 2,
                "user_id": 48777,
                "user": "Josch13",
                "userImageURL": "https://cdn.pixabay.com/user/avatar.jpg"
            },
            {
                "id": 195894,
                "pageURL": "https://pixabay.com/photos/nature-landscape-195894/",
                "type": "photo",
                "tags": "",
                "previewURL": "https://cdn.pixabay.com/photo/preview2.jpg",
                "webformatURL": "https://cdn.pixabay.com/photo/webformat2.jpg",
                "views": 10000,
                "downloads": 8000,
                "likes": 100,
                "user_id": 12345,
                "user": "NatureLover"
            }
        ]
    }


@pytest.fixture
def mock_pixabay_videos_response() -> dict:
    """Sample Pixabay video search response."""
    return {
        "total": 30,
        "totalHits": 30,
        "hits": [
            {
                "id": 125,
                "pageURL": "https://pixabay.com/videos/id-125/",
                "type": "film",
                "tags": "flowers, yellow, blossom",
                "duration": 12,
                "videos": {
                    "large": {
                        "url": "https://cdn.pixabay.com/video/large.mp4",
                        "width": 1920,
                        "height": 1080,
                        "thumbnail": "https://cdn.pixabay.com/video/large.jpg"
                    },
                    "medium": {
                        "url": "https://cdn.pixabay.com/video/medium.mp4",
                        "width": 1280,
                        "height": 720,
                        "thumbnail": "https://cdn.pixabay.com/video/medium.jpg"
                    },
                    "small": {
                        "url": "https://cdn.pixabay.com/video/small.mp4",
                        "width": 960,
                        "height": 540,
                        "thumbnail": "https://cdn.pixabay.com/video/small.jpg"
                    },
                    "tiny": {
                        "url": "https://cdn.pixabay.com/video/tiny.mp4",
                        "width": 640,
                        "height": 360,
                        "thumbnail": "https://cdn.pixabay.com/video/tiny.jpg"
                    }
                },
                "views": 4462,
                "downloads": 1464,
                "likes": 18,
                "user_id": 1281706,
                "user": "Coverr-Free-Footage",
                "userImageURL": "https://cdn.pixabay.com/user/coverr.png"
            },
            {
                "id": 126,
                "pageURL": "https://pixabay.com/videos/id-126/",
                "tags": "sea",
                "duration": 5,
                "videos": {
                    "small": {
                        "url": "https://cdn.pixabay.com/video/small2.mp4",
                        "width": 960,
                        "height": 540
                    }
                },
                "user_id": 1,
                "user": "someone",
                "userImageURL": "https://cdn.pixabay.com/user/someone.png"
            }
        ]
    }


@pytest.fixture
def mock_wikipedia_response() -> dict:
    """Sample MediaWiki search-generator response."""
    return {
        "batchcomplete": "",
        "query": {
            "pages": {
                "736": {
                    "pageid": 736,
                    "title": "Albert Einstein",
                    "thumbnail": {
                        "source": "https://upload.wikimedia.org/wikipedia/commons/thumb/d/d3/Einstein.jpg/400px-Einstein.jpg",
                        "width": 400,
                        "height": 533
                    },
                    "fullurl": "https://en.wikipedia.org/wiki/Albert_Einstein"
                },
                "1234": {
                    "pageid": 1234,
                    "title": "Einstein family",
                    "fullurl": "https://en.wikipedia.org/wiki/Einstein_family"
                }
            }
        }
    }


@pytest.fixture
def mock_oembed_response() -> dict:
    """Sample YouTube oEmbed response."""
    return {
        "title": "Rick Astley - Never Gonna Give You Up (Official Music Video)",
        "author_name": "Rick Astley",
        "author_url": "https://www.youtube.com/@RickAstleyYT",
        "type": "video",
        "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        "provider_name": "YouTube",
    }


@pytest.fixture
def transcript_snippets() -> list[Any]:
    """Caption snippets shaped like youtube-transcript-api results."""
    return [
        SimpleNamespace(text="We're no strangers to love", start=0.2, duration=3.0),
        SimpleNamespace(text="  You know the rules  and so do I ", start=3.6, duration=4.0),
        SimpleNamespace(text="Never gonna give you up", start=65.0, duration=2.0),
    ]


@pytest.fixture
def transcript_fetcher(transcript_snippets) -> Callable[[str], list[Any]]:
    calls: list[str] = []

    def fetch(video_id: str) -> list[Any]:
        calls.append(video_id)
        return transcript_snippets

    fetch.calls = calls  # type: ignore[attr-defined]
    return fetch


@pytest.fixture
def api_client(settings, upstream, transcript_fetcher) -> Generator[TestClient, None, None]:
    """Test client for the full app with every upstream stubbed."""
    app = create_app(settings, transport=upstream.transport, transcript_fetcher=transcript_fetcher)
    with TestClient(app) as client:
        yield client


# Markers for test categories
def pytest_configure(config):
    config.addinivalue_line("markers", "mock: tests using mocked API responses")
    config.addinivalue_line("markers", "integration: tests requiring real API keys")
    config.addinivalue_line("markers", "slow: slow running tests")
