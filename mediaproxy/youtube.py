"""YouTube video metadata and transcript extraction.

Metadata comes from the public oEmbed endpoint (no API key). The transcript
is fetched separately with youtube-transcript-api; a missing transcript is
reported as ``transcriptAvailable: false`` rather than as an error.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
from functools import partial
from typing import Any, Callable, Iterable

import httpx
from pydantic import BaseModel, Field
from youtube_transcript_api import NoTranscriptFound, YouTubeTranscriptApi

from mediaproxy.errors import (
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
    describe_upstream_response,
)

logger = logging.getLogger(__name__)

OEMBED_URL = "https://www.youtube.com/oembed"
BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

VIDEO_ID_PATTERN = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})"
)

# oEmbed status -> caller-facing message
_STATUS_MESSAGES = {
    401: "Video is unavailable or private",
    403: "Video is unavailable or private",
    404: "Video not found",
    429: "Too many requests. Please try again in a few minutes.",
}


class TranscriptSegment(BaseModel):
    timestamp: str
    seconds: int
    text: str


class Transcript(BaseModel):
    """Formatted transcript of a video."""
    text: str = ""
    segments: list[TranscriptSegment] = Field(default_factory=list)
    with_timestamps: str = ""
    word_count: int = 0
    duration_seconds: int = 0

    @property
    def available(self) -> bool:
        return bool(self.segments)


def extract_video_id(url: str) -> str:
    """Extract the 11-character video ID from any YouTube URL form.

    Raises:
        ValidationError: URL is not a recognizable YouTube video URL
    """
    match = VIDEO_ID_PATTERN.search(url or "")
    if not match:
        raise ValidationError("Invalid YouTube URL", f"Could not find a video ID in {url!r}")
    return match.group(1)


def format_timestamp(seconds: int) -> str:
    """Format seconds as H:MM:SS, or M:SS below one hour."""
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_duration(seconds: int) -> str:
    if not seconds:
        return "Unknown"
    return format_timestamp(seconds)


def _round_seconds(value: float) -> int:
    # Half-up, so 1.5s -> 2 and 2.5s -> 3
    return int(math.floor(value + 0.5))


def _snippet_fields(snippet: Any) -> tuple[str, float]:
    if isinstance(snippet, dict):
        return snippet.get("text", ""), float(snippet.get("start", 0.0))
    return snippet.text, float(snippet.start)


def build_transcript(snippets: Iterable[Any]) -> Transcript:
    """Convert caption snippets (``text``/``start`` in seconds) to a Transcript.

    Segment order follows the source order.
    """
    segments = []
    for snippet in snippets:
        text, start = _snippet_fields(snippet)
        seconds = _round_seconds(start)
        segments.append(
            TranscriptSegment(
                timestamp=format_timestamp(seconds),
                seconds=seconds,
                text=text.strip(),
            )
        )

    if not segments:
        return Transcript()

    text = " ".join(" ".join(s.text for s in segments).split())
    return Transcript(
        text=text,
        segments=segments,
        with_timestamps="\n".join(f"[{s.timestamp}] {s.text}" for s in segments),
        word_count=len(text.split()) if text else 0,
        duration_seconds=segments[-1].seconds,
    )


def fetch_transcript(video_id: str, languages: tuple[str, ...] = ("en",)) -> Any:
    """Fetch caption snippets, preferring ``languages`` but taking any track.

    Blocking; run it in an executor.
    """
    api = YouTubeTranscriptApi()
    transcripts = api.list(video_id)
    try:
        return transcripts.find_transcript(list(languages)).fetch()
    except NoTranscriptFound:
        for transcript in transcripts:
            return transcript.fetch()
        raise


TranscriptFetcher = Callable[[str], Iterable[Any]]


class YouTubeExtractor:
    """Fetches oEmbed metadata and the transcript for a video URL."""

    provider = "youtube"
    error_message = "Failed to extract YouTube video data"

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        transcript_fetcher: TranscriptFetcher | None = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport
        self._fetch_transcript = transcript_fetcher or fetch_transcript
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": BROWSER_USER_AGENT},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_metadata(self, video_id: str) -> dict[str, Any]:
        """Title, author and thumbnail from oEmbed."""
        params = {"url": f"https://www.youtube.com/watch?v={video_id}", "format": "json"}
        try:
            response = await self.client.get(OEMBED_URL, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                self.provider,
                "Request timeout - the video took too long to fetch.",
                str(e) or "oEmbed request timed out",
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamError(
                self.provider,
                _STATUS_MESSAGES.get(status, self.error_message),
                describe_upstream_response(e.response),
                status_code=status,
            ) from e
        except (httpx.RequestError, ValueError) as e:
            raise UpstreamError(self.provider, self.error_message, str(e)) from e

        if not isinstance(data, dict):
            raise UpstreamError(self.provider, self.error_message, "Malformed youtube response")
        return data

    async def fetch_transcript(self, video_id: str) -> Transcript:
        """Transcript for the video, empty when none can be fetched."""
        loop = asyncio.get_running_loop()
        try:
            # The caption client sets no timeout of its own
            snippets = await asyncio.wait_for(
                loop.run_in_executor(None, partial(self._fetch_all, video_id)),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.info(f"Transcript fetch for {video_id} exceeded {self.timeout}s")
            return Transcript()
        except Exception as e:
            logger.info(f"Transcript unavailable for {video_id}: {type(e).__name__}: {e}")
            return Transcript()

        transcript = build_transcript(snippets)
        if transcript.available:
            logger.info(
                f"Transcript processed for {video_id}: "
                f"{len(transcript.segments)} segments, {transcript.word_count} words"
            )
        else:
            logger.info(f"Transcript for {video_id} has no segments")
        return transcript

    def _fetch_all(self, video_id: str) -> list[Any]:
        """Synchronous fetch in executor."""
        return list(self._fetch_transcript(video_id))

    async def extract(self, url: str | None) -> dict[str, Any]:
        """Metadata and transcript for a YouTube URL.

        Raises:
            ValidationError: URL missing or not a YouTube video URL
            UpstreamError: oEmbed metadata could not be fetched
        """
        if not url or not url.strip():
            raise ValidationError("YouTube URL is required", "Missing 'url' parameter")
        video_id = extract_video_id(url.strip())
        logger.info(f"YouTube extraction started for {video_id}")

        metadata = await self.fetch_metadata(video_id)
        transcript = await self.fetch_transcript(video_id)

        return {
            "videoId": video_id,
            "title": metadata.get("title"),
            "description": "",  # oEmbed doesn't provide a description
            "channel": metadata.get("author_name") or "Unknown",
            "channelUrl": metadata.get("author_url"),
            "duration": format_duration(transcript.duration_seconds),
            "durationSeconds": transcript.duration_seconds,
            "thumbnail": metadata.get("thumbnail_url")
            or f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg",
            "transcript": transcript.text,
            "transcriptAvailable": transcript.available,
            "transcriptWordCount": transcript.word_count,
            "transcriptSegments": [s.model_dump() for s in transcript.segments],
            "transcriptWithTimestamps": transcript.with_timestamps,
        }
