"""Tests for the imgBB upload adapter."""

from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from mediaproxy.errors import ConfigurationError, UpstreamError, ValidationError
from mediaproxy.imgbb import EXPIRATION_SECONDS, ImgBBUploader, parse_image_data

IMGBB_SUCCESS = {
    "data": {
        "id": "2ndCYJK",
        "url": "https://i.ibb.co/w04Prt6/c1f64245afb2.gif",
        "expiration": "10800",
    },
    "success": True,
    "status": 200,
}


class TestParseImageData:
    """Tests for data URI handling."""

    def test_data_uri(self):
        assert parse_image_data("data:image/png;base64,AAAA") == "AAAA"

    def test_svg_data_uri(self):
        assert parse_image_data("data:image/svg+xml;base64,PHN2Zz4=") == "PHN2Zz4="

    def test_raw_base64(self):
        assert parse_image_data("iVBORw0KGgo=") == "iVBORw0KGgo="

    @pytest.mark.parametrize(
        "value",
        [
            "data:image/png,notbase64",
            "data:image/png;base64,",
            "data:text/plain;base64,AAAA",
        ],
    )
    def test_malformed_data_uri(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_image_data(value)
        assert exc_info.value.message == "Invalid image data URL format"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_image_data(value)
        assert exc_info.value.message == "Image data is required"


@pytest.mark.mock
class TestImgBBUploader:
    """Tests for uploads with a stubbed imgBB."""

    @pytest.mark.asyncio
    async def test_upload(self, upstream):
        upstream.add("api.imgbb.com", httpx.Response(200, json=IMGBB_SUCCESS))
        uploader = ImgBBUploader("test_imgbb_key", transport=upstream.transport)

        result = await uploader.upload("data:image/png;base64,AAAA")

        assert result == {"url": "https://i.ibb.co/w04Prt6/c1f64245afb2.gif", "expiration": "10800"}

        form = parse_qs(upstream.last_request.content.decode())
        assert form["key"] == ["test_imgbb_key"]
        assert form["image"] == ["AAAA"]
        assert form["expiration"] == [str(EXPIRATION_SECONDS)]
        await uploader.close()

    @pytest.mark.asyncio
    async def test_malformed_data_uri_makes_no_call(self, upstream):
        uploader = ImgBBUploader("test_imgbb_key", transport=upstream.transport)

        with pytest.raises(ValidationError):
            await uploader.upload("data:image/png,notbase64")
        assert upstream.call_count == 0

    @pytest.mark.asyncio
    async def test_missing_key(self, upstream):
        uploader = ImgBBUploader("", transport=upstream.transport)

        with pytest.raises(ConfigurationError):
            await uploader.upload("AAAA")
        assert upstream.call_count == 0

    @pytest.mark.asyncio
    async def test_invalid_response(self, upstream):
        upstream.add("api.imgbb.com", httpx.Response(200, json={"success": True, "data": {}}))
        uploader = ImgBBUploader("test_imgbb_key", transport=upstream.transport)

        with pytest.raises(UpstreamError) as exc_info:
            await uploader.upload("AAAA")

        assert exc_info.value.status_code == 500
        assert exc_info.value.details == "Invalid response from imgBB"
        await uploader.close()

    @pytest.mark.asyncio
    async def test_upstream_error(self, upstream):
        upstream.add(
            "api.imgbb.com",
            httpx.Response(400, json={"status_code": 400, "error": {"message": "Invalid API v1 key.", "code": 100}}),
        )
        uploader = ImgBBUploader("bad", transport=upstream.transport)

        with pytest.raises(UpstreamError) as exc_info:
            await uploader.upload("AAAA")

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == "Invalid API v1 key."
        await uploader.close()
