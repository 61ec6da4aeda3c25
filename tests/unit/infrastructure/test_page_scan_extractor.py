"""Tests for the fallback page-scan extractor and the embed host table."""

from __future__ import annotations

import pytest

from streamhop.infrastructure.hoster_resolvers import (
    EMBED_HOSTS,
    PageScanExtractor,
    classify_host,
)
from streamhop.infrastructure.hoster_resolvers._video_extract import extract_video_url


class TestExtractVideoUrl:
    def test_hls2_config(self) -> None:
        html = '<script>var links = {"hls2":"https://cdn.x/hls2/master.m3u8?t=1"};</script>'
        assert extract_video_url(html) == "https://cdn.x/hls2/master.m3u8?t=1"

    def test_packed_script(self, dropload_embed_html: str) -> None:
        assert extract_video_url(dropload_embed_html) == (
            "https://cdn.dropload.io/hls2/xyzabc/master.m3u8"
        )

    def test_sources_file(self) -> None:
        html = 'jwplayer("v").setup({sources:[{file:"https://cdn.x/v/movie.mp4",label:"720p"}]});'
        assert extract_video_url(html) == "https://cdn.x/v/movie.mp4"

    def test_source_tag(self) -> None:
        html = '<video><source src="https://cdn.x/v/clip" type="video/mp4"></video>'
        assert extract_video_url(html) == "https://cdn.x/v/clip"

    def test_video_tag(self) -> None:
        html = '<video controls src="https://cdn.x/v/clip"></video>'
        assert extract_video_url(html) == "https://cdn.x/v/clip"

    def test_skips_thumbnail_artifacts(self) -> None:
        html = '<video><source src="https://cdn.x/thumbnails/sprite.jpg"></video>'
        assert extract_video_url(html) is None

    def test_quoted_hls(self) -> None:
        html = "<script>player.load('https://cdn.x/p/index.m3u8');</script>"
        assert extract_video_url(html) == "https://cdn.x/p/index.m3u8"

    def test_nothing(self) -> None:
        assert extract_video_url("") is None
        assert extract_video_url("<html><body>Video removed</body></html>") is None


class TestPageScanExtractor:
    @pytest.mark.asyncio()
    async def test_returns_empty_string_when_nothing(self) -> None:
        assert await PageScanExtractor().extract("<html></html>") == ""

    @pytest.mark.asyncio()
    async def test_returns_url(self) -> None:
        html = '<video src="https://cdn.x/v/movie.mp4"></video>'
        assert await PageScanExtractor().extract(html) == "https://cdn.x/v/movie.mp4"


class TestClassifyHost:
    @pytest.mark.parametrize(
        ("url", "label"),
        [
            ("https://supervideo.cc/e/abc", "SuperVideo"),
            ("https://supervideo.tv/abc", "SuperVideo"),
            ("https://dropload.io/e/abc", "Dropload"),
            ("https://www.dropload.tv/abc", "Dropload"),
            ("https://vixcloud.co/embed/1", "VixCloud"),
        ],
    )
    def test_known_hosts(self, url: str, label: str) -> None:
        host = classify_host(url)
        assert host is not None
        assert host.label == label

    def test_unknown_host(self) -> None:
        assert classify_host("https://mixdrop.co/e/abc") is None
        assert classify_host("") is None

    def test_matches_host_not_path(self) -> None:
        assert classify_host("https://example.com/supervideo/abc") is None

    def test_only_supervideo_uses_fallback(self) -> None:
        assert [h.label for h in EMBED_HOSTS if h.use_fallback] == ["SuperVideo"]
