"""Tests for the altadefinizionez page parsers and provider."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from streamhop.infrastructure.providers.altadefinizionez import (
    AltadefinizionezProvider,
    episode_links,
    extract_imdb_id,
    movie_candidates,
    series_candidates,
)

_BASE = "https://altadefinizionez.test"

_SERIES_PAGE = """
<html><body>
<div class="dropdown episodes" data-season="2">
  <a class="dropdown-item" data-episode="2-1">Episodio 1</a>
  <a class="dropdown-item" data-episode="2-2"></a>
</div>
<div class="dropdown episodes" data-season="10">
  <a class="dropdown-item" data-episode="10-1">Finale</a>
</div>
<div class="dropdown episodes" data-season="1">
  <a class="dropdown-item" data-episode="1-1">Pilot</a>
</div>

<div class="dropdown mirrors" data-season="2" data-episode="2-1">
  <a class="dropdown-item" data-link="https://supervideo.cc/e/s2e1">SuperVideo</a>
</div>
<div class="dropdown mirrors" data-season="2" data-episode="2-2">
  <a class="dropdown-item" data-link="https://dropload.io/e/s2e2">Dropload</a>
  <a class="dropdown-item" data-link="//supervideo.cc/e/s2e2">SuperVideo</a>
</div>
<div class="dropdown mirrors" data-episode="1-1">
  <a class="dropdown-item" data-link="https://dropload.io/e/s1e1">Dropload</a>
</div>
</body></html>
"""


class TestExtractImdbId:
    def test_iframe_src(self) -> None:
        html = '<iframe src="https://mostraguarda.stream/set-movie-a/tt1234567"></iframe>'
        assert extract_imdb_id(html) == "tt1234567"

    def test_iframe_data_attribute(self) -> None:
        html = '<iframe data-lazy-src="/player?imdb=tt7654321"></iframe>'
        assert extract_imdb_id(html) == "tt7654321"

    def test_raw_html_scan(self) -> None:
        html = "<script>var imdb = 'tt0111161';</script>"
        assert extract_imdb_id(html) == "tt0111161"

    def test_iframe_wins_over_page_text(self) -> None:
        html = (
            "<p>tt9999999</p>"
            '<iframe src="https://mostraguarda.stream/set-movie-a/tt1234567"></iframe>'
        )
        assert extract_imdb_id(html) == "tt1234567"

    def test_missing(self) -> None:
        assert extract_imdb_id("<html><body>No id</body></html>") == ""
        assert extract_imdb_id("") == ""


class TestMovieCandidates:
    def test_mirror_list(self) -> None:
        html = """
        <ul class="_player-mirrors">
          <li data-link="//supervideo.cc/e/abc">SuperVideo</li>
          <li data-link="https://dropload.io/e/xyz">Dropload</li>
          <li>no link</li>
        </ul>
        """
        assert movie_candidates(html) == ["//supervideo.cc/e/abc", "https://dropload.io/e/xyz"]

    def test_single_iframe(self) -> None:
        html = '<iframe src="https://supervideo.cc/e/abc"></iframe>'
        assert movie_candidates(html) == ["https://supervideo.cc/e/abc"]

    def test_nothing(self) -> None:
        assert movie_candidates("<html></html>") == []


class TestSeriesCandidates:
    def test_season_scoped(self) -> None:
        assert series_candidates(_SERIES_PAGE, "2-2") == [
            "https://dropload.io/e/s2e2",
            "//supervideo.cc/e/s2e2",
        ]

    def test_loose_match_without_season_attribute(self) -> None:
        assert series_candidates(_SERIES_PAGE, "1-1") == ["https://dropload.io/e/s1e1"]

    def test_unknown_episode(self) -> None:
        assert series_candidates(_SERIES_PAGE, "3-1") == []

    def test_quote_in_key_is_escaped(self) -> None:
        assert series_candidates(_SERIES_PAGE, '2"-1') == []


class TestEpisodeLinks:
    def test_grouped_and_sorted(self) -> None:
        links = episode_links(_SERIES_PAGE, f"{_BASE}/serie-tv/show/")
        assert [link.title for link in links] == ["Season 1", "Season 2", "Season 10"]

        season2 = links[1].episodes
        assert [(e.title, e.link, e.season, e.episode) for e in season2] == [
            ("Episodio 1", f"{_BASE}/serie-tv/show/::2-1", 2, 1),
            ("Episode 2", f"{_BASE}/serie-tv/show/::2-2", 2, 2),
        ]

    def test_no_episodes(self) -> None:
        assert episode_links("<html></html>", f"{_BASE}/film/x/") == []


class TestAltadefinizionezProvider:
    def _provider(self, http_client: httpx.AsyncClient) -> AltadefinizionezProvider:
        return AltadefinizionezProvider(http_client, base_url=f"{_BASE}/")

    @pytest.mark.asyncio()
    async def test_base_url_override(self, http_client: httpx.AsyncClient) -> None:
        resolver = AsyncMock()
        resolver.resolve = AsyncMock(return_value="https://live.test")
        provider = AltadefinizionezProvider(
            http_client, base_url_resolver=resolver, base_url=f"{_BASE}/"
        )
        assert await provider._resolve_base_url() == _BASE
        resolver.resolve.assert_not_awaited()

    @respx.mock
    @pytest.mark.asyncio()
    async def test_series_request_without_episode(self, http_client: httpx.AsyncClient) -> None:
        streams = await self._provider(http_client).get_streams("/serie-tv/show/", "series")
        assert streams == []
        assert len(respx.calls) == 0

    @respx.mock
    @pytest.mark.asyncio()
    async def test_movie_without_imdb_id(self, http_client: httpx.AsyncClient) -> None:
        respx.get(f"{_BASE}/film/x/").respond(200, text="<html>nothing here</html>")

        streams = await self._provider(http_client).get_streams("/film/x/")
        assert streams == []

    @respx.mock
    @pytest.mark.asyncio()
    async def test_detail_page_error(self, http_client: httpx.AsyncClient) -> None:
        respx.get(f"{_BASE}/film/x/").respond(404)

        assert await self._provider(http_client).get_streams("/film/x/") == []

    @respx.mock
    @pytest.mark.asyncio()
    async def test_episode_listing(self, http_client: httpx.AsyncClient) -> None:
        respx.get(f"{_BASE}/serie-tv/show/").respond(200, text=_SERIES_PAGE)

        links = await self._provider(http_client).get_episode_links("/serie-tv/show/")
        assert [link.title for link in links] == ["Season 1", "Season 2", "Season 10"]
        assert links[0].episodes[0].link == f"{_BASE}/serie-tv/show/::1-1"
