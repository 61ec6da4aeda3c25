"""altadefinizionez provider.

Movies are not embedded on the site itself: the detail page only carries
the IMDb id, and the mirrors come from mostraguarda's ``set-movie``
endpoint.  Series pages list their mirrors inline, one dropdown per
episode, keyed ``<season>-<episode>``.

Catalog links:
    ``/film/some-title/``               movie
    ``/serie-tv/some-show/::2-5``       season 2, episode 5
"""

from __future__ import annotations

import asyncio
import re
from collections import defaultdict

from bs4 import BeautifulSoup

from streamhop.domain.entities import (
    EPISODE_SEPARATOR,
    ContentType,
    EpisodeLink,
    Link,
    Stream,
    parse_catalog_link,
)
from streamhop.infrastructure.common.html_selectors import (
    attr_value,
    extract_all_attrs,
    extract_attr,
    first_attr,
    parse_html,
    select_items,
)
from streamhop.infrastructure.common.urls import origin_of, resolve_url

from .constants import MOSTRAGUARDA_BASE
from .httpx_base import HttpxProviderBase

_IMDB_ID_RE = re.compile(r"tt\d{6,9}", re.IGNORECASE)

_IFRAME_ATTRS = (
    "src",
    "data-src",
    "data-lazy-src",
    "data-original",
    "data-embed",
    "data-url",
)
_DATA_IMDB_ATTRS = ("data-imdb", "data-imdb-id", "data-id-imdb")

SET_MOVIE_PATH = "/index.php?task=set-movie-a&id_imdb="


def _imdb_in(value: str) -> str:
    match = _IMDB_ID_RE.search(value or "")
    return match.group(0) if match else ""


def extract_imdb_id(html: str) -> str:
    """IMDb id of a detail page; first non-empty match wins.

    Order: iframe ``src``/``data-*`` attributes, a scan of the raw HTML,
    ``data-imdb*`` attributes, then an outbound imdb.com link.
    """
    if not html:
        return ""
    soup = parse_html(html)

    for iframe in soup.select("iframe"):
        for attr in _IFRAME_ATTRS:
            found = _imdb_in(attr_value(iframe, attr))
            if found:
                return found

    found = _imdb_in(html)
    if found:
        return found

    node = soup.select_one("[data-imdb], [data-imdb-id], [data-id-imdb]")
    if node is not None:
        found = _imdb_in(first_attr(node, _DATA_IMDB_ATTRS))
        if found:
            return found

    return _imdb_in(extract_attr(soup, 'a[href*="imdb.com/title/"]', "href"))


def movie_candidates(player_html: str) -> list[str]:
    """Mirror links of a mostraguarda player page, else its single iframe."""
    soup = parse_html(player_html)
    links = extract_all_attrs(soup, "li[data-link], span[data-link]", "data-link")
    if links:
        return links
    iframe = extract_attr(soup, "iframe[src]", "src")
    return [iframe] if iframe else []


def series_candidates(page_html: str, episode_key: str) -> list[str]:
    """Mirror links for *episode_key* (``<season>-<episode>``).

    The season-scoped dropdown is tried first; pages that omit
    ``data-season`` are matched on the episode key alone.
    """
    soup = parse_html(page_html)
    season = episode_key.split("-", 1)[0]
    key = _css_string(episode_key)
    scoped = f'.dropdown.mirrors[data-season="{_css_string(season)}"][data-episode="{key}"]'
    loose = f'.dropdown.mirrors[data-episode="{key}"]'

    selectors = [scoped, loose] if season else [loose]
    for selector in selectors:
        links = _dropdown_links(soup, selector)
        if links:
            return links
    return []


def _dropdown_links(soup: BeautifulSoup, container_selector: str) -> list[str]:
    links: list[str] = []
    for container in select_items(soup, container_selector):
        links.extend(extract_all_attrs(container, ".dropdown-item[data-link]", "data-link"))
    return links


def _css_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _season_sort_key(season: str) -> tuple[int, float, str]:
    try:
        return (0, float(season), season)
    except ValueError:
        return (1, 0.0, season)


def _to_int(value: str) -> int | None:
    return int(value) if value.isdigit() else None


def episode_links(page_html: str, page_url: str) -> list[Link]:
    """Group ``.dropdown.episodes`` entries by season (numeric order)."""
    soup = parse_html(page_html)
    seasons: dict[str, list[EpisodeLink]] = defaultdict(list)

    for dropdown in select_items(soup, ".dropdown.episodes[data-season]"):
        season = attr_value(dropdown, "data-season")
        if not season:
            continue
        for item in dropdown.select(".dropdown-item[data-episode]"):
            key = attr_value(item, "data-episode")
            if not key:
                continue
            parts = key.split("-")
            number = (parts[1] if len(parts) > 1 else "") or parts[0]
            label = item.get_text(strip=True) or (f"Episode {number}" if number else "Episode")
            seasons[season].append(
                EpisodeLink(
                    title=label,
                    link=f"{page_url}{EPISODE_SEPARATOR}{key}",
                    season=_to_int(season),
                    episode=_to_int(number),
                )
            )

    return [
        Link(title=f"Season {season}", episodes=tuple(episodes))
        for season, episodes in sorted(seasons.items(), key=lambda kv: _season_sort_key(kv[0]))
    ]


class AltadefinizionezProvider(HttpxProviderBase):
    """Movies via IMDb id + mostraguarda, series via inline mirror lists."""

    name = "altadefinizionez"
    default_base_url = "https://altadefinizionez.sbs"
    _timeout = 10.0

    async def _get_streams(
        self,
        link: str,
        content_type: ContentType,
        cancel: asyncio.Event | None,
    ) -> list[Stream]:
        base_url = await self._resolve_base_url()
        catalog = parse_catalog_link(link)
        page_url = resolve_url(catalog.title_ref, base_url)
        if not page_url:
            self._log.info("altadefinizionez_invalid_link", link=link)
            return []

        if catalog.is_episode:
            if not catalog.episode_key:
                return []
            candidates = await self._series_candidates(page_url, catalog.episode_key, cancel)
        elif content_type == "series":
            return []
        else:
            candidates = await self._movie_candidates(page_url, cancel)

        if not candidates:
            self._log.info("altadefinizionez_no_candidates", link=link)
            return []

        return await self._assembler.resolve(
            candidates,
            origin=MOSTRAGUARDA_BASE,
            referer=f"{MOSTRAGUARDA_BASE}/",
            cancel=cancel,
        )

    async def _movie_candidates(self, page_url: str, cancel: asyncio.Event | None) -> list[str]:
        resp = await self._safe_fetch(
            page_url, referer=f"{origin_of(page_url)}/", context="detail_page"
        )
        if resp is None:
            return []

        imdb_id = extract_imdb_id(resp.text)
        if not imdb_id:
            self._log.info("altadefinizionez_imdb_not_found", url=page_url)
            return []

        if cancel is not None and cancel.is_set():
            return []
        player = await self._safe_fetch(
            f"{MOSTRAGUARDA_BASE}{SET_MOVIE_PATH}{imdb_id}",
            referer=f"{MOSTRAGUARDA_BASE}/",
            context="set_movie",
        )
        if player is None:
            return []
        return movie_candidates(player.text)

    async def _series_candidates(
        self, page_url: str, episode_key: str, cancel: asyncio.Event | None
    ) -> list[str]:
        if cancel is not None and cancel.is_set():
            return []
        resp = await self._safe_fetch(
            page_url, referer=f"{origin_of(page_url)}/", context="series_page"
        )
        if resp is None:
            return []
        return series_candidates(resp.text, episode_key)

    async def _get_episode_links(self, url: str) -> list[Link]:
        base_url = await self._resolve_base_url()
        page_url = resolve_url(parse_catalog_link(url).title_ref, base_url)
        if not page_url:
            return []
        resp = await self._safe_fetch(
            page_url, referer=f"{origin_of(page_url)}/", context="episodes"
        )
        if resp is None:
            return []
        return episode_links(resp.text, page_url)
