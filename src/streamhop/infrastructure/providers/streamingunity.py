"""streamingunity provider.

The site is an Inertia.js app: page state is JSON in ``#app[data-page]``.
Playback goes through two iframes, the site's own ``/it/iframe/<id>``
wrapper and the VixCloud player it embeds.

Catalog links:
    ``/it/titles/1234-some-title``      movie (also ``/watch/1234`` or ``1234``)
    ``1234::56789``                     episode 56789 of title 1234
"""

from __future__ import annotations

import asyncio
import html as html_lib
import json
import re
from typing import Any
from urllib.parse import quote

from streamhop.domain.entities import (
    EPISODE_SEPARATOR,
    ContentType,
    EpisodeLink,
    Link,
    Stream,
    parse_catalog_link,
)
from streamhop.infrastructure.common.html_selectors import extract_attr, parse_html
from streamhop.infrastructure.common.urls import resolve_url

from .httpx_base import HttpxProviderBase

DEFAULT_LOCALE = "it"

_TITLE_ID_RE = re.compile(r"/(?:titles|watch)/(\d+)", re.IGNORECASE)
_BARE_ID_RE = re.compile(r"^(\d+)$")
_SEASON_IN_URL_RE = re.compile(r"/season-(\d+)\b", re.IGNORECASE)
_ABSOLUTE_IFRAME_LINK_RE = re.compile(rf"https?://[^\"'\s]+/{DEFAULT_LOCALE}/iframe/\d+[^\"'\s]*", re.I)
_RELATIVE_IFRAME_LINK_RE = re.compile(rf"/{DEFAULT_LOCALE}/iframe/\d+[^\"'\s]*", re.I)
_VIXCLOUD_EMBED_RE = re.compile(r"https?://(?:[^\"'\s/]+\.)?vixcloud\.co/embed/\d+[^\"'\s]*", re.I)


def extract_title_id(value: str) -> str:
    """Numeric title id from ``/titles/<id>``, ``/watch/<id>`` or a bare id."""
    cleaned = (value or "").split(EPISODE_SEPARATOR, 1)[0].strip()
    match = _TITLE_ID_RE.search(cleaned) or _BARE_ID_RE.match(cleaned)
    return match.group(1) if match else ""


def locale_url(base_url: str, path: str) -> str:
    return f"{base_url}/{DEFAULT_LOCALE}/{path.lstrip('/')}"


def extract_inertia_page(html: str) -> dict[str, Any] | None:
    """Decode the Inertia page object; ``None`` when absent or unparsable."""
    if not html:
        return None
    soup = parse_html(html)
    raw = extract_attr(soup, "#app[data-page]", "data-page", "div[data-page]")
    if not raw:
        return None
    for candidate in (raw, html_lib.unescape(raw)):
        try:
            page = json.loads(candidate)
        except ValueError:
            continue
        return page if isinstance(page, dict) else None
    return None


def translation(translations: Any, key: str, locale: str = DEFAULT_LOCALE) -> str:
    if not isinstance(translations, list):
        return ""
    for item in translations:
        if isinstance(item, dict) and item.get("key") == key and item.get("locale") == locale:
            return str(item.get("value") or "").strip()
    return ""


def extract_embed_url(html: str, base_url: str) -> str:
    """The site's iframe wrapper URL from a watch page."""
    page = extract_inertia_page(html) or {}
    props = page.get("props") or {}
    embed = props.get("embedUrl") if isinstance(props, dict) else None
    if embed:
        return resolve_url(html_lib.unescape(str(embed)), base_url)

    href = extract_attr(parse_html(html), f"a[href*='/{DEFAULT_LOCALE}/iframe/']", "href")
    if href:
        return resolve_url(href, base_url)

    match = _ABSOLUTE_IFRAME_LINK_RE.search(html)
    if match:
        return html_lib.unescape(match.group(0))
    match = _RELATIVE_IFRAME_LINK_RE.search(html)
    if match:
        return resolve_url(html_lib.unescape(match.group(0)), base_url)
    return ""


def extract_iframe_src(html: str, base_url: str) -> str:
    """The VixCloud player URL embedded by the iframe wrapper."""
    src = extract_attr(parse_html(html), "iframe[src]", "src")
    if src:
        return resolve_url(src, base_url)
    match = _VIXCLOUD_EMBED_RE.search(html or "")
    return html_lib.unescape(match.group(0)) if match else ""


def _positive_int(value: Any) -> int | None:
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def map_episodes(episodes: Any, title_id: str, season: int | None) -> list[EpisodeLink]:
    if not isinstance(episodes, list) or not title_id:
        return []
    mapped: list[EpisodeLink] = []
    for episode in episodes:
        if not isinstance(episode, dict):
            continue
        episode_id = str(episode.get("id") or "").strip()
        if not episode_id:
            continue
        raw_number = "" if episode.get("number") is None else str(episode["number"])
        name = translation(episode.get("translations"), "name") or str(episode.get("name") or "")
        name = " ".join(name.split())
        mapped.append(
            EpisodeLink(
                title=name or (f"Episode {raw_number}" if raw_number else "Episode"),
                link=f"{title_id}{EPISODE_SEPARATOR}{episode_id}",
                season=season,
                episode=_positive_int(raw_number),
            )
        )
    return mapped


class StreamingUnityProvider(HttpxProviderBase):
    """Movies and episodes through the site's VixCloud iframe chain."""

    name = "streamingunity"
    default_base_url = "https://streamingunity.tv"
    _timeout = 15.0

    async def _get_streams(
        self,
        link: str,
        content_type: ContentType,
        cancel: asyncio.Event | None,
    ) -> list[Stream]:
        base_url = await self._resolve_base_url()
        catalog = parse_catalog_link(link)
        title_id = extract_title_id(catalog.title_ref)
        if not title_id:
            self._log.info("streamingunity_title_id_missing", link=link)
            return []

        watch_url = locale_url(base_url, f"watch/{title_id}")
        player_url = ""
        referer = watch_url

        if catalog.episode_key:
            iframe_url = (
                f"{locale_url(base_url, f'iframe/{title_id}')}"
                f"?episode_id={quote(catalog.episode_key, safe='')}&next_episode=1"
            )
            resp = await self._safe_fetch(iframe_url, referer=watch_url, context="episode_iframe")
            if resp is not None:
                player_url = extract_iframe_src(resp.text, base_url)
                referer = iframe_url

        if not player_url:
            if cancel is not None and cancel.is_set():
                return []
            player_url, referer = await self._player_from_watch_page(base_url, watch_url, cancel)
            if not player_url:
                self._log.info("streamingunity_player_not_found", link=link)
                return []

        return await self._assembler.resolve(
            [player_url],
            origin=base_url,
            referer=referer,
            cancel=cancel,
        )

    async def _player_from_watch_page(
        self, base_url: str, watch_url: str, cancel: asyncio.Event | None
    ) -> tuple[str, str]:
        watch = await self._safe_fetch(watch_url, referer=base_url, context="watch_page")
        if watch is None:
            return "", ""
        embed_url = extract_embed_url(watch.text, base_url)
        if not embed_url:
            return "", ""

        if cancel is not None and cancel.is_set():
            return "", ""
        wrapper = await self._safe_fetch(embed_url, referer=watch_url, context="iframe_wrapper")
        if wrapper is None:
            return "", ""
        return extract_iframe_src(wrapper.text, base_url), embed_url

    async def _get_episode_links(self, url: str) -> list[Link]:
        base_url = await self._resolve_base_url()
        season_url = resolve_url(url, base_url)
        if not season_url:
            return []
        resp = await self._safe_fetch(season_url, referer=season_url, context="season_page")
        if resp is None:
            return []

        page = extract_inertia_page(resp.text) or {}
        props = page.get("props") or {}
        if not isinstance(props, dict):
            return []
        title = props.get("title") if isinstance(props.get("title"), dict) else {}
        title_id = str(title.get("id") or extract_title_id(season_url) or "").strip()
        if not title_id:
            return []

        loaded = props.get("loadedSeason") if isinstance(props.get("loadedSeason"), dict) else {}
        season = _positive_int(loaded.get("number"))
        if season is None:
            match = _SEASON_IN_URL_RE.search(season_url)
            season = _positive_int(match.group(1)) if match else None

        episodes = map_episodes(loaded.get("episodes"), title_id, season)
        if not episodes:
            return []
        return [Link(title=f"Season {season}" if season else "Episodes", episodes=tuple(episodes))]
