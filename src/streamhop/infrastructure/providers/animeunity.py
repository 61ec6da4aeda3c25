"""animeunity provider.

Episodes resolve through ``/embed-url/<episode id>``, which answers with a
redirect (or a plain-text body) pointing at the VixCloud player.  Other
players are read for their direct download URL instead.  The
episode list comes from the JSON ``/info_api`` endpoints, paged in ranges
of 120.
"""

from __future__ import annotations

import asyncio
import re

from streamhop.domain.entities import ContentType, EpisodeLink, Link, Stream, parse_catalog_link
from streamhop.infrastructure.common.urls import is_absolute
from streamhop.infrastructure.hoster_resolvers import classify_host
from streamhop.infrastructure.hoster_resolvers.vixcloud import (
    download_stream_type,
    extract_download_url,
)

from .constants import MOBILE_USER_AGENT
from .httpx_base import HttpxProviderBase

EPISODE_RANGE_SIZE = 120

_ANIME_ID_RE = re.compile(r"^(?:.*\banime/)?(\d+)(?:[-/].*)?$")


def episode_ranges(total: int, size: int = EPISODE_RANGE_SIZE) -> list[tuple[int, int]]:
    """Inclusive ``(start, end)`` pages covering episodes ``1..total``."""
    return [(start, min(start + size - 1, total)) for start in range(1, total + 1, size)]


def extract_anime_id(url: str) -> str:
    """Numeric id from ``77``, ``/anime/77-naruto`` or a full anime page URL."""
    ref = parse_catalog_link(url).title_ref.strip().strip("/")
    match = _ANIME_ID_RE.match(ref)
    return match.group(1) if match else ""


class AnimeUnityProvider(HttpxProviderBase):
    """Episode streams via the embed-url redirect to VixCloud."""

    name = "animeunity"
    default_base_url = "https://www.animeunity.so"
    _timeout = 15.0
    _user_agent = MOBILE_USER_AGENT

    async def _get_streams(
        self,
        link: str,
        content_type: ContentType,
        cancel: asyncio.Event | None,
    ) -> list[Stream]:
        catalog = parse_catalog_link(link)
        episode_id = (catalog.episode_key or catalog.title_ref).strip()
        if not episode_id:
            return []

        base_url = await self._resolve_base_url()
        redirect_url = f"{base_url}/embed-url/{episode_id}"
        resp = await self._safe_fetch(
            redirect_url,
            referer=f"{base_url}/",
            context="embed_url",
            follow_redirects=False,
            expect_ok=False,
        )
        if resp is None:
            return []

        location = resp.headers.get("location", "")
        embed_url = location if is_absolute(location) else resp.text.strip()
        if not is_absolute(embed_url):
            self._log.info("animeunity_embed_missing", episode_id=episode_id, status=resp.status_code)
            return []

        if classify_host(embed_url) is None:
            return await self._download_stream(embed_url, redirect_url, cancel)

        return await self._assembler.resolve(
            [embed_url],
            origin=base_url,
            referer=redirect_url,
            cancel=cancel,
        )

    async def _download_stream(
        self, embed_url: str, referer: str, cancel: asyncio.Event | None
    ) -> list[Stream]:
        """Single stream from the download URL on a non-VixCloud player page."""
        page = await self._safe_fetch(embed_url, referer=referer, context="embed_page")
        if page is None or (cancel is not None and cancel.is_set()):
            return []

        url = extract_download_url(page.text)
        if not url:
            self._log.info("animeunity_download_missing", url=embed_url)
            return []

        return [
            Stream(
                server="AnimeUnity 1",
                link=url,
                type=download_stream_type(url),
                headers=self._assembler.playback_headers(embed_url, {}),
            )
        ]

    async def _get_episode_links(self, url: str) -> list[Link]:
        anime_id = extract_anime_id(url)
        if not anime_id:
            return []

        base_url = await self._resolve_base_url()
        headers = self._headers(f"{base_url}/", Accept="application/json")

        info = await self._safe_fetch(
            f"{base_url}/info_api/{anime_id}/", headers=headers, context="info_api"
        )
        data = self._safe_parse_json(info, "info_api") if info is not None else None
        total = _episode_count(data)
        if not total:
            return []

        episodes: list[EpisodeLink] = []
        for start, end in episode_ranges(total):
            page = await self._safe_fetch(
                f"{base_url}/info_api/{anime_id}/1?start_range={start}&end_range={end}",
                headers=headers,
                context="info_api_range",
            )
            payload = self._safe_parse_json(page, "info_api_range") if page is not None else None
            items = payload.get("episodes") if isinstance(payload, dict) else None
            for item in items or []:
                if not isinstance(item, dict) or not item.get("id"):
                    continue
                number = item.get("number")
                number_text = "" if number is None else str(number).strip()
                episodes.append(
                    EpisodeLink(
                        title=f"Episode {number_text}" if number_text else "Episode",
                        link=str(item["id"]),
                        episode=int(number_text) if number_text.isdigit() else None,
                    )
                )

        if not episodes:
            return []
        return [Link(title="Episodes", episodes=tuple(episodes))]


def _episode_count(data: object) -> int:
    if not isinstance(data, dict):
        return 0
    try:
        return max(int(data.get("episodes_count") or 0), 0)
    except (TypeError, ValueError):
        return 0
