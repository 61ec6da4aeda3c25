"""Stream assembler: embed candidates in, playable ``Stream`` records out.

Candidates are processed one at a time in discovery order.  Embed hosts
rate-limit aggressively, so there is no fan-out here.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

import httpx
import structlog

from streamhop.domain.entities import EmbedDecodeResult, Stream, infer_stream_type
from streamhop.domain.ports import FallbackExtractorPort
from streamhop.infrastructure.common.urls import origin_of, resolve_url
from streamhop.infrastructure.providers.constants import (
    BROWSER_ACCEPT,
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
)

from ._cookies import build_cookie_header
from .registry import EMBED_HOSTS, EmbedHost, classify_host

log = structlog.get_logger(__name__)


def normalize_candidate(raw: str, origin: str) -> str:
    """``//host/x`` gets ``https:``, relative paths are joined to *origin*."""
    return resolve_url(raw, origin)


class StreamAssembler:
    """Fetches, decodes and labels embed candidates.

    One instance can serve many requests; per-request state (seen URLs,
    per-host counters) lives inside :meth:`resolve`.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        fallback_extractor: FallbackExtractorPort | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        hosts: Sequence[EmbedHost] = EMBED_HOSTS,
    ) -> None:
        self._http = http_client
        self._fallback = fallback_extractor
        self._user_agent = user_agent
        self._timeout = timeout
        self._hosts = hosts

    @property
    def user_agent(self) -> str:
        return self._user_agent

    async def resolve(
        self,
        candidates: Iterable[str],
        *,
        origin: str,
        referer: str,
        cancel: asyncio.Event | None = None,
    ) -> list[Stream]:
        """Turn raw embed candidates into streams.

        *origin* resolves relative candidates; *referer* is sent when
        fetching each embed page.  Returns ``[]`` as soon as *cancel* is
        set, discarding anything gathered so far.
        """
        if cancel is not None and cancel.is_set():
            return []

        streams: list[Stream] = []
        seen: set[str] = set()
        emitted: set[str] = set()
        counters: dict[str, int] = {}

        for raw in candidates:
            embed_url = normalize_candidate(raw, origin)
            if not embed_url or embed_url in seen:
                continue
            seen.add(embed_url)

            host = classify_host(embed_url, self._hosts)
            if host is None:
                log.debug("candidate_skipped", url=embed_url, reason="unknown_host")
                continue

            if cancel is not None and cancel.is_set():
                log.info("stream_resolution_cancelled", processed=len(seen) - 1)
                return []

            for stream in await self._try_candidate(host, embed_url, referer):
                if stream.link in emitted:
                    continue
                index = counters.get(host.label, 0) + 1
                counters[host.label] = index
                emitted.add(stream.link)
                streams.append(
                    Stream(
                        server=f"{host.label} {index}",
                        link=stream.link,
                        type=stream.type,
                        subtitles=stream.subtitles,
                        headers=stream.headers,
                    )
                )

        if cancel is not None and cancel.is_set():
            return []

        log.debug("streams_assembled", count=len(streams), candidates=len(seen))
        return streams

    # ------------------------------------------------------------------
    # Per-candidate pipeline
    # ------------------------------------------------------------------

    async def _try_candidate(self, host: EmbedHost, embed_url: str, referer: str) -> list[Stream]:
        """Fetch and decode one candidate; ``[]`` on any failure."""
        try:
            return await self._resolve_candidate(host, embed_url, referer)
        except httpx.TimeoutException:
            log.warning("candidate_timeout", host=host.label, url=embed_url)
        except httpx.HTTPError as exc:
            log.warning("candidate_http_error", host=host.label, url=embed_url, error=str(exc))
        except Exception:
            log.exception("candidate_failed", host=host.label, url=embed_url)
        return []

    async def _resolve_candidate(
        self, host: EmbedHost, embed_url: str, referer: str
    ) -> list[Stream]:
        html = await self._fetch_embed(embed_url, referer)
        embed_origin = origin_of(embed_url)

        result = host.decode(html, embed_origin)
        if not result.found and host.use_fallback and self._fallback is not None:
            recovered = await self._fallback.extract(html)
            if recovered:
                log.info("fallback_extractor_recovered", host=host.label, url=embed_url)
                result = EmbedDecodeResult(
                    stream_url=resolve_url(recovered, embed_origin),
                    subtitles=result.subtitles,
                    cookies=result.cookies,
                )

        if not result.found:
            log.info("candidate_unresolvable", host=host.label, url=embed_url)
            return []

        streams: list[Stream] = []
        for stream_url in result.stream_urls:
            stream_type = result.stream_type or infer_stream_type(stream_url)
            if stream_type is None:
                log.info(
                    "candidate_unknown_media_type",
                    host=host.label,
                    url=embed_url,
                    stream_url=stream_url,
                )
                continue
            streams.append(
                Stream(
                    server=host.label,
                    link=stream_url,
                    type=stream_type,
                    subtitles=result.subtitles,
                    headers=self.playback_headers(embed_url, result.cookies),
                )
            )
        return streams

    async def _fetch_embed(self, embed_url: str, referer: str) -> str:
        resp = await self._http.get(
            embed_url,
            headers={
                "User-Agent": self._user_agent,
                "Accept": BROWSER_ACCEPT,
                "Accept-Language": DEFAULT_ACCEPT_LANGUAGE,
                "Referer": referer,
            },
            follow_redirects=True,
            timeout=self._timeout,
        )
        resp.raise_for_status()
        return resp.text

    def playback_headers(self, embed_url: str, cookies: dict[str, str]) -> dict[str, str]:
        """Headers a player must send to fetch media decoded from *embed_url*."""
        headers = {"Referer": embed_url}
        embed_origin = origin_of(embed_url)
        if embed_origin:
            headers["Origin"] = embed_origin
        headers["User-Agent"] = self._user_agent
        cookie = build_cookie_header(cookies)
        if cookie:
            headers["Cookie"] = cookie
        return headers
