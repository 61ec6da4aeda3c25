"""Shared base class for httpx-based provider adapters.

Covers what every adapter repeats: base-URL resolution, browser-like
request headers, safe fetch/parse helpers, and the "never raise, never
return partial results after cancellation" contract of the public entry
points.  Subclasses implement ``_get_streams`` and ``_get_episode_links``.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import structlog

from streamhop.domain.entities import ContentType, Link, Stream
from streamhop.domain.ports import BaseUrlResolverPort
from streamhop.infrastructure.common.urls import strip_trailing_slashes
from streamhop.infrastructure.hoster_resolvers import PageScanExtractor, StreamAssembler

from .constants import (
    BROWSER_ACCEPT,
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
)


class HttpxProviderBase:
    """Shared base for provider adapters.

    Subclasses **must** set:
    - ``name``
    - ``default_base_url``

    Subclasses **may** override:
    - ``_timeout``, ``_user_agent``
    """

    name: str = ""
    default_base_url: str = ""

    _timeout: float = DEFAULT_REQUEST_TIMEOUT
    _user_agent: str = DEFAULT_USER_AGENT

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_url_resolver: BaseUrlResolverPort | None = None,
        assembler: StreamAssembler | None = None,
        base_url: str = "",
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._http = http_client
        self._base_url_resolver = base_url_resolver
        self._base_url_override = strip_trailing_slashes(base_url)
        if timeout is not None:
            self._timeout = timeout
        if user_agent:
            self._user_agent = user_agent
        self._assembler = assembler or StreamAssembler(
            http_client,
            fallback_extractor=PageScanExtractor(),
            user_agent=self._user_agent,
            timeout=self._timeout,
        )
        self._log = structlog.get_logger(self.name or __name__)

    # ------------------------------------------------------------------
    # Public entry points (never raise)
    # ------------------------------------------------------------------

    async def get_streams(
        self,
        link: str,
        content_type: ContentType = "movie",
        *,
        cancel: asyncio.Event | None = None,
    ) -> list[Stream]:
        """Resolve *link* into playable streams; ``[]`` on any failure."""
        if cancel is not None and cancel.is_set():
            return []
        try:
            streams = await self._get_streams(link, content_type, cancel)
        except Exception:
            self._log.exception(f"{self.name}_stream_error", link=link)
            return []
        if cancel is not None and cancel.is_set():
            return []
        self._log.info(f"{self.name}_streams_resolved", link=link, count=len(streams))
        return streams

    async def get_episode_links(self, url: str) -> list[Link]:
        """Enumerate episodes of *url* grouped by season; ``[]`` on any failure."""
        try:
            return await self._get_episode_links(url)
        except Exception:
            self._log.exception(f"{self.name}_episodes_error", url=url)
            return []

    async def _get_streams(
        self,
        link: str,
        content_type: ContentType,
        cancel: asyncio.Event | None,
    ) -> list[Stream]:
        raise NotImplementedError(f"{type(self).__name__}._get_streams() not implemented")

    async def _get_episode_links(self, url: str) -> list[Link]:
        raise NotImplementedError(f"{type(self).__name__}._get_episode_links() not implemented")

    # ------------------------------------------------------------------
    # Base URL
    # ------------------------------------------------------------------

    async def _resolve_base_url(self) -> str:
        """Configured override, else the live lookup, else the built-in default."""
        if self._base_url_override:
            return self._base_url_override
        if self._base_url_resolver is not None:
            try:
                resolved = await self._base_url_resolver.resolve(self.name)
            except Exception:
                self._log.warning(f"{self.name}_base_url_lookup_failed", exc_info=True)
                resolved = ""
            if resolved:
                return strip_trailing_slashes(resolved)
        return strip_trailing_slashes(self.default_base_url)

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------

    def _headers(self, referer: str = "", **extra: str) -> dict[str, str]:
        headers = {
            "User-Agent": self._user_agent,
            "Accept": BROWSER_ACCEPT,
            "Accept-Language": DEFAULT_ACCEPT_LANGUAGE,
        }
        if referer:
            headers["Referer"] = referer
        headers.update(extra)
        return headers

    async def _safe_fetch(
        self,
        url: str,
        *,
        referer: str = "",
        context: str = "",
        follow_redirects: bool = True,
        expect_ok: bool = True,
        headers: dict[str, str] | None = None,
        **kwargs: object,
    ) -> httpx.Response | None:
        """GET *url* with structured error logging.

        Returns ``None`` on failure instead of raising.  With
        ``expect_ok=False`` non-2xx responses are returned as-is.
        """
        try:
            resp = await self._http.get(
                url,
                headers=headers or self._headers(referer),
                follow_redirects=follow_redirects,
                timeout=self._timeout,
                **kwargs,
            )
            if expect_ok:
                resp.raise_for_status()
            return resp
        except httpx.TimeoutException:
            self._log.warning(f"{self.name}_timeout", url=url, context=context)
        except httpx.HTTPStatusError as exc:
            self._log.warning(
                f"{self.name}_http_error",
                url=url,
                status=exc.response.status_code,
                context=context,
            )
        except httpx.HTTPError as exc:
            self._log.warning(f"{self.name}_fetch_error", url=url, error=str(exc), context=context)
        return None

    def _safe_parse_json(self, response: httpx.Response, context: str = "") -> dict | list | None:
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError):
            self._log.warning(f"{self.name}_invalid_json", url=str(response.url), context=context)
            return None
