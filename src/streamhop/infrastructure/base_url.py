"""Live-domain lookup for providers whose sites hop between domains.

Two sources are consulted:

1. a plain-text pointer list (one URL per line) for providers listed in
   ``POINTER_PROVIDERS``; the first line whose hostname matches the
   provider's pattern wins, else the provider's static fallback;
2. a ``{"<provider>": {"url": "..."}}`` JSON document for every other
   provider.

Lookups go through :func:`get_or_refresh`, so each provider hits the
network at most once per TTL.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
import structlog

from streamhop.domain.ports import CachePort
from streamhop.infrastructure.common.urls import host_of, is_absolute, strip_trailing_slashes

log = structlog.get_logger(__name__)

DEFAULT_POINTER_URL = "https://pastebin.com/raw/KgQ4jTy6"
DEFAULT_PROVIDERS_JSON_URL = "https://himanshu8443.github.io/providers/modflix.json"
DEFAULT_TTL_SECONDS = 3600

_CACHE_PREFIX = "base_url:"


@dataclass(frozen=True)
class PointerEntry:
    match: re.Pattern[str]
    fallback: str


POINTER_PROVIDERS: dict[str, PointerEntry] = {
    "animeunity": PointerEntry(
        match=re.compile(r"(?:^|\.)animeunity\.", re.IGNORECASE),
        fallback="https://www.animeunity.so",
    ),
    "streamingunity": PointerEntry(
        match=re.compile(r"(?:^|\.)streamingunity\.", re.IGNORECASE),
        fallback="https://streamingunity.tv",
    ),
}


async def get_or_refresh(
    cache: CachePort,
    key: str,
    ttl: int,
    refresh: Callable[[], Awaitable[str]],
) -> str:
    """Return the cached value for *key*, refreshing it when missing.

    Empty refresh results are returned but not cached, so a failed lookup
    is retried on the next call.
    """
    cached = await cache.get(key)
    if cached:
        return str(cached)
    value = await refresh()
    if value:
        await cache.set(key, value, ttl=ttl)
    return value


def pick_pointer_line(text: str, entry: PointerEntry) -> str:
    """First absolute URL line of *text* whose host matches *entry*."""
    for line in text.splitlines():
        candidate = line.strip()
        if not candidate or not is_absolute(candidate):
            continue
        if entry.match.search(host_of(candidate)):
            return strip_trailing_slashes(candidate)
    return ""


class BaseUrlResolver:
    """``BaseUrlResolverPort`` backed by the pointer list and providers JSON."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        cache: CachePort,
        *,
        pointer_url: str = DEFAULT_POINTER_URL,
        providers_json_url: str = DEFAULT_PROVIDERS_JSON_URL,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        timeout: float = 10.0,
        pointer_providers: dict[str, PointerEntry] | None = None,
    ) -> None:
        self._http = http_client
        self._cache = cache
        self._pointer_url = pointer_url
        self._providers_json_url = providers_json_url
        self._ttl = ttl_seconds
        self._timeout = timeout
        self._pointer_providers = POINTER_PROVIDERS if pointer_providers is None else pointer_providers

    async def resolve(self, provider_key: str) -> str:
        try:
            return await get_or_refresh(
                self._cache,
                f"{_CACHE_PREFIX}{provider_key}",
                self._ttl,
                lambda: self._refresh(provider_key),
            )
        except Exception:
            log.exception("base_url_resolve_failed", provider=provider_key)
            return ""

    async def _refresh(self, provider_key: str) -> str:
        entry = self._pointer_providers.get(provider_key)
        if entry is not None:
            return await self._from_pointer_list(provider_key, entry)
        return await self._from_providers_json(provider_key)

    async def _from_pointer_list(self, provider_key: str, entry: PointerEntry) -> str:
        fallback = strip_trailing_slashes(entry.fallback)
        try:
            resp = await self._http.get(self._pointer_url, timeout=self._timeout)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning("base_url_pointer_fetch_failed", provider=provider_key, error=str(exc))
            return fallback

        url = pick_pointer_line(resp.text, entry)
        if not url:
            log.info("base_url_pointer_no_match", provider=provider_key, fallback=fallback)
            return fallback
        log.info("base_url_resolved", provider=provider_key, url=url, source="pointer")
        return url

    async def _from_providers_json(self, provider_key: str) -> str:
        try:
            resp = await self._http.get(self._providers_json_url, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            log.warning("base_url_json_fetch_failed", provider=provider_key, error=str(exc))
            return ""
        except ValueError:
            log.warning("base_url_json_invalid", provider=provider_key)
            return ""

        entry = data.get(provider_key) if isinstance(data, dict) else None
        url = str(entry.get("url") or "") if isinstance(entry, dict) else ""
        if not is_absolute(url):
            log.info("base_url_json_missing", provider=provider_key)
            return ""
        url = strip_trailing_slashes(url)
        log.info("base_url_resolved", provider=provider_key, url=url, source="providers_json")
        return url
