"""SQLite-backed CachePort on top of ``diskcache``.

Entries are written with a tag (the adapter's namespace), so ``clear()``
evicts only this adapter's entries when the directory is shared.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import structlog
from diskcache import Cache as DiskCache

log = structlog.get_logger(__name__)


class DiskcacheAdapter:
    """Async facade over ``diskcache.Cache``; calls run in worker threads.

    Must be entered (``async with``) before ``get``/``set``.
    """

    def __init__(
        self,
        directory: str | Path = "./.cache/streamhop",
        ttl_seconds: int = 3600,
        max_concurrent: int = 10,
        namespace: str = "streamhop",
    ) -> None:
        self.directory = Path(directory)
        self.default_ttl = ttl_seconds
        self.namespace = namespace
        self._disk: DiskCache | None = None
        self._slots = asyncio.Semaphore(max_concurrent)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}" if self.namespace else key

    def _opened(self) -> DiskCache:
        if self._disk is None:
            raise RuntimeError("DiskcacheAdapter not opened; use 'async with' first.")
        return self._disk

    async def __aenter__(self) -> DiskcacheAdapter:
        if self._disk is None:
            self._disk = await asyncio.to_thread(DiskCache, str(self.directory))
            log.info(
                "diskcache_opened",
                path=str(self.directory),
                namespace=self.namespace,
                default_ttl=self.default_ttl,
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        disk, self._disk = self._disk, None
        if disk is not None:
            await asyncio.to_thread(disk.close)
            log.info("diskcache_closed", path=str(self.directory))

    async def get(self, key: str) -> Any:
        disk = self._opened()
        async with self._slots:
            value = await asyncio.to_thread(disk.get, self._key(key), None)
        log.debug("cache_get", key=key, hit=value is not None)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        disk = self._opened()
        expire = self.default_ttl if ttl is None else ttl
        async with self._slots:
            await asyncio.to_thread(
                disk.set,
                self._key(key),
                value,
                expire=expire or None,
                tag=self.namespace or None,
            )
        log.debug("cache_set", key=key, ttl=expire)

    async def delete(self, key: str) -> bool:
        if self._disk is None:
            return False
        async with self._slots:
            return bool(await asyncio.to_thread(self._disk.delete, self._key(key)))

    async def clear(self) -> None:
        if self._disk is None:
            return
        async with self._slots:
            if self.namespace:
                removed = await asyncio.to_thread(self._disk.evict, self.namespace)
            else:
                removed = await asyncio.to_thread(self._disk.clear)
        log.warning("cache_cleared", path=str(self.directory), removed=removed)
