"""In-process CachePort for tests and single-shot CLI runs."""

from __future__ import annotations

import time
from typing import Any


class MemoryCacheAdapter:
    """Dict-backed cache with monotonic-clock expiry."""

    def __init__(self, ttl_seconds: int = 3600) -> None:
        self.default_ttl = ttl_seconds
        self._entries: dict[str, tuple[Any, float | None]] = {}

    async def __aenter__(self) -> MemoryCacheAdapter:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self._entries.clear()

    async def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        expire = ttl if ttl is not None else self.default_ttl
        expires_at = time.monotonic() + expire if expire else None
        self._entries[key] = (value, expires_at)

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def clear(self) -> None:
        self._entries.clear()
