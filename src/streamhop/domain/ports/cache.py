"""Cache port used for base-URL lookups."""

from __future__ import annotations

from typing import Any, Protocol


class CachePort(Protocol):
    """Async key-value store with per-entry expiry.

    Adapters: ``DiskcacheAdapter`` (persistent, SQLite) and
    ``MemoryCacheAdapter`` (process-local).  Both are async context
    managers and must be entered before use.

    A TTL of ``0`` stores the entry without expiry.
    """

    async def get(self, key: str) -> Any:
        """Stored value, or ``None`` when missing or expired."""
        ...

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """Store *value*; ``ttl=None`` uses the adapter's default."""
        ...

    async def delete(self, key: str) -> bool: ...

    async def clear(self) -> None: ...

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> CachePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
