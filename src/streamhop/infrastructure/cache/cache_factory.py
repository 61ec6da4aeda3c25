"""Builds the configured CachePort implementation."""

from __future__ import annotations

from typing import Literal

import structlog

from streamhop.domain.ports import CachePort

from .diskcache_adapter import DiskcacheAdapter
from .memory_adapter import MemoryCacheAdapter

log = structlog.get_logger(__name__)

CacheBackend = Literal["diskcache", "memory"]


def create_cache(
    backend: CacheBackend = "diskcache",
    *,
    directory: str = "./.cache/streamhop",
    ttl_seconds: int = 3600,
    max_concurrent: int = 10,
) -> CachePort:
    """Create an (unopened) cache adapter for *backend*.

    Raises:
        ValueError: if *backend* is unknown.
    """
    log.info("cache_factory_create", backend=backend, directory=directory, ttl=ttl_seconds)
    if backend == "diskcache":
        return DiskcacheAdapter(
            directory=directory,
            ttl_seconds=ttl_seconds,
            max_concurrent=max_concurrent,
        )
    if backend == "memory":
        return MemoryCacheAdapter(ttl_seconds=ttl_seconds)
    raise ValueError(f"Unknown cache backend: {backend!r}. Must be 'diskcache' or 'memory'.")
