"""Port for last-resort stream URL recovery from an embed page."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FallbackExtractorPort(Protocol):
    """Best-effort extraction used when a host-specific decoder finds nothing.

    Returns ``""`` when no playable URL can be recovered.
    """

    async def extract(self, html: str) -> str: ...
