"""Port for looking up the live domain of a provider."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BaseUrlResolverPort(Protocol):
    """Returns the current base URL (scheme + host, no trailing slash).

    Returns ``""`` when nothing could be determined; callers fall back to
    their built-in default domain.
    """

    async def resolve(self, provider_key: str) -> str: ...
