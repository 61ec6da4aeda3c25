"""streamhop exceptions."""

from __future__ import annotations


class StreamhopError(Exception):
    """Base class for all streamhop errors."""


class ProviderNotFoundError(StreamhopError):
    """Raised when a provider name is not known to the registry."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"Unknown provider: {provider!r}")
        self.provider = provider


class DuplicateProviderError(StreamhopError):
    """Raised when two providers register under the same name."""
