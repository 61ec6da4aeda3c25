"""Provider registry and the factory that wires the built-in adapters."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping

import httpx
import structlog

from streamhop.domain.exceptions import DuplicateProviderError, ProviderNotFoundError
from streamhop.domain.ports import BaseUrlResolverPort, StreamProviderPort

from .altadefinizionez import AltadefinizionezProvider
from .animeunity import AnimeUnityProvider
from .httpx_base import HttpxProviderBase
from .streamingunity import StreamingUnityProvider

log = structlog.get_logger(__name__)

BUILTIN_PROVIDERS: tuple[type[HttpxProviderBase], ...] = (
    AltadefinizionezProvider,
    StreamingUnityProvider,
    AnimeUnityProvider,
)


class ProviderRegistry:
    """Name-indexed collection of stream providers."""

    def __init__(self, providers: Iterable[StreamProviderPort] = ()) -> None:
        self._providers: dict[str, StreamProviderPort] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: StreamProviderPort) -> None:
        if provider.name in self._providers:
            raise DuplicateProviderError(f"Provider already registered: {provider.name!r}")
        self._providers[provider.name] = provider
        log.debug("provider_registered", provider=provider.name)

    def get(self, name: str) -> StreamProviderPort:
        try:
            return self._providers[name]
        except KeyError:
            raise ProviderNotFoundError(name) from None

    def list_names(self) -> list[str]:
        return sorted(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)


def build_default_registry(
    http_client: httpx.AsyncClient,
    *,
    base_url_resolver: BaseUrlResolverPort | None = None,
    base_url_overrides: Mapping[str, str] | None = None,
    disabled: Collection[str] = (),
    timeout: float | None = None,
    user_agent: str | None = None,
) -> ProviderRegistry:
    """Instantiate the built-in providers on one shared HTTP client.

    *user_agent* replaces the desktop default only; providers that pin a
    mobile agent keep it.
    """
    overrides = base_url_overrides or {}
    registry = ProviderRegistry()
    for provider_cls in BUILTIN_PROVIDERS:
        if provider_cls.name in disabled:
            log.info("provider_disabled_by_config", provider=provider_cls.name)
            continue
        keeps_own_agent = provider_cls._user_agent != HttpxProviderBase._user_agent
        registry.register(
            provider_cls(
                http_client,
                base_url_resolver=base_url_resolver,
                base_url=overrides.get(provider_cls.name, ""),
                timeout=timeout,
                user_agent=None if keeps_own_agent else user_agent,
            )
        )
    log.info("providers_loaded", providers=registry.list_names())
    return registry
