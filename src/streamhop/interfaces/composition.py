"""Composition root: builds every runtime resource from an AppConfig."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from streamhop.application.use_cases import ListEpisodesUseCase, ResolveStreamsUseCase
from streamhop.domain.ports import BaseUrlResolverPort, CachePort
from streamhop.infrastructure.base_url import BaseUrlResolver
from streamhop.infrastructure.cache import create_cache
from streamhop.infrastructure.config import AppConfig
from streamhop.infrastructure.providers.registry import ProviderRegistry, build_default_registry
from streamhop.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@dataclass
class Runtime:
    """Resources shared by the HTTP API and the CLI."""

    cache: CachePort
    http_client: httpx.AsyncClient
    base_url_resolver: BaseUrlResolverPort
    providers: ProviderRegistry
    resolve_streams_uc: ResolveStreamsUseCase
    list_episodes_uc: ListEpisodesUseCase


@asynccontextmanager
async def open_runtime(config: AppConfig) -> AsyncIterator[Runtime]:
    """Create and tear down all resources.

    Order matters:
        1. Cache (base-URL lookups are cached)
        2. HTTP client (shared by providers, assembler and base-URL lookup)
        3. Base-URL resolver
        4. Provider registry
        5. Use cases
    """
    cache = create_cache(
        backend=config.cache_backend,
        directory=str(config.cache_dir),
        ttl_seconds=config.cache_ttl_seconds,
    )
    await cache.__aenter__()
    log.info("cache_initialized", backend=config.cache_backend)

    http_client = httpx.AsyncClient(follow_redirects=True)
    try:
        base_url_resolver = BaseUrlResolver(
            http_client,
            cache,
            pointer_url=config.base_url_pointer_url,
            providers_json_url=config.base_url_providers_json_url,
            ttl_seconds=config.base_url_ttl_seconds,
        )
        providers = build_default_registry(
            http_client,
            base_url_resolver=base_url_resolver,
            base_url_overrides=config.base_url_overrides(),
            disabled=[name for name, cfg in config.providers.items() if not cfg.enabled],
            timeout=config.http_timeout_seconds,
            user_agent=config.http_user_agent,
        )
        runtime = Runtime(
            cache=cache,
            http_client=http_client,
            base_url_resolver=base_url_resolver,
            providers=providers,
            resolve_streams_uc=ResolveStreamsUseCase(providers=providers),
            list_episodes_uc=ListEpisodesUseCase(providers=providers),
        )
        log.info("runtime_ready", providers=providers.list_names())
        yield runtime
    finally:
        await http_client.aclose()
        log.info("http_client_closed")
        await cache.aclose()
        log.info("cache_closed")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan hook: expose the runtime on ``app.state``."""
    state = cast(AppState, app.state)

    async with open_runtime(state.config) as runtime:
        state.cache = runtime.cache
        state.http_client = runtime.http_client
        state.base_url_resolver = runtime.base_url_resolver
        state.providers = runtime.providers
        state.resolve_streams_uc = runtime.resolve_streams_uc
        state.list_episodes_uc = runtime.list_episodes_uc
        log.info("app_startup_complete")
        yield

    log.info("app_shutdown_complete")
