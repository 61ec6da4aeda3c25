from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from streamhop import __version__
from streamhop.domain.exceptions import ProviderNotFoundError
from streamhop.infrastructure.config import AppConfig
from streamhop.interfaces.app_state import AppState
from streamhop.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


async def provider_not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    provider = getattr(exc, "provider", "")
    log.info("provider_not_found", provider=provider, path=request.url.path)
    return JSONResponse(
        status_code=404,
        content={"error": "provider_not_found", "provider": provider},
    )


def _install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=response.status_code if response is not None else 500,
                duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
                client_host=(request.client.host if request.client else None),
            )


def build_app(config: AppConfig) -> FastAPI:
    """Build the FastAPI app from *config* alone.

    The HTTP client, cache and providers only exist once lifespan() runs.
    """
    app = FastAPI(
        title="streamhop",
        description="Stream-link resolution for Italian streaming sites",
        version=__version__,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from streamhop.interfaces.api.streams.router import router as streams_router

    app.include_router(streams_router)
    app.add_exception_handler(ProviderNotFoundError, provider_not_found_handler)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    _install_request_logging(app)
    return app
