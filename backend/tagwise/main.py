from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from .api.middleware.security import SecurityHeadersMiddleware
from .api.v1.router import api_router
from .config import Settings, get_settings
from .core.errors import (
    InvalidArgumentError,
    TagwiseError,
    UpstreamUnavailableError,
)
from .db.base import create_redis_client, create_supabase_admin_client
from .utils.logging import get_logger, setup_logging
from .utils.openai_client import create_openai_client

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = get_logger(__name__)

_ERROR_STATUS: dict[type[TagwiseError], int] = {
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    UpstreamUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def _handle_tagwise_error(request: Request, exc: TagwiseError) -> JSONResponse:
    status_code = next(
        (code for cls, code in _ERROR_STATUS.items() if isinstance(exc, cls)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Shared clients; request-scoped Supabase clients are built per request
        app.state.redis = create_redis_client(settings)
        app.state.openai = create_openai_client(settings)
        app.state.supabase_admin = (
            create_supabase_admin_client(settings) if settings.supabase_service_role_key else None
        )
        if app.state.supabase_admin is None:
            logger.warning("APP_SUPABASE_SERVICE_ROLE_KEY is not set; suggestions are unavailable")
        try:
            yield
        finally:
            await app.state.redis.aclose()
            await app.state.openai.close()

    app = FastAPI(
        title="Tagwise API",
        debug=settings.debug,
        version="0.1.0",
        root_path=settings.root_path or "",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=[
            "Accept",
            "Accept-Language",
            "Content-Language",
            "Content-Type",
            "Authorization",
            "X-Requested-With",
        ],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Proxy headers (X-Forwarded-*) when behind ALB/ingress
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

    # Trusted hosts (configure in env for production)
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    # GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(SecurityHeadersMiddleware)

    app.add_exception_handler(TagwiseError, _handle_tagwise_error)

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
