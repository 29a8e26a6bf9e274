"""FastAPI application entry point.

Merchant Admin API - admin users and catalogs of a multi-store shop.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from merchant_admin.routes import api_router
from merchant_admin.schemas import ErrorDetail, ErrorResponse
from merchant_admin.services.errors import ServiceError, UnauthorizedError
from merchant_admin.settings import Settings, get_settings
from merchant_admin.stores.postgres import init_db, close_db, ping_db
from merchant_admin.stores.redis import init_redis, close_redis

logger = logging.getLogger("uvicorn.error")


def warn_insecure_settings(settings: Settings) -> None:
    if settings.uses_default_secret_key:
        logger.warning("SECRET_KEY is not set; access tokens are signed with the placeholder key")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    warn_insecure_settings(get_settings())

    try:
        await init_db()
        await ping_db()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    # Redis backs login throttling only; the rest of the API works without it
    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed")

    yield

    # Shutdown
    await close_redis()
    await close_db()


def _error_response(exc: ServiceError) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message, detail=exc.detail))
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=headers)


def register_error_handlers(app: FastAPI, debug: bool = False) -> None:
    """Translate service errors and unexpected failures into ErrorResponse bodies.

    Request validation errors keep FastAPI's default 422 body.
    """

    @app.exception_handler(ServiceError)
    async def service_exception_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return _error_response(exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message=str(exc) if debug else "Internal server error",
            )
        )
        return JSONResponse(status_code=500, content=body.model_dump())


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Administration API for merchant stores: admin users and catalogs",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app, debug=settings.debug)

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        return {"ok": True}

    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "merchant_admin.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
