"""FastAPI application factory for AI Pulse.

This module creates and configures the FastAPI application with:
- Lifespan management (cache database, HTTP client, services)
- Middleware configuration (CORS, request ID, logging)
- Exception handlers
- API routers
"""

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aipulse.config import Settings, get_settings
from aipulse.core.database import Database
from aipulse.core.exceptions import AIPulseError, ValidationError
from aipulse.core.logging import configure_logging, get_logger, set_request_id
from aipulse.dependencies import DatabaseDep, SettingsDep
from aipulse.services.cache import CacheStore
from aipulse.services.catalog import CatalogService
from aipulse.services.descriptions import DescriptionService
from aipulse.services.github import GithubService
from aipulse.services.producthunt import ProductHuntService
from aipulse.services.refresh import BackgroundRefresher

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open shared resources at startup and release them at shutdown.

    Everything the request handlers need is constructed here once and
    stored on ``app.state``:
    - the cache database and its CacheStore
    - one outbound ``httpx.AsyncClient`` shared by both catalog fetchers
    - the background refresher and the CatalogService using it
    - the DescriptionService
    """
    settings: Settings = app.state.settings

    configure_logging(settings)
    startup_logger = get_logger(__name__)

    database = Database.from_settings(settings)
    await database.create_tables()
    cache_store = CacheStore(database)

    http_client = httpx.AsyncClient(
        timeout=settings.http_timeout,
        transport=app.state.http_transport,
    )
    refresher = BackgroundRefresher(single_flight=settings.refresh_single_flight)
    catalog_service = CatalogService(
        store=cache_store,
        github=GithubService(cache_store, settings, client=http_client),
        producthunt=ProductHuntService(cache_store, settings, client=http_client),
        refresher=refresher,
        settings=settings,
    )
    description_service = DescriptionService(settings)

    app.state.database = database
    app.state.cache_store = cache_store
    app.state.catalog_service = catalog_service
    app.state.description_service = description_service

    startup_logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.app_env.value,
        github_token_configured=settings.github_token is not None,
        producthunt_token_configured=settings.producthunt_developer_token is not None,
    )

    yield

    await refresher.close()
    await description_service.close()
    await http_client.aclose()
    await database.close()

    startup_logger.info("application_shutting_down", app_name=settings.app_name)


def create_app(
    settings: Settings | None = None,
    *,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing
        http_transport: Optional transport for outbound catalog requests

    Returns:
        FastAPI: Configured application instance
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Discovery API for AI tools sourced from GitHub and Product Hunt. "
            "Catalog pages are cached and refreshed in the background."
        ),
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.http_transport = http_transport

    configure_middleware(app, settings)
    configure_exception_handlers(app)
    configure_routes(app)

    return app


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure application middleware.

    Args:
        app: The FastAPI application instance
        settings: Application settings
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next: Any) -> Any:
        """Log requests and responses with a request ID."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        set_request_id(request_id)

        request_logger = get_logger("aipulse.request")
        start_time = time.perf_counter()

        request_logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            query=str(request.query_params) if request.query_params else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            request_logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                error=str(exc),
            )
            raise
        finally:
            set_request_id(None)

        request_logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        response.headers["X-Request-ID"] = request_id
        return response


def configure_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers.

    Args:
        app: The FastAPI application instance
    """
    exception_logger = get_logger("aipulse.exceptions")

    @app.exception_handler(AIPulseError)
    async def aipulse_exception_handler(request: Request, exc: AIPulseError) -> JSONResponse:
        """Render AI Pulse exceptions as ``{"error": message, "code": ...}``."""
        request_id = getattr(request.state, "request_id", None)

        if exc.status_code >= 500:
            # Chained causes carry the upstream or database traceback.
            exception_logger.error(
                "application_error",
                error_code=exc.code,
                error_message=exc.message,
                details=exc.details or None,
                status_code=exc.status_code,
                path=request.url.path,
                exc_info=exc if exc.__cause__ is not None else None,
            )
        else:
            exception_logger.warning(
                "client_error",
                error_code=exc.code,
                error_message=exc.message,
                status_code=exc.status_code,
                path=request.url.path,
            )

        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(request_id=request_id),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Render unparseable or mistyped request bodies as a 400 ``{"error": ...}``.

        The only validated body is the clean-description request, so any
        failure there means no usable description was sent.
        """
        locations = [tuple(error.get("loc", ())) for error in exc.errors()]
        if any(loc[:1] == ("body",) for loc in locations):
            error = ValidationError(message="Description required", field="description")
        else:
            error = ValidationError(message="Invalid request")
        error.details["errors"] = [".".join(str(part) for part in loc) for loc in locations]
        return await aipulse_exception_handler(request, error)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions with a consistent error response."""
        request_id = getattr(request.state, "request_id", None)

        exception_logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=AIPulseError().to_dict(request_id=request_id),
        )


def configure_routes(app: FastAPI) -> None:
    """Configure application routes.

    Args:
        app: The FastAPI application instance
    """

    @app.get(
        "/health/live",
        tags=["Health"],
        summary="Liveness probe",
        description="Returns OK if the service is running",
    )
    async def liveness() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(
        "/health/ready",
        tags=["Health"],
        summary="Readiness probe",
        description="Returns OK if the cache database answers",
    )
    async def readiness(database: DatabaseDep) -> JSONResponse:
        db_ok = await database.ping()
        return JSONResponse(
            status_code=status.HTTP_200_OK if db_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ok" if db_ok else "error",
                "checks": {"database": "ok" if db_ok else "error"},
            },
        )

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Returns API information",
    )
    async def root(settings: SettingsDep) -> dict[str, str]:
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health/live",
        }

    from aipulse.api.router import router as api_router

    app.include_router(api_router, prefix="/api")


# Create the application instance
app = create_app()


def cli() -> None:
    """CLI entry point for running the application."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "aipulse.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    cli()
