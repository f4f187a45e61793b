"""FastAPI application factory and startup configuration.

Public routers (cities, listings, slug resolution, legacy redirects) are open;
the admin router carries `dependencies=[RequireApiKey]` so /health and /docs
stay reachable for healthchecks and local development.
"""
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.exceptions import (
    DataSourceError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from app.core.logging import get_logger, set_correlation_id, setup_logging
from app.api.legacy import router as legacy_router
from app.api.v1.admin import router as admin_router
from app.api.v1.listings import router as listings_router
from app.api.deps import RequireApiKey
from app.api.responses import error, ok

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    setup_logging()
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)

    if not settings.api_key:
        logger.warning("API_KEY not set — admin endpoints will answer 500 until it is configured.")

    yield

    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Real estate listings API — city listing pages, filters and SEO slug resolution.",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def add_trace_id(request: Request, call_next):
        request.state.trace_id = str(uuid4())
        set_correlation_id(request.state.trace_id)
        response = await call_next(request)
        response.headers["X-Trace-Id"] = request.state.trace_id
        return response

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        trace_id = getattr(request.state, "trace_id", None)
        logger.exception("Unhandled exception [trace_id=%s]", trace_id, exc_info=exc)
        return error(500, "Internal server error", request)

    @application.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return error(404, exc.message, request)

    @application.exception_handler(DataSourceError)
    async def data_source_handler(request: Request, exc: DataSourceError):
        logger.error("Data source error: %s (%s)", exc.message, exc.detail)
        return error(503, exc.message, request)

    @application.exception_handler(DuplicateError)
    async def duplicate_handler(request: Request, exc: DuplicateError):
        return error(409, exc.message, request)

    @application.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return error(422, exc.message, request)

    application.include_router(listings_router, prefix="/api/v1", tags=["listings"])
    application.include_router(
        admin_router, prefix="/api/v1/admin", tags=["admin"], dependencies=[RequireApiKey]
    )

    @application.get("/health", tags=["system"])
    async def health_check(request: Request):
        from sqlalchemy import text
        from app.database import async_session_factory

        db_status = "ok"
        try:
            async with async_session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            db_status = f"error: {str(e)}"

        return ok(
            {
                "status": "healthy" if db_status == "ok" else "unhealthy",
                "version": settings.app_version,
                "database": db_status,
            },
            "Health check completed",
            request,
        )

    application.include_router(legacy_router, tags=["legacy"])

    return application


app = create_app()
