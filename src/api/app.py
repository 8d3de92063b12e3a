"""
Main FastAPI application factory.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .dependencies import get_logger
from .routes import health, sync, gmail
from .models import ErrorResponse
from config.settings import gmail_config, supabase_config


logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Starting FastAPI application", environment=settings.environment, api_version=settings.api_version)

    if not gmail_config.is_configured():
        logger.warning("Google OAuth client is not configured; sync endpoints will fail")
    if not supabase_config.url:
        logger.warning("Supabase URL is not configured; sync endpoints will fail")

    yield

    logger.info("Shutting down FastAPI application")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.api_version,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.error("Unhandled exception", path=request.url.path, error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                success=False,
                message="Internal server error",
                error_code="INTERNAL_ERROR",
                details={"error": str(exc)}
            ).model_dump(mode="json")
        )

    for module in (health, sync, gmail):
        app.include_router(module.router, prefix=f"{settings.api_prefix}/v1")

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "message": "Hostel mailbox sync API is running",
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs"
        }

    return app
