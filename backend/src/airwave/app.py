"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from airwave.api.routes import generate, webhooks
from airwave.core.config import Settings, configure_logging, warn_missing_config
from airwave.services.airtable.client import AirtableClient
from airwave.services.generation import GenerationService
from airwave.services.wavespeed.client import WavespeedClient

logger = structlog.get_logger()


def build_generation_service(settings: Settings) -> GenerationService:
    """Wire the record store and job provider clients from settings."""
    store = AirtableClient(
        token=settings.airtable_token,
        base_id=settings.airtable_base_id,
        api_url=settings.airtable_api_url,
        timeout=settings.http_timeout_seconds,
    )
    provider = WavespeedClient(
        api_key=settings.wavespeed_api_key,
        api_url=settings.wavespeed_api_url,
        create_job_path=settings.wavespeed_create_job_path,
        timeout=settings.http_timeout_seconds,
    )
    return GenerationService(settings=settings, store=store, provider=provider)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Startup: configure logging, warn about missing configuration, wire the
    orchestrator into app.state. Missing configuration never blocks startup;
    requests that depend on it fail at call time.
    """
    settings: Settings = app.state.settings

    configure_logging(settings)
    missing = warn_missing_config(settings)

    app.state.generation_service = build_generation_service(settings)

    logger.info(
        "application.startup",
        port=settings.port,
        recreator_table=settings.airtable_table_recreator,
        poses_table=settings.airtable_table_poses,
        missing_config=missing,
    )

    yield

    logger.info("application.shutdown")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler boundary: log and answer 500 with the exception message."""
    logger.error(
        "request.unhandled_exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or type(exc).__name__},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Settings to use (default: loaded from environment)

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Airwave Relay",
        description="Airtable to Wavespeed image generation relay",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings or Settings()  # type: ignore[call-arg]

    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register API routers
    app.include_router(generate.router, prefix="/generate", tags=["generate"])
    app.include_router(webhooks.router, prefix="/wavespeed", tags=["webhooks"])

    @app.get("/", response_class=PlainTextResponse)
    async def liveness() -> str:
        """Plain-text liveness acknowledgment."""
        return "OK"

    @app.get("/health")
    async def health_check():
        """Health check reporting which required env vars are unset.

        Returns:
            200: {"status": "healthy", "missing_config": [...]}
        """
        return {
            "status": "healthy",
            "missing_config": app.state.settings.missing_required(),
        }

    return app


# Create app instance for uvicorn
app = create_app()
