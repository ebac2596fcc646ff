"""
FastAPI application entry point.

This module creates and configures the FastAPI application using an
application factory (create_app), so tests can build an app and swap
dependencies without touching the environment.

For local development:
    uvicorn cleanfeed_dashboard.main:app --reload

For production:
    cleanfeed-dashboard
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from .api.dependencies import reset_storage_client, verify_operator
from .api.routes import dashboard
from .config.settings import Settings, get_settings
from .core.errors import ConfigurationMissing

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


def check_required_settings(settings: Settings) -> None:
    """Raise ConfigurationMissing listing every absent required variable."""
    missing = settings.validate_required_fields()
    if missing:
        raise ConfigurationMissing(missing)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Refuses to start serving when required configuration is missing.
    Raising here makes uvicorn abort startup with a nonzero exit.
    """
    settings = get_settings()

    try:
        check_required_settings(settings)
    except ConfigurationMissing as e:
        logger.critical(
            "Missing required configuration",
            extra={"missing_fields": e.missing}
        )
        raise

    logger.info(
        "Cleanfeed dashboard starting",
        extra={
            "bucket": settings.spaces_bucket,
            "prefix": settings.catalog_prefix,
            "mock_mode": settings.spaces_mock_mode,
        }
    )

    yield

    reset_storage_client()
    logger.info("Cleanfeed dashboard shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Every route requires the operator's Basic credentials, including
    unknown paths, which answer 401 before they answer 404. The OpenAPI
    docs are switched off because they would be reachable without them.
    """
    app = FastAPI(
        title="Cleanfeed Dashboard",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        dependencies=[Depends(verify_operator)],
        lifespan=lifespan,
    )

    app.include_router(dashboard.router, tags=["Dashboard"])

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Logs the full error server-side and returns a generic message so
        stack traces never reach the browser.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


def run() -> None:
    """
    Console entry point.

    Validates configuration before binding the port and exits with
    status 1 if anything required is missing.
    """
    import uvicorn

    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    try:
        check_required_settings(settings)
    except ConfigurationMissing as e:
        logger.critical("FATAL: %s", e)
        sys.exit(1)

    logger.info("Dashboard on :%s", settings.dash_port)

    uvicorn.run(
        app,
        host=settings.dash_host,
        port=settings.dash_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
