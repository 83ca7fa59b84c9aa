"""
KitCheckout API

FastAPI application entry point.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request
from loguru import logger

from kitcheckout import __version__
from kitcheckout.config import AppSettings
from kitcheckout.services import ServiceContainer
from .dependencies import get_settings
from .middleware import LoggingConfig, setup_exception_handlers, setup_logging
from .routes import auth, equipment, loans, reports, settings as settings_routes, undo
from .schemas import HealthResponse
from .security import TokenService


def configure_logging(settings: AppSettings) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Saves default settings on first run and migrates legacy user records
    before serving requests.
    """
    settings = app.state.settings
    logger.info(f"Starting KitCheckout in {settings.environment} mode")
    if settings.environment != "development" and settings.secret_key == AppSettings.secret_key:
        logger.warning("SECRET_KEY is not set; access tokens are signed with the development key")

    app.state.services.ensure_init()
    logger.info("KitCheckout started successfully")

    yield

    logger.info("Shutting down KitCheckout...")
    app.state.services.store.engine.dispose()
    logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: AppSettings = None, services: ServiceContainer = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        services: Prebuilt service container. If None, one is built from settings.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="KitCheckout",
        description="Sports equipment checkout tracker.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.services = services or ServiceContainer(settings)
    app.state.tokens = TokenService(settings.secret_key, settings.access_token_expire_minutes)

    # ==========================================================================
    # Middleware
    # ==========================================================================

    setup_logging(
        app,
        config=LoggingConfig(
            enabled=True,
            log_request_body=settings.debug,
        ),
        structured=settings.environment != "development",
    )

    setup_exception_handlers(app)

    # ==========================================================================
    # Routers
    # ==========================================================================

    api_prefix = "/api/v1"

    app.include_router(auth.router, prefix=api_prefix)
    app.include_router(equipment.router, prefix=api_prefix)
    app.include_router(loans.router, prefix=api_prefix)
    app.include_router(settings_routes.router, prefix=api_prefix)
    app.include_router(reports.router, prefix=api_prefix)
    app.include_router(undo.router, prefix=api_prefix)

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "KitCheckout",
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.debug else None,
        }

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check(request: Request) -> HealthResponse:
        """Report whether the document store is reachable."""
        components = {}
        overall_healthy = True

        try:
            request.app.state.services.store.exists("__health__")
            components["database"] = "healthy"
        except Exception as e:
            components["database"] = f"unhealthy: {str(e)}"
            overall_healthy = False

        return HealthResponse(
            status="healthy" if overall_healthy else "degraded",
            version=__version__,
            environment=settings.environment,
            components=components,
        )

    return app


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=8000,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
