"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from graetzlmap.api import CMS_ROUTERS, QUERY_ROUTERS
from graetzlmap.config.settings import Settings, get_settings
from graetzlmap.core.dependencies import ServiceContainer
from graetzlmap.core.error_handlers import setup_error_handlers
from graetzlmap.core.exceptions import GeoDataLoadError
from graetzlmap.core.logging import configure_logging
from graetzlmap.middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: build the service container on startup and prime
    the geo cache; release it on shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        f"Starting {settings.app_name} v{settings.app_version}",
        extra={"environment": settings.environment.value, "cms_api": settings.serves_cms_api()},
    )

    container = ServiceContainer(settings)
    container.initialize_services()
    app.state.service_container = container

    try:
        container.get_geo_context().load_data()
    except GeoDataLoadError as e:
        # Map endpoints degrade to empty results until the data appears
        logger.error(f"Geodata not loaded at startup: {e.message}")

    logger.info("Application startup complete")
    try:
        yield
    finally:
        logger.info("Shutting down application")
        container.cleanup_services()
        logger.info("Application shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: configuration to use; the process-wide settings when omitted

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    configure_logging(
        settings.log_level.value, settings.log_format, settings.log_line_format, settings.log_file
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(CORSMiddleware, **settings.get_cors_config())
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    if settings.serves_cms_api():
        for router in CMS_ROUTERS:
            app.include_router(router)
    else:
        logger.info("Static build mode: CMS and CRUD routes are not served")
    for router in QUERY_ROUTERS:
        app.include_router(router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running",
            "mode": "cms" if settings.serves_cms_api() else "static",
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Data file presence, geo cache state and error statistics."""
        container: Optional[ServiceContainer] = getattr(request.app.state, "service_container", None)
        error_stats = request.app.state.error_handler.get_error_statistics()

        if container is None or not container.initialized:
            return {
                "status": "unhealthy",
                "message": "Service container not initialized",
                "version": settings.app_version,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "errors": error_stats,
            }

        geo = container.get_geo_context()
        files = container.data_files()
        required = {"neighborhoods", "pois" if settings.serves_cms_api() else "bundle"}
        missing = [f["name"] for f in files if f["name"] in required and not f["exists"]]

        return {
            "status": "degraded" if missing else "healthy",
            "version": settings.app_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": {
                "data_files": files,
                "missing": missing,
                "geo_cache": {"loaded": geo.is_loaded},
            },
            "errors": error_stats,
        }

    return app


# Create application instance
app = create_app()
