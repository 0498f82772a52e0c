"""Main FastAPI application for mongopager."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI

from . import __version__
from .config import get_settings
from .db.connection import mongo_manager
from .errors import register_exception_handlers
from .errors.problem_details import ServiceUnavailableError
from .routes import documents_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format=get_settings().log_format
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logging.getLogger().setLevel(getattr(logging, settings.log_level))
    logger.info(f"Starting {settings.app_name}")

    try:
        await mongo_manager.initialize()
        await mongo_manager.ping()
        logger.info("MongoDB connectivity verified")
    except Exception as e:
        logger.error(f"Failed to initialize MongoDB: {e}")
        raise

    yield

    logger.info(f"Shutting down {settings.app_name}")
    try:
        await mongo_manager.close()
        logger.info("MongoDB client closed")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Cursor-based pagination over MongoDB collections",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    register_exception_handlers(app)

    app.include_router(documents_router, prefix="/v1")

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """Liveness check endpoint."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": __version__
        }

    @app.get("/ready", tags=["Health"])
    async def ready_check() -> Dict[str, Any]:
        """Readiness check endpoint with database connectivity test."""
        try:
            await mongo_manager.ping()
        except Exception as e:
            logger.error(f"Readiness check failed: {e}")
            raise ServiceUnavailableError(
                detail="Service not ready",
                database_error=str(e)
            )
        return {
            "status": "ready",
            "service": settings.app_name,
            "database": "connected"
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()

    uvicorn.run(
        "mongopager.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
