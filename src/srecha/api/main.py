"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from srecha import __version__
from srecha.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from srecha.api.middleware.error_handler import setup_exception_handlers
from srecha.api.routes import (
    auth_router,
    catalog_router,
    deliveries_router,
    documents_router,
    health_router,
    invoices_router,
    warehouse_router,
)
from srecha.application.container import ServiceContainer, build_container
from srecha.config import Settings, configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and opens the pool on startup, closes it on shutdown.
    """
    container: ServiceContainer = app.state.container
    settings = container.settings

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        data_dir=str(settings.storage.data_dir),
    )

    try:
        await container.startup()
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    logger.info("application_started")

    yield

    logger.info("application_stopping")
    await container.shutdown()
    logger.info("application_stopped")


def create_app(
    settings: Settings | None = None,
    container: ServiceContainer | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to build the container from (default: global settings)
        container: Prebuilt container, e.g. one pointing at a test data directory

    Returns:
        Configured FastAPI instance
    """
    settings = settings or (container.settings if container else get_settings())

    app = FastAPI(
        title="Srecha Invoice Engine API",
        description="Invoices, their lifecycle, reference data and rendered documents",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )
    app.state.container = container or build_container(settings)

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(invoices_router)
    app.include_router(documents_router)
    app.include_router(catalog_router)
    app.include_router(warehouse_router)
    app.include_router(deliveries_router)

    return app


# Create app instance
app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    configure_logging()
    settings = get_settings()

    uvicorn.run(
        "srecha.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    run()
