"""
Main FastAPI application for forms-manager.

Forms authoring backend: form metadata, draft/live definitions, version
history and audit events.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forms_manager.api.v1 import api_router
from forms_manager.api.v1.dependencies import reset_context, set_context
from forms_manager.api.v1.error_handlers import register_error_handlers
from forms_manager.api.v1.routers import health_router
from forms_manager.core.config import Settings, get_settings
from forms_manager.core.database import create_database, init_database
from forms_manager.core.logging import configure_logging
from forms_manager.services.context import create_context

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the database handle and service context for the process."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} ({settings.environment})")

    database = create_database(settings)
    if database is not None:
        try:
            await init_database(database)
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")
            raise

    set_context(create_context(settings, database))
    logger.info(f"{settings.app_name} started successfully")

    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.app_name}...")
        reset_context()
        if database is not None:
            await database.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="forms-manager",
        description="Forms authoring backend",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(api_router)

    return app


def run() -> None:
    """Development server entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "forms_manager.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
