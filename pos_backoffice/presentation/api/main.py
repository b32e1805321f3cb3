"""
Main - Factory FastAPI.

Responsabilite unique:
----------------------
Creer et configurer l'application FastAPI.

Le conteneur est construit au demarrage (lifespan) puis partage via
app.state. Le timer des backups automatiques demarre avec l'API si
SCHEDULER_ENABLED=true; sinon il tourne dans le worker (scheduler.py).

Usage:
------
    # Development
    uvicorn pos_backoffice.presentation.api.main:app --reload

    # Production
    uvicorn pos_backoffice.presentation.api.main:app --host 0.0.0.0 --port 8000
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from pos_backoffice.infrastructure.backup.config import get_backup_config
from pos_backoffice.infrastructure.container import Container
from pos_backoffice.infrastructure.logging import (
    RequestLogger,
    configure_logging_from_env,
    get_logger,
)
from pos_backoffice.presentation.api.backup.router import router as backup_router
from pos_backoffice.presentation.api.config import APISettings, get_settings
from pos_backoffice.presentation.api.errors import register_exception_handlers
from pos_backoffice.presentation.api.reset.router import router as reset_router

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Construit le conteneur et pilote le timer si l'application en est proprietaire."""
    owned = app.state.container is None
    if owned:
        config = get_backup_config()
        app.state.container = Container.create(config)
        if config.scheduler_enabled:
            app.state.container.scheduler.start()

    logger.info("app_started", version=app.version)
    try:
        yield
    finally:
        if owned:
            app.state.container.shutdown()
            app.state.container = None
        logger.info("app_stopped")


def create_app(
    container: Optional[Container] = None,
    settings: Optional[APISettings] = None,
) -> FastAPI:
    """
    Factory pour creer l'application FastAPI.

    Args:
        container: Conteneur deja construit (tests); sinon cree au demarrage.
        settings: Configuration API (defaut: variables d'environnement).

    Returns:
        Application FastAPI configuree.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.container = container
    app.state.settings = settings

    # Request logging middleware
    app.add_middleware(BaseHTTPMiddleware, dispatch=RequestLogger())

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Health check
    @app.get("/health", tags=["Health"])
    def health():
        """Endpoint de sante (base et timer)."""
        current = app.state.container
        if current is None:
            return {"status": "starting"}
        database = current.db.health_check()
        return {
            "status": database["status"],
            "database": database,
            "scheduler_running": current.scheduler.is_running,
        }

    # Routers
    app.include_router(backup_router, prefix=settings.api_prefix)
    app.include_router(reset_router, prefix=settings.api_prefix)

    return app


configure_logging_from_env()

# Instance pour uvicorn
app = create_app()
