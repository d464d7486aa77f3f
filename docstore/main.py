"""docstore API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly, health before the catch-all resource routes
    - Global error handlers map DocStoreError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Store loaded on startup via lifespan unless a Database was passed in

Design Decisions:
    - create_app() factory: the CLI and tests build apps over their own Database;
      module-level `app` serves `uvicorn docstore.main:app` from settings
    - Static directories mounted AFTER API routes so collections take precedence
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from docstore import __version__
from docstore.api.error_handlers import register_error_handlers
from docstore.api.routes import health, resources
from docstore.config import Settings, get_settings
from docstore.infrastructure.adapters import adapter_for_file
from docstore.infrastructure.database import Database
from docstore.infrastructure.observability import setup_logging
from docstore.services.store_service import StoreService

logger = logging.getLogger(__name__)

DEFAULT_STATIC_DIR = "public"


async def load_database(path: str) -> Database:
    """Open the data file with the adapter matching its extension."""
    db = Database(adapter_for_file(path))
    await db.read()
    return db


def create_app(
    db: Database | None = None, settings: Settings | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        if getattr(app.state, "service", None) is None:
            setup_logging(settings.log_level, settings.log_format)
            app.state.service = StoreService(await load_database(settings.data_file))
            logger.info(f"Loaded {settings.data_file}", extra={"path": settings.data_file})
        logger.info("docstore API started")
        yield
        logger.info("docstore API shutting down")

    app = FastAPI(title="docstore API", version=__version__, lifespan=lifespan)
    app.state.service = StoreService(db) if db is not None else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(resources.router)

    register_error_handlers(app)

    static = _static_files([DEFAULT_STATIC_DIR, *settings.static_dirs])
    if static is not None:
        app.mount("/", static, name="static")

    return app


class MultiDirStaticFiles(StaticFiles):
    """StaticFiles searching several directories in order."""

    def __init__(self, directories: list[str], **kwargs):
        self.directories = directories
        super().__init__(directory=directories[0], **kwargs)

    def get_directories(self, directory=None, packages=None) -> list[str]:
        return list(self.directories)


def _static_files(directories: list[str]) -> StaticFiles | None:
    """One StaticFiles app searching every existing directory in order."""
    paths = [os.path.abspath(d) for d in directories if os.path.isdir(d)]
    if not paths:
        return None
    return MultiDirStaticFiles(paths, html=True)


app = create_app()
