"""Feng Shui Catalog API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CatalogError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The CatalogStore is owned by app.state and loaded once in the lifespan
    - A corrupt or unreadable catalog document never stops startup: the
      error is reported and the service runs with an empty catalog
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fengshui_catalog.api.error_handlers import register_error_handlers
from fengshui_catalog.api.routes import catalog, health
from fengshui_catalog.config import Settings, get_settings
from fengshui_catalog.core.errors import CatalogError
from fengshui_catalog.infrastructure.json_storage import JsonFileStorage
from fengshui_catalog.infrastructure.observability import setup_logging
from fengshui_catalog.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> CatalogStore:
    """CatalogStore over the JSON document named in settings, loaded if present."""
    store = CatalogStore(JsonFileStorage(settings.data_file))
    try:
        store.load()
    except CatalogError:
        logger.warning(
            "Starting with an empty catalog",
            extra={"file_name": str(settings.data_file)},
        )
    return store


def create_app(
    settings: Settings | None = None, store: CatalogStore | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        if getattr(app.state, "catalog_store", None) is None:
            app.state.catalog_store = build_store(settings)
        logger.info(
            "Feng Shui catalog API started",
            extra={"counts": app.state.catalog_store.state.counts()},
        )
        yield
        logger.info("Feng Shui catalog API shutting down")

    app = FastAPI(
        title="Feng Shui Catalog API", version="1.0.0", lifespan=lifespan,
    )
    app.state.catalog_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(catalog.router)

    register_error_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("fengshui_catalog.main:app", host="0.0.0.0", port=8000)
