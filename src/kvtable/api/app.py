"""
kvtable.api.app

FastAPI app factory.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose the shared async engine.
- Bootstrap the default table on startup when configured to.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from kvtable import __version__
from kvtable.api.routers.health import router as health_router
from kvtable.api.routers.root import router as root_router
from kvtable.api.routers.tables import router as tables_router
from kvtable.db.bootstrap import bootstrap
from kvtable.db.session import connection_scope, create_engine
from kvtable.observability.logging import configure_logging, get_logger
from kvtable.observability.middleware import RequestContextMiddleware
from kvtable.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, database_url=settings.database_url)
        engine = create_engine(settings)
        app.state.engine = engine
        try:
            if settings.auto_create_table:
                async with connection_scope(engine) as conn:
                    await bootstrap(conn, settings.default_table)
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="kvtable",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(tables_router)
    # The bare `/{key}/{value}` route matches any two-segment POST; keep it last.
    app.include_router(root_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Routers read settings from `app.state.settings` so each app instance (tests
# build several) keeps its own configuration.
