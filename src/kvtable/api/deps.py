"""
kvtable.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and DB connections.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from kvtable.db.session import connection_scope
from kvtable.settings import Settings


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


def engine_from_app(request: Request) -> AsyncEngine:
    # The engine is created in the lifespan handler of `kvtable.api.app.create_app`.
    return request.app.state.engine  # type: ignore[attr-defined]


async def db_connection(
    engine: AsyncEngine = Depends(engine_from_app),
) -> AsyncIterator[AsyncConnection]:
    # One transaction per request: committed unless the endpoint raises.
    async with connection_scope(engine) as conn:
        yield conn
