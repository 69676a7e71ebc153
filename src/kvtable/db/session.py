"""
kvtable.db.session

Async SQLAlchemy engine + connection helpers.

Responsibilities:
- Create the async engine from settings.
- Provide a transactional connection scope for callers outside FastAPI.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from kvtable.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.database_url, pool_pre_ping=True)


@asynccontextmanager
async def connection_scope(engine: AsyncEngine) -> AsyncIterator[AsyncConnection]:
    """
    Yield a connection inside a transaction: committed when the block exits
    normally, rolled back when it raises.
    """

    async with engine.begin() as conn:
        yield conn


# --- Module Notes -----------------------------------------------------------
# Table handles never open connections themselves; this scope is how the API
# layer (see `kvtable.api.deps.db_connection`) and scripts obtain one.
