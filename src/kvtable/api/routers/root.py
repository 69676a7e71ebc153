"""
kvtable.api.routers.root

Plain-text routes on the default table.

Responsibilities:
- Greet on `/`.
- Upsert a text value via `POST /{key}/{value}`.
- Read a text value via `GET /{key}` and remove it via `DELETE /{key}`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncConnection
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from kvtable.api.deps import db_connection, settings_dep
from kvtable.db.table import Table
from kvtable.errors import KvTableError
from kvtable.observability.logging import get_logger
from kvtable.settings import Settings

router = APIRouter()
log = get_logger(__name__)


@router.get("/", response_class=PlainTextResponse)
async def hello() -> str:
    return "Hello world!"


@router.post("/{key}/{value}", response_class=PlainTextResponse)
async def set_value(
    key: str,
    value: str,
    conn: AsyncConnection = Depends(db_connection),
    settings: Settings = Depends(settings_dep),
) -> str:
    table = Table.existing(settings.default_table)
    try:
        await table.set(conn, key, value)
    except KvTableError as e:
        log.info("set_rejected", table=table.name, key=key, error=type(e).__name__)
        raise HTTPException(
            status_code=HTTP_400_BAD_REQUEST, detail="Unable to insert values"
        ) from e
    return "Stored"


@router.get("/{key}", response_class=PlainTextResponse)
async def get_value(
    key: str,
    conn: AsyncConnection = Depends(db_connection),
    settings: Settings = Depends(settings_dep),
) -> str:
    table = Table.existing(settings.default_table)
    try:
        return await table.get(conn, key, str)
    except KvTableError as e:
        log.info("get_rejected", table=table.name, key=key, error=type(e).__name__)
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Value was not found") from e


@router.delete("/{key}", response_class=PlainTextResponse)
async def remove_value(
    key: str,
    conn: AsyncConnection = Depends(db_connection),
    settings: Settings = Depends(settings_dep),
) -> str:
    table = Table.existing(settings.default_table)
    try:
        await table.remove(conn, key)
    except KvTableError as e:
        log.info("remove_rejected", table=table.name, key=key, error=type(e).__name__)
        raise HTTPException(
            status_code=HTTP_404_NOT_FOUND, detail="Unable to delete by key"
        ) from e
    return "Rows affected: 1"


# --- Module Notes -----------------------------------------------------------
# Every failure on these routes collapses to one status (400 for writes, 404 for
# reads and deletes); the typed errors are only visible in the logs.
