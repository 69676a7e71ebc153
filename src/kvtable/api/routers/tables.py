"""
kvtable.api.routers.tables

REST endpoints over named key-value tables.

Responsibilities:
- Bootstrap tables.
- Expose upsert, strict insert, typed read and strict removal of single keys.
"""

from __future__ import annotations

import base64

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncConnection
from starlette.status import HTTP_200_OK, HTTP_201_CREATED, HTTP_204_NO_CONTENT

from kvtable.api.deps import db_connection
from kvtable.api.errors import http_error
from kvtable.db.bootstrap import bootstrap
from kvtable.db.table import Table
from kvtable.db.values import ValueKind, kind_of
from kvtable.errors import KvTableError

router = APIRouter(prefix="/v1/tables", tags=["tables"])


class ValueBody(BaseModel):
    # Required but nullable: `{"value": null}` stores NULL.
    value: str | int | float | bool | None


class TableResponse(BaseModel):
    table: str
    outcome: str


class RecordResponse(BaseModel):
    key: str
    value: str | int | float | None
    kind: ValueKind


@router.post("/{table}", response_model=TableResponse)
async def create_table(
    table: str,
    response: Response,
    conn: AsyncConnection = Depends(db_connection),
) -> TableResponse:
    try:
        result = await bootstrap(conn, table)
    except KvTableError as e:
        raise http_error(e) from e
    response.status_code = HTTP_201_CREATED if result.created else HTTP_200_OK
    return TableResponse(table=result.table.name, outcome=result.outcome.value)


@router.put("/{table}/{key}", status_code=HTTP_204_NO_CONTENT)
async def set_value(
    table: str,
    key: str,
    body: ValueBody,
    conn: AsyncConnection = Depends(db_connection),
) -> None:
    try:
        await Table.existing(table).set(conn, key, body.value)
    except KvTableError as e:
        raise http_error(e) from e


@router.post("/{table}/{key}", status_code=HTTP_201_CREATED)
async def insert_value(
    table: str,
    key: str,
    body: ValueBody,
    conn: AsyncConnection = Depends(db_connection),
) -> dict[str, str]:
    try:
        await Table.existing(table).insert(conn, key, body.value)
    except KvTableError as e:
        raise http_error(e) from e
    return {"key": key, "status": "inserted"}


@router.get("/{table}/{key}", response_model=RecordResponse)
async def get_value(
    table: str,
    key: str,
    conn: AsyncConnection = Depends(db_connection),
) -> RecordResponse:
    try:
        raw = await Table.existing(table).get(conn, key)
    except KvTableError as e:
        raise http_error(e) from e
    kind = kind_of(raw)
    if kind is ValueKind.blob:
        # JSON has no bytes type.
        raw = base64.b64encode(raw).decode("ascii")
    return RecordResponse(key=key, value=raw, kind=kind)


@router.delete("/{table}/{key}", status_code=HTTP_204_NO_CONTENT)
async def remove_value(
    table: str,
    key: str,
    conn: AsyncConnection = Depends(db_connection),
) -> None:
    try:
        await Table.existing(table).remove(conn, key)
    except KvTableError as e:
        raise http_error(e) from e


# --- Module Notes -----------------------------------------------------------
# Handles are built per request with `Table.existing`; a table that was never
# bootstrapped answers 500 on first use rather than being created implicitly.
