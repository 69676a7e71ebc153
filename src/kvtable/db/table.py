"""
kvtable.db.table

The table handle: a named two-column key-value collection.

Responsibilities:
- Track whether the backing table is known to exist (`TableState`).
- Translate typed get/set/insert/remove calls into single parameterized statements.
- Map engine failures into the kvtable error taxonomy.

The handle owns no connection. Every operation borrows the `AsyncConnection`
passed in and issues exactly one statement on it; transactions, locking and
thread/task affinity belong to the caller and the engine. A single
`AsyncConnection` must not be used by concurrently running tasks.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from kvtable.db import statements
from kvtable.db.values import NativeValue, ValueCodec, decode, encode
from kvtable.errors import InvalidKey, KeyConflict, KeyTooLong, NotFound, StorageError
from kvtable.observability.logging import get_logger

log = get_logger(__name__)


class TableState(enum.StrEnum):
    unverified = "UNVERIFIED"
    verified = "VERIFIED"


@dataclass(slots=True)
class Table:
    """
    Handle on one key-value table.

    Build it with `kvtable.db.bootstrap.create` (verified) or `Table.existing`
    (unverified). An unverified handle against a table that does not exist
    fails with `StorageError` on first use.
    """

    name: str
    state: TableState = field(default=TableState.unverified)

    @classmethod
    def existing(cls, name: str) -> Table:
        # No engine round trip and no validation here; the name is checked when
        # the first statement is rendered.
        return cls(name=name)

    @classmethod
    async def create(cls, connection: AsyncConnection, name: str) -> Table:
        from kvtable.db.bootstrap import create

        return await create(connection, name)

    @property
    def verified(self) -> bool:
        return self.state is TableState.verified

    def trust(self) -> Table:
        """Assert that the backing table exists with the expected shape."""
        self.state = TableState.verified
        return self

    # --- Operations -----------------------------------------------------------

    async def set(
        self,
        connection: AsyncConnection,
        key: str,
        value: Any,
        *,
        codec: ValueCodec | None = None,
    ) -> None:
        """Insert `key` or replace its value (upsert)."""
        params = (_check_key(key), _encode(value, codec))
        await self._execute(connection, "set", statements.UPSERT, params)

    async def insert(
        self,
        connection: AsyncConnection,
        key: str,
        value: Any,
        *,
        codec: ValueCodec | None = None,
    ) -> None:
        """Insert `key`; raise `KeyConflict` if it is already present."""
        params = (_check_key(key), _encode(value, codec))
        try:
            await self._execute(connection, "insert", statements.INSERT, params)
        except StorageError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise KeyConflict(self.name, key) from e.__cause__
            raise

    async def get(
        self,
        connection: AsyncConnection,
        key: str,
        as_type: type | None = None,
        *,
        nullable: bool = False,
        codec: ValueCodec | None = None,
    ) -> Any:
        """
        Fetch the value stored under `key`.

        With `as_type` the stored value is converted (see `values.decode`) or
        `TypeMismatch` is raised, including for target types `decode` does not
        support. With `codec` the codec decodes it instead and `as_type` is
        ignored; `nullable` applies either way.
        """

        result = await self._execute(
            connection, "get", statements.SELECT_VALUE, (_check_key(key),)
        )
        row = result.first()
        if row is None:
            raise NotFound(self.name, key)
        raw: NativeValue = row[0]
        if codec is not None:
            if nullable and raw is None:
                return None
            return codec.decode(raw)
        return decode(raw, as_type, nullable=nullable)

    async def remove(self, connection: AsyncConnection, key: str) -> None:
        """Delete `key`; raise `NotFound` if it is absent."""
        if not await self.discard(connection, key):
            raise NotFound(self.name, key)

    async def discard(self, connection: AsyncConnection, key: str) -> bool:
        """Delete `key` if present; return whether a row was removed."""
        result = await self._execute(connection, "remove", statements.DELETE, (_check_key(key),))
        return result.rowcount > 0

    # --- Internal -------------------------------------------------------------

    async def _execute(
        self,
        connection: AsyncConnection,
        operation: str,
        template: str,
        params: tuple[NativeValue, ...],
    ) -> CursorResult[Any]:
        sql = statements.render(template, self.name)
        try:
            return await connection.exec_driver_sql(sql, params)
        except SQLAlchemyError as e:
            diagnostic = str(getattr(e, "orig", None) or e)
            if not isinstance(e, IntegrityError):
                log.warning(
                    "storage_error",
                    table=self.name,
                    operation=operation,
                    state=self.state.value,
                    error=diagnostic,
                )
            raise StorageError(operation, self.name, diagnostic) from e


def _check_key(key: Any) -> str:
    # Rejected locally so oversized keys are never truncated by the engine.
    if not isinstance(key, str):
        raise InvalidKey(key)
    if len(key) > statements.MAX_KEY_LENGTH:
        raise KeyTooLong(key, statements.MAX_KEY_LENGTH)
    return key


def _encode(value: Any, codec: ValueCodec | None) -> NativeValue:
    if codec is not None:
        value = codec.encode(value)
    return encode(value)


# --- Module Notes -----------------------------------------------------------
# Integrity errors are only meaningful to `insert`; for `set` the upsert clause
# means one can only come from a schema that does not match the expected shape,
# and it stays a StorageError.
