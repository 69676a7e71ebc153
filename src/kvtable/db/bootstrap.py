"""
kvtable.db.bootstrap

Schema bootstrap for key-value tables.

Responsibilities:
- Create a `(k, v)` table if it is absent and return a verified handle.
- Report whether the table was created or already existed.
- Refuse to verify a pre-existing table whose columns or key constraints do not match.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from kvtable.db import statements
from kvtable.db.table import Table, TableState
from kvtable.errors import StorageError
from kvtable.observability.logging import get_logger

log = get_logger(__name__)

_EXPECTED_COLUMNS = (statements.KEY_COLUMN, statements.VALUE_COLUMN)


class BootstrapOutcome(enum.StrEnum):
    created = "CREATED"
    existed = "EXISTED"


@dataclass(frozen=True, slots=True)
class BootstrapResult:
    table: Table
    outcome: BootstrapOutcome

    @property
    def created(self) -> bool:
        return self.outcome is BootstrapOutcome.created


async def bootstrap(connection: AsyncConnection, name: str) -> BootstrapResult:
    """
    Idempotently create table `name`.

    Engine failures surface as `StorageError` and are not retried: a failing
    CREATE usually means a real conflict, not a transient condition.
    """

    name = statements.validate_table_name(name)
    try:
        found = await connection.exec_driver_sql(statements.TABLE_EXISTS, (name,))
        existed = found.first() is not None
        await connection.exec_driver_sql(statements.render(statements.CREATE_TABLE, name))
        # A view of the same name also makes the CREATE a no-op, so the shape is
        # checked whatever the lookup said.
        info = await connection.exec_driver_sql(statements.render(statements.TABLE_INFO, name))
        # table_info rows: (cid, name, type, notnull, dflt_value, pk)
        rows = info.all()
    except SQLAlchemyError as e:
        diagnostic = str(getattr(e, "orig", None) or e)
        log.warning("storage_error", table=name, operation="create", error=diagnostic)
        raise StorageError("create", name, diagnostic) from e

    problem = _shape_problem(rows)
    if problem is not None:
        log.warning("table_shape_mismatch", table=name, problem=problem)
        raise StorageError("create", name, f"{name} {problem}")

    outcome = BootstrapOutcome.existed if existed else BootstrapOutcome.created
    log.info("table_exists" if existed else "table_created", table=name)
    return BootstrapResult(table=Table(name=name, state=TableState.verified), outcome=outcome)


def _shape_problem(rows: Sequence[Any]) -> str | None:
    columns = tuple(row[1] for row in rows)
    if columns != _EXPECTED_COLUMNS:
        return f"has columns {list(columns)}, expected {list(_EXPECTED_COLUMNS)}"
    key, value = rows
    if key[5] != 1 or key[3] != 1:
        return f"column {statements.KEY_COLUMN} must be a NOT NULL primary key"
    if value[2] or value[3] or value[4] is not None or value[5]:
        return f"column {statements.VALUE_COLUMN} must carry no type or constraint"
    return None


async def create(connection: AsyncConnection, name: str) -> Table:
    return (await bootstrap(connection, name)).table


# --- Module Notes -----------------------------------------------------------
# The existence lookup and shape check cost two extra statements, paid only
# here; table handles never check existence on their own.
