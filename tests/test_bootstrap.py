"""
tests.test_bootstrap

Schema bootstrap: idempotent creation, outcome reporting and shape checks.
"""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncConnection

from kvtable.db.bootstrap import BootstrapOutcome, bootstrap, create
from kvtable.db.table import Table, TableState
from kvtable.errors import InvalidIdentifier, StorageError


@pytest.mark.asyncio
async def test_create_returns_verified_handle(conn: AsyncConnection) -> None:
    table = await create(conn, "test")

    assert table.name == "test"
    assert table.state is TableState.verified
    assert table.verified

    # The physical table exists: dropping it succeeds.
    await conn.exec_driver_sql("DROP TABLE test")


@pytest.mark.asyncio
async def test_create_twice_is_a_noop(conn: AsyncConnection) -> None:
    first = await bootstrap(conn, "users")
    await first.table.set(conn, "bobby", "abc@abc.com")

    second = await bootstrap(conn, "users")

    assert first.outcome is BootstrapOutcome.created
    assert first.created
    assert second.outcome is BootstrapOutcome.existed
    assert not second.created
    assert second.table.verified
    assert await second.table.get(conn, "bobby") == "abc@abc.com"


@pytest.mark.asyncio
async def test_table_create_alias(conn: AsyncConnection) -> None:
    table = await Table.create(conn, "aliases")
    assert table.verified
    await table.insert(conn, "a", 1)
    assert await table.get(conn, "a", int) == 1


@pytest.mark.asyncio
async def test_existing_table_with_other_shape_is_rejected(conn: AsyncConnection) -> None:
    await conn.exec_driver_sql("CREATE TABLE legacy (id INTEGER PRIMARY KEY, payload TEXT)")

    with pytest.raises(StorageError) as exc_info:
        await create(conn, "legacy")

    assert exc_info.value.operation == "create"
    assert "payload" in exc_info.value.diagnostic


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "bad-name", "select", "x; DROP TABLE y"])
async def test_create_rejects_invalid_names(conn: AsyncConnection, name: str) -> None:
    with pytest.raises(InvalidIdentifier):
        await create(conn, name)


@pytest.mark.asyncio
async def test_view_with_same_name_is_rejected(conn: AsyncConnection) -> None:
    # IF NOT EXISTS also skips creation when a view holds the name.
    await conn.exec_driver_sql("CREATE VIEW shadow AS SELECT 1 AS one")

    with pytest.raises(StorageError) as exc_info:
        await create(conn, "shadow")

    assert "one" in exc_info.value.diagnostic


@pytest.mark.asyncio
async def test_engine_failure_surfaces_as_storage_error(conn: AsyncConnection) -> None:
    # An index occupies the name; SQLite refuses the CREATE even with IF NOT EXISTS.
    await create(conn, "base")
    await conn.exec_driver_sql("CREATE INDEX taken ON base (v)")

    with pytest.raises(StorageError) as exc_info:
        await create(conn, "taken")

    assert exc_info.value.__cause__ is not None
    assert "taken" in exc_info.value.diagnostic


@pytest.mark.asyncio
async def test_existing_table_is_found_case_insensitively(conn: AsyncConnection) -> None:
    await create(conn, "users")

    result = await bootstrap(conn, "Users")

    assert result.outcome is BootstrapOutcome.existed
    assert result.table.verified


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "ddl",
    [
        "CREATE TABLE loose (k TEXT, v)",
        "CREATE TABLE loose (k TEXT PRIMARY KEY, v)",
        "CREATE TABLE loose (k TEXT NOT NULL UNIQUE, v)",
        "CREATE TABLE loose (k VARCHAR(255) PRIMARY KEY UNIQUE NOT NULL, v TEXT NOT NULL)",
        "CREATE TABLE loose (k VARCHAR(255) PRIMARY KEY UNIQUE NOT NULL, v DEFAULT 0)",
    ],
)
async def test_existing_table_without_key_constraints_is_rejected(
    conn: AsyncConnection, ddl: str
) -> None:
    await conn.exec_driver_sql(ddl)

    with pytest.raises(StorageError) as exc_info:
        await create(conn, "loose")

    assert exc_info.value.operation == "create"
