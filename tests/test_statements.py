from __future__ import annotations

import pytest

from kvtable.db import statements
from kvtable.errors import InvalidIdentifier


def test_rendered_statements_match_schema() -> None:
    assert statements.render(statements.CREATE_TABLE, "user_emails") == (
        "CREATE TABLE IF NOT EXISTS user_emails (\n"
        "  k VARCHAR(255) PRIMARY KEY UNIQUE NOT NULL,\n"
        "  v\n"
        ");"
    )
    assert (
        statements.render(statements.INSERT, "t")
        == "INSERT INTO t (k, v) VALUES (?, ?);"
    )
    assert statements.render(statements.UPSERT, "t") == (
        "INSERT INTO t (k, v) VALUES (?, ?)\n"
        "  ON CONFLICT(k) DO UPDATE SET v = excluded.v;"
    )
    assert statements.render(statements.SELECT_VALUE, "t") == "SELECT v FROM t WHERE k = ?;"
    assert statements.render(statements.DELETE, "t") == "DELETE FROM t WHERE k = ?;"


@pytest.mark.parametrize("name", ["users", "user_emails", "_private", "T1", "a" * 64])
def test_valid_table_names(name: str) -> None:
    assert statements.validate_table_name(name) == name


@pytest.mark.parametrize(
    "name",
    [
        "",
        "1users",
        "bad-name",
        "has space",
        "users; DROP TABLE users",
        'quoted"name',
        "select",
        "TABLE",
        "sqlite_master",
        "SQLITE_sequence",
        "a" * 65,
        None,
        42,
    ],
)
def test_invalid_table_names(name) -> None:
    with pytest.raises(InvalidIdentifier):
        statements.validate_table_name(name)
