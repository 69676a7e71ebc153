"""
kvtable.db.statements

SQL statement templates for the two-column `(k, v)` table shape.

Responsibilities:
- Validate table names before they are interpolated into statement text.
- Render the bit-exact statements issued by the table handle and the bootstrap.
"""

from __future__ import annotations

import re

from sqlalchemy.dialects.sqlite.base import SQLiteIdentifierPreparer

from kvtable.errors import InvalidIdentifier

KEY_COLUMN = "k"
VALUE_COLUMN = "v"
MAX_KEY_LENGTH = 255
MAX_NAME_LENGTH = 64

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
# SQLAlchemy keeps the SQLite keyword list in lower case.
_RESERVED_WORDS = frozenset(SQLiteIdentifierPreparer.reserved_words)

CREATE_TABLE = (
    "CREATE TABLE IF NOT EXISTS {name} (\n"
    f"  {KEY_COLUMN} VARCHAR({MAX_KEY_LENGTH}) PRIMARY KEY UNIQUE NOT NULL,\n"
    f"  {VALUE_COLUMN}\n"
    ");"
)
INSERT = f"INSERT INTO {{name}} ({KEY_COLUMN}, {VALUE_COLUMN}) VALUES (?, ?);"
UPSERT = (
    f"INSERT INTO {{name}} ({KEY_COLUMN}, {VALUE_COLUMN}) VALUES (?, ?)\n"
    f"  ON CONFLICT({KEY_COLUMN}) DO UPDATE SET {VALUE_COLUMN} = excluded.{VALUE_COLUMN};"
)
SELECT_VALUE = f"SELECT {VALUE_COLUMN} FROM {{name}} WHERE {KEY_COLUMN} = ?;"
DELETE = f"DELETE FROM {{name}} WHERE {KEY_COLUMN} = ?;"

# Bootstrap inspection; the name is a bound parameter here.
TABLE_EXISTS = "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ? COLLATE NOCASE"
TABLE_INFO = "PRAGMA table_info({name})"


def validate_table_name(name: object) -> str:
    """
    Allow-list check for a table name.

    Identifiers cannot be bound parameters, so anything that reaches statement
    text must be a plain, unreserved identifier.
    """

    if not isinstance(name, str):
        raise InvalidIdentifier(name, "must be a string")
    if not name:
        raise InvalidIdentifier(name, "must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidIdentifier(name, f"must be at most {MAX_NAME_LENGTH} characters")
    if _NAME_RE.fullmatch(name) is None:
        raise InvalidIdentifier(name, "only letters, digits and underscores are allowed")
    if name.lower() in _RESERVED_WORDS:
        raise InvalidIdentifier(name, "is a reserved word")
    if name.lower().startswith("sqlite_"):
        raise InvalidIdentifier(name, "the sqlite_ prefix is reserved by the engine")
    return name


def render(template: str, name: str) -> str:
    return template.format(name=validate_table_name(name))


# --- Module Notes -----------------------------------------------------------
# Keys and values are always bound with `?` placeholders and executed through
# `AsyncConnection.exec_driver_sql`, so the text above is what SQLite receives.
