"""
kvtable

Typed key-value tables on top of SQLite.

Responsibilities:
- Expose package version metadata.
- Re-export the table handle, bootstrap entrypoints and error taxonomy.
"""

from kvtable.db.bootstrap import BootstrapOutcome, BootstrapResult, bootstrap, create
from kvtable.db.table import Table, TableState
from kvtable.errors import (
    InvalidIdentifier,
    InvalidKey,
    KeyConflict,
    KeyTooLong,
    KvTableError,
    NotFound,
    StorageError,
    TypeMismatch,
    ValueEncodingError,
)

__all__ = [
    "__version__",
    "BootstrapOutcome",
    "BootstrapResult",
    "InvalidIdentifier",
    "InvalidKey",
    "KeyConflict",
    "KeyTooLong",
    "KvTableError",
    "NotFound",
    "StorageError",
    "Table",
    "TableState",
    "TypeMismatch",
    "ValueEncodingError",
    "bootstrap",
    "create",
]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Only pure modules are imported here; the API package pulls in FastAPI and is
# imported explicitly by callers that serve HTTP.
