"""
kvtable.errors

Error taxonomy for table operations.

Responsibilities:
- Give every failure a typed exception the caller can match on.
- Wrap engine-level failures in `StorageError` while keeping the diagnostic.
"""

from __future__ import annotations


class KvTableError(Exception):
    """Base class for every error raised by kvtable."""


class InvalidIdentifier(KvTableError):
    def __init__(self, name: object, reason: str) -> None:
        super().__init__(f"Invalid table name {name!r}: {reason}")
        self.name = name
        self.reason = reason


class InvalidKey(KvTableError):
    def __init__(self, key: object) -> None:
        super().__init__(f"Key must be a string, got {type(key).__name__}")
        self.key = key


class KeyTooLong(KvTableError):
    def __init__(self, key: str, limit: int) -> None:
        super().__init__(f"Key is {len(key)} characters long; the limit is {limit}")
        self.key = key
        self.limit = limit


class KeyConflict(KvTableError):
    def __init__(self, table: str, key: str) -> None:
        super().__init__(f"Key {key!r} already exists in table {table!r}")
        self.table = table
        self.key = key


class NotFound(KvTableError):
    def __init__(self, table: str, key: str) -> None:
        super().__init__(f"Key {key!r} not found in table {table!r}")
        self.table = table
        self.key = key


class ValueEncodingError(KvTableError):
    """The value has no representation in the engine's native value affinity."""


class TypeMismatch(KvTableError):
    def __init__(self, expected: str, stored: str) -> None:
        super().__init__(f"Cannot decode stored {stored} value as {expected}")
        self.expected = expected
        self.stored = stored


class StorageError(KvTableError):
    """
    Opaque wrapper around an engine failure (I/O, locking, missing table, permissions).
    The original exception is chained as `__cause__`.
    """

    def __init__(self, operation: str, table: str, diagnostic: str) -> None:
        super().__init__(f"{operation} on table {table!r} failed: {diagnostic}")
        self.operation = operation
        self.table = table
        self.diagnostic = diagnostic


# --- Module Notes -----------------------------------------------------------
# A missing table is deliberately not its own error kind: the handle cannot tell
# "never created" apart from other schema failures without an extra round trip.
