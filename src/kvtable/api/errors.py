"""
kvtable.api.errors

Translation of kvtable errors into HTTP responses.
"""

from __future__ import annotations

from fastapi import HTTPException
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

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

_STATUS_BY_ERROR: dict[type[KvTableError], int] = {
    NotFound: HTTP_404_NOT_FOUND,
    KeyConflict: HTTP_409_CONFLICT,
    InvalidIdentifier: 422,
    InvalidKey: 422,
    KeyTooLong: 422,
    ValueEncodingError: 422,
    TypeMismatch: 422,
    StorageError: HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_error(e: KvTableError) -> HTTPException:
    status = _STATUS_BY_ERROR.get(type(e), HTTP_500_INTERNAL_SERVER_ERROR)
    if isinstance(e, StorageError):
        # Engine diagnostics can include file paths; they stay in the logs.
        return HTTPException(status_code=status, detail="Storage failure")
    return HTTPException(status_code=status, detail=str(e))
