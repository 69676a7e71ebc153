"""
kvtable.db.values

Conversion between Python values and SQLite's native value affinity.

Responsibilities:
- Classify values into the five native kinds (TEXT, INTEGER, REAL, BLOB, NULL).
- Encode caller values on write and decode stored values to a requested type on read.
- Provide optional codecs for storing structured values as TEXT.
"""

from __future__ import annotations

import enum
import json
import math
from typing import Any, Protocol, TypeAlias

from pydantic import BaseModel, ValidationError

from kvtable.errors import TypeMismatch, ValueEncodingError

NativeValue: TypeAlias = str | int | float | bytes | None

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class ValueKind(enum.StrEnum):
    text = "TEXT"
    integer = "INTEGER"
    real = "REAL"
    blob = "BLOB"
    null = "NULL"


def kind_of(value: NativeValue) -> ValueKind:
    # bool is an int subclass; SQLite stores it as INTEGER.
    if value is None:
        return ValueKind.null
    if isinstance(value, str):
        return ValueKind.text
    if isinstance(value, int):
        return ValueKind.integer
    if isinstance(value, float):
        return ValueKind.real
    if isinstance(value, bytes):
        return ValueKind.blob
    raise ValueEncodingError(f"{type(value).__name__} is not a native SQLite value")


def encode(value: Any) -> NativeValue:
    """Normalize `value` into something the driver binds without adapters."""

    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise ValueEncodingError(f"Integer {value} does not fit in 64 bits")
        return value
    if isinstance(value, float):
        # SQLite silently stores NaN as NULL, which would not round-trip.
        if math.isnan(value):
            raise ValueEncodingError("NaN cannot be stored")
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise ValueEncodingError(
        f"{type(value).__name__} has no native SQLite representation; use a codec"
    )


def decode(raw: NativeValue, as_type: type | None = None, *, nullable: bool = False) -> Any:
    """
    Convert a stored value to `as_type`.

    `as_type=None` returns the value as stored. Widening is limited to
    INTEGER -> float and TEXT -> bytes; everything else must match exactly.
    """

    stored = kind_of(raw)
    if as_type is None or (nullable and stored is ValueKind.null):
        return raw

    if as_type is type(None):
        if stored is ValueKind.null:
            return None
    elif as_type is bool:
        if stored is ValueKind.integer:
            return raw != 0
    elif as_type is int:
        if stored is ValueKind.integer:
            return raw
    elif as_type is float:
        if stored in (ValueKind.real, ValueKind.integer):
            return float(raw)  # type: ignore[arg-type]
    elif as_type is str:
        if stored is ValueKind.text:
            return raw
    elif as_type is bytes:
        if stored is ValueKind.blob:
            return raw
        if stored is ValueKind.text:
            return raw.encode("utf-8")  # type: ignore[union-attr]

    # Unsupported targets fall through here too.
    expected = getattr(as_type, "__name__", repr(as_type))
    raise TypeMismatch(expected=expected, stored=stored.value)


class ValueCodec(Protocol):
    def encode(self, obj: Any) -> NativeValue: ...

    def decode(self, raw: NativeValue) -> Any: ...


class JsonCodec:
    """Stores any JSON-serializable object as TEXT."""

    def encode(self, obj: Any) -> NativeValue:
        try:
            return json.dumps(obj, separators=(",", ":"), sort_keys=True, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise ValueEncodingError(f"Value is not JSON serializable: {e}") from e

    def decode(self, raw: NativeValue) -> Any:
        if not isinstance(raw, str):
            raise TypeMismatch(expected="JSON text", stored=kind_of(raw).value)
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise TypeMismatch(expected="JSON text", stored=ValueKind.text.value) from e


class ModelCodec:
    """Stores a pydantic model as its JSON representation."""

    def __init__(self, model: type[BaseModel]) -> None:
        self.model = model

    def encode(self, obj: Any) -> NativeValue:
        if not isinstance(obj, self.model):
            raise ValueEncodingError(
                f"Expected {self.model.__name__}, got {type(obj).__name__}"
            )
        return obj.model_dump_json()

    def decode(self, raw: NativeValue) -> Any:
        if not isinstance(raw, str):
            raise TypeMismatch(expected=self.model.__name__, stored=kind_of(raw).value)
        try:
            return self.model.model_validate_json(raw)
        except ValidationError as e:
            raise TypeMismatch(expected=self.model.__name__, stored=ValueKind.text.value) from e


# --- Module Notes -----------------------------------------------------------
# The value column carries no declared type, so SQLite keeps each value's own
# storage class; `kind_of` on a fetched value therefore reflects what was written.
