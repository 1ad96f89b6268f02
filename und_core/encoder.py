"""
Deterministic encoders for signable transaction content.

Two families live here:

* ``convert_object_to_sign_bytes``: canonical JSON (keys sorted at every
  depth, no whitespace, UTF-8).  This is what gets hashed and signed.
* Binary amino primitives (unsigned varints, bools, length-prefixed
  strings/bytes, timestamps) for the chain's binary wire format.

Both must be byte-exact: any drift produces signatures the chain rejects.
"""

from __future__ import annotations

import json
import re
import struct
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from und_core.errors import ValidationError


# ===================================================================
#  Unsigned varint
# ===================================================================

class UVarInt:
    """Unsigned LEB128 varint, unbounded (Python ints are arbitrary precision)."""

    @staticmethod
    def encode(n: int) -> bytes:
        if n < 0:
            raise ValidationError(f"varint cannot encode negative number {n}")
        out = bytearray()
        while True:
            byte = n & 0x7F
            n >>= 7
            if n:
                out.append(byte | 0x80)
            else:
                out.append(byte)
                return bytes(out)

    @staticmethod
    def decode(data: bytes, offset: int = 0) -> tuple[int, int]:
        """Return ``(value, bytes_consumed)`` for the varint at *offset*."""
        result = 0
        shift = 0
        pos = offset
        while pos < len(data):
            byte = data[pos]
            result |= (byte & 0x7F) << shift
            pos += 1
            if not byte & 0x80:
                return result, pos - offset
            shift += 7
        raise ValidationError("truncated varint")


def _to_int(value: int | str | Decimal) -> int:
    if isinstance(value, bool):
        raise ValidationError("expected a number, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # Floats lose precision above 2^53; require an exact integer value
        if not value.is_integer():
            raise ValidationError(f"cannot encode non-integer {value!r}")
        return int(Decimal(repr(value)))
    try:
        dec = Decimal(str(value).strip())
    except ArithmeticError:
        raise ValidationError(f"not a number: {value!r}") from None
    if dec != dec.to_integral_value():
        raise ValidationError(f"cannot encode non-integer {value!r}")
    return int(dec)


def encode_number(num: int | str | Decimal) -> bytes:
    """Unsigned varint of *num*; decimal strings are accepted for big values."""
    return UVarInt.encode(_to_int(num))


def encode_bool(b: bool) -> bytes:
    return b"\x01" if b else b"\x00"


def encode_bytes(data: bytes) -> bytes:
    """Varint length prefix followed by the raw bytes."""
    return UVarInt.encode(len(data)) + bytes(data)


def encode_string(s: str) -> bytes:
    """Varint length prefix followed by the UTF-8 bytes."""
    return encode_bytes(s.encode("utf-8"))


# ===================================================================
#  Timestamps
# ===================================================================

_ISO_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d{1,9}))?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})?$"
)


def _parse_time(value: str | datetime) -> tuple[int, int]:
    """Return (unix seconds, nanoseconds) without losing sub-microsecond digits."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        whole = value.replace(microsecond=0)
        return int(whole.timestamp()), value.microsecond * 1000

    m = _ISO_RE.match(value.strip())
    if m is None:
        raise ValidationError(f"invalid ISO-8601 time: {value!r}")
    tz = m.group("tz") or "Z"
    base = datetime.fromisoformat(m.group("base") + ("+00:00" if tz == "Z" else tz))
    nanos = int((m.group("frac") or "0").ljust(9, "0"))
    return int(base.timestamp()), nanos


def encode_time(value: str | datetime) -> bytes:
    """
    Binary timestamp: 0x09 + seconds (fixed64 LE) + 0x15 + nanos (fixed32 LE).

    >>> encode_time("1973-11-29T21:33:09.123456789Z").hex()
    '0915cd5b07000000001515cd5b07'
    """
    seconds, nanos = _parse_time(value)
    if seconds < 0:
        raise ValidationError("times before 1970-01-01 are not supported")
    return (
        bytes([(1 << 3) | 1]) + struct.pack("<Q", seconds)
        + bytes([(2 << 3) | 5]) + struct.pack("<I", nanos)
    )


# ===================================================================
#  Canonical JSON
# ===================================================================

def _check_json_safe(obj: Any, path: str = "$") -> None:
    if isinstance(obj, float):
        raise ValidationError(
            f"float at {path} has no canonical form; pass amounts as strings",
        )
    if isinstance(obj, dict):
        for key, value in obj.items():
            if not isinstance(key, str):
                raise ValidationError(f"non-string key {key!r} at {path}")
            _check_json_safe(value, f"{path}.{key}")
    elif isinstance(obj, (list, tuple)):
        for i, value in enumerate(obj):
            _check_json_safe(value, f"{path}[{i}]")


def sort_object(obj: Any) -> Any:
    """Deep copy of *obj* with every dict's keys in sorted order."""
    if isinstance(obj, dict):
        return {key: sort_object(obj[key]) for key in sorted(obj)}
    if isinstance(obj, (list, tuple)):
        return [sort_object(item) for item in obj]
    return obj


def convert_object_to_sign_bytes(obj: Any) -> bytes:
    """
    Canonical JSON bytes of *obj*.

    Object keys are sorted at every depth, arrays keep their order, and no
    whitespace is emitted.  Two documents that are equal by value always
    yield identical bytes.
    """
    _check_json_safe(obj)
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False,
    ).encode("utf-8")
