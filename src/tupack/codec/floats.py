"""Order-preserving IEEE-754 float codec.

Floats are written as tag 0x20 (4 bytes) and doubles as tag 0x21 (8 bytes).
The raw bits are reinterpreted as an unsigned integer; negative values have
every bit flipped, positive values only get their sign bit set. The result,
written big-endian, sorts byte-wise in numeric order with -0.0 just below
+0.0, infinities at the ends and NaN above +inf.

All NaN payloads collapse to a single quiet NaN before the transform.
"""

from __future__ import annotations

import math
import struct

from ..exceptions import ArgumentError, FormatError, NumericOverflowError
from . import tags

_SINGLE_SIGN = 0x8000_0000
_SINGLE_MASK = 0xFFFF_FFFF
_SINGLE_NAN = 0x7FC0_0000

_DOUBLE_SIGN = 0x8000_0000_0000_0000
_DOUBLE_MASK = 0xFFFF_FFFF_FFFF_FFFF
_DOUBLE_NAN = 0x7FF8_0000_0000_0000

_FLOAT32_MAX = struct.unpack(">f", b"\x7f\x7f\xff\xff")[0]


class Single(float):
    """A 32-bit float.

    Plain Python floats are packed as doubles (tag 0x21). Wrapping a value in
    Single packs it as a 4-byte float (tag 0x20) instead; the value is rounded
    to float32 precision on construction. Decoding a 0x20 segment returns a
    Single, so re-packing keeps the same tag.

    Raises:
        ArgumentError: If a finite value is outside the float32 range
    """

    def __new__(cls, value: float = 0.0) -> Single:
        try:
            rounded = struct.unpack(">f", struct.pack(">f", float(value)))[0]
        except OverflowError as err:
            raise ArgumentError(f"Value {value} does not fit in a 32-bit float") from err
        return super().__new__(cls, rounded)

    def __repr__(self) -> str:
        return f"Single({float(self)!r})"


def _single_bits(value: float) -> int:
    if math.isnan(value):
        return _SINGLE_NAN
    try:
        return struct.unpack(">I", struct.pack(">f", value))[0]
    except OverflowError as err:
        raise ArgumentError(f"Value {value} does not fit in a 32-bit float") from err


def _double_bits(value: float) -> int:
    if math.isnan(value):
        return _DOUBLE_NAN
    return struct.unpack(">Q", struct.pack(">d", value))[0]


def write_single(out: bytearray, value: float) -> None:
    """Append a 32-bit float element."""
    bits = _single_bits(value)
    bits = (bits ^ _SINGLE_MASK) if bits & _SINGLE_SIGN else (bits | _SINGLE_SIGN)
    out.append(tags.SINGLE)
    out += bits.to_bytes(4, "big")


def write_double(out: bytearray, value: float) -> None:
    """Append a 64-bit float element."""
    bits = _double_bits(value)
    bits = (bits ^ _DOUBLE_MASK) if bits & _DOUBLE_SIGN else (bits | _DOUBLE_SIGN)
    out.append(tags.DOUBLE)
    out += bits.to_bytes(8, "big")


def read_single(payload: bytes | memoryview) -> Single:
    """Decode the 4-byte payload of a 0x20 segment."""
    if len(payload) != 4:
        raise FormatError(f"Single precision float expects 4 bytes, got {len(payload)}")
    bits = int.from_bytes(payload, "big")
    bits = (bits & ~_SINGLE_SIGN) if bits & _SINGLE_SIGN else (bits ^ _SINGLE_MASK)
    return Single(struct.unpack(">f", bits.to_bytes(4, "big"))[0])


def read_double(payload: bytes | memoryview) -> float:
    """Decode the 8-byte payload of a 0x21 segment."""
    if len(payload) != 8:
        raise FormatError(f"Double precision float expects 8 bytes, got {len(payload)}")
    bits = int.from_bytes(payload, "big")
    bits = (bits & ~_DOUBLE_SIGN) if bits & _DOUBLE_SIGN else (bits ^ _DOUBLE_MASK)
    return struct.unpack(">d", bits.to_bytes(8, "big"))[0]


def narrow_to_single(value: float) -> Single:
    """Convert a decoded double into a Single.

    Raises:
        NumericOverflowError: If a finite value exceeds the float32 range
    """
    if math.isfinite(value) and abs(value) > _FLOAT32_MAX:
        raise NumericOverflowError(f"Value {value} does not fit in a 32-bit float")
    return Single(value)


def bit_pattern(value: float, single: bool = False) -> int:
    """Return the IEEE-754 bits of a value, with NaN canonicalized."""
    return _single_bits(value) if single else _double_bits(value)
