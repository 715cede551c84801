"""Minimal-length signed integer codec.

Integers use the tags 0x0C-0x1C. Tag 0x14 is zero and carries no payload.
A positive value is written as ``0x14 + n`` followed by its ``n`` big-endian
bytes; a negative value is written as ``0x14 - n`` followed by the ``n``-byte
big-endian encoding of ``(2^(8n) - 1) + value``. This keeps byte order equal to
numeric order across all lengths:

    -256 -> 12 FE FF
      -1 -> 13 FE
       0 -> 14
       1 -> 15 01
     256 -> 16 01 00

Only magnitudes up to 2^64 - 1 are supported; wider values would need the
0x0B/0x1D big-integer tags, which are not implemented.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import ArgumentError, FormatError, NumericOverflowError
from . import tags

MAX_MAGNITUDE = (1 << 64) - 1


def byte_count(magnitude: int) -> int:
    """Return the minimal number of bytes (at least 1) holding a non-negative value."""
    return max(1, (magnitude.bit_length() + 7) >> 3)


def write_int(out: bytearray, value: int) -> None:
    """Append the tag and payload of an integer.

    Args:
        out: Buffer to append to
        value: Integer in the range [-(2^64 - 1), 2^64 - 1]

    Raises:
        ArgumentError: If the magnitude does not fit in 64 bits
    """
    if value == 0:
        out.append(tags.INT_ZERO)
        return

    if value > 0:
        if value > MAX_MAGNITUDE:
            raise ArgumentError(f"Integer {value} is too large to be packed (max is 2^64-1)")
        n = byte_count(value)
        out.append(tags.INT_ZERO + n)
        out += value.to_bytes(n, "big")
        return

    if -value > MAX_MAGNITUDE:
        raise ArgumentError(f"Integer {value} is too small to be packed (min is -(2^64-1))")
    n = byte_count(-value)
    out.append(tags.INT_ZERO - n)
    out += (((1 << (8 * n)) - 1) + value).to_bytes(n, "big")


def encode_int(value: int) -> bytes:
    """Encode a single integer element (tag included)."""
    out = bytearray()
    write_int(out, value)
    return bytes(out)


def payload_size(tag: int) -> int:
    """Number of payload bytes following an integer tag."""
    return abs(tag - tags.INT_ZERO)


def read_int(tag: int, payload: bytes | memoryview) -> int:
    """Decode the payload that follows an integer tag.

    Raises:
        FormatError: If the tag is not an integer tag or the payload length does
            not match the tag
    """
    if not tags.is_integer_tag(tag):
        raise FormatError(f"Tag 0x{tag:02X} is not an integer tag")

    n = payload_size(tag)
    if len(payload) != n:
        raise FormatError(f"Integer tag 0x{tag:02X} expects {n} payload bytes, got {len(payload)}")

    if n == 0:
        return 0

    raw = int.from_bytes(payload, "big")
    if tag > tags.INT_ZERO:
        return raw
    return raw - ((1 << (8 * n)) - 1)


@dataclass(frozen=True)
class IntKind:
    """Fixed-width integer target used by the narrowing decoders.

    Attributes:
        name: Display name ("int8", "uint32", ...)
        bits: Width in bits
        signed: Whether negative values are allowed
    """

    name: str
    bits: int
    signed: bool

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def narrow(self, value: int) -> int:
        """Check that a decoded value fits this kind.

        Raises:
            NumericOverflowError: If the value is outside [min_value, max_value]
        """
        if value < self.min_value or value > self.max_value:
            raise NumericOverflowError(
                f"Value {value} does not fit in {self.name} "
                f"(range: {self.min_value} to {self.max_value})"
            )
        return value

    def __repr__(self) -> str:
        return f"IntKind({self.name})"


INT8 = IntKind("int8", 8, True)
UINT8 = IntKind("uint8", 8, False)
INT16 = IntKind("int16", 16, True)
UINT16 = IntKind("uint16", 16, False)
INT32 = IntKind("int32", 32, True)
UINT32 = IntKind("uint32", 32, False)
INT64 = IntKind("int64", 64, True)
UINT64 = IntKind("uint64", 64, False)
