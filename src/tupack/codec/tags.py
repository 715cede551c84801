"""Tag bytes of the tuple encoding.

The numeric value of each tag defines the relative order of the types it
represents: byte-wise comparison of two packed tuples first compares tags, so
the table below IS the cross-type ordering.
"""

from __future__ import annotations

import enum

NIL = 0x00
BYTES = 0x01
UTF8 = 0x02
LEGACY_TUPLE = 0x03
EMBEDDED_TUPLE = 0x05

NEGATIVE_BIG_INTEGER = 0x0B
INT_NEG8 = 0x0C
INT_NEG1 = 0x13
INT_ZERO = 0x14
INT_POS1 = 0x15
INT_POS8 = 0x1C
POSITIVE_BIG_INTEGER = 0x1D

SINGLE = 0x20
DOUBLE = 0x21

FALSE = 0x26
TRUE = 0x27

UUID128 = 0x30
UUID64 = 0x31
UUID80 = 0x32
UUID96 = 0x33

# VersionStamps share their tags with Uuid80/Uuid96: only the requested
# decode type can tell them apart.
VERSIONSTAMP80 = UUID80
VERSIONSTAMP96 = UUID96

DIRECTORY = 0xFE
SYSTEM = 0xFF

# Byte following a literal 0x00 inside a variable-length payload
ESCAPE = 0xFF

# Total size (tag included) of the fixed-width types
FIXED_SIZES: dict[int, int] = {
    SINGLE: 1 + 4,
    DOUBLE: 1 + 8,
    FALSE: 1,
    TRUE: 1,
    UUID128: 1 + 16,
    UUID64: 1 + 8,
    UUID80: 1 + 10,
    UUID96: 1 + 12,
}


class SegmentType(enum.Enum):
    """Logical kind of a packed tuple segment, derived from its tag byte."""

    NIL = "nil"
    BYTES = "bytes"
    STRING = "string"
    TUPLE = "tuple"
    INTEGER = "integer"
    SINGLE = "single"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    UUID128 = "uuid128"
    UUID64 = "uuid64"
    UUID80 = "uuid80"
    UUID96 = "uuid96"
    USER_TYPE = "user_type"

    @classmethod
    def from_tag(cls, tag: int) -> SegmentType:
        """Classify a tag byte.

        Raises:
            ValueError: If the tag is not part of the tuple encoding
        """
        if tag == NIL:
            return cls.NIL
        if tag == BYTES:
            return cls.BYTES
        if tag == UTF8:
            return cls.STRING
        if tag == EMBEDDED_TUPLE:
            return cls.TUPLE
        if INT_NEG8 <= tag <= INT_POS8:
            return cls.INTEGER
        if tag == SINGLE:
            return cls.SINGLE
        if tag == DOUBLE:
            return cls.DOUBLE
        if tag in (FALSE, TRUE):
            return cls.BOOLEAN
        if tag == UUID128:
            return cls.UUID128
        if tag == UUID64:
            return cls.UUID64
        if tag == UUID80:
            return cls.UUID80
        if tag == UUID96:
            return cls.UUID96
        if tag >= 0x40:
            return cls.USER_TYPE
        raise ValueError(f"Invalid tuple tag byte 0x{tag:02X}")


def is_integer_tag(tag: int) -> bool:
    """Return True for the varint integer tags 0x0C-0x1C."""
    return INT_NEG8 <= tag <= INT_POS8
