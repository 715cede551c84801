"""Unit tests for the integer codec."""

from __future__ import annotations

import pytest

from tupack import (
    INT8,
    INT16,
    INT32,
    INT64,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    ArgumentError,
    FormatError,
    NumericOverflowError,
    decode_key,
    encode_key,
)
from tupack.codec import varint

MAX = (1 << 64) - 1


class TestIntegerEncoding:
    """Test the minimal-length integer encoding."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, b"\x14"),
            (1, b"\x15\x01"),
            (-1, b"\x13\xfe"),
            (-256, b"\x12\xfe\xff"),
            (255, b"\x15\xff"),
            (256, b"\x16\x01\x00"),
            (-255, b"\x13\x00"),
            (42, b"\x15\x2a"),
            (2014, b"\x16\x07\xde"),
            (MAX, b"\x1c" + b"\xff" * 8),
            (-MAX, b"\x0c" + b"\x00" * 8),
        ],
    )
    def test_known_encodings(self, value: int, expected: bytes) -> None:
        """Test concrete encodings."""
        assert varint.encode_int(value) == expected
        assert encode_key(value) == expected

    def test_minimal_length(self) -> None:
        """Test each value uses the fewest payload bytes."""
        assert len(varint.encode_int(0xFF)) == 2
        assert len(varint.encode_int(0x100)) == 3
        assert len(varint.encode_int(0xFFFF_FFFF)) == 5
        assert len(varint.encode_int(0x1_0000_0000)) == 6
        assert len(varint.encode_int(-0xFFFF)) == 3
        assert len(varint.encode_int(-0x10000)) == 4

    def test_byte_order_matches_numeric_order(self) -> None:
        """Test encodings sort like the integers across length boundaries."""
        values = [-MAX, -(1 << 32), -65536, -65535, -256, -255, -1, 0, 1, 255, 256, 65535, 65536, 1 << 32, MAX]
        encoded = [varint.encode_int(v) for v in values]
        assert encoded == sorted(encoded)

    def test_out_of_range_rejected(self) -> None:
        """Test magnitudes above 64 bits raise ArgumentError."""
        with pytest.raises(ArgumentError, match="too large"):
            encode_key(MAX + 1)
        with pytest.raises(ArgumentError, match="too small"):
            encode_key(-MAX - 1)

    def test_argument_error_is_value_error(self) -> None:
        """Test ArgumentError can be caught as ValueError."""
        with pytest.raises(ValueError):
            encode_key(1 << 70)


class TestIntegerDecoding:
    """Test integer payload decoding."""

    @pytest.mark.parametrize("value", [0, 1, -1, 127, -128, 1000, -1000, MAX, -MAX, 1 << 40])
    def test_roundtrip(self, value: int) -> None:
        """Test decode(encode(v)) == v."""
        assert decode_key(encode_key(value)) == value

    def test_payload_size(self) -> None:
        """Test the payload size is derived from the tag."""
        assert varint.payload_size(0x14) == 0
        assert varint.payload_size(0x1C) == 8
        assert varint.payload_size(0x0C) == 8
        assert varint.payload_size(0x12) == 2

    def test_wrong_payload_length(self) -> None:
        """Test a payload that does not match its tag is rejected."""
        with pytest.raises(FormatError, match="expects 2 payload bytes"):
            varint.read_int(0x16, b"\x01")

    def test_non_integer_tag(self) -> None:
        """Test read_int refuses other tags."""
        with pytest.raises(FormatError, match="not an integer tag"):
            varint.read_int(0x02, b"")


class TestNarrowing:
    """Test typed narrowing decoders."""

    @pytest.mark.parametrize(
        "kind,fits,overflows",
        [
            (INT8, -128, -129),
            (INT8, 127, 128),
            (UINT8, 255, 256),
            (UINT8, 0, -1),
            (INT16, -32768, -32769),
            (UINT16, 65535, 65536),
            (INT32, (1 << 31) - 1, 1 << 31),
            (UINT32, (1 << 32) - 1, 1 << 32),
            (INT64, -(1 << 63), -(1 << 63) - 1),
            (INT64, (1 << 63) - 1, 1 << 63),
            (UINT64, MAX, -1),
        ],
    )
    def test_conversion_matrix(self, kind: varint.IntKind, fits: int, overflows: int) -> None:
        """Test values at the edge of each target range."""
        assert decode_key(encode_key(fits), kind) == fits
        with pytest.raises(NumericOverflowError, match=kind.name):
            decode_key(encode_key(overflows), kind)

    def test_overflow_is_builtin_overflow_error(self) -> None:
        """Test NumericOverflowError can be caught as OverflowError."""
        with pytest.raises(OverflowError):
            decode_key(encode_key(300), INT8)

    def test_kind_bounds(self) -> None:
        """Test min/max values of the kinds."""
        assert INT8.min_value == -128
        assert INT8.max_value == 127
        assert UINT64.min_value == 0
        assert UINT64.max_value == MAX
        assert repr(UINT16) == "IntKind(uint16)"
