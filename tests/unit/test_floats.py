"""Unit tests for the float codec."""

from __future__ import annotations

import math
import struct

import pytest

from tupack import ArgumentError, NumericOverflowError, Single, decode_key, encode_key
from tupack.codec import floats


def double_from_bits(bits: int) -> float:
    return struct.unpack(">d", bits.to_bytes(8, "big"))[0]


class TestDoubleEncoding:
    """Test 64-bit float encoding (tag 0x21)."""

    def test_positive_value(self) -> None:
        """Test positive values only get their sign bit set."""
        assert encode_key(1.0) == b"\x21\xbf\xf0" + b"\x00" * 6

    def test_negative_value(self) -> None:
        """Test negative values have every bit flipped."""
        assert encode_key(-1.0) == b"\x21\x40\x0f" + b"\xff" * 6

    def test_signed_zero(self) -> None:
        """Test 0.0 and -0.0 differ and -0.0 sorts first."""
        positive = encode_key(0.0)
        negative = encode_key(-0.0)
        assert positive == b"\x21\x80" + b"\x00" * 7
        assert negative == b"\x21\x7f" + b"\xff" * 7
        assert negative < positive

    def test_signed_zero_roundtrip(self) -> None:
        """Test the sign of zero survives decoding."""
        assert math.copysign(1.0, decode_key(encode_key(-0.0))) == -1.0
        assert math.copysign(1.0, decode_key(encode_key(0.0))) == 1.0

    def test_order(self) -> None:
        """Test byte order equals numeric order, NaN last."""
        values = [-math.inf, -1e300, -1.0, -5e-324, -0.0, 0.0, 5e-324, 1.0, 1e300, math.inf, math.nan]
        encoded = [encode_key(v) for v in values]
        assert encoded == sorted(encoded)

    @pytest.mark.parametrize("value", [3.141592653589793, -2.5, 1e-310, math.inf, -math.inf])
    def test_roundtrip(self, value: float) -> None:
        """Test exact bit pattern roundtrip."""
        decoded = decode_key(encode_key(value))
        assert struct.pack(">d", decoded) == struct.pack(">d", value)


class TestNaN:
    """Test NaN canonicalization."""

    @pytest.mark.parametrize(
        "bits",
        [0x7FF8_0000_0000_0000, 0x7FF8_0000_0000_0001, 0xFFF8_0000_0000_0000, 0x7FF0_0000_0000_0001],
    )
    def test_all_nans_collapse(self, bits: int) -> None:
        """Test every NaN payload encodes identically."""
        assert encode_key(double_from_bits(bits)) == b"\x21\xff\xf8" + b"\x00" * 6

    def test_nan_decodes_to_nan(self) -> None:
        """Test the canonical NaN decodes as NaN."""
        assert math.isnan(decode_key(encode_key(math.nan)))

    def test_bit_pattern(self) -> None:
        """Test bit_pattern canonicalizes NaN."""
        assert floats.bit_pattern(double_from_bits(0xFFF8_0000_0000_0001)) == 0x7FF8_0000_0000_0000
        assert floats.bit_pattern(math.nan, single=True) == 0x7FC0_0000


class TestSingle:
    """Test 32-bit float encoding (tag 0x20)."""

    def test_single_tag(self) -> None:
        """Test Single values use the 4-byte encoding."""
        assert encode_key(Single(0.0)) == b"\x20\x80\x00\x00\x00"
        assert encode_key(Single(-0.0)) == b"\x20\x7f\xff\xff\xff"
        assert encode_key(Single(1.0)) == b"\x20\xbf\x80\x00\x00"

    def test_single_nan(self) -> None:
        """Test Single NaN is canonical."""
        assert encode_key(Single(math.nan)) == b"\x20\xff\xc0\x00\x00"

    def test_decodes_as_single(self) -> None:
        """Test a 0x20 segment decodes back to a Single."""
        decoded = decode_key(encode_key(Single(1.5)))
        assert isinstance(decoded, Single)
        assert decoded == 1.5

    def test_rounding(self) -> None:
        """Test Single rounds to float32 precision."""
        assert Single(0.1) != 0.1
        assert Single(0.1) == struct.unpack(">f", struct.pack(">f", 0.1))[0]
        assert repr(Single(0.5)) == "Single(0.5)"

    def test_out_of_range(self) -> None:
        """Test finite values beyond float32 are rejected."""
        with pytest.raises(ArgumentError, match="32-bit float"):
            Single(1e39)

    def test_narrowing_from_double(self) -> None:
        """Test decoding a double as Single narrows or fails."""
        assert decode_key(encode_key(2.5), Single) == Single(2.5)
        with pytest.raises(NumericOverflowError):
            decode_key(encode_key(1e39), Single)

    def test_single_sorts_below_double(self) -> None:
        """Test the float32 family sorts before the float64 family."""
        assert encode_key(Single(math.inf)) < encode_key(-math.inf)
