"""Property-based tests using hypothesis."""

from __future__ import annotations

import math
import struct

from hypothesis import given
from hypothesis import strategies as st

from tupack import compare, compare_tuples, decode_key, encode_key, pack, packed_size, unpack

MAX = (1 << 64) - 1

integers = st.integers(min_value=-MAX, max_value=MAX)

scalars = (
    st.none()
    | st.booleans()
    | integers
    | st.floats(allow_nan=False)
    | st.text(max_size=20)
    | st.binary(max_size=20)
    | st.uuids()
)

elements = st.recursive(scalars, lambda children: st.lists(children, max_size=4).map(tuple), max_leaves=12)

tuples = st.lists(elements, max_size=5).map(tuple)


def sign(value: int) -> int:
    return (value > 0) - (value < 0)


class TestRoundtripProperties:
    """Round-trip and canonical form."""

    @given(items=tuples)
    def test_unpack_pack_roundtrip(self, items: tuple) -> None:
        """Test decode(encode(t)) == t."""
        assert unpack(pack(items)).to_tuple() == items

    @given(items=tuples)
    def test_canonical_idempotence(self, items: tuple) -> None:
        """Test encode(decode(encode(t))) == encode(t)."""
        packed = pack(items)
        assert pack(unpack(packed)) == packed
        assert pack(unpack(packed).to_tuple()) == packed

    @given(items=tuples)
    def test_packed_size(self, items: tuple) -> None:
        """Test the size calculation matches the packed length."""
        assert packed_size(items) == len(pack(items))

    @given(value=st.binary())
    def test_bytes_escaping(self, value: bytes) -> None:
        """Test byte strings survive escaping and never contain a bare zero."""
        packed = encode_key(value)
        assert decode_key(packed) == value
        payload = packed[1:-1]
        assert payload.replace(b"\x00\xff", b"").count(0) == 0


class TestOrderProperties:
    """Order preservation."""

    @given(a=integers, b=integers)
    def test_integer_order(self, a: int, b: int) -> None:
        """Test integer byte order equals numeric order across the full range."""
        assert compare(encode_key(a), encode_key(b)) == sign(a - b)

    @given(a=st.floats(allow_nan=False), b=st.floats(allow_nan=False))
    def test_float_order(self, a: float, b: float) -> None:
        """Test float byte order equals numeric order, -0.0 below 0.0."""
        expected = sign(a - b) if a != b else sign(math.copysign(1, a) - math.copysign(1, b))
        assert compare(encode_key(a), encode_key(b)) == expected

    @given(a=st.text(), b=st.text())
    def test_string_order(self, a: str, b: str) -> None:
        """Test string byte order equals code point order."""
        assert compare(encode_key(a), encode_key(b)) == sign((a > b) - (a < b))

    @given(x=tuples, y=tuples)
    def test_tuple_order(self, x: tuple, y: tuple) -> None:
        """Test byte order equals semantic tuple order."""
        assert compare(pack(x), pack(y)) == compare_tuples(x, y)


class TestNaNProperties:
    """NaN canonicalization."""

    @given(
        negative=st.booleans(),
        mantissa=st.integers(min_value=1, max_value=(1 << 52) - 1),
    )
    def test_nan_collapse(self, negative: bool, mantissa: int) -> None:
        """Test every NaN bit pattern encodes identically."""
        bits = (int(negative) << 63) | (0x7FF << 52) | mantissa
        value = struct.unpack(">d", bits.to_bytes(8, "big"))[0]
        assert math.isnan(value)
        assert encode_key(value) == encode_key(math.nan)
