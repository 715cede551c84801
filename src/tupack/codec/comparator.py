"""Ordering of packed tuples.

Packed tuples are ordered by plain unsigned byte comparison. compare_tuples()
is the equivalent ordering expressed on decoded Python values: elements are
ranked first by the tag their type is written with, then compared within the
type. The two always agree, which is what makes byte-ordered range scans over
packed keys meaningful.
"""

from __future__ import annotations

import ipaddress
import uuid
from typing import Any

from ..values import UserType, Uuid64, Uuid80, Uuid96, VersionStamp
from . import floats, tags
from .floats import Single


def compare(a: bytes | bytearray | memoryview, b: bytes | bytearray | memoryview) -> int:
    """Compare two packed buffers byte-wise.

    Returns:
        -1, 0 or 1
    """
    left, right = bytes(a), bytes(b)
    return (left > right) - (left < right)


def compare_tuples(x: Any, y: Any) -> int:
    """Compare two decoded tuples element by element.

    A tuple that is a strict prefix of the other sorts first.

    Returns:
        -1, 0 or 1
    """
    for left, right in zip(x, y):
        result = compare_values(left, right)
        if result:
            return result
    return (len(x) > len(y)) - (len(x) < len(y))


def compare_values(left: Any, right: Any) -> int:
    """Compare two tuple elements (see compare_tuples)."""
    left_rank, right_rank = _rank(left), _rank(right)
    if left_rank != right_rank:
        return -1 if left_rank < right_rank else 1

    if left_rank in (tags.NIL, tags.FALSE, tags.TRUE):
        return 0
    if left_rank == tags.EMBEDDED_TUPLE:
        return compare_tuples(_items(left), _items(right))

    left_key, right_key = _key(left_rank, left), _key(right_rank, right)
    return (left_key > right_key) - (left_key < right_key)


def to_range(packed: bytes | bytearray | memoryview) -> tuple[bytes, bytes]:
    """Key range holding every tuple that starts with the elements of ``packed``.

    Returns:
        ``(begin, end)`` with begin inclusive and end exclusive: ``packed + 00``
        and ``packed + FF``
    """
    key = bytes(packed)
    return key + b"\x00", key + b"\xff"


def _rank(value: Any) -> int:
    if value is None:
        return tags.NIL
    if isinstance(value, bool):
        return tags.TRUE if value else tags.FALSE
    if isinstance(value, int):
        # all integer tags form one numerically ordered family
        return tags.INT_ZERO
    if isinstance(value, Single):
        return tags.SINGLE
    if isinstance(value, float):
        return tags.DOUBLE
    if isinstance(value, (bytes, bytearray, memoryview, ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return tags.BYTES
    if isinstance(value, str):
        return tags.UTF8
    if isinstance(value, uuid.UUID):
        return tags.UUID128
    if isinstance(value, Uuid64):
        return tags.UUID64
    if isinstance(value, Uuid80):
        return tags.UUID80
    if isinstance(value, Uuid96):
        return tags.UUID96
    if isinstance(value, VersionStamp):
        return tags.VERSIONSTAMP96 if value.has_user_version else tags.VERSIONSTAMP80
    if isinstance(value, UserType):
        return value.tag
    if isinstance(value, (tuple, list)) or hasattr(value, "to_tuple"):
        return tags.EMBEDDED_TUPLE
    raise TypeError(f"Cannot compare tuple element of type {type(value).__name__}")


def _items(value: Any) -> Any:
    if isinstance(value, (tuple, list)):
        return value
    return value.to_tuple()


def _key(rank: int, value: Any) -> Any:
    if rank == tags.BYTES:
        return value.packed if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)) else bytes(value)
    if rank == tags.SINGLE:
        return _float_key(value, single=True)
    if rank == tags.DOUBLE:
        return _float_key(value)
    if rank == tags.UUID128:
        return value.bytes
    if rank in (tags.UUID64, tags.UUID80, tags.UUID96):
        return value.to_bytes()
    if isinstance(value, UserType):
        return value.payload
    # integers, and strings (code point order equals UTF-8 byte order)
    return value


def _float_key(value: float, single: bool = False) -> int:
    bits = floats.bit_pattern(value, single)
    sign = 1 << (31 if single else 63)
    mask = (sign << 1) - 1
    return (bits ^ mask) if bits & sign else (bits | sign)
