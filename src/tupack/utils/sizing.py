"""Packed size calculation utilities.

This module computes the exact packed length of a tuple without building the
packed buffer, e.g. to check keys against a size limit before packing them.
"""

from __future__ import annotations

import ipaddress
import uuid
from collections.abc import Iterable
from typing import Any

from ..codec import tags, varint
from ..codec.floats import Single
from ..codec.packed import PackedTuple
from ..codec.writer import TupleFormattable
from ..exceptions import ArgumentError
from ..registry import handler_for_value
from ..values import UserType, Uuid64, Uuid80, Uuid96, VersionStamp


def packed_size(items: Iterable[Any]) -> int:
    """Calculate the packed size of a tuple in bytes.

    The result always equals ``len(pack(items))``.

    Args:
        items: Tuple elements, as accepted by pack()

    Returns:
        Size in bytes (prefix excluded)

    Raises:
        ArgumentError: If an element cannot be packed

    Example:
        >>> packed_size((42, (2014, 11, 6), "Doc123"))
        19
    """
    if isinstance(items, PackedTuple):
        return _packed_tuple_size(items, 0)
    if isinstance(items, TupleFormattable) and not isinstance(items, (tuple, list)):
        items = items.to_tuple()
    items = tuple(items)
    if len(items) > 1 and any(_is_system(item) for item in items):
        raise ArgumentError("A system key must be the only element of its tuple")
    return sum(element_size(item) for item in items)


def element_size(value: Any, depth: int = 0) -> int:
    """Packed size of a single element at the given nesting depth."""
    if value is None:
        return 2 if depth > 0 else 1
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        if abs(value) > varint.MAX_MAGNITUDE:
            raise ArgumentError(f"Integer {value} cannot be packed (magnitude exceeds 2^64-1)")
        return 1 if value == 0 else 1 + varint.byte_count(abs(value))
    if isinstance(value, Single):
        return tags.FIXED_SIZES[tags.SINGLE]
    if isinstance(value, float):
        return tags.FIXED_SIZES[tags.DOUBLE]
    if isinstance(value, str):
        try:
            return _escaped_size(value.encode("utf-8"))
        except UnicodeEncodeError as err:
            raise ArgumentError(f"String cannot be encoded as UTF-8: {err}") from err
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _escaped_size(bytes(value))
    if isinstance(value, uuid.UUID):
        return tags.FIXED_SIZES[tags.UUID128]
    if isinstance(value, Uuid64):
        return tags.FIXED_SIZES[tags.UUID64]
    if isinstance(value, Uuid80):
        return tags.FIXED_SIZES[tags.UUID80]
    if isinstance(value, Uuid96):
        return tags.FIXED_SIZES[tags.UUID96]
    if isinstance(value, VersionStamp):
        return 1 + value.size
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return _escaped_size(value.packed)
    if isinstance(value, UserType):
        if _is_system(value) and depth > 0:
            raise ArgumentError("The System marker (0xFF) can only start a top-level tuple")
        return 1 + len(value.payload)
    if isinstance(value, PackedTuple):
        return 2 + _packed_tuple_size(value, depth + 1)
    if isinstance(value, (tuple, list)) or isinstance(value, TupleFormattable):
        inner = value if isinstance(value, (tuple, list)) else value.to_tuple()
        return 2 + sum(element_size(item, depth + 1) for item in inner)

    handler = handler_for_value(value)
    if handler is None:
        raise ArgumentError(f"Unsupported type for tuple packing: {type(value).__name__}")
    return 1 + handler.width


def _is_system(value: Any) -> bool:
    return isinstance(value, UserType) and value.tag == tags.SYSTEM


def _escaped_size(data: bytes) -> int:
    # tag + payload + one escape byte per 0x00 + terminator
    return 2 + len(data) + data.count(0)


def _packed_tuple_size(packed: PackedTuple, depth: int) -> int:
    nil_size = 2 if depth > 0 else 1
    if depth > 0 and any(segment.tag == tags.SYSTEM for segment in packed.segments):
        raise ArgumentError("The System marker (0xFF) can only start a top-level tuple")
    return sum(nil_size if segment.tag == tags.NIL else segment.length for segment in packed.segments)
