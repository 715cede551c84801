"""Typed materialization of tuple segments.

decode_segment() turns one Segment of a PackedTuple into a Python value. With
no target type the value is decoded from its tag alone ("natural" decoding);
with a target type, compatible alternate encodings are accepted, e.g. a
16-byte string where a UUID is requested, or a decimal string where an
integer is requested.

Supported targets:
    int, IntKind (INT8 ... UINT64), float, Single, bool, str, bytes,
    uuid.UUID, Uuid64, Uuid80, Uuid96, VersionStamp, UserType,
    IPv4Address, IPv6Address, tuple, PackedTuple, any class bound to a user
    type in the registry, and any class with a ``from_tuple`` classmethod.
"""

from __future__ import annotations

import ipaddress
import uuid
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..exceptions import FormatError
from ..registry import USER_TYPE_REGISTRY, handler_for_tag
from ..values import UserType, Uuid64, Uuid80, Uuid96, VersionStamp
from . import floats, strings, tags, varint
from .floats import Single
from .reader import Segment
from .varint import IntKind

if TYPE_CHECKING:
    from .packed import PackedTuple


def decode_segment(view: PackedTuple, segment: Segment, as_: Any = None) -> Any:
    """Materialize one segment.

    Args:
        view: Tuple view owning the segment
        segment: Segment to decode
        as_: Requested Python type, or None for natural decoding

    Raises:
        FormatError: If the segment cannot be converted into the requested type
        NumericOverflowError: If a number does not fit the requested IntKind or Single
        TypeError: If the requested type is not supported
    """
    if as_ is None or as_ is object or as_ is Any:
        return _natural(view, segment)

    if isinstance(as_, IntKind):
        return as_.narrow(_to_int(view, segment))

    converter = _CONVERTERS.get(as_)
    if converter is not None:
        return converter(view, segment)

    from .packed import PackedTuple

    if as_ is PackedTuple:
        return _to_packed(view, segment)

    for handler in USER_TYPE_REGISTRY.values():
        if handler.python_type is as_:
            return _to_registered(view, segment, handler.tag)

    from_tuple = getattr(as_, "from_tuple", None)
    if callable(from_tuple):
        nested = _to_packed(view, segment)
        return None if nested is None else from_tuple(nested)

    raise TypeError(f"Unsupported decode target type: {as_!r}")


def decode_loose_bool(view: PackedTuple, segment: Segment) -> bool:
    """Interpret any segment as a boolean.

    Null, zero, empty strings, empty tuples and all-zero identifiers are
    False; everything else is True. This is a convenience for callers that
    explicitly ask for it and is not the inverse of packing a bool.
    """
    tag = segment.tag
    if tag == tags.NIL or tag == tags.FALSE:
        return False
    if tag == tags.TRUE:
        return True
    if tags.is_integer_tag(tag):
        return tag != tags.INT_ZERO and varint.read_int(tag, view.payload(segment)) != 0
    if tag in (tags.BYTES, tags.UTF8, tags.EMBEDDED_TUPLE):
        # <01><00>, <02><00> and <05><00> are the empty values
        return segment.length != 2
    if tag == tags.SINGLE:
        return floats.read_single(view.payload(segment)) != 0.0
    if tag == tags.DOUBLE:
        return floats.read_double(view.payload(segment)) != 0.0
    if tag in (tags.UUID128, tags.UUID64, tags.UUID80, tags.UUID96):
        return any(view.payload(segment))
    return True


def _natural(view: PackedTuple, segment: Segment) -> Any:
    tag = segment.tag
    if tag == tags.NIL:
        return None
    if tag == tags.BYTES:
        return strings.read_bytes(view.payload(segment))
    if tag == tags.UTF8:
        return strings.read_string(view.payload(segment))
    if tag == tags.EMBEDDED_TUPLE:
        return view.nested(segment)
    if tags.is_integer_tag(tag):
        return varint.read_int(tag, view.payload(segment))
    if tag == tags.SINGLE:
        return floats.read_single(view.payload(segment))
    if tag == tags.DOUBLE:
        return floats.read_double(view.payload(segment))
    if tag == tags.FALSE:
        return False
    if tag == tags.TRUE:
        return True
    if tag == tags.UUID128:
        return uuid.UUID(bytes=bytes(view.payload(segment)))
    if tag == tags.UUID64:
        return Uuid64.from_bytes(view.payload(segment))
    if tag in (tags.UUID80, tags.UUID96):
        # shared with Uuid80/Uuid96: ask for those types explicitly to get them
        return VersionStamp.from_bytes(view.payload(segment))
    return _to_registered(view, segment, tag)


def _fail(segment: Segment, target: str) -> FormatError:
    return FormatError(f"Cannot convert tuple segment of type 0x{segment.tag:02X} into {target}")


def _to_int(view: PackedTuple, segment: Segment) -> int:
    tag = segment.tag
    if tags.is_integer_tag(tag):
        return varint.read_int(tag, view.payload(segment))
    if tag == tags.NIL:
        return 0
    if tag in (tags.UTF8, tags.BYTES):
        text = _to_str(view, segment)
        try:
            return int(text)
        except ValueError as err:
            raise FormatError(f"Cannot convert string {text!r} into an integer") from err
    raise _fail(segment, "an integer")


def _to_double(view: PackedTuple, segment: Segment) -> float:
    tag = segment.tag
    if tag == tags.DOUBLE:
        return floats.read_double(view.payload(segment))
    if tag == tags.SINGLE:
        return float(floats.read_single(view.payload(segment)))
    if tags.is_integer_tag(tag):
        return float(varint.read_int(tag, view.payload(segment)))
    if tag == tags.NIL:
        return 0.0
    if tag == tags.UTF8:
        text = strings.read_string(view.payload(segment))
        try:
            return float(text)
        except ValueError as err:
            raise FormatError(f"Cannot convert string {text!r} into a float") from err
    raise _fail(segment, "a float")


def _to_single(view: PackedTuple, segment: Segment) -> Single:
    if segment.tag == tags.SINGLE:
        return floats.read_single(view.payload(segment))
    return floats.narrow_to_single(_to_double(view, segment))


def _to_bool(view: PackedTuple, segment: Segment) -> bool:
    if segment.tag == tags.TRUE:
        return True
    if segment.tag == tags.FALSE:
        return False
    raise _fail(segment, "a boolean")


def _to_str(view: PackedTuple, segment: Segment) -> Optional[str]:
    tag = segment.tag
    if tag == tags.UTF8:
        return strings.read_string(view.payload(segment))
    if tag == tags.NIL:
        return None
    if tag == tags.BYTES:
        return strings.read_ascii(view.payload(segment))
    if tags.is_integer_tag(tag):
        return str(varint.read_int(tag, view.payload(segment)))
    if tag in (tags.SINGLE, tags.DOUBLE):
        return repr(float(_to_double(view, segment)))
    if tag == tags.UUID128:
        return str(uuid.UUID(bytes=bytes(view.payload(segment))))
    if tag == tags.UUID64:
        return str(Uuid64.from_bytes(view.payload(segment)))
    raise _fail(segment, "a string")


def _to_bytes(view: PackedTuple, segment: Segment) -> Optional[bytes]:
    tag = segment.tag
    if tag == tags.BYTES:
        return strings.read_bytes(view.payload(segment))
    if tag == tags.NIL:
        return None
    if tag == tags.UTF8:
        return strings.read_bytes(view.payload(segment))
    if tag in (tags.UUID128, tags.UUID64, tags.UUID80, tags.UUID96):
        return bytes(view.payload(segment))
    raise _fail(segment, "a byte string")


def _to_uuid128(view: PackedTuple, segment: Segment) -> uuid.UUID:
    tag = segment.tag
    if tag == tags.UUID128:
        return uuid.UUID(bytes=bytes(view.payload(segment)))
    if tag == tags.NIL:
        return uuid.UUID(int=0)
    if tag == tags.BYTES:
        data = strings.read_bytes(view.payload(segment))
        if len(data) != 16:
            raise FormatError(f"UUID expects 16 bytes, got {len(data)}")
        return uuid.UUID(bytes=data)
    if tag == tags.UTF8:
        text = strings.read_string(view.payload(segment))
        try:
            return uuid.UUID(text)
        except ValueError as err:
            raise FormatError(f"Invalid UUID format: {text!r}") from err
    raise _fail(segment, "a UUID")


def _fixed_uuid_converter(cls: Any, own_tag: int) -> Callable[[PackedTuple, Segment], Any]:
    def convert(view: PackedTuple, segment: Segment) -> Any:
        tag = segment.tag
        if tag == own_tag:
            return cls.from_bytes(view.payload(segment))
        if tag == tags.NIL:
            return cls(0)
        if tag == tags.BYTES:
            return cls.from_bytes(strings.read_bytes(view.payload(segment)))
        if tag == tags.UTF8:
            return cls.parse(strings.read_string(view.payload(segment)))
        if cls is Uuid64 and tags.is_integer_tag(tag):
            value = varint.read_int(tag, view.payload(segment))
            return cls(varint.UINT64.narrow(value))
        raise _fail(segment, f"a {cls.__name__}")

    return convert


def _to_versionstamp(view: PackedTuple, segment: Segment) -> Optional[VersionStamp]:
    tag = segment.tag
    if tag in (tags.VERSIONSTAMP80, tags.VERSIONSTAMP96):
        return VersionStamp.from_bytes(view.payload(segment))
    if tag == tags.NIL:
        return None
    if tag == tags.BYTES:
        return VersionStamp.from_bytes(strings.read_bytes(view.payload(segment)))
    raise _fail(segment, "a VersionStamp")


def _to_user_type(view: PackedTuple, segment: Segment) -> Optional[UserType]:
    if segment.tag == tags.NIL:
        return None
    if handler_for_tag(segment.tag) is None:
        raise _fail(segment, "a user type")
    return UserType(segment.tag, bytes(view.payload(segment)))


def _to_registered(view: PackedTuple, segment: Segment, tag: int) -> Any:
    if segment.tag == tags.NIL:
        return None
    handler = handler_for_tag(segment.tag)
    if handler is None or segment.tag != tag:
        raise _fail(segment, f"user type 0x{tag:02X}")
    return handler.materialize(bytes(view.payload(segment)))


def _ip_converter(cls: Any) -> Callable[[PackedTuple, Segment], Any]:
    def convert(view: PackedTuple, segment: Segment) -> Any:
        tag = segment.tag
        if tag == tags.NIL:
            return None
        if tag == tags.BYTES:
            raw: bytes | str = strings.read_bytes(view.payload(segment))
        elif tag == tags.UTF8:
            raw = strings.read_string(view.payload(segment))
        else:
            raise _fail(segment, "an IP address")
        try:
            address = ipaddress.ip_address(raw)
        except ValueError as err:
            raise FormatError(f"Invalid IP address in tuple: {err}") from err
        if not isinstance(address, cls):
            raise FormatError(f"Expected {cls.__name__}, got {type(address).__name__}")
        return address

    return convert


def _to_packed(view: PackedTuple, segment: Segment) -> Optional[PackedTuple]:
    if segment.tag == tags.EMBEDDED_TUPLE:
        return view.nested(segment)
    if segment.tag == tags.NIL:
        return None
    raise _fail(segment, "an embedded tuple")


def _to_tuple(view: PackedTuple, segment: Segment) -> Optional[tuple[Any, ...]]:
    nested = _to_packed(view, segment)
    return None if nested is None else nested.to_tuple()


_CONVERTERS: dict[Any, Callable[[PackedTuple, Segment], Any]] = {
    int: _to_int,
    float: _to_double,
    Single: _to_single,
    bool: _to_bool,
    str: _to_str,
    bytes: _to_bytes,
    uuid.UUID: _to_uuid128,
    Uuid64: _fixed_uuid_converter(Uuid64, tags.UUID64),
    Uuid80: _fixed_uuid_converter(Uuid80, tags.UUID80),
    Uuid96: _fixed_uuid_converter(Uuid96, tags.UUID96),
    VersionStamp: _to_versionstamp,
    UserType: _to_user_type,
    ipaddress.IPv4Address: _ip_converter(ipaddress.IPv4Address),
    ipaddress.IPv6Address: _ip_converter(ipaddress.IPv6Address),
    tuple: _to_tuple,
}
