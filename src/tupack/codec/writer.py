"""Tuple writer.

TupleWriter appends elements to a growable buffer, dispatching on the runtime
type of each value, and produces immutable ``bytes`` on pack().

Nested tuples are written as tag 0x05, their elements, and a closing 0x00.
Inside a nested tuple a null is written as ``00 FF`` so that a bare 0x00 is
always the end of the nested tuple:

    (1, (None, "a"), 2) -> 15 01 05 00 FF 02 61 00 00 15 02
"""

from __future__ import annotations

import contextlib
import ipaddress
import logging
import uuid
from collections.abc import Iterable, Iterator
from typing import Any, Optional, Protocol, runtime_checkable

from ..config import TupackConfig, get_config
from ..exceptions import ArgumentError
from ..registry import handler_for_tag, handler_for_value
from ..values import UserType, Uuid64, Uuid80, Uuid96, VersionStamp
from . import floats, strings, tags, varint
from .floats import Single

logger = logging.getLogger(__name__)


@runtime_checkable
class TupleFormattable(Protocol):
    """Objects that pack themselves as a nested tuple."""

    def to_tuple(self) -> tuple[Any, ...]: ...


class TupleWriter:
    """Builds one packed tuple at a time.

    A writer owns a reusable buffer. It is not thread-safe; once pack()
    returns, the resulting bytes are immutable and can be shared freely.

    Example:
        >>> writer = TupleWriter()
        >>> writer.append(42)
        >>> writer.append_tuple((2014, 11, 6))
        >>> writer.append("Doc123")
        >>> key = writer.pack()
    """

    def __init__(self, prefix: Optional[bytes] = None, config: Optional[TupackConfig] = None) -> None:
        """Initialize an empty writer.

        Args:
            prefix: Optional bytes written verbatim before the first element
            config: Codec configuration (defaults to the process-wide one)
        """
        self._config = config or get_config()
        self._buffer = bytearray()
        self._prefix = bytes(prefix) if prefix else b""
        self._depth = 0
        self.reset()

    def reset(self, prefix: Optional[bytes] = None) -> None:
        """Discard written elements, optionally switching to a new prefix."""
        if prefix is not None:
            self._prefix = bytes(prefix)
        self._buffer.clear()
        self._buffer += self._prefix
        self._start = len(self._buffer)
        self._depth = 0
        # end offset of a system key written at the start, if any
        self._system_key_end: Optional[int] = None

    def __len__(self) -> int:
        """Number of bytes written so far, prefix excluded."""
        return len(self._buffer) - self._start

    @property
    def depth(self) -> int:
        return self._depth

    def pack(self) -> bytes:
        """Return the prefix followed by all elements appended so far.

        Raises:
            ArgumentError: If a nested tuple opened with begin_tuple() is still open,
                a system key is followed by other elements, or the result exceeds
                the configured max_key_size
        """
        if self._depth != 0:
            raise ArgumentError(f"Cannot pack a tuple with {self._depth} unclosed nested tuple(s)")
        self._check_system_key()
        self._check_size(len(self._buffer))
        return bytes(self._buffer)

    def _check_system_key(self) -> None:
        if self._system_key_end is not None and len(self._buffer) != self._system_key_end:
            raise ArgumentError("A system key must be the only element of its tuple")

    def _check_size(self, size: int) -> None:
        limit = self._config.max_key_size
        if limit is not None and size > limit:
            raise ArgumentError(f"Packed tuple is {size} bytes, which exceeds the limit of {limit} bytes")

    def extend(self, items: Iterable[Any]) -> None:
        """Append every item of an iterable, in order."""
        for item in items:
            self.append(item)

    def append(self, value: Any) -> None:
        """Append one element, choosing the encoding from its runtime type.

        On error nothing is written: the writer is left as it was before the call.

        Raises:
            ArgumentError: If the value type is not supported or the value is out of range
        """
        with self._atomic():
            self._append(value)

    @contextlib.contextmanager
    def _atomic(self) -> Iterator[None]:
        mark, depth, system_key_end = len(self._buffer), self._depth, self._system_key_end
        try:
            yield
            if system_key_end is not None and len(self._buffer) > mark:
                raise ArgumentError("A system key must be the only element of its tuple")
        except Exception:
            del self._buffer[mark:]
            self._depth = depth
            self._system_key_end = system_key_end
            raise

    def _append(self, value: Any) -> None:
        out = self._buffer

        if value is None:
            self.append_nil()
        # bool before int: bool is a subclass of int
        elif isinstance(value, bool):
            out.append(tags.TRUE if value else tags.FALSE)
        elif isinstance(value, int):
            varint.write_int(out, value)
        elif isinstance(value, Single):
            floats.write_single(out, value)
        elif isinstance(value, float):
            floats.write_double(out, value)
        elif isinstance(value, str):
            strings.write_string(out, value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            strings.write_bytes(out, value)
        elif isinstance(value, uuid.UUID):
            self.append_uuid128(value)
        elif isinstance(value, Uuid64):
            out.append(tags.UUID64)
            out += value.to_bytes()
        elif isinstance(value, Uuid80):
            out.append(tags.UUID80)
            out += value.to_bytes()
        elif isinstance(value, Uuid96):
            out.append(tags.UUID96)
            out += value.to_bytes()
        elif isinstance(value, VersionStamp):
            self.append_versionstamp(value)
        elif isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            strings.write_bytes(out, value.packed)
        elif isinstance(value, UserType):
            self.append_user_type(value)
        elif isinstance(value, (tuple, list)) or isinstance(value, TupleFormattable):
            self.append_tuple(value)
        else:
            handler = handler_for_value(value)
            if handler is None:
                raise ArgumentError(f"Unsupported type for tuple packing: {type(value).__name__}")
            payload = handler.to_payload(value) if handler.to_payload is not None else b""
            self.append_user_type(UserType(handler.tag, payload))

    def append_nil(self) -> None:
        """Append a null: ``00`` at top level, ``00 FF`` inside a nested tuple."""
        if self._depth > 0:
            self._buffer += b"\x00\xff"
        else:
            self._buffer.append(tags.NIL)

    def append_bool(self, value: bool) -> None:
        self._buffer.append(tags.TRUE if value else tags.FALSE)

    def append_int(self, value: int) -> None:
        varint.write_int(self._buffer, value)

    def append_single(self, value: float) -> None:
        floats.write_single(self._buffer, value)

    def append_double(self, value: float) -> None:
        floats.write_double(self._buffer, value)

    def append_bytes(self, value: bytes | bytearray | memoryview) -> None:
        strings.write_bytes(self._buffer, value)

    def append_string(self, value: str) -> None:
        strings.write_string(self._buffer, value)

    def append_uuid128(self, value: uuid.UUID) -> None:
        # UUID.bytes is already RFC 4122 (big-endian) order
        self._buffer.append(tags.UUID128)
        self._buffer += value.bytes

    def append_uuid64(self, value: Uuid64) -> None:
        self._buffer.append(tags.UUID64)
        self._buffer += value.to_bytes()

    def append_uuid80(self, value: Uuid80) -> None:
        self._buffer.append(tags.UUID80)
        self._buffer += value.to_bytes()

    def append_uuid96(self, value: Uuid96) -> None:
        self._buffer.append(tags.UUID96)
        self._buffer += value.to_bytes()

    def append_versionstamp(self, value: VersionStamp) -> None:
        """Append an 80-bit (0x32) or 96-bit (0x33) versionstamp."""
        self._buffer.append(tags.VERSIONSTAMP96 if value.has_user_version else tags.VERSIONSTAMP80)
        self._buffer += value.to_bytes()

    def append_ip_address(self, value: ipaddress.IPv4Address | ipaddress.IPv6Address) -> None:
        """Append an IP address as a 4 or 16 byte string."""
        strings.write_bytes(self._buffer, value.packed)

    def append_user_type(self, value: UserType) -> None:
        """Append a registered user-type tag and its payload.

        Raises:
            ArgumentError: If the tag is not registered, the payload size is wrong, or
                a System marker is not the first element of a top-level tuple
        """
        handler = handler_for_tag(value.tag)
        if handler is None:
            raise ArgumentError(f"User type tag 0x{value.tag:02X} is not registered")

        if value.tag == tags.SYSTEM:
            # the reader only recognizes a system key as the first byte of a key
            if self._depth > 0 or len(self._buffer) != self._start:
                raise ArgumentError("The System marker (0xFF) can only start a top-level tuple")
        elif len(value.payload) != handler.width:
            raise ArgumentError(
                f"User type {handler.name} expects a {handler.width}-byte payload, "
                f"got {len(value.payload)} bytes"
            )
        self._buffer.append(value.tag)
        self._buffer += value.payload
        if value.tag == tags.SYSTEM:
            self._system_key_end = len(self._buffer)

    def begin_tuple(self) -> None:
        """Open a nested tuple; elements appended next belong to it.

        Raises:
            ArgumentError: If the maximum nesting depth would be exceeded
        """
        if self._depth >= self._config.max_depth:
            raise ArgumentError(f"Tuple nesting exceeds the maximum depth of {self._config.max_depth}")
        self._buffer.append(tags.EMBEDDED_TUPLE)
        self._depth += 1

    def end_tuple(self) -> None:
        """Close the innermost nested tuple."""
        if self._depth == 0:
            raise ArgumentError("end_tuple() called without a matching begin_tuple()")
        self._buffer.append(0x00)
        self._depth -= 1

    def append_tuple(self, inner: Any) -> None:
        """Append a nested tuple.

        Accepts a tuple, list, PackedTuple, or any object with a to_tuple() method.
        Elements of an already packed tuple are copied without being decoded.
        On error nothing is written.
        """
        # local import: packed imports this module
        from .packed import PackedTuple

        with self._atomic():
            self.begin_tuple()
            if isinstance(inner, PackedTuple):
                self._copy_segments(inner)
            else:
                items = inner if isinstance(inner, (tuple, list)) else inner.to_tuple()
                for item in items:
                    self._append(item)
            self.end_tuple()

    def append_packed(self, packed: Any) -> None:
        """Append every element of a PackedTuple to the current level."""
        with self._atomic():
            self._copy_segments(packed)

    def _copy_segments(self, packed: Any) -> None:
        for index, segment in enumerate(packed.segments):
            if segment.tag == tags.NIL:
                self.append_nil()
            elif segment.tag == tags.SYSTEM:
                self.append_user_type(packed.get(index, UserType))
            else:
                self._buffer += packed.raw(segment)


def pack_many(
    tuples: Iterable[Iterable[Any]],
    prefix: Optional[bytes] = None,
    config: Optional[TupackConfig] = None,
) -> list[bytes]:
    """Pack several tuples through one shared buffer.

    Each tuple is written once into a single contiguous buffer; the individual
    keys are then cut out of it. The result is identical to packing each tuple
    separately.

    Args:
        tuples: Tuples (or any iterables of elements) to pack
        prefix: Optional prefix prepended to every key
        config: Codec configuration

    Returns:
        One packed key per input tuple, in input order
    """
    from .packed import PackedTuple

    writer = TupleWriter(config=config)
    prefix = bytes(prefix) if prefix else b""
    bounds: list[tuple[int, int]] = []
    for items in tuples:
        start = len(writer._buffer)
        writer._buffer += prefix
        writer._start = len(writer._buffer)
        writer._system_key_end = None
        if isinstance(items, PackedTuple):
            writer.append_packed(items)
        elif isinstance(items, TupleFormattable):
            writer.extend(items.to_tuple())
        else:
            writer.extend(items)
        writer._check_system_key()
        writer._check_size(len(writer._buffer) - start)
        bounds.append((start, len(writer._buffer)))

    view = memoryview(writer._buffer)
    try:
        keys = [bytes(view[start:end]) for start, end in bounds]
    finally:
        view.release()
    logger.debug("Packed %d tuples into a %d byte batch", len(keys), len(writer._buffer))
    return keys
