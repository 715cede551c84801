"""Lazy view over a packed tuple.

A PackedTuple keeps the packed bytes and the segment list produced by one
forward scan. Elements are only decoded when they are accessed, and nested
tuples are themselves PackedTuple views over the same bytes.
"""

from __future__ import annotations

import functools
import math
from collections.abc import Iterator
from typing import Any, Optional, Union, overload

from ..config import TupackConfig, get_config
from ..exceptions import ArgumentError, InvalidOperationError
from . import tags, varint
from .comparator import compare
from .decoders import decode_loose_bool, decode_segment
from .reader import Segment, scan


@functools.total_ordering
class PackedTuple:
    """Immutable, lazily decoded tuple.

    Example:
        >>> t = PackedTuple.unpack(b"\\x15\\x2a\\x02Doc123\\x00")
        >>> len(t)
        2
        >>> t[0], t.get(1, str)
        (42, 'Doc123')
    """

    __slots__ = ("_buffer", "_segments", "_depth", "_config", "_packed")

    def __init__(
        self,
        buffer: bytes,
        segments: list[Segment],
        depth: int = 0,
        config: Optional[TupackConfig] = None,
        packed: Optional[bytes] = None,
    ) -> None:
        """Wrap already scanned segments. Use unpack() to parse bytes.

        Args:
            buffer: Bytes the segments point into
            segments: Segments of this tuple, in order
            depth: Nesting depth of the segments (0 for top-level tuples)
            config: Codec configuration used for nested scans
            packed: Top-level packed form of exactly these segments, when known
        """
        self._buffer = buffer
        self._segments = segments
        self._depth = depth
        self._config = config or get_config()
        self._packed = packed

    @classmethod
    def unpack(cls, data: bytes | bytearray | memoryview, config: Optional[TupackConfig] = None) -> PackedTuple:
        """Scan a packed buffer.

        Raises:
            FormatError: If the buffer is not a valid packed tuple
        """
        buffer = data if isinstance(data, bytes) else bytes(data)
        return cls(buffer, scan(buffer, config=config), 0, config, buffer)

    @property
    def segments(self) -> list[Segment]:
        return self._segments

    @property
    def depth(self) -> int:
        return self._depth

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Any]:
        for segment in self._segments:
            yield decode_segment(self, segment)

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> PackedTuple: ...

    def __getitem__(self, index: Union[int, slice]) -> Any:
        if isinstance(index, slice):
            return PackedTuple(self._buffer, self._segments[index], self._depth, self._config)
        return self.get(index)

    def get(self, index: int, as_: Any = None) -> Any:
        """Decode the element at ``index``.

        Args:
            index: Position of the element (negative values count from the end)
            as_: Requested type (see tupack.codec.decoders), or None for natural decoding

        Raises:
            IndexError: If the index is out of range
            FormatError: If the element cannot be converted into ``as_``
            NumericOverflowError: If a number does not fit ``as_``
        """
        return decode_segment(self, self._segments[index], as_)

    def get_loose_bool(self, index: int) -> bool:
        """Decode the element at ``index`` as a loose boolean (see decode_loose_bool)."""
        return decode_loose_bool(self, self._segments[index])

    def first(self, as_: Any = None) -> Any:
        """Decode the first element.

        Raises:
            InvalidOperationError: If the tuple is empty
        """
        if not self._segments:
            raise InvalidOperationError("Tuple is empty")
        return decode_segment(self, self._segments[0], as_)

    def last(self, as_: Any = None) -> Any:
        """Decode the last element.

        Raises:
            InvalidOperationError: If the tuple is empty
        """
        if not self._segments:
            raise InvalidOperationError("Tuple is empty")
        return decode_segment(self, self._segments[-1], as_)

    def segment_type(self, index: int) -> tags.SegmentType:
        return tags.SegmentType.from_tag(self._segments[index].tag)

    def raw(self, segment: Segment) -> bytes:
        """Bytes of a segment as stored in the buffer (tag included)."""
        return self._buffer[segment.offset : segment.end]

    def payload(self, segment: Segment) -> bytes:
        """Bytes of a segment without its tag, and without its terminator for
        strings and nested tuples."""
        tag = segment.tag
        if tag == tags.NIL:
            return b""
        if tag in (tags.BYTES, tags.UTF8, tags.EMBEDDED_TUPLE):
            return self._buffer[segment.offset + 1 : segment.end - 1]
        return self._buffer[segment.offset + 1 : segment.end]

    def nested(self, segment: Segment) -> PackedTuple:
        """View over the elements of an embedded tuple segment."""
        depth = self._depth + 1
        segments = scan(self._buffer, segment.offset + 1, segment.end - 1, depth, self._config)
        return PackedTuple(self._buffer, segments, depth, self._config)

    def to_tuple(self) -> tuple[Any, ...]:
        """Decode every element; nested tuples become plain tuples too."""
        return tuple(
            self.nested(segment).to_tuple() if segment.tag == tags.EMBEDDED_TUPLE else decode_segment(self, segment)
            for segment in self._segments
        )

    def to_bytes(self) -> bytes:
        """Packed top-level form of this tuple."""
        if self._packed is None:
            # local import: the writer imports this module
            from .writer import TupleWriter

            writer = TupleWriter(config=self._config)
            writer.append_packed(self)
            self._packed = writer.pack()
        return self._packed

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def _structure(self) -> tuple[Any, ...]:
        return tuple(_segment_key(self, segment) for segment in self._segments)

    def __eq__(self, other: object) -> bool:
        other_tuple = _coerce(other)
        if other_tuple is None:
            return NotImplemented
        return self._structure() == other_tuple._structure()

    def __hash__(self) -> int:
        # equal to the hash of the plain tuple this view compares equal to
        return hash(_hashable(self.to_tuple()))

    def __lt__(self, other: object) -> bool:
        other_tuple = _coerce(other)
        if other_tuple is None:
            return NotImplemented
        return compare(self.to_bytes(), other_tuple.to_bytes()) < 0

    def __repr__(self) -> str:
        items = [repr(value) for value in self]
        if len(items) == 1:
            return f"({items[0]},)"
        return f"({', '.join(items)})"


def _segment_key(view: PackedTuple, segment: Segment) -> Any:
    tag = segment.tag
    if tag == tags.NIL:
        return (tags.NIL,)
    if tags.is_integer_tag(tag):
        return (tags.INT_ZERO, varint.read_int(tag, view.payload(segment)))
    if tag == tags.EMBEDDED_TUPLE:
        return (tags.EMBEDDED_TUPLE, view.nested(segment)._structure())
    return (tag, view.raw(segment))


def _hashable(values: tuple[Any, ...]) -> tuple[Any, ...]:
    # NaN hashes by identity, so every decoded NaN is mapped to one object
    return tuple(
        _hashable(value)
        if isinstance(value, tuple)
        else math.nan
        if isinstance(value, float) and math.isnan(value)
        else value
        for value in values
    )


def _coerce(other: object) -> Optional[PackedTuple]:
    if isinstance(other, PackedTuple):
        return other
    if isinstance(other, tuple):
        from .writer import TupleWriter

        writer = TupleWriter()
        try:
            writer.extend(other)
        except ArgumentError:
            return None
        return PackedTuple.unpack(writer.pack())
    return None


EMPTY = PackedTuple(b"", [], packed=b"")
