"""Single-pass tuple scanner.

scan() walks a packed buffer once and returns one Segment per top-level
element: its tag, the offset of the tag byte and the total length of the
element (tag, payload and terminator included). Nothing is decoded here;
typed values are materialized later from (buffer, segment, target type).
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from ..config import TupackConfig, get_config
from ..exceptions import FormatError
from ..registry import handler_for_tag
from . import strings, tags, varint


class Segment(NamedTuple):
    """Location of one element inside a packed buffer."""

    tag: int
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


def scan(
    buffer: bytes,
    start: int = 0,
    end: Optional[int] = None,
    depth: int = 0,
    config: Optional[TupackConfig] = None,
    limit: Optional[int] = None,
) -> list[Segment]:
    """Split ``buffer[start:end]`` into element segments.

    Args:
        buffer: Packed tuple bytes
        start: Offset of the first element
        end: Offset just past the last element (defaults to len(buffer))
        depth: Nesting depth of the region (0 for a top-level tuple, 1 for the
            inside of an embedded tuple, ...)
        config: Codec configuration, for the maximum nesting depth
        limit: Stop after this many segments (the rest of the buffer is not checked)

    Returns:
        Segments in buffer order

    Raises:
        FormatError: If the buffer is truncated, contains an unknown tag, or
            nests tuples deeper than allowed
    """
    if end is None:
        end = len(buffer)
    max_depth = (config or get_config()).max_depth

    segments: list[Segment] = []
    pos = start
    while pos < end:
        if limit is not None and len(segments) >= limit:
            break
        next_pos = _element_end(buffer, pos, start, end, depth, max_depth)
        segments.append(Segment(buffer[pos], pos, next_pos - pos))
        pos = next_pos
    return segments


def _element_end(buffer: bytes, pos: int, start: int, end: int, depth: int, max_depth: int) -> int:
    """Return the offset just past the element whose tag is at ``pos``."""
    tag = buffer[pos]

    if tag == tags.NIL:
        if depth == 0:
            return pos + 1
        # inside an embedded tuple a null is <00><FF>, a bare <00> ends the tuple
        if pos + 1 < end and buffer[pos + 1] == tags.ESCAPE:
            return pos + 2
        raise FormatError(f"Unexpected end of embedded tuple at offset {pos}")

    if tag in (tags.BYTES, tags.UTF8):
        return strings.find_terminator(buffer, pos + 1, end) + 1

    if tag == tags.EMBEDDED_TUPLE:
        return _embedded_tuple_end(buffer, pos, end, depth + 1, max_depth)

    if tags.is_integer_tag(tag):
        return _fixed_end(pos, 1 + varint.payload_size(tag), end, tag)

    size = tags.FIXED_SIZES.get(tag)
    if size is not None:
        return _fixed_end(pos, size, end, tag)

    if tag == tags.LEGACY_TUPLE:
        raise FormatError("Old style embedded tuples (0x03) are not supported")

    if tag in (tags.NEGATIVE_BIG_INTEGER, tags.POSITIVE_BIG_INTEGER):
        raise FormatError(f"Big integers (tag 0x{tag:02X}) larger than 64 bits are not supported")

    if tag == tags.SYSTEM and pos == start and depth == 0:
        # system key: the rest of the buffer belongs to it
        return end

    handler = handler_for_tag(tag)
    if handler is not None:
        return _fixed_end(pos, 1 + handler.width, end, tag)

    raise FormatError(f"Invalid tuple type byte 0x{tag:02X} at offset {pos}")


def _fixed_end(pos: int, size: int, end: int, tag: int) -> int:
    if pos + size > end:
        raise FormatError(
            f"Truncated element with tag 0x{tag:02X} at offset {pos}: "
            f"need {size} bytes, have {end - pos}"
        )
    return pos + size


def _embedded_tuple_end(buffer: bytes, pos: int, end: int, depth: int, max_depth: int) -> int:
    if depth > max_depth:
        raise FormatError(f"Embedded tuple at offset {pos} exceeds the maximum depth of {max_depth}")

    inner_start = pos + 1
    cursor = inner_start
    while cursor < end:
        if buffer[cursor] == tags.NIL and not (cursor + 1 < end and buffer[cursor + 1] == tags.ESCAPE):
            return cursor + 1
        cursor = _element_end(buffer, cursor, inner_start, end, depth, max_depth)

    raise FormatError(f"Truncated embedded tuple started at offset {pos}")
