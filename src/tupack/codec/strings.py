"""Escape-terminated byte payloads.

Byte strings (tag 0x01) and unicode strings (tag 0x02, UTF-8) have no length
prefix. Every literal 0x00 in the payload is written as ``00 FF`` and the
payload is closed by a bare 0x00:

    b"\\x42\\x00\\x42" -> 01 42 00 FF 42 00
    "hello"         -> 02 68 65 6C 6C 6F 00
    ""              -> 02 00
"""

from __future__ import annotations

from ..exceptions import ArgumentError, FormatError
from . import tags

_ZERO = b"\x00"
_ESCAPED_ZERO = b"\x00\xff"


def escape(data: bytes | bytearray | memoryview) -> bytes:
    """Replace every 0x00 with 0x00 0xFF."""
    return bytes(data).replace(_ZERO, _ESCAPED_ZERO)


def unescape(data: bytes | bytearray | memoryview) -> bytes:
    """Reverse escape()."""
    return bytes(data).replace(_ESCAPED_ZERO, _ZERO)


def write_bytes(out: bytearray, data: bytes | bytearray | memoryview) -> None:
    """Append a byte string element."""
    out.append(tags.BYTES)
    out += escape(data)
    out.append(0x00)


def write_string(out: bytearray, text: str) -> None:
    """Append a unicode string element.

    Raises:
        ArgumentError: If the string cannot be encoded as UTF-8
    """
    try:
        encoded = text.encode("utf-8")
    except UnicodeEncodeError as err:
        raise ArgumentError(f"String cannot be encoded as UTF-8: {err}") from err
    out.append(tags.UTF8)
    out += escape(encoded)
    out.append(0x00)


def find_terminator(buffer: bytes, start: int, end: int | None = None) -> int:
    """Return the index of the bare 0x00 closing a payload that starts at ``start``.

    A 0x00 followed by 0xFF is an escaped literal and scanning continues after it.
    Only ``buffer[start:end]`` is searched.

    Raises:
        FormatError: If the region ends before the terminator
    """
    if end is None:
        end = len(buffer)
    pos = start
    while True:
        pos = buffer.find(_ZERO, pos, end)
        if pos < 0:
            raise FormatError(f"Truncated string starting at offset {start - 1}: missing terminator")
        if pos + 1 < end and buffer[pos + 1] == tags.ESCAPE:
            pos += 2
            continue
        return pos


def read_bytes(payload: bytes | memoryview) -> bytes:
    """Decode the escaped payload of a 0x01 segment (terminator excluded)."""
    return unescape(payload)


def read_string(payload: bytes | memoryview) -> str:
    """Decode the escaped payload of a 0x02 segment (terminator excluded).

    Raises:
        FormatError: If the payload is not valid UTF-8
    """
    try:
        return unescape(payload).decode("utf-8")
    except UnicodeDecodeError as err:
        raise FormatError(f"Invalid UTF-8 string in tuple: {err}") from err


def read_ascii(payload: bytes | memoryview) -> str:
    """Decode a 0x01 payload as ASCII text (used by lenient string conversions)."""
    try:
        return unescape(payload).decode("ascii")
    except UnicodeDecodeError as err:
        raise FormatError(f"Byte string is not valid ASCII: {err}") from err
