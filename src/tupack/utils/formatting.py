"""Human readable rendering of packed keys."""

from __future__ import annotations

from typing import Optional

from ..codec.decoder import unpack
from ..exceptions import DecodeError


def format_key(data: bytes | bytearray | memoryview, prefix: Optional[bytes] = None) -> str:
    """Render a packed key for logs and error messages.

    Valid keys are shown in tuple notation; anything else falls back to a hex
    dump. A known prefix is shown as hex in front of the tuple.

    Example:
        >>> format_key(pack((42, (2014, 11, 6), "Doc123")))
        "(42, (2014, 11, 6), 'Doc123')"
        >>> format_key(b"\\x15")
        '<15>'
    """
    buffer = bytes(data)
    head = ""
    if prefix and buffer.startswith(prefix):
        head = f"<{bytes(prefix).hex(' ').upper()}>"
        buffer = buffer[len(prefix) :]

    try:
        return head + repr(unpack(buffer))
    except DecodeError:
        return head + f"<{buffer.hex(' ').upper()}>"
