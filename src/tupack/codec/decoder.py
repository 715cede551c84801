"""Top-level tuple unpacking functions.

unpack() returns a lazy PackedTuple; the decode_* helpers extract one or a
fixed number of typed elements from a packed key.
"""

from __future__ import annotations

from typing import Any, Optional

from ..config import TupackConfig
from ..exceptions import FormatError, InvalidOperationError
from .decoders import decode_segment
from .packed import EMPTY, PackedTuple
from .reader import scan


def unpack(
    data: bytes | bytearray | memoryview,
    prefix: Optional[bytes] = None,
    config: Optional[TupackConfig] = None,
) -> PackedTuple:
    """Unpack a packed key into a lazy tuple view.

    Args:
        data: Packed key
        prefix: Expected prefix; it is checked and stripped before unpacking
        config: Codec configuration (defaults to the process-wide one)

    Returns:
        PackedTuple over the elements (empty for empty input)

    Raises:
        FormatError: If the buffer is malformed or does not start with ``prefix``

    Examples:
        ```python
        from tupack import pack, unpack

        t = unpack(pack((42, (2014, 11, 6), "Doc123")))
        t[0]             # 42
        t[1].to_tuple()  # (2014, 11, 6)
        t.get(2, str)    # 'Doc123'
        ```
    """
    data = _strip_prefix(data, prefix)
    if not data:
        return EMPTY
    return PackedTuple.unpack(data, config=config)


def decode_key(data: bytes | bytearray | memoryview, *types: Any) -> Any:
    """Decode a key holding exactly ``len(types)`` elements.

    With no type or one type, the single element is returned; with several
    types a tuple of decoded elements is returned.

    Raises:
        FormatError: If the key does not hold exactly that many elements

    Examples:
        ```python
        decode_key(encode_key(42))                 # 42
        decode_key(encode_key("a", 1), str, int)   # ('a', 1)
        ```
    """
    arity = max(1, len(types))
    view = unpack(data)
    if len(view) != arity:
        raise FormatError(f"Expected a key with {arity} element(s), got {len(view)}")
    if len(types) <= 1:
        return view.get(0, types[0] if types else None)
    return tuple(view.get(index, as_) for index, as_ in enumerate(types))


def decode_single(data: bytes | bytearray | memoryview, as_: Any = None) -> Any:
    """Decode a key that must hold exactly one element.

    Raises:
        FormatError: If the key is empty or holds more than one element
    """
    return decode_key(data, as_)


def decode_first(data: bytes | bytearray | memoryview, as_: Any = None) -> Any:
    """Decode the first element of a packed tuple.

    Only the first element is scanned.

    Raises:
        InvalidOperationError: If the tuple is empty
    """
    buffer = bytes(data)
    segments = scan(buffer, limit=1)
    if not segments:
        raise InvalidOperationError("Cannot decode the first element of an empty tuple")
    return decode_segment(PackedTuple(buffer, segments), segments[0], as_)


def decode_last(data: bytes | bytearray | memoryview, as_: Any = None) -> Any:
    """Decode the last element of a packed tuple.

    Raises:
        InvalidOperationError: If the tuple is empty
    """
    view = unpack(data)
    if not len(view):
        raise InvalidOperationError("Cannot decode the last element of an empty tuple")
    return view.last(as_)


def decode_key_at(data: bytes | bytearray | memoryview, index: int, as_: Any = None) -> Any:
    """Decode the element at ``index`` without materializing the ones before it.

    Negative indexes count from the end and require a full scan.

    Raises:
        IndexError: If the tuple has no element at ``index``
        FormatError: If the buffer is malformed up to that element
    """
    buffer = bytes(data)
    if index < 0:
        return unpack(buffer).get(index, as_)
    segments = scan(buffer, limit=index + 1)
    if len(segments) <= index:
        raise IndexError(f"Tuple index {index} out of range for a tuple of {len(segments)} element(s)")
    return decode_segment(PackedTuple(buffer, segments), segments[index], as_)


def _strip_prefix(data: bytes | bytearray | memoryview, prefix: Optional[bytes]) -> bytes:
    buffer = bytes(data)
    if not prefix:
        return buffer
    if not buffer.startswith(prefix):
        raise FormatError(f"Key does not start with the expected prefix {bytes(prefix).hex(' ')}")
    return buffer[len(prefix) :]
