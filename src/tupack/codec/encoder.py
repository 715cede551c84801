"""Top-level tuple packing functions.

This module provides pack() and encode_key(), which turn Python values into
order-preserving packed keys, and re-exports pack_many() for batches.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Optional

from ..config import TupackConfig
from .packed import PackedTuple
from .writer import TupleFormattable, TupleWriter, pack_many

__all__ = ["pack", "encode_key", "pack_many"]


def pack(items: Iterable[Any], prefix: Optional[bytes] = None, config: Optional[TupackConfig] = None) -> bytes:
    """Pack the elements of a tuple.

    The elements are written in order; nested tuples, lists, PackedTuples and
    objects with a ``to_tuple()`` method become embedded tuples.

    Args:
        items: Tuple elements (a tuple, list, PackedTuple, or any object with
            a ``to_tuple()`` method)
        prefix: Optional bytes prepended verbatim to the packed key
        config: Codec configuration (defaults to the process-wide one)

    Returns:
        Packed key

    Raises:
        ArgumentError: If an element has an unsupported type or is out of range

    Examples:
        ```python
        from tupack import pack

        key = pack((42, (2014, 11, 6), "Doc123"))
        # b'\\x15*\\x05\\x16\\x07\\xde\\x15\\x0b\\x15\\x06\\x00\\x02Doc123\\x00'

        # Subspace keys
        key = pack(("users", 7), prefix=b"\\x15\\x01")
        ```
    """
    writer = TupleWriter(prefix=prefix, config=config)
    if isinstance(items, PackedTuple):
        writer.append_packed(items)
    elif isinstance(items, TupleFormattable) and not isinstance(items, (tuple, list)):
        writer.extend(items.to_tuple())
    else:
        writer.extend(items)
    return writer.pack()


def encode_key(*items: Any, prefix: Optional[bytes] = None) -> bytes:
    """Pack the positional arguments as a tuple.

    ``encode_key(value)`` is the packed form of the one-element tuple
    ``(value,)``, which is also how single values are stored.

    Examples:
        ```python
        encode_key(1)             # b'\\x15\\x01'
        encode_key("hello", 42)   # b'\\x02hello\\x00\\x15*'
        ```
    """
    return pack(items, prefix=prefix)
