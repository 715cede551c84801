"""Order-preserving tuple codec.

This package provides packing of Python values into byte keys whose
lexicographic order matches the order of the values, and lazy unpacking of
such keys.
"""

from __future__ import annotations

from .comparator import compare, compare_tuples, to_range
from .decoder import decode_first, decode_key, decode_key_at, decode_last, decode_single, unpack
from .encoder import encode_key, pack, pack_many
from .floats import Single
from .packed import PackedTuple
from .reader import Segment, scan
from .tags import SegmentType
from .varint import INT8, INT16, INT32, INT64, UINT8, UINT16, UINT32, UINT64, IntKind
from .writer import TupleFormattable, TupleWriter

__all__ = [
    "pack",
    "encode_key",
    "pack_many",
    "unpack",
    "decode_key",
    "decode_single",
    "decode_first",
    "decode_last",
    "decode_key_at",
    "compare",
    "compare_tuples",
    "to_range",
    "PackedTuple",
    "TupleWriter",
    "TupleFormattable",
    "Segment",
    "SegmentType",
    "scan",
    "Single",
    "IntKind",
    "INT8",
    "UINT8",
    "INT16",
    "UINT16",
    "INT32",
    "UINT32",
    "INT64",
    "UINT64",
]
