"""tupack: Order-Preserving Tuple Codec

A Python library that packs tuples of typed values into byte keys whose raw
lexicographic order matches the order of the original values. Keys produced
this way can be range-scanned by any ordered key-value store, and the format
is byte-compatible with the tuple layer of the FoundationDB client libraries.

Key Features:
- Minimal-length integers, order-preserving floats, escaped strings
- UUIDs (64/80/96/128-bit), VersionStamps, user-type markers, nested tuples
- Lazy, typed unpacking with lenient conversions on request
- Pydantic-based typed key layouts

Quick Start:
    >>> from tupack import pack, unpack, TupleModel
    >>>
    >>> key = pack((42, (2014, 11, 6), "Doc123"))
    >>> t = unpack(key)
    >>> t[0], t[1].to_tuple(), t.get(2, str)
    (42, (2014, 11, 6), 'Doc123')
    >>>
    >>> class Document(TupleModel):
    ...     tenant: int
    ...     doc_id: str
    >>>
    >>> begin, end = Document.key_range(42)
    >>> begin <= Document(tenant=42, doc_id="Doc123").to_key() < end
    True
"""

from __future__ import annotations

from .config import DEFAULT_KEY_SIZE_LIMIT, TupackConfig, get_config, set_config
from .exceptions import (
    ArgumentError,
    DecodeError,
    EncodeError,
    FormatError,
    InvalidOperationError,
    NumericOverflowError,
    SchemaError,
    TupackError,
)
from .codec import (
    INT8,
    INT16,
    INT32,
    INT64,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    IntKind,
    PackedTuple,
    SegmentType,
    Single,
    TupleFormattable,
    TupleWriter,
    compare,
    compare_tuples,
    decode_first,
    decode_key,
    decode_key_at,
    decode_last,
    decode_single,
    encode_key,
    pack,
    pack_many,
    to_range,
    unpack,
)
from .models import TupleModel
from .registry import UserTypeHandler, register_user_type, unregister_user_type
from .utils import format_key, packed_size
from .values import UserType, Uuid64, Uuid80, Uuid96, VersionStamp

__version__ = "0.1.0"

__all__ = [
    # Core API
    "pack",
    "unpack",
    "encode_key",
    "decode_key",
    "decode_single",
    "decode_first",
    "decode_last",
    "decode_key_at",
    "pack_many",
    "PackedTuple",
    "TupleWriter",
    "TupleFormattable",
    "SegmentType",
    # Ordering
    "compare",
    "compare_tuples",
    "to_range",
    # Value types
    "Single",
    "Uuid64",
    "Uuid80",
    "Uuid96",
    "VersionStamp",
    "UserType",
    # Integer narrowing
    "IntKind",
    "INT8",
    "UINT8",
    "INT16",
    "UINT16",
    "INT32",
    "UINT32",
    "INT64",
    "UINT64",
    # User types
    "UserTypeHandler",
    "register_user_type",
    "unregister_user_type",
    # Models
    "TupleModel",
    # Configuration
    "TupackConfig",
    "DEFAULT_KEY_SIZE_LIMIT",
    "get_config",
    "set_config",
    # Exceptions
    "TupackError",
    "SchemaError",
    "EncodeError",
    "DecodeError",
    "ArgumentError",
    "FormatError",
    "NumericOverflowError",
    "InvalidOperationError",
    # Utilities
    "packed_size",
    "format_key",
    # Version
    "__version__",
]
