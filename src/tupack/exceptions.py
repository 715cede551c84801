"""Exception hierarchy for tupack.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from TupackError for easy catching of any tupack-specific error.
The concrete classes also derive from the matching builtin (ValueError,
OverflowError) so callers that only know the standard exceptions still catch them.
"""

from __future__ import annotations


class TupackError(Exception):
    """Base exception for all tupack errors."""

    pass


class SchemaError(TupackError):
    """Raised when a TupleModel cannot be mapped to a tuple layout.

    Examples:
        - Field annotation with no tuple encoding (e.g. dict, set)
        - Union of several non-None types
    """

    pass


class EncodeError(TupackError):
    """Raised when packing a tuple fails."""

    pass


class DecodeError(TupackError):
    """Raised when unpacking or materializing a tuple element fails."""

    pass


class ArgumentError(EncodeError, ValueError):
    """Raised when a value cannot be encoded.

    Examples:
        - Unsupported runtime type (e.g. a set or an arbitrary object)
        - Integer outside of the +/- (2^64 - 1) range
        - String that cannot be encoded as UTF-8 (lone surrogates)
        - Nesting deeper than the configured maximum depth
    """

    pass


class FormatError(DecodeError, ValueError):
    """Raised when a packed buffer is malformed or does not match the request.

    Examples:
        - Truncated buffer (missing payload bytes or terminator)
        - Unknown or unsupported tag byte
        - Element cannot be converted into the requested type
        - Tuple arity mismatch on fixed-arity decode calls
        - Key does not start with the expected prefix
    """

    pass


class NumericOverflowError(DecodeError, OverflowError):
    """Raised when a decoded number does not fit in the requested target type."""

    pass


class InvalidOperationError(TupackError):
    """Raised when accessing the first or last element of an empty tuple."""

    pass
