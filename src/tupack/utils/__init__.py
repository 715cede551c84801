"""Utility functions for tupack.

This module provides packed size calculation and key formatting.
"""

from __future__ import annotations

from .formatting import format_key
from .sizing import element_size, packed_size

__all__ = [
    "packed_size",
    "element_size",
    "format_key",
]
