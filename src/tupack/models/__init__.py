"""Pydantic key layouts for tupack.

This module provides the TupleModel base class and the schema introspection
that maps model fields to tuple positions.
"""

from __future__ import annotations

from .base import TupleModel
from .schema import FieldSchema, KeySchema

__all__ = [
    "TupleModel",
    "KeySchema",
    "FieldSchema",
]
