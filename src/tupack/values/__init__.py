"""Value types that have no direct Python builtin equivalent."""

from __future__ import annotations

from .user_type import UserType
from .uuids import Uuid64, Uuid80, Uuid96
from .versionstamp import VersionStamp

__all__ = [
    "Uuid64",
    "Uuid80",
    "Uuid96",
    "VersionStamp",
    "UserType",
]
