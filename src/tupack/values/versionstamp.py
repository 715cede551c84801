"""Store-assigned commit versions.

A VersionStamp is an 8-byte transaction version followed by a 2-byte batch
order and an optional 2-byte user version, all big-endian. Stamps created
before commit are "incomplete": their first 10 bytes are all 0xFF and are
filled in by the store when the transaction commits.

Packed stamps reuse the Uuid80 (0x32) and Uuid96 (0x33) tags. The bytes alone
cannot tell a stamp from a Uuid80/Uuid96; the caller picks one by the type it
asks the decoder for.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Optional

from ..exceptions import FormatError

PLACEHOLDER_VERSION = 0xFFFF_FFFF_FFFF_FFFF
PLACEHOLDER_ORDER = 0xFFFF

_INCOMPLETE_BIT = 1 << 63


@functools.total_ordering
@dataclass(frozen=True)
class VersionStamp:
    """80-bit or 96-bit versionstamp.

    Attributes:
        transaction_version: Commit version of the transaction (64 bits)
        batch_order: Order of the transaction within its commit batch (16 bits)
        user_version: Optional user-chosen 16-bit version; None for 80-bit stamps
        is_incomplete: True until the store has assigned the real version

    Example:
        >>> VersionStamp.complete(0x0102030405060708, 0x090A)
        VersionStamp('@72623859790382856-2314')
        >>> VersionStamp.incomplete(user_version=7).to_bytes().hex()
        'ffffffffffffffffffff0007'
    """

    transaction_version: int
    batch_order: int
    user_version: Optional[int] = None
    is_incomplete: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.transaction_version <= PLACEHOLDER_VERSION:
            raise ValueError(f"Transaction version must fit in 64 bits, got {self.transaction_version}")
        if not 0 <= self.batch_order <= 0xFFFF:
            raise ValueError(f"Batch order must fit in 16 bits, got {self.batch_order}")
        if self.user_version is not None and not 0 <= self.user_version <= 0xFFFF:
            raise ValueError(f"User version must fit in 16 bits, got {self.user_version}")

        # The top bit of the version is what marks a stamp as incomplete on the wire
        if self.is_incomplete and not self.transaction_version & _INCOMPLETE_BIT:
            raise ValueError("Incomplete versionstamps must have the top version bit set")
        if not self.is_incomplete and self.transaction_version & _INCOMPLETE_BIT:
            raise ValueError(
                f"Transaction version {self.transaction_version} is reserved for incomplete stamps"
            )

    @classmethod
    def complete(cls, version: int, order: int, user_version: Optional[int] = None) -> VersionStamp:
        """Create a stamp for an already committed transaction."""
        return cls(version, order, user_version, is_incomplete=False)

    @classmethod
    def incomplete(cls, user_version: Optional[int] = None) -> VersionStamp:
        """Create a placeholder stamp to be filled in by the store at commit time."""
        return cls(PLACEHOLDER_VERSION, PLACEHOLDER_ORDER, user_version, is_incomplete=True)

    @property
    def has_user_version(self) -> bool:
        return self.user_version is not None

    @property
    def size(self) -> int:
        """Serialized length in bytes: 12 with a user version, 10 without."""
        return 12 if self.has_user_version else 10

    def to_bytes(self) -> bytes:
        data = self.transaction_version.to_bytes(8, "big") + self.batch_order.to_bytes(2, "big")
        if self.user_version is not None:
            data += self.user_version.to_bytes(2, "big")
        return data

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> VersionStamp:
        """Read a stamp from 10 or 12 bytes.

        Raises:
            FormatError: If the length is neither 10 nor 12
        """
        if len(data) not in (10, 12):
            raise FormatError(f"A VersionStamp is either 10 or 12 bytes, got {len(data)}")
        raw = bytes(data)
        version = int.from_bytes(raw[0:8], "big")
        order = int.from_bytes(raw[8:10], "big")
        user_version = int.from_bytes(raw[10:12], "big") if len(raw) == 12 else None
        return cls(version, order, user_version, is_incomplete=bool(version & _INCOMPLETE_BIT))

    def _sort_key(self) -> tuple[int, int, int, int, int]:
        # incomplete stamps sort after every complete one, and a stamp without
        # user version sorts before the same stamp with one
        if self.is_incomplete:
            head = (1, 0, 0)
        else:
            head = (0, self.transaction_version, self.batch_order)
        if self.user_version is None:
            return head + (0, 0)
        return head + (1, self.user_version)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionStamp):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        if self.is_incomplete:
            text = "@?"
        else:
            text = f"@{self.transaction_version}-{self.batch_order}"
        if self.user_version is not None:
            text += f"#{self.user_version}"
        return text

    def __repr__(self) -> str:
        return f"VersionStamp('{self}')"
