"""Reserved marker elements at the top of the tag space."""

from __future__ import annotations

from dataclasses import dataclass

from ..codec import tags


@dataclass(frozen=True)
class UserType:
    """A user-type element: one reserved tag byte, optionally followed by a raw payload.

    The two built-in user types are the Directory marker (0xFE) and the System
    marker (0xFF). A key that starts with 0xFF is a system key: everything
    after the first byte is its payload.

    Attributes:
        tag: Tag byte (0x40-0xFF, see tupack.registry)
        payload: Raw bytes written verbatim after the tag
    """

    tag: int
    payload: bytes = b""

    def __post_init__(self) -> None:
        if not 0 <= self.tag <= 0xFF:
            raise ValueError(f"User type tag must be a byte, got {self.tag}")
        if not isinstance(self.payload, bytes):
            object.__setattr__(self, "payload", bytes(self.payload))

    @classmethod
    def directory(cls) -> UserType:
        return cls(tags.DIRECTORY)

    @classmethod
    def system(cls) -> UserType:
        return cls(tags.SYSTEM)

    @classmethod
    def system_key(cls, payload: bytes) -> UserType:
        """A ``\\xFF``-prefixed system key such as ``b"\\xff/metadataVersion"``."""
        return cls(tags.SYSTEM, payload)

    def __str__(self) -> str:
        if self.tag == tags.DIRECTORY and not self.payload:
            return "|Directory|"
        if self.tag == tags.SYSTEM:
            return "|System|" if not self.payload else f"|System:{self.payload!r}|"
        if self.payload:
            return f"|User-{self.tag:02X}:{self.payload.hex()}|"
        return f"|User-{self.tag:02X}|"
