"""Fixed-width unique identifiers.

Uuid64, Uuid80 and Uuid96 are opaque 8, 10 and 12 byte identifiers stored
big-endian, so ordering the integer value is the same as ordering the bytes.
128-bit identifiers use the standard library ``uuid.UUID`` directly: its
``bytes`` attribute is already in RFC 4122 (big-endian) order.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import ClassVar, TypeVar

from ..exceptions import FormatError

U = TypeVar("U", bound="_FixedUuid")


@dataclass(frozen=True, order=True)
class _FixedUuid:
    """Shared implementation of the fixed-width identifiers."""

    value: int

    SIZE: ClassVar[int] = 0
    # Hex digits per dash-separated group of the string form
    GROUPS: ClassVar[tuple[int, ...]] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError(f"{type(self).__name__} value must be an int, got {type(self.value).__name__}")
        if self.value < 0 or self.value >> (8 * self.SIZE):
            raise ValueError(f"{type(self).__name__} value must fit in {self.SIZE} unsigned bytes")

    @classmethod
    def from_bytes(cls: type[U], data: bytes | bytearray | memoryview) -> U:
        """Read an identifier from exactly SIZE big-endian bytes.

        Raises:
            FormatError: If the length is not SIZE
        """
        if len(data) != cls.SIZE:
            raise FormatError(f"{cls.__name__} expects {cls.SIZE} bytes, got {len(data)}")
        return cls(int.from_bytes(data, "big"))

    @classmethod
    def parse(cls: type[U], text: str) -> U:
        """Parse the canonical string form (dashes and braces are optional).

        Raises:
            FormatError: If the text is not a valid identifier
        """
        digits = text.strip().strip("{}").replace("-", "")
        if len(digits) != 2 * cls.SIZE:
            raise FormatError(f"Invalid {cls.__name__} format: {text!r}")
        try:
            return cls(int(digits, 16))
        except ValueError as err:
            raise FormatError(f"Invalid {cls.__name__} format: {text!r}") from err

    @classmethod
    def random(cls: type[U]) -> U:
        """Generate a new random identifier."""
        return cls(secrets.randbits(8 * cls.SIZE))

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(self.SIZE, "big")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        digits = f"{self.value:0{2 * self.SIZE}x}"
        parts = []
        pos = 0
        for width in self.GROUPS:
            parts.append(digits[pos : pos + width])
            pos += width
        return "-".join(parts)

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"


@dataclass(frozen=True, order=True, repr=False)
class Uuid64(_FixedUuid):
    """64-bit identifier, formatted as ``xxxxxxxx-xxxxxxxx``."""

    SIZE: ClassVar[int] = 8
    GROUPS: ClassVar[tuple[int, ...]] = (8, 8)


@dataclass(frozen=True, order=True, repr=False)
class Uuid80(_FixedUuid):
    """80-bit identifier, formatted as ``xxxx-xxxxxxxx-xxxxxxxx``."""

    SIZE: ClassVar[int] = 10
    GROUPS: ClassVar[tuple[int, ...]] = (4, 8, 8)


@dataclass(frozen=True, order=True, repr=False)
class Uuid96(_FixedUuid):
    """96-bit identifier, formatted as ``xxxxxxxx-xxxxxxxx-xxxxxxxx``."""

    SIZE: ClassVar[int] = 12
    GROUPS: ClassVar[tuple[int, ...]] = (8, 8, 8)
