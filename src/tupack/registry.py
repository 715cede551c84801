"""User-type registry.

Tags 0x40-0xFF are reserved for user types. Each registered tag declares the
fixed number of payload bytes that follow it, so that the reader can skip over
it, and may bind a Python class that is packed to / unpacked from that tag.

The Directory (0xFE) and System (0xFF) markers are registered on import and
cannot be removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .codec import tags
from .values.user_type import UserType

logger = logging.getLogger(__name__)

MIN_USER_TAG = 0x40
MAX_USER_TAG = 0xFF


@dataclass(frozen=True)
class UserTypeHandler:
    """Registration record for a user-type tag.

    Attributes:
        tag: Reserved tag byte (0x40-0xFF)
        name: Display name
        width: Number of payload bytes following the tag
        python_type: Optional class packed with this tag
        to_payload: Converts an instance of python_type into exactly ``width`` bytes
        from_payload: Converts a payload back into a Python value; when omitted
            the element decodes as a UserType
    """

    tag: int
    name: str
    width: int = 0
    python_type: Optional[type] = None
    to_payload: Optional[Callable[[Any], bytes]] = None
    from_payload: Optional[Callable[[bytes], Any]] = None

    def materialize(self, payload: bytes) -> Any:
        if self.from_payload is not None:
            return self.from_payload(payload)
        return UserType(self.tag, payload)


# Global registry: tag -> handler
USER_TYPE_REGISTRY: dict[int, UserTypeHandler] = {}

# Reverse index for handlers bound to a Python class
_TYPE_INDEX: dict[type, UserTypeHandler] = {}

_BUILTIN_TAGS = frozenset({tags.DIRECTORY, tags.SYSTEM})


def register_user_type(handler: UserTypeHandler) -> None:
    """Register a user-type tag.

    Args:
        handler: Registration record

    Raises:
        ValueError: If the tag is outside 0x40-0xFF, the tag or class is already
            registered to a different handler, or a bound class has no to_payload

    Example:
        >>> @dataclass(frozen=True)
        ... class Marker:
        ...     code: int
        >>> register_user_type(UserTypeHandler(
        ...     tag=0x40, name="marker", width=1, python_type=Marker,
        ...     to_payload=lambda m: bytes([m.code]),
        ...     from_payload=lambda b: Marker(b[0]),
        ... ))
    """
    if not MIN_USER_TAG <= handler.tag <= MAX_USER_TAG:
        raise ValueError(
            f"User type tag must be in 0x{MIN_USER_TAG:02X}-0x{MAX_USER_TAG:02X}, got 0x{handler.tag:02X}"
        )
    if handler.width < 0:
        raise ValueError(f"User type width must be >= 0, got {handler.width}")
    if handler.python_type is not None and handler.to_payload is None and handler.width > 0:
        raise ValueError(f"User type {handler.name} binds {handler.python_type.__name__} but has no to_payload")

    existing = USER_TYPE_REGISTRY.get(handler.tag)
    if existing is not None:
        if existing == handler:
            # Already registered, no-op
            return
        raise ValueError(
            f"User type tag 0x{handler.tag:02X} already registered to {existing.name}. "
            f"Cannot register {handler.name} with the same tag."
        )

    if handler.python_type is not None and handler.python_type in _TYPE_INDEX:
        raise ValueError(
            f"{handler.python_type.__name__} is already bound to user type "
            f"{_TYPE_INDEX[handler.python_type].name}"
        )

    USER_TYPE_REGISTRY[handler.tag] = handler
    if handler.python_type is not None:
        _TYPE_INDEX[handler.python_type] = handler
    logger.debug("Registered user type %s on tag 0x%02X (width=%d)", handler.name, handler.tag, handler.width)


def unregister_user_type(tag: int) -> None:
    """Remove a user-type registration.

    Raises:
        ValueError: If the tag is one of the built-in markers
        KeyError: If the tag is not registered
    """
    if tag in _BUILTIN_TAGS:
        raise ValueError(f"Built-in user type 0x{tag:02X} cannot be unregistered")
    handler = USER_TYPE_REGISTRY.pop(tag)
    if handler.python_type is not None:
        _TYPE_INDEX.pop(handler.python_type, None)
    logger.debug("Unregistered user type %s from tag 0x%02X", handler.name, tag)


def handler_for_tag(tag: int) -> Optional[UserTypeHandler]:
    return USER_TYPE_REGISTRY.get(tag)


def handler_for_value(value: Any) -> Optional[UserTypeHandler]:
    """Find the handler bound to the exact class of a value."""
    return _TYPE_INDEX.get(type(value))


register_user_type(UserTypeHandler(tag=tags.DIRECTORY, name="Directory"))
register_user_type(UserTypeHandler(tag=tags.SYSTEM, name="System"))
