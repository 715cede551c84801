"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pytest

from tupack import TupackConfig, get_config, set_config
from tupack.registry import USER_TYPE_REGISTRY, UserTypeHandler, register_user_type, unregister_user_type


@dataclass(frozen=True)
class Marker:
    """Application type bound to user-type tag 0x40."""

    code: int


def marker_to_payload(marker: Marker) -> bytes:
    return marker.code.to_bytes(2, "big")


def marker_from_payload(payload: bytes) -> Marker:
    return Marker(int.from_bytes(payload, "big"))


MARKER_HANDLER = UserTypeHandler(
    tag=0x40,
    name="marker",
    width=2,
    python_type=Marker,
    to_payload=marker_to_payload,
    from_payload=marker_from_payload,
)


@pytest.fixture
def document_key() -> tuple:
    """The canonical example key: (tenant, (year, month, day), doc_id)."""
    return (42, (2014, 11, 6), "Doc123")


@pytest.fixture
def document_key_bytes() -> bytes:
    """Packed form of the document_key fixture."""
    return b"\x15\x2a\x05\x16\x07\xde\x15\x0b\x15\x06\x00\x02Doc123\x00"


@pytest.fixture
def marker_type() -> Iterator[UserTypeHandler]:
    """Register the Marker user type for the duration of a test."""
    register_user_type(MARKER_HANDLER)
    yield MARKER_HANDLER
    if MARKER_HANDLER.tag in USER_TYPE_REGISTRY:
        unregister_user_type(MARKER_HANDLER.tag)


@pytest.fixture
def restore_config() -> Iterator[TupackConfig]:
    """Restore the process-wide configuration after a test changes it."""
    saved = get_config()
    yield saved
    set_config(saved)
