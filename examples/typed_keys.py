#!/usr/bin/env python3
"""Typed key layouts with TupleModel.

This example demonstrates:
1. Declaring a key layout as a pydantic model with a subspace prefix
2. Packing models and scanning them back with key ranges
3. Registering an application type on a user-type tag
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import ClassVar, Optional

from tupack import TupleModel, UserTypeHandler, decode_key, encode_key, format_key, register_user_type


class Day(TupleModel):
    """Calendar day, packed as a nested (year, month, day) tuple."""

    year: int
    month: int
    day: int


class DocumentIndex(TupleModel):
    """Secondary index entry: (tenant, created, doc_id)."""

    tenant: int
    created: Day
    doc_id: str

    tupack_prefix: ClassVar[Optional[bytes]] = b"\x02index\x00"


@dataclass(frozen=True)
class Shard:
    """Shard number stored under user-type tag 0x40."""

    number: int


def main() -> None:
    """Run the typed keys example."""
    print("=" * 60)
    print("tupack Typed Keys Example")
    print("=" * 60)
    print()

    print("1. Packing index entries...")
    entries = [
        DocumentIndex(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="Doc123"),
        DocumentIndex(tenant=42, created=Day(year=2014, month=12, day=1), doc_id="Doc200"),
        DocumentIndex(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="Doc124"),
        DocumentIndex(tenant=7, created=Day(year=2015, month=1, day=1), doc_id="Other"),
    ]
    keys = sorted(entry.to_key() for entry in entries)
    for key in keys:
        print(f"   {format_key(key, prefix=DocumentIndex.tupack_prefix)}")
    print()

    print("2. Scanning tenant 42 on 2014-11-06...")
    begin, end = DocumentIndex.key_range(42, Day(year=2014, month=11, day=6))
    for key in keys[bisect.bisect_left(keys, begin) : bisect.bisect_left(keys, end)]:
        print(f"   {DocumentIndex.from_key(key).doc_id}")
    print()

    print("3. Registering a user type...")
    register_user_type(
        UserTypeHandler(
            tag=0x40,
            name="shard",
            width=1,
            python_type=Shard,
            to_payload=lambda shard: bytes([shard.number]),
            from_payload=lambda payload: Shard(payload[0]),
        )
    )
    packed = encode_key(Shard(3))
    print(f"   Shard(3) -> {packed.hex(' ')} -> {decode_key(packed)!r}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
