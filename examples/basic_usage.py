#!/usr/bin/env python3
"""Basic usage example for tupack.

This example demonstrates:
1. Packing a tuple into an order-preserving key
2. Unpacking it lazily, with natural and typed access
3. Checking that byte order follows value order
4. Calculating key sizes and building prefix ranges
"""

from __future__ import annotations

from tupack import INT16, decode_key, format_key, pack, packed_size, to_range, unpack


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("tupack Basic Usage Example")
    print("=" * 60)
    print()

    # Pack a key
    print("1. Packing (42, (2014, 11, 6), 'Doc123')...")
    key = pack((42, (2014, 11, 6), "Doc123"))
    print(f"   Packed size: {len(key)} bytes (predicted: {packed_size((42, (2014, 11, 6), 'Doc123'))})")
    print(f"   Hex: {key.hex(' ')}")
    print()

    # Unpack it
    print("2. Unpacking...")
    t = unpack(key)
    print(f"   Tuple: {t!r}")
    print(f"   Tenant: {t[0]}")
    print(f"   Created: {t[1].to_tuple()}")
    print(f"   Year as int16: {t[1].get(0, INT16)}")
    print(f"   Document: {t.get(2, str)}")
    print()

    # Ordering
    print("3. Sorting packed keys...")
    values = [10, -1, None, "b", 2.5, "a", b"\x00", 0, (1, 2)]
    for packed in sorted(pack((v,)) for v in values):
        print(f"   {packed.hex(' '):<30} {format_key(packed)}")
    print()

    # Ranges
    print("4. Prefix range over ('users',)...")
    begin, end = to_range(pack(("users",)))
    for candidate in [("users", 1), ("users", "x", 2), ("users",), ("usersx", 1)]:
        inside = begin <= pack(candidate) < end
        print(f"   {candidate!r:<22} {'inside' if inside else 'outside'}")
    print()

    # Single values
    print("5. Single values...")
    for value in [0, 1, -1, -256, True, "hello world"]:
        encoded = pack((value,))
        print(f"   {value!r:<15} -> {encoded.hex(' '):<40} -> {decode_key(encoded)!r}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
