"""End-to-end integration tests."""

from __future__ import annotations

import bisect
import functools
import uuid
from typing import ClassVar, Optional

import pytest

from tupack import (
    FormatError,
    TupleModel,
    UserType,
    VersionStamp,
    compare_tuples,
    decode_key,
    encode_key,
    format_key,
    pack,
    pack_many,
    to_range,
    unpack,
)


class Day(TupleModel):
    """Calendar day."""

    year: int
    month: int
    day: int


class DocumentIndex(TupleModel):
    """Secondary index entry: (tenant, created, doc_id)."""

    tenant: int
    created: Day
    doc_id: str

    tupack_prefix: ClassVar[Optional[bytes]] = b"\x15\x02"


class OrderedStore:
    """Sorted in-memory key-value store answering byte-ordered range scans."""

    def __init__(self) -> None:
        self._keys: list[bytes] = []
        self._values: dict[bytes, bytes] = {}

    def set(self, key: bytes, value: bytes) -> None:
        if key not in self._values:
            bisect.insort(self._keys, key)
        self._values[key] = value

    def get_range(self, begin: bytes, end: bytes) -> list[tuple[bytes, bytes]]:
        lo = bisect.bisect_left(self._keys, begin)
        hi = bisect.bisect_left(self._keys, end)
        return [(key, self._values[key]) for key in self._keys[lo:hi]]


class TestDocumentKey:
    """Test the canonical nested key scenario."""

    def test_nested_document_key(self, document_key: tuple, document_key_bytes: bytes) -> None:
        """Test (42, (2014, 11, 6), "Doc123") end to end."""
        packed = pack(document_key)
        assert packed == document_key_bytes

        t = unpack(packed)
        assert len(t) == 3
        assert t[0] == 42
        assert t[1] == (2014, 11, 6)
        assert len(t[1]) == 3
        assert t.get(2, str) == "Doc123"
        assert format_key(packed) == "(42, (2014, 11, 6), 'Doc123')"

    def test_value_roundtrip(self) -> None:
        """Test single values stored as one-element tuples."""
        for value in [None, True, 0, -1, 1 << 40, 2.5, "text", b"\x00raw", uuid.UUID(int=9)]:
            assert decode_key(encode_key(value)) == value


class TestRangeScans:
    """Test range queries over packed keys in a byte-ordered store."""

    @pytest.fixture
    def store(self) -> OrderedStore:
        store = OrderedStore()
        rows = [
            ("users", 1, "alice"),
            ("users", 2, "bob"),
            ("users", 10, "carol"),
            ("users", -5, "system"),
            ("users", None, "anonymous"),
            ("usersx", 1, "other"),
            ("groups", 1, "admins"),
        ]
        for key, row in zip(pack_many(rows), rows):
            store.set(key, row[2].encode())
        return store

    def test_prefix_scan(self, store: OrderedStore) -> None:
        """Test a prefix range returns exactly the matching rows, in order."""
        begin, end = to_range(pack(("users",)))
        rows = [unpack(key).to_tuple() for key, _ in store.get_range(begin, end)]
        assert rows == [
            ("users", None, "anonymous"),
            ("users", -5, "system"),
            ("users", 1, "alice"),
            ("users", 2, "bob"),
            ("users", 10, "carol"),
        ]

    def test_bounded_scan(self, store: OrderedStore) -> None:
        """Test numeric bounds translate to byte bounds."""
        rows = store.get_range(pack(("users", 1)), pack(("users", 10)))
        assert [value for _, value in rows] == [b"alice", b"bob"]

    def test_store_order_is_semantic_order(self, store: OrderedStore) -> None:
        """Test the whole store is sorted like the decoded tuples."""
        decoded = [unpack(key).to_tuple() for key, _ in store.get_range(b"", b"\xff")]
        assert decoded == sorted(decoded, key=functools.cmp_to_key(compare_tuples))


class TestModelIndex:
    """Test typed index keys."""

    def test_index_scan_by_tenant_and_day(self) -> None:
        """Test model key ranges over nested fields."""
        store = OrderedStore()
        entries = [
            DocumentIndex(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="Doc123"),
            DocumentIndex(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="Doc124"),
            DocumentIndex(tenant=42, created=Day(year=2014, month=12, day=1), doc_id="Doc200"),
            DocumentIndex(tenant=7, created=Day(year=2014, month=11, day=6), doc_id="Other"),
        ]
        for entry in entries:
            store.set(entry.to_key(), b"")

        begin, end = DocumentIndex.key_range(42, Day(year=2014, month=11, day=6))
        found = [DocumentIndex.from_key(key).doc_id for key, _ in store.get_range(begin, end)]
        assert found == ["Doc123", "Doc124"]

        begin, end = DocumentIndex.key_range(42)
        assert len(store.get_range(begin, end)) == 3

    def test_foreign_key_rejected(self) -> None:
        """Test keys outside the layout prefix are rejected."""
        with pytest.raises(FormatError):
            DocumentIndex.from_key(pack((42, (2014, 11, 6), "Doc123")))


class TestSpecialKeys:
    """Test system keys, markers and versionstamps in keys."""

    def test_system_key(self) -> None:
        """Test a system key sorts after every tuple key."""
        system = encode_key(UserType.system_key(b"/metadataVersion"))
        assert system > pack(("zzz", UserType.directory()))
        assert unpack(system)[0].payload == b"/metadataVersion"

    def test_versionstamped_log(self) -> None:
        """Test log keys ordered by commit version, pending entries last."""
        keys = [
            pack(("log", VersionStamp.incomplete(0))),
            pack(("log", VersionStamp.complete(100, 1, 0))),
            pack(("log", VersionStamp.complete(100, 0, 1))),
            pack(("log", VersionStamp.complete(99, 5, 0))),
        ]
        stamps = [unpack(key).get(1, VersionStamp) for key in sorted(keys)]
        assert stamps == sorted(stamps)
        assert stamps[-1].is_incomplete
