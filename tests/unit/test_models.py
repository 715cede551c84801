"""Unit tests for TupleModel key layouts."""

from __future__ import annotations

import enum
import uuid
from typing import ClassVar, Optional, Union

import pytest

from tupack import ArgumentError, FormatError, SchemaError, TupleModel, pack, unpack
from tupack.models import KeySchema


class Day(TupleModel):
    """Calendar day."""

    year: int
    month: int
    day: int


class DocumentKey(TupleModel):
    """Document index key."""

    tenant: int
    created: Day
    doc_id: str

    tupack_prefix: ClassVar[Optional[bytes]] = b"\x15\x07"


class Priority(enum.IntEnum):
    """Test int enum."""

    LOW = 1
    HIGH = 2


class Color(str, enum.Enum):
    """Test str enum."""

    RED = "red"
    BLUE = "blue"


class TaskKey(TupleModel):
    """Key with optional and enum fields."""

    priority: Priority
    color: Color
    parent: Optional[int] = None
    owner: Optional[uuid.UUID] = None


class TestTupleModel:
    """Test packing and unpacking models."""

    def test_to_tuple(self) -> None:
        """Test fields are tuple elements in declaration order."""
        key = DocumentKey(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="Doc123")
        assert key.to_tuple() == (42, Day(year=2014, month=11, day=6), "Doc123")

    def test_to_key(self, document_key: tuple) -> None:
        """Test nested models pack as nested tuples, after the prefix."""
        key = DocumentKey(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="Doc123")
        assert key.to_key() == b"\x15\x07" + pack(document_key)

    def test_roundtrip(self) -> None:
        """Test from_key(to_key()) gives an equal model."""
        key = DocumentKey(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="Doc123")
        decoded = DocumentKey.from_key(key.to_key())
        assert decoded == key
        assert isinstance(decoded.created, Day)

    def test_from_plain_tuple(self, document_key: tuple) -> None:
        """Test plain tuples are accepted, nested models included."""
        key = DocumentKey.from_tuple(document_key)
        assert key.created == Day(year=2014, month=11, day=6)

    def test_wrong_prefix(self, document_key: tuple) -> None:
        """Test keys from another layout are rejected."""
        with pytest.raises(FormatError, match="prefix"):
            DocumentKey.from_key(pack(document_key))

    def test_wrong_arity(self) -> None:
        """Test the element count must match the field count."""
        with pytest.raises(FormatError, match="expects 3 elements"):
            Day.from_key(pack((2014, 11)))

    def test_validation_error(self) -> None:
        """Test pydantic validation failures become FormatError."""
        with pytest.raises(FormatError, match="Invalid Day"):
            Day.from_tuple(("year", 11, 6))

    def test_undecodable_element(self) -> None:
        """Test an element of the wrong type is a FormatError."""
        with pytest.raises(FormatError):
            Day.from_key(pack((2014, 11, True)))

    def test_optional_and_enum_fields(self) -> None:
        """Test None packs as null and enums pack as their values."""
        owner = uuid.UUID(int=5)
        key = TaskKey(priority=Priority.HIGH, color=Color.BLUE, owner=owner)
        assert key.to_tuple() == (2, "blue", None, owner)

        decoded = TaskKey.from_key(key.to_key())
        assert decoded == key
        assert decoded.parent is None
        assert decoded.priority is Priority.HIGH

    def test_model_as_element(self) -> None:
        """Test a model inside a plain tuple packs as a nested tuple."""
        day = Day(year=2014, month=11, day=6)
        assert pack(("x", day)) == pack(("x", (2014, 11, 6)))
        assert unpack(pack(("x", day))).get(1, Day) == day

    def test_frozen(self) -> None:
        """Test keys are immutable and hashable."""
        day = Day(year=2014, month=11, day=6)
        with pytest.raises(Exception):
            day.year = 2015
        assert len({day, Day(year=2014, month=11, day=6)}) == 1


class TestKeyRange:
    """Test ranges over a layout."""

    def test_range_by_leading_fields(self) -> None:
        """Test the range holds the keys that share the leading fields."""
        begin, end = DocumentKey.key_range(42)
        inside = DocumentKey(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="Doc123")
        outside = DocumentKey(tenant=43, created=Day(year=2000, month=1, day=1), doc_id="a")
        assert begin <= inside.to_key() < end
        assert not begin <= outside.to_key() < end

    def test_range_with_nested_model(self) -> None:
        """Test leading values may be nested models."""
        begin, end = DocumentKey.key_range(42, Day(year=2014, month=11, day=6))
        key = DocumentKey(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="z")
        assert begin <= key.to_key() < end

    def test_whole_layout(self) -> None:
        """Test a range with no leading values spans the prefix."""
        assert DocumentKey.key_range() == (b"\x15\x07\x00", b"\x15\x07\xff")

    def test_too_many_values(self) -> None:
        """Test more leading values than fields is an error."""
        with pytest.raises(ArgumentError):
            Day.key_range(1, 2, 3, 4)


class TestKeySchema:
    """Test schema introspection."""

    def test_positions(self) -> None:
        """Test fields map to positions in declaration order."""
        schema = KeySchema.from_model(DocumentKey)
        assert [(f.position, f.name) for f in schema.fields] == [(0, "tenant"), (1, "created"), (2, "doc_id")]
        assert schema.fields[1].is_model
        assert schema.fields[1].decode_as is Day

    def test_optional_and_enum(self) -> None:
        """Test Optional stripping and enum value types."""
        fields = KeySchema.from_model(TaskKey).fields
        assert fields[0].decode_as is int
        assert fields[1].decode_as is str
        assert fields[2].optional
        assert fields[2].python_type is int
        assert fields[3].decode_as is uuid.UUID

    def test_unsupported_annotation(self) -> None:
        """Test fields with no tuple encoding are rejected."""

        class Bad(TupleModel):
            data: dict[str, int]

        with pytest.raises(SchemaError, match="no tuple encoding"):
            KeySchema.from_model(Bad)

    def test_union_rejected(self) -> None:
        """Test unions of several types are rejected."""

        class Ambiguous(TupleModel):
            value: Union[int, str]

        with pytest.raises(SchemaError, match="unions"):
            KeySchema.from_model(Ambiguous)
