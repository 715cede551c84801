"""Typed key layouts built on pydantic.

A TupleModel is a pydantic model whose fields, in declaration order, are the
elements of a packed tuple. It gives a validated, named view of keys such as
``(tenant, (year, month, day), doc_id)``.
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ..codec import tags
from ..codec.comparator import to_range
from ..codec.decoder import unpack
from ..codec.encoder import pack
from ..codec.packed import PackedTuple
from ..exceptions import ArgumentError, FormatError
from .schema import KeySchema

M = TypeVar("M", bound="TupleModel")


class TupleModel(BaseModel):
    """Base class for typed tuple layouts.

    Example:
        >>> from typing import ClassVar, Optional
        >>> class Day(TupleModel):
        ...     year: int
        ...     month: int
        ...     day: int
        >>> class DocumentKey(TupleModel):
        ...     tenant: int
        ...     created: Day
        ...     doc_id: str
        ...
        ...     tupack_prefix: ClassVar[Optional[bytes]] = b"\\x15\\x07"
        >>> key = DocumentKey(tenant=42, created=Day(year=2014, month=11, day=6), doc_id="Doc123")
        >>> DocumentKey.from_key(key.to_key()) == key
        True

    Attributes:
        tupack_prefix: Bytes prepended to every key of this layout (optional)
    """

    model_config = ConfigDict(
        # Allow tupack value types (Uuid64, VersionStamp, ...) as field types
        arbitrary_types_allowed=True,
        # Forbid extra fields not defined in the layout
        extra="forbid",
        # Keys are values: immutable and hashable
        frozen=True,
    )

    tupack_prefix: ClassVar[bytes | None] = None

    def to_tuple(self) -> tuple[Any, ...]:
        """Field values in declaration order. Nested models stay models and pack
        as embedded tuples; enum members are replaced by their values."""
        return tuple(_element(getattr(self, name)) for name in type(self).model_fields)

    def to_key(self) -> bytes:
        """Pack the model, with the layout prefix if any."""
        return pack(self.to_tuple(), prefix=type(self).tupack_prefix)

    @classmethod
    def from_tuple(cls: type[M], values: Any) -> M:
        """Build a model from a PackedTuple or a plain tuple/list of values.

        Raises:
            FormatError: If the number of elements does not match the layout, an
                element cannot be decoded, or the values fail validation
        """
        schema = KeySchema.from_model(cls)
        if len(values) != len(schema):
            raise FormatError(f"{cls.__name__} expects {len(schema)} elements, got {len(values)}")

        data: dict[str, Any] = {}
        for field in schema.fields:
            if isinstance(values, PackedTuple):
                if field.optional and values.segments[field.position].tag == tags.NIL:
                    data[field.name] = None
                else:
                    data[field.name] = values.get(field.position, field.decode_as)
                continue

            value = values[field.position]
            if field.is_model and isinstance(value, (tuple, list, PackedTuple)):
                value = field.python_type.from_tuple(value)
            data[field.name] = value

        try:
            return cls.model_validate(data)
        except ValidationError as err:
            raise FormatError(f"Invalid {cls.__name__} tuple: {err}") from err

    @classmethod
    def from_key(cls: type[M], data: bytes | bytearray | memoryview) -> M:
        """Unpack a key produced by to_key().

        Raises:
            FormatError: If the key is malformed, lacks the layout prefix, or
                does not match the layout
        """
        return cls.from_tuple(unpack(data, prefix=cls.tupack_prefix))

    @classmethod
    def key_range(cls, *leading: Any) -> tuple[bytes, bytes]:
        """Range covering every key of this layout whose first fields equal ``leading``.

        Raises:
            ArgumentError: If more values are given than the layout has fields
        """
        field_count = len(cls.model_fields)
        if len(leading) > field_count:
            raise ArgumentError(f"{cls.__name__} has {field_count} fields, got {len(leading)} leading values")
        return to_range(pack(tuple(_element(value) for value in leading), prefix=cls.tupack_prefix))


def _element(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    return value
