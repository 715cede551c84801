"""Schema introspection for TupleModel classes.

This module maps the fields of a pydantic model, in declaration order, to
tuple positions, and picks the typed decoder used for each position.
"""

from __future__ import annotations

import enum
import ipaddress
import types
import uuid
from dataclasses import dataclass
from typing import Any, List, Literal, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..codec.floats import Single
from ..exceptions import SchemaError
from ..registry import USER_TYPE_REGISTRY
from ..values import UserType, Uuid64, Uuid80, Uuid96, VersionStamp

# Annotations decoded with the matching typed decoder
_DIRECT_TYPES: frozenset[Any] = frozenset(
    {
        int,
        float,
        Single,
        bool,
        str,
        bytes,
        uuid.UUID,
        Uuid64,
        Uuid80,
        Uuid96,
        VersionStamp,
        UserType,
        ipaddress.IPv4Address,
        ipaddress.IPv6Address,
    }
)

# Annotations decoded naturally and then validated by pydantic
_NATURAL_TYPES: frozenset[Any] = frozenset({Any, object, bytearray})

_UNION_TYPES = (Union, types.UnionType)


@dataclass(frozen=True)
class FieldSchema:
    """Tuple position of a single model field.

    Attributes:
        name: Field name
        position: Index of the field in the tuple
        python_type: Field annotation with Optional stripped
        optional: Whether None is accepted (packed as a null element)
        decode_as: Target type passed to the typed decoder (None for natural decoding)
        is_model: Whether the field is itself a TupleModel (packed as a nested tuple)
    """

    name: str
    position: int
    python_type: Any
    optional: bool
    decode_as: Any
    is_model: bool


class KeySchema:
    """Tuple layout of an entire model.

    Example:
        >>> schema = KeySchema.from_model(DocumentKey)
        >>> [(f.position, f.name) for f in schema.fields]
        [(0, 'tenant'), (1, 'created'), (2, 'doc_id')]
    """

    def __init__(self, model_class: Type[BaseModel]) -> None:
        """Initialize schema from a pydantic model.

        Args:
            model_class: TupleModel class to introspect
        """
        self.model_class = model_class
        self.fields: List[FieldSchema] = []
        self._introspect()

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> KeySchema:
        return cls(model_class)

    def __len__(self) -> int:
        return len(self.fields)

    def _introspect(self) -> None:
        for position, (field_name, field_info) in enumerate(self.model_class.model_fields.items()):
            self.fields.append(self._extract_field_schema(field_name, position, field_info))

    def _extract_field_schema(self, name: str, position: int, field_info: FieldInfo) -> FieldSchema:
        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")

        # Optional[T] / T | None
        optional = False
        if get_origin(annotation) in _UNION_TYPES:
            non_none_args = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(non_none_args) != 1:
                raise SchemaError(f"Field {name}: unions of several types are not supported")
            annotation = non_none_args[0]
            optional = True

        is_model = isinstance(annotation, type) and hasattr(annotation, "tupack_prefix")
        return FieldSchema(
            name=name,
            position=position,
            python_type=annotation,
            optional=optional,
            decode_as=self._decode_target(name, annotation, is_model),
            is_model=is_model,
        )

    @staticmethod
    def _decode_target(name: str, annotation: Any, is_model: bool) -> Any:
        if is_model or annotation in _DIRECT_TYPES:
            return annotation
        if annotation in _NATURAL_TYPES:
            return None

        if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
            # packed as the member value, pydantic maps the value back
            if issubclass(annotation, int):
                return int
            if issubclass(annotation, str):
                return str
            return None

        origin = get_origin(annotation)
        if origin is Literal:
            return None
        if annotation in (tuple, list) or origin in (tuple, list):
            return tuple

        for handler in USER_TYPE_REGISTRY.values():
            if handler.python_type is annotation:
                return annotation

        raise SchemaError(f"Field {name}: type {annotation!r} has no tuple encoding")
