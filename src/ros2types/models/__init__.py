from __future__ import annotations

from ros2types.models.description import (
    Field,
    FieldType,
    HashedTypeDescription,
    IndividualTypeDescription,
    TypeDescription,
    TypeNameAndHash,
)
from ros2types.models.field_type import FieldTypeId, UnknownFieldTypeError
from ros2types.models.record import TypeKind, TypeRecord

__all__ = [
    # field types
    "FieldTypeId",
    "UnknownFieldTypeError",
    # descriptions
    "Field",
    "FieldType",
    "IndividualTypeDescription",
    "TypeDescription",
    "TypeNameAndHash",
    "HashedTypeDescription",
    # records
    "TypeKind",
    "TypeRecord",
]
