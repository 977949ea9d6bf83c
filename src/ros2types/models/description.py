"""Models of the rosidl ``HashedTypeDescription`` JSON documents.

Mirrors ``rosidl_generator_type_description/resource/HashedTypeDescription.schema.json``.
Unknown fields are rejected at every level.
"""

from __future__ import annotations

from typing import Annotated

import pydantic
from pydantic import BaseModel, ConfigDict

from ros2types.models.field_type import FieldTypeIdField

# JSON integers only: no strings, floats or booleans.
UInt32 = Annotated[int, pydantic.Field(strict=True, ge=0, le=2**32 - 1)]


class _DescriptionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class FieldType(_DescriptionModel):
    type_id: FieldTypeIdField
    capacity: UInt32  # array/sequence bound
    string_capacity: UInt32  # bound of bounded string elements
    nested_type_name: str


class Field(_DescriptionModel):
    default_value: str | None = None
    name: str
    type: FieldType


class IndividualTypeDescription(_DescriptionModel):
    type_name: str
    fields: list[Field]


class TypeDescription(_DescriptionModel):
    type_description: IndividualTypeDescription
    referenced_type_descriptions: list[IndividualTypeDescription]


class TypeNameAndHash(_DescriptionModel):
    type_name: str
    hash_string: str


class HashedTypeDescription(_DescriptionModel):
    """Content of one ``<name>.json`` file generated next to a ``.msg/.srv/.action``."""

    type_description_msg: TypeDescription
    type_hashes: list[TypeNameAndHash]

    @property
    def type_name(self) -> str:
        return self.type_description_msg.type_description.type_name

    def hash_for(self, type_name: str) -> str | None:
        """Return the hash string listed for ``type_name``, if any."""
        for entry in self.type_hashes:
            if entry.type_name == type_name:
                return entry.hash_string
        return None
