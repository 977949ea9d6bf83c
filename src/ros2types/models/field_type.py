"""Wire-level field type codes of ROS 2 type descriptions.

Values follow the ``FIELD_TYPE_*`` constants of
``rosidl_generator_type_description``. Codes are laid out in four blocks of
48 with identical offsets: scalars from 1, fixed-size arrays from 49, bounded
sequences from 97 and unbounded sequences from 145.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated

from pydantic import BeforeValidator, PlainSerializer

_BLOCK_SIZE = 48


class UnknownFieldTypeError(ValueError):
    """Raised when a name or code does not match any ``FieldTypeId``."""


class FieldTypeId(IntEnum):
    NotSet = 0

    # Nested type defined in other .msg/.idl files.
    NestedType = 1

    Int8 = 2
    UInt8 = 3
    Int16 = 4
    UInt16 = 5
    Int32 = 6
    UInt32 = 7
    Int64 = 8
    UInt64 = 9
    Float = 10
    Double = 11
    LongDouble = 12
    Char = 13
    WChar = 14
    Boolean = 15
    Byte = 16
    String = 17
    WString = 18
    FixedString = 19
    FixedWString = 20
    BoundedString = 21
    BoundedWString = 22

    # Fixed size arrays
    NestedTypeArray = 49
    Int8Array = 50
    UInt8Array = 51
    Int16Array = 52
    UInt16Array = 53
    Int32Array = 54
    UInt32Array = 55
    Int64Array = 56
    UInt64Array = 57
    FloatArray = 58
    DoubleArray = 59
    LongDoubleArray = 60
    CharArray = 61
    WCharArray = 62
    BooleanArray = 63
    ByteArray = 64
    StringArray = 65
    WStringArray = 66
    FixedStringArray = 67
    FixedWStringArray = 68
    BoundedStringArray = 69
    BoundedWStringArray = 70

    # Bounded sequences
    NestedTypeBoundedSequence = 97
    Int8BoundedSequence = 98
    UInt8BoundedSequence = 99
    Int16BoundedSequence = 100
    UInt16BoundedSequence = 101
    Int32BoundedSequence = 102
    UInt32BoundedSequence = 103
    Int64BoundedSequence = 104
    UInt64BoundedSequence = 105
    FloatBoundedSequence = 106
    DoubleBoundedSequence = 107
    LongDoubleBoundedSequence = 108
    CharBoundedSequence = 109
    WCharBoundedSequence = 110
    BooleanBoundedSequence = 111
    ByteBoundedSequence = 112
    StringBoundedSequence = 113
    WStringBoundedSequence = 114
    FixedStringBoundedSequence = 115
    FixedWStringBoundedSequence = 116
    BoundedStringBoundedSequence = 117
    BoundedWStringBoundedSequence = 118

    # Unbounded sequences
    NestedTypeUnboundedSequence = 145
    Int8UnboundedSequence = 146
    UInt8UnboundedSequence = 147
    Int16UnboundedSequence = 148
    UInt16UnboundedSequence = 149
    Int32UnboundedSequence = 150
    UInt32UnboundedSequence = 151
    Int64UnboundedSequence = 152
    UInt64UnboundedSequence = 153
    FloatUnboundedSequence = 154
    DoubleUnboundedSequence = 155
    LongDoubleUnboundedSequence = 156
    CharUnboundedSequence = 157
    WCharUnboundedSequence = 158
    BooleanUnboundedSequence = 159
    ByteUnboundedSequence = 160
    StringUnboundedSequence = 161
    WStringUnboundedSequence = 162
    FixedStringUnboundedSequence = 163
    FixedWStringUnboundedSequence = 164
    BoundedStringUnboundedSequence = 165
    BoundedWStringUnboundedSequence = 166

    @classmethod
    def parse(cls, value: str | int | FieldTypeId) -> FieldTypeId:
        """Coerce a case-insensitive variant name or a numeric code.

        Raises:
            UnknownFieldTypeError: if ``value`` matches no variant. The message
                lists every valid name.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            member = _BY_NAME.get(value.lower())
        elif isinstance(value, int) and not isinstance(value, bool):
            member = _BY_CODE.get(value)
        else:
            member = None
        if member is None:
            raise UnknownFieldTypeError(
                f"unknown field type {value!r}, expected one of: {', '.join(VARIANT_NAMES)}"
            )
        return member

    def to_name(self) -> str:
        return self.name

    def to_code(self) -> int:
        return int(self.value)

    def is_nested(self) -> bool:
        return self is not FieldTypeId.NotSet and self.value % _BLOCK_SIZE == 1

    def is_array(self) -> bool:
        return self.value // _BLOCK_SIZE == 1

    def is_bounded_sequence(self) -> bool:
        return self.value // _BLOCK_SIZE == 2

    def is_unbounded_sequence(self) -> bool:
        return self.value // _BLOCK_SIZE == 3

    def element_kind(self) -> FieldTypeId:
        """Return the scalar variant at the same offset, e.g. Int8Array -> Int8."""
        if self is FieldTypeId.NotSet:
            return self
        return _BY_CODE[self.value % _BLOCK_SIZE]


VARIANT_NAMES: tuple[str, ...] = tuple(member.name for member in FieldTypeId)

_BY_NAME: dict[str, FieldTypeId] = {member.name.lower(): member for member in FieldTypeId}
_BY_CODE: dict[int, FieldTypeId] = {member.value: member for member in FieldTypeId}


FieldTypeIdField = Annotated[
    FieldTypeId,
    BeforeValidator(FieldTypeId.parse),
    PlainSerializer(lambda member: member.name, return_type=str),
]
"""``FieldTypeId`` as a model field: parsed from a name or code, dumped as its name."""
