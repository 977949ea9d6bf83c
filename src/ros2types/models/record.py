from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from ros2types.errors import InvalidKeyError, InvalidTypeError
from ros2types.index import split_key
from ros2types.models.description import HashedTypeDescription


class TypeKind(str, Enum):
    """Structural category of an interface file, valued by its kind tag."""

    MSG = "msg"  # plain message definition
    SRV = "srv"
    ACTION = "action"

    @classmethod
    def from_extension(cls, extension: str) -> TypeKind | None:
        """Map ``.msg``/``msg`` style extensions to a kind, ``None`` if unrelated.

        Matching is case-sensitive: ``Foo.MSG`` is not an interface file.
        """
        try:
            return cls(extension.lstrip("."))
        except ValueError:
            return None


class TypeRecord(BaseModel):
    """One loaded interface type. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    full_name: str  # e.g. "std_msgs/msg/String"
    namespace: str  # e.g. "std_msgs"
    short_name: str  # e.g. "String"
    kind: TypeKind
    description: HashedTypeDescription
    content_hash: str
    description_path: Path
    definition_path: Path
    definition_text: str

    @classmethod
    def build(
        cls,
        description: HashedTypeDescription,
        kind: TypeKind,
        definition_text: str,
        description_path: Path,
        definition_path: Path,
    ) -> TypeRecord:
        """Validate a parsed description against its file kind and build the record.

        Raises:
            InvalidTypeError: if the self type name is not
                ``<package>/<kind>/<name>``, its kind segment does not match
                ``kind``, or no hash is listed for it.
        """
        full_name = description.type_name
        try:
            segments = split_key(full_name)
        except InvalidKeyError as e:
            raise InvalidTypeError(
                f"Invalid type name {full_name!r} in {description_path}: {e.message}"
            ) from e

        if len(segments) != 3:
            raise InvalidTypeError(
                f"Invalid type name format: {full_name}. Expected format is "
                "<package>/<kind>/<name>, e.g. std_msgs/msg/String"
            )
        namespace, kind_tag, short_name = segments

        if kind_tag.lower() != kind.value:
            raise InvalidTypeError(
                f"Type kind mismatch: expected {kind.value!r}, found {kind_tag!r} "
                f"in type name {full_name}"
            )

        content_hash = description.hash_for(full_name)
        if content_hash is None:
            raise InvalidTypeError(f"No hash found for type {full_name} in {description_path}")

        return cls(
            full_name=full_name,
            namespace=namespace,
            short_name=short_name,
            kind=kind,
            description=description,
            content_hash=content_hash,
            description_path=description_path,
            definition_path=definition_path,
            definition_text=definition_text,
        )

    @property
    def short_type_name(self) -> str:
        """``std_msgs/msg/String`` -> ``std_msgs/String``."""
        return f"{self.namespace}/{self.short_name}"
