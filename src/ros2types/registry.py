"""Type registry: the namespace index of loaded types plus conflict rules.

A registry is filled once by the loader (see ``ros2types.loader``) and then
handed, read-only, to the query handler.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from ros2types.errors import ConflictError
from ros2types.index import NamespaceIndex
from ros2types.schema import flatten_schema

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ros2types.models.record import TypeRecord
    from ros2types.schema import FlattenedSchema

log = structlog.get_logger()


class InsertOutcome(Enum):
    INSERTED = "inserted"
    DUPLICATE = "duplicate"  # same name and same hash already present


class TypeRegistry:
    """Index of ``TypeRecord`` keyed by full type name."""

    def __init__(self) -> None:
        self._index: NamespaceIndex[TypeRecord] = NamespaceIndex()

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[TypeRecord]:
        for _, record in self._index.items():
            yield record

    def add(self, record: TypeRecord) -> InsertOutcome:
        """Insert ``record`` unless its name is already taken.

        Re-adding a type with the same content hash is a no-op. A different hash
        under the same name raises and keeps the record already loaded.

        Raises:
            ConflictError: if another record with a different hash owns the name.
        """
        existing = self._index.get(record.full_name)
        if existing is not None:
            if existing.content_hash == record.content_hash:
                return InsertOutcome.DUPLICATE
            raise ConflictError(
                record.full_name,
                str(existing.description_path),
                str(record.description_path),
            )

        self._index.insert(record.full_name, record)
        log.debug(
            "type_loaded",
            type_name=record.full_name,
            description_path=str(record.description_path),
            definition_path=str(record.definition_path),
        )
        return InsertOutcome.INSERTED

    def get(self, full_name: str) -> TypeRecord | None:
        return self._index.get(full_name)

    def query(self, pattern: str) -> list[TypeRecord]:
        """All records whose full name matches ``pattern`` (``*``/``**`` wildcards)."""
        records = self._index.query(pattern)
        log.debug("types_matched", pattern=pattern, count=len(records))
        return records

    def flatten(self, record: TypeRecord) -> str:
        return self.flatten_schema(record).text

    def flatten_schema(self, record: TypeRecord) -> FlattenedSchema:
        return flatten_schema(self._index, record)
