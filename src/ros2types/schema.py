"""Flattened schema export.

Builds the single-text schema that rosbag2 stores for a topic type: the type's
own definition followed by the definition of each referenced type, each one
introduced by a separator line and a ``MSG: <package>/<Name>`` header. See
rosbag2_cpp ``LocalMessageDefinitionSource`` for the consumer side.

Referenced types are emitted in the order the type description lists them and
are not deduplicated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from ros2types.index import NamespaceIndex
    from ros2types.models.record import TypeRecord

log = structlog.get_logger()

SEPARATOR = "\n" + "=" * 80 + "\n"


@dataclass(frozen=True, slots=True)
class FlattenedSchema:
    text: str
    missing: tuple[str, ...] = ()  # referenced type names absent from the index


def flatten_schema(index: NamespaceIndex[TypeRecord], record: TypeRecord) -> FlattenedSchema:
    """Concatenate ``record``'s definition with those of its referenced types.

    A referenced type missing from ``index`` is logged, listed in
    ``FlattenedSchema.missing`` and left out of the text.
    """
    parts = [record.definition_text]
    missing: list[str] = []

    for dependency in record.description.type_description_msg.referenced_type_descriptions:
        found = index.get(dependency.type_name)
        if found is None:
            log.warning(
                "missing_dependency",
                type_name=record.full_name,
                dependency=dependency.type_name,
            )
            missing.append(dependency.type_name)
            continue

        parts.append(SEPARATOR)
        parts.append(f"{found.kind.name}: {found.short_type_name}\n")
        parts.append(found.definition_text)

    return FlattenedSchema(text="".join(parts), missing=tuple(missing))
