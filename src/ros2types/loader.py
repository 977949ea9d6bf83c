"""Discovery and loading of interface files into a ``TypeRegistry``.

Every ``<Name>.msg``, ``<Name>.srv`` or ``<Name>.action`` file found under a
root is expected to have a ``<Name>.json`` sibling holding its rosidl
``HashedTypeDescription``. A file that cannot be loaded is logged and skipped;
a scan never stops on a single bad entry.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pydantic
import structlog

from ros2types.errors import AccessError, ConflictError, ParseError, Ros2TypesError
from ros2types.models.description import HashedTypeDescription
from ros2types.models.record import TypeKind, TypeRecord
from ros2types.registry import InsertOutcome

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from ros2types.registry import TypeRegistry

log = structlog.get_logger()

DESCRIPTION_SUFFIX = ".json"


def load_directories(registry: TypeRegistry, roots: Iterable[str | Path]) -> int:
    """Load every root in turn. Returns the number of newly inserted types."""
    root_list = list(roots)
    total = 0
    for root in root_list:
        total += load_directory(registry, root)
    log.info("all_types_loaded", roots=len(root_list), count=total)
    return total


def load_directory(registry: TypeRegistry, root: str | Path) -> int:
    """Load all interface files below ``root``. Returns the number of newly inserted types."""
    root = Path(root)
    log.debug("types_loading", root=str(root))

    count = 0
    for definition_path, kind in iter_definition_files(root):
        try:
            outcome = load_type_file(registry, definition_path, kind)
        except ConflictError as e:
            log.warning(
                "type_conflict",
                type_name=e.type_name,
                existing_path=e.existing_path,
                rejected_path=e.rejected_path,
            )
            continue
        except Ros2TypesError as e:
            log.warning(
                "type_load_failed",
                path=str(definition_path),
                code=e.code.value,
                reason=e.message,
            )
            continue

        if outcome is InsertOutcome.INSERTED:
            count += 1

    log.info("types_loaded", root=str(root), count=count)
    return count


def iter_definition_files(root: Path) -> Iterator[tuple[Path, TypeKind]]:
    """Yield ``(path, kind)`` for interface files below ``root``, following symlinks.

    Unreadable directories are logged and skipped. A directory reached twice
    (symlink cycle or alias) is only walked once.
    """
    visited: set[tuple[int, int]] = set()

    def on_error(error: OSError) -> None:
        log.warning("walk_error", path=error.filename, error=str(error))

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=True):
        try:
            stat = os.stat(dirpath)
        except OSError as e:
            on_error(e)
            dirnames[:] = []
            continue

        identity = (stat.st_dev, stat.st_ino)
        if identity in visited:
            log.debug("directory_already_visited", path=dirpath)
            dirnames[:] = []
            continue
        visited.add(identity)

        # deterministic walk order
        dirnames.sort()
        for filename in sorted(filenames):
            kind = TypeKind.from_extension(os.path.splitext(filename)[1])
            if kind is None:
                continue
            path = Path(dirpath) / filename
            if path.is_file():
                yield path, kind


def load_type_file(registry: TypeRegistry, definition_path: Path, kind: TypeKind) -> InsertOutcome:
    """Load one definition file and its JSON description into ``registry``.

    Raises:
        AccessError: if the description is missing or either file is unreadable.
        ParseError: if the description is not valid JSON or breaks its schema.
        InvalidTypeError: if the described type name or hash list is inconsistent.
        ConflictError: if a different version of the type is already loaded.
    """
    description_path = definition_path.with_suffix(DESCRIPTION_SUFFIX)
    if not description_path.is_file():
        raise AccessError(f"No JSON description found for {definition_path}")

    description = read_description(description_path)
    definition_text = _read_text(definition_path)

    record = TypeRecord.build(
        description,
        kind,
        definition_text=definition_text,
        description_path=description_path,
        definition_path=definition_path,
    )
    return registry.add(record)


def read_description(path: Path) -> HashedTypeDescription:
    """Parse a rosidl ``HashedTypeDescription`` JSON file."""
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise AccessError(f"Failed to read JSON file {path}: {e}") from e

    try:
        return HashedTypeDescription.model_validate_json(raw)
    except pydantic.ValidationError as e:
        raise ParseError(f"Failed to parse JSON file {path}: {e}") from e


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise AccessError(f"Failed to read definition file {path}: {e}") from e
