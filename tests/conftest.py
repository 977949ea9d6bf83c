"""Shared fixtures: writing interface files to disk and building records in memory."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from ros2types.models.description import HashedTypeDescription
from ros2types.models.record import TypeKind, TypeRecord
from ros2types.registry import TypeRegistry

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def fake_hash(type_name: str, salt: str = "") -> str:
    return "RIHS01_" + hashlib.sha256(f"{type_name}{salt}".encode()).hexdigest()


def string_field(name: str = "data") -> dict[str, Any]:
    return {
        "name": name,
        "type": {"type_id": 17, "capacity": 0, "string_capacity": 0, "nested_type_name": ""},
        "default_value": "",
    }


def description_dict(
    type_name: str,
    references: Sequence[str] = (),
    hash_string: str | None = None,
) -> dict[str, Any]:
    """A rosidl HashedTypeDescription document for ``type_name``."""
    return {
        "type_description_msg": {
            "type_description": {"type_name": type_name, "fields": [string_field()]},
            "referenced_type_descriptions": [
                {"type_name": ref, "fields": [string_field()]} for ref in references
            ],
        },
        "type_hashes": [
            {"type_name": type_name, "hash_string": hash_string or fake_hash(type_name)},
            *({"type_name": ref, "hash_string": fake_hash(ref)} for ref in references),
        ],
    }


@pytest.fixture()
def make_description() -> Callable[..., dict[str, Any]]:
    return description_dict


@pytest.fixture()
def write_type(tmp_path: Path) -> Callable[..., Path]:
    """Write ``<pkg>/<kind>/<Name>.<kind>`` and its ``.json`` below a root (tmp_path by default).

    Returns the definition file path.
    """

    def _write(
        full_name: str,
        definition: str = "string data\n",
        references: Sequence[str] = (),
        hash_string: str | None = None,
        root: Path | None = None,
    ) -> Path:
        package, kind, name = full_name.split("/")
        directory = (root or tmp_path) / package / kind
        directory.mkdir(parents=True, exist_ok=True)
        definition_path = directory / f"{name}.{kind}"
        definition_path.write_text(definition, encoding="utf-8")
        (directory / f"{name}.json").write_text(
            json.dumps(description_dict(full_name, references, hash_string)), encoding="utf-8"
        )
        return definition_path

    return _write


@pytest.fixture()
def make_record() -> Callable[..., TypeRecord]:
    """Build a ``TypeRecord`` without touching the filesystem."""

    def _make(
        full_name: str,
        definition: str = "string data\n",
        references: Sequence[str] = (),
        hash_string: str | None = None,
        description_path: str | None = None,
    ) -> TypeRecord:
        kind = TypeKind(full_name.split("/")[1])
        description = HashedTypeDescription.model_validate(
            description_dict(full_name, references, hash_string)
        )
        base = Path("/opt/ros/share") / full_name
        return TypeRecord.build(
            description,
            kind,
            definition_text=definition,
            description_path=Path(description_path) if description_path else base.with_suffix(".json"),
            definition_path=base.with_suffix(f".{kind.value}"),
        )

    return _make


@pytest.fixture()
def registry() -> TypeRegistry:
    return TypeRegistry()
