"""Unit tests for ros2types.schema (flattened schema export)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from structlog.testing import capture_logs

from ros2types.schema import SEPARATOR

if TYPE_CHECKING:
    from collections.abc import Callable

    from ros2types.models.record import TypeRecord
    from ros2types.registry import TypeRegistry


def test_separator_shape() -> None:
    assert SEPARATOR == "\n" + "=" * 80 + "\n"


def test_type_without_dependencies(
    registry: TypeRegistry, make_record: Callable[..., TypeRecord]
) -> None:
    record = make_record("std_msgs/msg/String", definition="string data\n")
    registry.add(record)

    schema = registry.flatten_schema(record)
    assert schema.text == "string data\n"
    assert schema.missing == ()


def test_dependencies_in_declared_order(
    registry: TypeRegistry, make_record: Callable[..., TypeRecord]
) -> None:
    pose = make_record(
        "geometry_msgs/msg/Pose",
        definition="Point position\nQuaternion orientation\n",
        references=["geometry_msgs/msg/Point", "geometry_msgs/msg/Quaternion"],
    )
    registry.add(pose)
    registry.add(make_record("geometry_msgs/msg/Quaternion", definition="float64 w\n"))
    registry.add(make_record("geometry_msgs/msg/Point", definition="float64 x\n"))

    assert registry.flatten(pose) == (
        "Point position\nQuaternion orientation\n"
        + SEPARATOR
        + "MSG: geometry_msgs/Point\n"
        + "float64 x\n"
        + SEPARATOR
        + "MSG: geometry_msgs/Quaternion\n"
        + "float64 w\n"
    )


def test_missing_dependency_is_skipped_and_logged(
    registry: TypeRegistry, make_record: Callable[..., TypeRecord]
) -> None:
    a = make_record("pkg/msg/A", definition="B b\nC c\n", references=["pkg/msg/B", "pkg/msg/C"])
    registry.add(a)
    registry.add(make_record("pkg/msg/B", definition="int32 x\n"))

    with capture_logs() as logs:
        schema = registry.flatten_schema(a)

    assert schema.text == "B b\nC c\n" + SEPARATOR + "MSG: pkg/B\n" + "int32 x\n"
    assert schema.missing == ("pkg/msg/C",)
    warnings = [entry for entry in logs if entry["log_level"] == "warning"]
    assert len(warnings) == 1
    assert warnings[0]["event"] == "missing_dependency"
    assert warnings[0]["dependency"] == "pkg/msg/C"
    assert warnings[0]["type_name"] == "pkg/msg/A"


def test_repeated_references_are_not_deduplicated(
    registry: TypeRegistry, make_record: Callable[..., TypeRecord]
) -> None:
    a = make_record("pkg/msg/A", definition="a\n", references=["pkg/msg/B", "pkg/msg/B"])
    registry.add(a)
    registry.add(make_record("pkg/msg/B", definition="b\n"))

    text = registry.flatten(a)
    assert text.count("MSG: pkg/B\n") == 2


def test_header_uses_dependency_kind(
    registry: TypeRegistry, make_record: Callable[..., TypeRecord]
) -> None:
    a = make_record("pkg/action/Move", definition="goal\n", references=["pkg/srv/Plan"])
    registry.add(a)
    registry.add(make_record("pkg/srv/Plan", definition="request\n---\nresponse\n"))

    assert registry.flatten(a) == "goal\n" + SEPARATOR + "SRV: pkg/Plan\nrequest\n---\nresponse\n"
