"""Integration test fixtures.

Provides an install tree laid out like ``/opt/ros/<distro>/share`` and an
environment pointing the server subprocess at it.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture()
def install_prefix(tmp_path: Path, write_type: Callable[..., Path]) -> Path:
    """An ament prefix holding std_msgs/String and geometry_msgs Point + Pose."""
    prefix = tmp_path / "install"
    share = prefix / "share"
    write_type("std_msgs/msg/String", definition="string data\n", root=share)
    write_type("geometry_msgs/msg/Point", definition="float64 x\nfloat64 y\nfloat64 z\n", root=share)
    write_type(
        "geometry_msgs/msg/Pose",
        definition="Point position\nQuaternion orientation\n",
        references=["geometry_msgs/msg/Point", "geometry_msgs/msg/Quaternion"],
        root=share,
    )
    return prefix


@pytest.fixture()
def subprocess_env(install_prefix: Path) -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if not k.startswith("ROS2TYPES__")}
    env["AMENT_PREFIX_PATH"] = str(install_prefix)
    env["ROS2TYPES__LOGGING__FORMAT"] = "json"
    return env
