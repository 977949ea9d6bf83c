"""Locating installed interface files through ``AMENT_PREFIX_PATH``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from ros2types.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

AMENT_PREFIX_PATH = "AMENT_PREFIX_PATH"


def get_ament_share_paths(environ: Mapping[str, str] | None = None) -> list[Path]:
    """Return ``<prefix>/share`` for each prefix listed in ``AMENT_PREFIX_PATH``.

    Raises:
        ConfigError: if the variable is unset or empty, i.e. no ROS environment
            has been sourced.
    """
    environ = os.environ if environ is None else environ
    value = environ.get(AMENT_PREFIX_PATH)
    if value is None:
        raise ConfigError(
            f"{AMENT_PREFIX_PATH} environment variable is not defined. "
            "Is your ROS environment setup ?"
        )
    prefixes = [prefix for prefix in value.split(os.pathsep) if prefix]
    if not prefixes:
        raise ConfigError(
            f"{AMENT_PREFIX_PATH} environment variable is empty. "
            "Is your ROS environment correctly setup ?"
        )
    return [Path(prefix) / "share" for prefix in prefixes]
