from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from ros2types.ament import get_ament_share_paths
from ros2types.config import Settings
from ros2types.loader import load_directories
from ros2types.query import QueryHandler
from ros2types.registry import TypeRegistry

log = structlog.get_logger()


@dataclass
class AppState:
    """Everything a running server needs, built once at startup."""

    settings: Settings
    registry: TypeRegistry
    handler: QueryHandler


def registry_roots(settings: Settings) -> list[Path]:
    """Configured directories, then the ament share directories if enabled.

    Raises:
        ConfigError: if ament lookup is enabled but ``AMENT_PREFIX_PATH`` is unusable.
    """
    roots = [Path(path) for path in settings.registry.paths]
    if settings.registry.use_ament_prefix_path:
        roots.extend(get_ament_share_paths())
    return roots


def build_state(settings: Settings) -> AppState:
    registry = TypeRegistry()
    load_directories(registry, registry_roots(settings))
    log.info("registry_ready", total=len(registry))
    return AppState(
        settings=settings,
        registry=registry,
        handler=QueryHandler(registry, key_prefix=settings.query.key_prefix),
    )
