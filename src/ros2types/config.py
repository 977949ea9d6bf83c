"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (ROS2TYPES__LOGGING__LEVEL=DEBUG)
  2. ros2types.yaml         (searched in cwd, then the platform config dir)
  3. Hardcoded defaults

The config file is optional. Every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_CONFIG_FILENAME = "ros2types.yaml"
_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("ros2types")


def _find_config_file() -> str | None:
    """Return the path of the first ros2types.yaml found, or None."""
    candidates = [
        Path(_CONFIG_FILENAME),
        Path(_DEFAULT_CONFIG_DIR) / _CONFIG_FILENAME,
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class RegistrySettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Directories scanned as given, before the ament share directories.
    paths: list[str] = []
    # Also scan <prefix>/share for every entry of AMENT_PREFIX_PATH.
    use_ament_prefix_path: bool = True


class QuerySettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key_prefix: str = "@ros2_types"


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: ROS2TYPES__QUERY__KEY_PREFIX=@types
        env_prefix="ROS2TYPES__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
        extra="forbid",
    )

    registry: RegistrySettings = RegistrySettings()
    query: QuerySettings = QuerySettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
