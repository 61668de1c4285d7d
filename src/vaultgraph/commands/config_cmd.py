# src/vaultgraph/commands/config_cmd.py
"""Config command - display the effective configuration and where each value came from."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from vaultgraph.commands.base import ConfigResult, SettingInfo
from vaultgraph.config import (
    build_settings,
    find_config_file,
    get_settings_from_env,
    get_settings_from_yaml,
    load_config,
    load_env_file,
    validate_config,
)


def _get_setting_source(
    key: str,
    yaml_settings: dict[str, Any],
    env_settings: dict[str, Any],
) -> str:
    """Determine the source of a setting value."""
    if key in env_settings:
        return "env var"
    if key in yaml_settings:
        return "yaml"
    return "default"


def _display(value: Any) -> str:
    return "(not set)" if value is None else str(value)


def config(
    config_path: str | Path | None = None,
) -> ConfigResult:
    """Get current configuration settings.

    Args:
        config_path: Override config file path

    Returns:
        ConfigResult with all settings and their sources
    """
    load_env_file()
    try:
        yaml_config = load_config(config_path)
        env_settings = get_settings_from_env()
        yaml_settings = get_settings_from_yaml(yaml_config)
        settings = build_settings(yaml_config, env_settings)
    except (OSError, yaml.YAMLError, ValueError) as e:
        return ConfigResult(success=False, error=f"Invalid configuration: {e}")

    found_config_path = Path(config_path) if config_path is not None else find_config_file()

    result = ConfigResult(success=True)
    result.config_path = str(found_config_path) if found_config_path else None
    result.warnings = validate_config(yaml_config, found_config_path)

    for key, value in settings.model_dump().items():
        result.settings.append(
            SettingInfo(
                name=key,
                value=_display(value),
                source=_get_setting_source(key, yaml_settings, env_settings),
            )
        )

    return result
