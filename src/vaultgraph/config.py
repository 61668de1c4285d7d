# src/vaultgraph/config.py
"""Configuration loading utilities for vaultgraph.

This module provides configuration loading that can be used by:
- CLI commands
- External applications using vaultgraph as a library

It handles:
- Finding and loading vaultgraph.yaml config files
- Loading .env files for RPC and endpoint secrets
- Building Settings objects from multiple sources
- Creating GraphExplorer instances from configuration
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from vaultgraph.explorer import GraphExplorer
    from vaultgraph.settings import Settings

CONFIG_FILES = ["vaultgraph.yaml", "vaultgraph.yml", ".vaultgraphrc"]
ENV_FILE = ".env"
ENV_PREFIX = "VAULTGRAPH_"


@dataclass
class ConfigError:
    """Error during configuration loading."""

    message: str
    suggestion: str | None = None


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Load environment variables from a .env file if it exists.

    Existing environment variables are never overridden.

    Args:
        env_path: Path to .env file (default: .env in current directory)
    """
    path = Path(env_path)
    if not path.exists():
        return

    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip("'\"")
                if key not in os.environ:
                    os.environ[key] = value


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find a configuration file in the start directory or its parents.

    Args:
        start_dir: Directory to start searching from (default: cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir or Path.cwd()
    for _ in range(10):  # Limit search depth
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists():
                return config_path
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# Connection keys live at the root, behavior under 'settings:'
CONNECTION_KEYS = {"endpoint", "rpc_url", "vault_address", "ipfs_gateway"}
VALID_ROOT_KEYS = CONNECTION_KEYS | {"settings"}

VALID_SETTINGS_KEYS = {
    "batch_size",
    "max_records",
    "request_timeout",
    "timeout",  # alias
    "default_curve_id",
    "unit_symbol",
    "strict",
}

_SETTINGS_ALIASES = {"timeout": "request_timeout"}

_INT_KEYS = {"batch_size", "max_records", "default_curve_id"}
_FLOAT_KEYS = {"request_timeout"}
_BOOL_KEYS = {"strict"}
_STR_KEYS = CONNECTION_KEYS | {"unit_symbol"}


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """Validate config and return warnings about unknown keys.

    Args:
        config: The loaded configuration dictionary
        config_path: Path to config file (for error messages)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    unknown_root = set(config.keys()) - VALID_ROOT_KEYS
    if unknown_root:
        path_str = str(config_path) if config_path else "config"
        warnings.append(f"Unknown config keys in {path_str}: {', '.join(sorted(unknown_root))}")

    settings = config.get("settings", {})
    if isinstance(settings, dict):
        unknown_settings = set(settings.keys()) - VALID_SETTINGS_KEYS
        if unknown_settings:
            warnings.append(f"Unknown settings keys: {', '.join(sorted(unknown_settings))}")
    elif settings is not None:
        warnings.append("'settings' must be a mapping")

    return warnings


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Configuration dictionary (empty if no config found)
    """
    config_path = Path(config_path) if config_path is not None else find_config_file()

    if config_path is None:
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        return {}
    return config


def _safe_int(value: str | None) -> int | None:
    """Parse int from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _safe_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def get_settings_from_env() -> dict[str, Any]:
    """Read settings from VAULTGRAPH_* environment variables.

    Returns values that were explicitly set (not defaults), so env vars
    override YAML only where present. Unparseable numbers are ignored.

    Returns:
        Dictionary of setting name -> value for explicitly set env vars
    """
    result: dict[str, Any] = {}

    for key in _STR_KEYS:
        env_key = ENV_PREFIX + key.upper()
        if env_key in os.environ:
            result[key] = os.environ[env_key] or None
    for key in _INT_KEYS:
        if (val := _safe_int(os.environ.get(ENV_PREFIX + key.upper()))) is not None:
            result[key] = val
    for key in _FLOAT_KEYS:
        if (fval := _safe_float(os.environ.get(ENV_PREFIX + key.upper()))) is not None:
            result[key] = fval
    for key in _BOOL_KEYS:
        env_key = ENV_PREFIX + key.upper()
        if env_key in os.environ:
            result[key] = os.environ[env_key].lower() in ("true", "1", "yes")

    # Empty values mean unset for keys that have a default
    for key in ("unit_symbol", "ipfs_gateway"):
        if result.get(key) is None:
            result.pop(key, None)

    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract settings from a YAML config.

    Connection keys are read from the root, behavior from the 'settings:' section.

    Args:
        config: The loaded YAML configuration

    Returns:
        Dictionary of setting name -> value
    """
    result: dict[str, Any] = {k: config[k] for k in CONNECTION_KEYS if config.get(k) is not None}

    yaml_settings = config.get("settings", {}) or {}
    if not isinstance(yaml_settings, dict):
        return result

    for yaml_key, value in yaml_settings.items():
        if yaml_key in VALID_SETTINGS_KEYS:
            result[_SETTINGS_ALIASES.get(yaml_key, yaml_key)] = value

    return result


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
    **overrides: Any,
) -> Settings:
    """Build a Settings object from YAML config, env vars and explicit overrides.

    Precedence (highest to lowest):
    1. Explicit overrides (CLI flags), where not None
    2. Environment variables
    3. YAML config
    4. Settings class defaults

    Args:
        config: YAML configuration dictionary
        env_settings: Environment variable overrides (if None, reads from env)
        **overrides: Explicit values; None means "not given"

    Returns:
        Configured Settings instance
    """
    from vaultgraph.settings import Settings

    config = config or {}
    yaml_settings = get_settings_from_yaml(config)
    env_settings = env_settings if env_settings is not None else get_settings_from_env()
    explicit = {k: v for k, v in overrides.items() if v is not None}

    merged = {**yaml_settings, **env_settings, **explicit}
    return Settings(**merged)


def get_settings(
    config_path: str | Path | None = None,
    **overrides: Any,
) -> Settings:
    """Load .env, YAML and env vars and build Settings.

    Args:
        config_path: Override config file path
        **overrides: Explicit values taking precedence over every source
    """
    load_env_file()
    config = load_config(config_path)
    return build_settings(config, **overrides)


def create_explorer(settings: Settings) -> GraphExplorer:
    """Create a GraphExplorer from settings.

    Raises:
        ValueError: If no endpoint is configured.
    """
    from vaultgraph.explorer import GraphExplorer

    return GraphExplorer.from_settings(settings)


def get_explorer(
    config_path: str | Path | None = None,
    **overrides: Any,
) -> GraphExplorer | ConfigError:
    """Create a GraphExplorer based on configuration.

    Args:
        config_path: Override config file path
        **overrides: Explicit setting values (e.g. endpoint from a CLI flag)

    Returns:
        Configured GraphExplorer, or ConfigError if configuration is invalid
    """
    try:
        settings = get_settings(config_path, **overrides)
    except (OSError, yaml.YAMLError, ValueError) as e:
        return ConfigError(message=f"Invalid configuration: {e}")

    if not settings.endpoint:
        return ConfigError(
            message="No query service endpoint configured.",
            suggestion=(
                "Set 'endpoint' in vaultgraph.yaml, export VAULTGRAPH_ENDPOINT, "
                "or pass --endpoint"
            ),
        )

    try:
        return create_explorer(settings)
    except ImportError as e:
        return ConfigError(
            message=str(e),
            suggestion="Install the web3 extra or unset rpc_url/vault_address",
        )
