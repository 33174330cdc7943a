"""Configuration file loading and caching.

Handles:
- YAML file parsing
- Environment variable overrides
- Config caching with reload support
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from shellwrapper.config.merge import merge_configs
from shellwrapper.config.paths import get_config_paths
from shellwrapper.config.schema import (
    Config,
    LoggingConfig,
    ShellConfig,
    ShellFlavorConfig,
)

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("shellwrapper.config")

_cached_config: Config | None = None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build config dict from environment variables.

    SHELLWRAPPER_LOG sets logging.file, SHELLWRAPPER_SHELL sets
    shell.default_flavor.
    """
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("SHELLWRAPPER_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    flavor = os.environ.get("SHELLWRAPPER_SHELL")
    if flavor:
        overrides.setdefault("shell", {})["default_flavor"] = flavor

    return overrides


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass."""
    defaults = ShellConfig()

    shell_data = data.get("shell") or {}
    flavors = [
        ShellFlavorConfig(
            name=str(f["name"]),
            command=str(f["command"]),
            error_redirect=f.get("error_redirect", ">&2"),
        )
        for f in shell_data.get("flavors", [])
        if isinstance(f, dict) and f.get("name") and f.get("command")
    ]
    shell = ShellConfig(
        default_flavor=shell_data.get("default_flavor", defaults.default_flavor),
        encoding=shell_data.get("encoding", defaults.encoding),
        terminator=shell_data.get("terminator", defaults.terminator),
        marker_prefix=shell_data.get("marker_prefix", defaults.marker_prefix),
        line_limit=int(shell_data.get("line_limit", defaults.line_limit)),
        flavors=flavors,
    )

    log_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=log_data.get("verbose"),
        file=log_data.get("file"),
    )

    known_keys = {"shell", "logging"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(shell=shell, logging=logging_config, extra=extra)


def load_config(session_root: str | None = None, reload: bool = False) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Project config ($session_root/.shellwrapper/config.yaml)
    3. User config
    4. System config

    Args:
        session_root: Project directory for project-level config.
        reload: Force reload even if cached.

    Returns:
        Merged Config object.
    """
    global _cached_config

    if _cached_config is not None and not reload and session_root is None:
        return _cached_config

    configs: list[dict[str, Any]] = []

    for path in get_config_paths(session_root):
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            configs.append(config_data)

    env_config = env_overrides()
    if env_config:
        configs.append(env_config)

    config = dict_to_config(merge_configs(*configs))

    # Cache only global config (no session_root)
    if session_root is None:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it on first use."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config.

    Useful for testing or forcing a reload.
    """
    global _cached_config
    _cached_config = None
