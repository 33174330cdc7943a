"""Configuration management for shellwrapper.

Provides hierarchical YAML-based configuration with:
- System-level config (/etc/shellwrapper/ or %PROGRAMDATA%)
- User-level config (~/.config/shellwrapper/, ~/.shellwrapper/ or %APPDATA%)
- Project-level config ($session_root/.shellwrapper/)
- Environment variable overrides (highest priority)

Example usage:
    from shellwrapper.config import load_config

    config = load_config(session_root="/path/to/project")
    print(config.shell.default_flavor)
"""

from shellwrapper.config.loader import (
    get_config,
    load_config,
    reset_config,
)
from shellwrapper.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_system_config_path,
    get_user_config_path,
)
from shellwrapper.config.schema import (
    Config,
    LoggingConfig,
    ShellConfig,
    ShellFlavorConfig,
)

__all__ = [
    # Main API
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    # Schema types
    "ShellConfig",
    "ShellFlavorConfig",
    "LoggingConfig",
    # Path utilities
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
    "get_project_config_path",
]
