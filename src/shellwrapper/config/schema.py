"""Configuration schema dataclasses for shellwrapper.

Defines the structure of configuration at all levels (system, user, project).
All fields have defaults to support partial configs that merge together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ShellFlavorConfig:
    """A user-defined shell flavor.

    Example config.yaml:
        shell:
          flavors:
            - name: zsh
              command: "zsh -s"
    """

    name: str  # Lookup key, e.g. "zsh"
    command: str  # Launch command, e.g. "zsh -s"
    error_redirect: str = ">&2"  # Appended to the stderr marker echo


@dataclass
class ShellConfig:
    """Shell session defaults."""

    default_flavor: str = "bash"
    encoding: str = "utf-8"
    terminator: str = "\n"  # Written after each command
    marker_prefix: str = "END-"  # Sentinel is prefix + nanosecond timestamp
    line_limit: int = 1024 * 1024  # Max line length for async sessions
    flavors: list[ShellFlavorConfig] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    shell: ShellConfig = field(default_factory=ShellConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Unknown top-level sections are kept for extensions
    extra: dict[str, Any] = field(default_factory=dict)
