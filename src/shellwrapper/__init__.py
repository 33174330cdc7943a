"""shellwrapper: run commands in a persistent shell and capture their output."""

__version__ = "0.1.0"

# Public API
from shellwrapper.config import Config, get_config, load_config
from shellwrapper.errors import (
    ShellError,
    ShellIOError,
    ShellStartupError,
    ShellTerminatedError,
    UnknownShellFlavorError,
)
from shellwrapper.shell import (
    BASH,
    SH,
    AsyncShellSession,
    CommandResult,
    ShellFlavor,
    ShellSession,
    create_async_session,
    create_session,
)

__all__ = [
    # Main entry points
    "create_session",
    "create_async_session",
    "ShellSession",
    "AsyncShellSession",
    "CommandResult",
    # Flavors
    "ShellFlavor",
    "BASH",
    "SH",
    # Errors
    "ShellError",
    "ShellStartupError",
    "ShellTerminatedError",
    "ShellIOError",
    "UnknownShellFlavorError",
    # Config
    "Config",
    "load_config",
    "get_config",
]
