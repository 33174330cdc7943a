"""Interactive shell sessions.

Provides ShellSession (blocking) and AsyncShellSession (asyncio), both
running commands in one long-lived shell process and splitting its output
into per-command results with an end-of-output marker.
"""

from shellwrapper.shell.async_session import AsyncShellSession
from shellwrapper.shell.factory import create_async_session, create_session
from shellwrapper.shell.flavors import BASH, SH, ShellFlavor, get_flavor, list_flavors
from shellwrapper.shell.marker import SessionMarker
from shellwrapper.shell.result import CommandResult
from shellwrapper.shell.session import ShellSession

__all__ = [
    "AsyncShellSession",
    "BASH",
    "CommandResult",
    "SH",
    "SessionMarker",
    "ShellFlavor",
    "ShellSession",
    "create_async_session",
    "create_session",
    "get_flavor",
    "list_flavors",
]
