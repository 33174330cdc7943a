"""Exception types raised by shell sessions."""

from __future__ import annotations


class ShellError(Exception):
    """Base exception for shell session errors."""


class ShellStartupError(ShellError):
    """The shell process could not be spawned."""

    def __init__(self, launch_command: str, reason: str) -> None:
        self.launch_command = launch_command
        super().__init__(f"Failed to start shell '{launch_command}': {reason}")


class ShellTerminatedError(ShellError):
    """A command was submitted to a session that has already been terminated."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Shell process has already exited, cannot execute: {command}")


class ShellIOError(ShellError):
    """Writing a command or reading its output failed mid-protocol.

    The session is not marked terminated; the end-of-output bookkeeping may
    be out of sync afterwards (and a failed write kills the shell), so callers
    usually terminate the session.
    """

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        super().__init__(f"I/O failure while executing '{command}': {reason}")


class UnknownShellFlavorError(ShellError, KeyError):
    """No shell flavor is registered under the requested name."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        self.known = known
        super().__init__(f"Unknown shell flavor '{name}' (known: {', '.join(known)})")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])
