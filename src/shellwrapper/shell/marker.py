"""End-of-output marker protocol.

Every session owns one sentinel string. After each command the session asks
the shell to echo the sentinel once on stdout and once on stderr; readers
collect lines from each channel until the sentinel line shows up.

Wire format written to stdin per command::

    <command><terminator>
    echo <sentinel>
    echo <sentinel> >&2
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

DEFAULT_PREFIX = "END-"
DEFAULT_ERROR_REDIRECT = ">&2"


class EndOfStreamError(EOFError):
    """The channel closed before the sentinel line arrived."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = lines
        super().__init__(f"stream closed before end-of-output marker ({len(lines)} lines read)")


def strip_line_ending(line: str) -> str:
    """Remove a trailing ``\\n``, ``\\r\\n`` or ``\\r``."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


@dataclass(frozen=True)
class SessionMarker:
    """Sentinel bound to one session's lifetime.

    Unique with overwhelming probability within a process run, not
    cryptographically. A command that prints the sentinel itself ends its
    own output early.
    """

    value: str
    error_redirect: str = DEFAULT_ERROR_REDIRECT

    @classmethod
    def generate(
        cls, prefix: str = DEFAULT_PREFIX, error_redirect: str = DEFAULT_ERROR_REDIRECT
    ) -> SessionMarker:
        return cls(value=f"{prefix}{time.time_ns()}", error_redirect=error_redirect)

    def instructions(self) -> str:
        """Shell lines that print the sentinel on stdout, then on stderr."""
        return f"echo {self.value}\necho {self.value} {self.error_redirect}\n"

    def render(self, command: str, terminator: str) -> str:
        """Full stdin payload for one command."""
        return f"{command}{terminator}{self.instructions()}"

    def matches(self, line: str) -> bool:
        return line == self.value

    def collect(self, readline: Callable[[], bytes], encoding: str = "utf-8") -> list[str]:
        """Read lines until the sentinel, returning everything before it.

        Args:
            readline: Blocking callable returning one raw line, b"" at EOF.
            encoding: Text encoding of the channel.

        Raises:
            EndOfStreamError: If the channel closes before the sentinel.
        """
        lines: list[str] = []
        while True:
            raw = readline()
            if not raw:
                raise EndOfStreamError(lines)
            line = strip_line_ending(raw.decode(encoding, errors="replace"))
            if self.matches(line):
                return lines
            lines.append(line)

    async def acollect(
        self, readline: Callable[[], Awaitable[bytes]], encoding: str = "utf-8"
    ) -> list[str]:
        """Async variant of :meth:`collect` for asyncio stream readers."""
        lines: list[str] = []
        while True:
            raw = await readline()
            if not raw:
                raise EndOfStreamError(lines)
            line = strip_line_ending(raw.decode(encoding, errors="replace"))
            if self.matches(line):
                return lines
            lines.append(line)
