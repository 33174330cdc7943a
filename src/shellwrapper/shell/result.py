"""Captured output of a single executed command."""

from __future__ import annotations

from dataclasses import dataclass, field

NEWLINE = "\n"


def concat_lines(lines: tuple[str, ...], separator: str) -> str:
    """Join lines, appending the separator after every line (including the last)."""
    return "".join(line + separator for line in lines)


@dataclass(frozen=True)
class CommandResult:
    """Result of one command executed in a shell session.

    Attributes:
        command: The command text exactly as submitted.
        output_lines: Lines written to stdout, without line terminators.
        error_lines: Lines written to stderr, without line terminators.
    """

    command: str
    output_lines: tuple[str, ...] = ()
    error_lines: tuple[str, ...] = ()
    _joined: dict[tuple[str, str], str] = field(
        default_factory=dict, init=False, repr=False, compare=False, hash=False
    )

    def output(self, separator: str = NEWLINE) -> str:
        """Stdout as a single string, each line followed by ``separator``."""
        return self._join("output", self.output_lines, separator)

    def error(self, separator: str = NEWLINE) -> str:
        """Stderr as a single string, each line followed by ``separator``."""
        return self._join("error", self.error_lines, separator)

    def _join(self, channel: str, lines: tuple[str, ...], separator: str) -> str:
        key = (channel, separator)
        joined = self._joined.get(key)
        if joined is None:
            joined = concat_lines(lines, separator)
            self._joined[key] = joined
        return joined

    def __repr__(self) -> str:
        """Concise repr for display in a REPL."""
        return (
            f"<CommandResult {self.command!r}, {len(self.output_lines)} out, "
            f"{len(self.error_lines)} err>"
        )
