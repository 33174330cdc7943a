"""Helpers for building piped command lines."""

from __future__ import annotations


def pipe(producer: str, consumer: str) -> str:
    """Join two commands with a shell pipe."""
    return f"{producer} | {consumer}"


def echo_literal(message: str) -> str:
    """An ``echo`` of ``message`` wrapped in single quotes.

    Embedded single quotes are not escaped; such a message yields a
    malformed command.
    """
    return f"echo '{message}'"
