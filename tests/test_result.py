"""Tests for CommandResult."""

from __future__ import annotations

import dataclasses

import pytest

from shellwrapper.shell.result import CommandResult, concat_lines


class TestCommandResult:
    """Joined output and immutability."""

    def test_output_appends_separator_to_each_line(self):
        result = CommandResult("cmd", ("FOO", "BAR"))
        assert result.output() == "FOO\nBAR\n"
        assert result.output(", ") == "FOO, BAR, "

    def test_error(self):
        result = CommandResult("cmd", error_lines=("oops",))
        assert result.error() == "oops\n"
        assert result.output() == ""

    def test_joined_forms_are_cached(self):
        result = CommandResult("cmd", ("a", "b"))
        assert result.output() is result.output()
        assert result.output("|") == "a|b|"
        assert result.output() == "a\nb\n"

    def test_frozen(self):
        result = CommandResult("cmd")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.command = "other"  # type: ignore[misc]

    def test_equality_ignores_cache(self):
        first = CommandResult("cmd", ("a",))
        second = CommandResult("cmd", ("a",))
        first.output()
        assert first == second

    def test_repr(self):
        result = CommandResult("echo hi", ("hi",))
        assert repr(result) == "<CommandResult 'echo hi', 1 out, 0 err>"

    def test_concat_lines_empty(self):
        assert concat_lines((), "\n") == ""
