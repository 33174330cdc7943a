"""Tests for the end-of-output marker protocol."""

from __future__ import annotations

import asyncio
import io

import pytest

from shellwrapper.shell.compose import echo_literal, pipe
from shellwrapper.shell.marker import EndOfStreamError, SessionMarker, strip_line_ending


class TestSessionMarker:
    """Sentinel generation and the stdin wire format."""

    def test_generate_uses_prefix(self):
        marker = SessionMarker.generate("MARK-")
        assert marker.value.startswith("MARK-")
        assert marker.value[len("MARK-"):].isdigit()

    def test_instructions(self):
        marker = SessionMarker("END-1")
        assert marker.instructions() == "echo END-1\necho END-1 >&2\n"

    def test_custom_error_redirect(self):
        marker = SessionMarker("END-1", error_redirect="1>&2")
        assert marker.instructions().endswith("echo END-1 1>&2\n")

    def test_render(self):
        marker = SessionMarker("END-1")
        assert marker.render("ls", "\n") == "ls\necho END-1\necho END-1 >&2\n"

    def test_matches_exact_line_only(self):
        marker = SessionMarker("END-1")
        assert marker.matches("END-1")
        assert not marker.matches(" END-1")
        assert not marker.matches("END-12")


class TestCollect:
    """Reading a channel up to the sentinel."""

    def test_stops_at_marker(self):
        marker = SessionMarker("END-1")
        stream = io.BytesIO(b"a\nb\r\nEND-1\nnext\nEND-1\n")

        assert marker.collect(stream.readline) == ["a", "b"]
        assert marker.collect(stream.readline) == ["next"]

    def test_empty_output(self):
        marker = SessionMarker("END-1")
        assert marker.collect(io.BytesIO(b"END-1\n").readline) == []

    def test_command_echoing_marker_misfires(self):
        marker = SessionMarker("END-1")
        stream = io.BytesIO(b"before\nEND-1\nafter\nEND-1\n")
        assert marker.collect(stream.readline) == ["before"]

    def test_eof_before_marker(self):
        marker = SessionMarker("END-1")
        with pytest.raises(EndOfStreamError) as exc_info:
            marker.collect(io.BytesIO(b"partial\n").readline)
        assert exc_info.value.lines == ["partial"]

    def test_undecodable_bytes_replaced(self):
        marker = SessionMarker("END-1")
        lines = marker.collect(io.BytesIO(b"caf\xe9\nEND-1\n").readline)
        assert lines == ["caf\ufffd"]

    @pytest.mark.asyncio
    async def test_acollect(self):
        marker = SessionMarker("END-1")
        reader = asyncio.StreamReader()
        reader.feed_data(b"x\ny\nEND-1\n")
        reader.feed_eof()

        assert await marker.acollect(reader.readline) == ["x", "y"]
        with pytest.raises(EndOfStreamError):
            await marker.acollect(reader.readline)


class TestHelpers:
    """Line handling and command composition."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("a\n", "a"), ("a\r\n", "a"), ("a", "a"), ("\n", ""), ("a\r", "a")],
    )
    def test_strip_line_ending(self, raw, expected):
        assert strip_line_ending(raw) == expected

    def test_pipe(self):
        assert pipe("ls", "wc -l") == "ls | wc -l"

    def test_echo_literal_does_not_escape(self):
        assert echo_literal("it's") == "echo 'it's'"
