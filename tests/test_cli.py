"""Tests for the command-line interface."""

from __future__ import annotations

import io

import pytest

from shellwrapper.cli import create_parser, main, run_commands
from shellwrapper.config import Config, ShellConfig
from shellwrapper.logging import get_logger


class TestCli:
    """Argument parsing and command execution."""

    def test_parser_defaults(self):
        args = create_parser().parse_args([])
        assert args.shell is None
        assert args.commands == []
        assert args.verbose == 0

    def test_run_commands_shares_session(self, tmp_path):
        out, err = io.StringIO(), io.StringIO()
        status = run_commands(
            [f"cd '{tmp_path}'", "pwd", "echo oops >&2"],
            "sh",
            config=Config(),
            out=out,
            err=err,
        )
        assert status == 0
        assert out.getvalue() == f"{tmp_path}\n"
        assert err.getvalue() == "oops\n"

    def test_run_commands_unknown_shell(self):
        err = io.StringIO()
        status = run_commands(["echo hi"], "nope", config=Config(), out=io.StringIO(), err=err)
        assert status == 1
        assert "nope" in err.getvalue()

    def test_run_commands_default_flavor(self):
        out = io.StringIO()
        config = Config(shell=ShellConfig(default_flavor="sh"))
        assert run_commands(["echo hi"], None, config=config, out=out, err=io.StringIO()) == 0
        assert out.getvalue() == "hi\n"

    def test_main_with_commands(self, capsys: pytest.CaptureFixture[str]):
        assert main(["--shell", "sh", "X=5", "echo $X"]) == 0
        assert capsys.readouterr().out == "5\n"

    def test_main_reads_stdin(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
        monkeypatch.setattr("sys.stdin", io.StringIO("echo one\n\necho two\n"))
        assert main(["-s", "sh"]) == 0
        assert capsys.readouterr().out == "one\ntwo\n"

    def test_list_shells(self, capsys: pytest.CaptureFixture[str]):
        assert main(["--list-shells"]) == 0
        out = capsys.readouterr().out
        assert "bash\tbash -s" in out
        assert "sh\tsh -s" in out

    def test_main_keeps_log_lines_out_of_relayed_stderr(self, capsys: pytest.CaptureFixture[str]):
        assert main(["-s", "sh", "echo oops >&2"]) == 0
        assert capsys.readouterr().err == "oops\n"
        assert get_logger().handlers == []

    def test_main_verbose_logs_to_stderr(self, capsys: pytest.CaptureFixture[str]):
        assert main(["-vvvv", "-s", "sh", "echo oops >&2"]) == 0
        err = capsys.readouterr().err
        assert "oops\n" in err
        assert "$ echo oops >&2" in err
