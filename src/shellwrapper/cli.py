"""Command-line interface for shellwrapper."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Iterator, Sequence
from typing import TextIO

from shellwrapper import __version__
from shellwrapper.config import Config, load_config
from shellwrapper.errors import ShellError
from shellwrapper.logging import get_logger, setup_logging
from shellwrapper.shell.factory import create_session
from shellwrapper.shell.flavors import list_flavors

log = get_logger("cli")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="shellwrapper",
        description="Run commands in one persistent shell session",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (can be repeated)",
    )
    parser.add_argument(
        "-s", "--shell",
        default=None,
        help="Shell flavor to launch (default: shell.default_flavor from config)",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Project directory holding .shellwrapper/config.yaml",
    )
    parser.add_argument(
        "--list-shells",
        action="store_true",
        help="List known shell flavors and exit",
    )
    parser.add_argument(
        "commands",
        nargs="*",
        help="Commands to run in order (read from stdin, one per line, if omitted)",
    )
    return parser


def _stdin_commands(stream: TextIO) -> Iterator[str]:
    for line in stream:
        command = line.rstrip("\r\n")
        if command.strip():
            yield command


def run_commands(
    commands: Iterable[str],
    shell_name: str | None,
    config: Config | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Run commands in one session, echoing their captured output.

    Returns:
        Process exit status: 0 on success, 1 on a shell error.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    try:
        with create_session(shell_name, config=config) as shell:
            for command in commands:
                result = shell.execute(command)
                out.write(result.output())
                err.write(result.error())
                out.flush()
                err.flush()
    except ShellError as e:
        log.error("%s", e)
        print(f"shellwrapper: {e}", file=err)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``shellwrapper`` command."""
    args = create_parser().parse_args(argv)

    config = load_config(session_root=args.root)
    if args.verbose:
        config.logging.verbose = min(args.verbose, 4)
    # Captured shell stderr is relayed to our stderr; log there only on request
    setup_logging(config.logging, console=bool(args.verbose))

    if args.list_shells:
        for name, flavor in sorted(list_flavors(config).items()):
            print(f"{name}\t{flavor.command}")
        return 0

    commands: Iterable[str] = args.commands or _stdin_commands(sys.stdin)
    return run_commands(commands, args.shell, config=config)
