"""Interactive shell session backed by a long-lived subprocess."""

from __future__ import annotations

import os
import shlex
import signal
import subprocess
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from typing import IO

from shellwrapper.errors import (
    ShellIOError,
    ShellStartupError,
    ShellTerminatedError,
)
from shellwrapper.logging import TRACE, session_logger
from shellwrapper.shell.compose import echo_literal, pipe
from shellwrapper.shell.marker import (
    DEFAULT_ERROR_REDIRECT,
    DEFAULT_PREFIX,
    EndOfStreamError,
    SessionMarker,
)
from shellwrapper.shell.result import NEWLINE, CommandResult

POSIX = os.name == "posix"


def split_launch_command(launch_command: str | Sequence[str]) -> tuple[str, list[str]]:
    """Normalize a launch command into (display string, argv)."""
    if isinstance(launch_command, str):
        return launch_command, shlex.split(launch_command)
    argv = list(launch_command)
    return shlex.join(argv), argv


def build_env(env: Mapping[str, str] | None) -> dict[str, str] | None:
    """Overlay ``env`` on the current environment; None inherits it unchanged."""
    if not env:
        return None
    process_env = os.environ.copy()
    process_env.update(env)
    return process_env


def kill_process_group(pid: int, kill: Callable[[], None]) -> None:
    """Forcibly stop a shell and everything it started.

    Shells are spawned as session leaders on POSIX so foreground jobs holding
    the output pipes die with them. ``kill`` is the fallback for the shell
    process alone.
    """
    if POSIX:
        try:
            os.killpg(pid, signal.SIGKILL)
            return
        except (ProcessLookupError, PermissionError):
            pass
    try:
        kill()
    except ProcessLookupError:
        pass  # Already gone


class ShellSession:
    """A shell process that executes commands one at a time.

    The working directory, environment and shell variables persist between
    calls because every command runs in the same process.

    Usage:
        with ShellSession("bash -s") as shell:
            shell.execute("cd /tmp")
            print(shell.execute("pwd").output_lines)

    Only one command is in flight at a time; concurrent callers are
    serialized. ``terminate()`` may be called from any thread, which makes a
    pending ``execute()`` fail with ShellIOError.
    """

    def __init__(
        self,
        launch_command: str | Sequence[str],
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
        marker_prefix: str = DEFAULT_PREFIX,
        error_redirect: str = DEFAULT_ERROR_REDIRECT,
        terminator: str = NEWLINE,
    ) -> None:
        """Spawn the shell.

        Args:
            launch_command: Command line (or argv) of a shell reading stdin.
            cwd: Working directory for the shell. Inherited if None.
            env: Extra environment variables for the shell.
            encoding: Encoding used for stdin and both output channels.
            marker_prefix: Prefix of the end-of-output sentinel.
            error_redirect: Shell syntax sending echo output to stderr.
            terminator: Default text written after each command.

        Raises:
            ShellStartupError: If the process cannot be created.
        """
        self._launch_command, argv = split_launch_command(launch_command)
        if not argv:
            raise ShellStartupError(self._launch_command, "empty launch command")

        try:
            self._process = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
                env=build_env(env),
                start_new_session=POSIX,
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            raise ShellStartupError(self._launch_command, str(e)) from e

        assert self._process.stdin and self._process.stdout and self._process.stderr
        self._stdin: IO[bytes] = self._process.stdin
        self._stdout: IO[bytes] = self._process.stdout
        self._stderr: IO[bytes] = self._process.stderr

        self._encoding = encoding
        self._terminator = terminator
        self._marker = SessionMarker.generate(marker_prefix, error_redirect)
        self._exited = False
        self._lock = threading.Lock()
        self._terminate_lock = threading.Lock()
        self._log = session_logger(self._process.pid)
        # One reader per channel so neither pipe can fill up while the other drains
        self._readers = ThreadPoolExecutor(
            max_workers=2, thread_name_prefix=f"shellwrapper-{self._process.pid}"
        )

        self._log.debug("Started shell '%s'", self._launch_command)

    @property
    def launch_command(self) -> str:
        return self._launch_command

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def marker(self) -> str:
        """The end-of-output sentinel for this session."""
        return self._marker.value

    def has_terminated(self) -> bool:
        return self._exited

    def execute(self, command: str, terminator: str | None = None) -> CommandResult:
        """Run a command and capture its output.

        Args:
            command: Shell command text.
            terminator: Text written after the command. Defaults to the
                session terminator (a newline).

        Returns:
            CommandResult with the command's stdout and stderr lines.

        Raises:
            ShellTerminatedError: If terminate() was already called.
            ShellIOError: If writing the command or reading its output fails.
        """
        with self._lock:
            if self._exited:
                raise ShellTerminatedError(command)

            if terminator is None:
                terminator = self._terminator
            try:
                payload = self._marker.render(command, terminator).encode(self._encoding)
            except UnicodeEncodeError as e:
                raise ShellIOError(command, str(e)) from e
            self._log.log(TRACE, "$ %s", command)

            # Readers start first: a long command can fill the output pipes
            # before all of it has been written
            try:
                stdout_future = self._readers.submit(
                    self._marker.collect, self._stdout.readline, self._encoding
                )
                stderr_future = self._readers.submit(
                    self._marker.collect, self._stderr.readline, self._encoding
                )
            except RuntimeError as e:
                # Reader pool shut down by a concurrent terminate()
                raise ShellIOError(command, str(e)) from e

            try:
                self._stdin.write(payload)
                self._stdin.flush()
            except (OSError, ValueError) as e:
                # The readers would wait forever for a marker that was never sent
                kill_process_group(self._process.pid, self._process.kill)
                wait([stdout_future, stderr_future])
                raise ShellIOError(command, str(e)) from e

            wait([stdout_future, stderr_future])
            try:
                output_lines = stdout_future.result()
                error_lines = stderr_future.result()
            except (EndOfStreamError, OSError, ValueError) as e:
                raise ShellIOError(command, str(e)) from e

        return CommandResult(
            command=command,
            output_lines=tuple(output_lines),
            error_lines=tuple(error_lines),
        )

    def execute_many(self, commands: Iterable[str]) -> list[CommandResult]:
        """Run commands in order; the first failure aborts the batch."""
        return [self.execute(command) for command in commands]

    def execute_piped(self, producer: str, consumer: str) -> CommandResult:
        """Run ``producer | consumer`` as one command."""
        return self.execute(pipe(producer, consumer))

    def execute_piped_echo(self, message: str, consumer: str) -> CommandResult:
        """Pipe a single-quoted literal into ``consumer``.

        ``message`` must not contain single quotes.
        """
        return self.execute_piped(echo_literal(message), consumer)

    def terminate(self) -> None:
        """Kill the shell and release its streams.

        Stream close errors are ignored. Calling this again is harmless.
        """
        with self._terminate_lock:
            first = not self._exited
            self._exited = True

        if first:
            # Kill before closing: closing a pipe blocks while a reader holds it
            kill_process_group(self._process.pid, self._process.kill)

        for stream in (self._stdout, self._stdin, self._stderr):
            try:
                stream.close()
            except OSError as e:
                self._log.debug("Ignoring error closing shell stream: %s", e)

        if first:
            self._process.wait()
            self._readers.shutdown(wait=False)
            self._log.debug(
                "Terminated shell '%s' (exit %s)",
                self._launch_command,
                self._process.returncode,
            )

    def __enter__(self) -> ShellSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.terminate()

    def __repr__(self) -> str:
        state = "terminated" if self._exited else "running"
        return f"<ShellSession '{self._launch_command}' pid={self.pid} {state}>"
