"""Asyncio variant of the interactive shell session."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Iterable, Mapping, Sequence

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
from shellwrapper.shell.session import (
    POSIX,
    build_env,
    kill_process_group,
    split_launch_command,
)

DEFAULT_LINE_LIMIT = 1024 * 1024


class AsyncShellSession:
    """A shell process driven from asyncio.

    Same contract as ShellSession; stdout and stderr are drained by one task
    each. Create instances with ``await AsyncShellSession.create(...)``.

    Usage:
        async with await AsyncShellSession.create("bash -s") as shell:
            result = await shell.execute("echo hello")
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        launch_command: str,
        *,
        encoding: str = "utf-8",
        marker: SessionMarker | None = None,
        terminator: str = NEWLINE,
    ) -> None:
        if process.stdin is None or process.stdout is None or process.stderr is None:
            raise ValueError("process must be spawned with stdin, stdout and stderr pipes")
        self._process = process
        self._stdin: asyncio.StreamWriter = process.stdin
        self._stdout: asyncio.StreamReader = process.stdout
        self._stderr: asyncio.StreamReader = process.stderr
        self._launch_command = launch_command
        self._encoding = encoding
        self._terminator = terminator
        self._marker = marker or SessionMarker.generate()
        self._exited = False
        self._lock = asyncio.Lock()
        self._log = session_logger(process.pid)

    @classmethod
    async def create(
        cls,
        launch_command: str | Sequence[str],
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
        marker_prefix: str = DEFAULT_PREFIX,
        error_redirect: str = DEFAULT_ERROR_REDIRECT,
        terminator: str = NEWLINE,
        line_limit: int = DEFAULT_LINE_LIMIT,
    ) -> AsyncShellSession:
        """Spawn the shell.

        Args:
            launch_command: Command line (or argv) of a shell reading stdin.
            cwd: Working directory for the shell. Inherited if None.
            env: Extra environment variables for the shell.
            encoding: Encoding used for stdin and both output channels.
            marker_prefix: Prefix of the end-of-output sentinel.
            error_redirect: Shell syntax sending echo output to stderr.
            terminator: Default text written after each command.
            line_limit: Longest output line the stream readers accept.

        Raises:
            ShellStartupError: If the process cannot be created.
        """
        display, argv = split_launch_command(launch_command)
        if not argv:
            raise ShellStartupError(display, "empty launch command")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=build_env(env),
                limit=line_limit,
                start_new_session=POSIX,
            )
        except (OSError, ValueError) as e:
            raise ShellStartupError(display, str(e)) from e

        session_logger(process.pid).debug("Started shell '%s'", display)
        return cls(
            process,
            display,
            encoding=encoding,
            marker=SessionMarker.generate(marker_prefix, error_redirect),
            terminator=terminator,
        )

    @property
    def launch_command(self) -> str:
        return self._launch_command

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def marker(self) -> str:
        return self._marker.value

    def has_terminated(self) -> bool:
        return self._exited

    async def execute(self, command: str, terminator: str | None = None) -> CommandResult:
        """Run a command and capture its output.

        Raises:
            ShellTerminatedError: If terminate() was already called.
            ShellIOError: If writing the command or reading its output fails.
        """
        async with self._lock:
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
            readers = asyncio.gather(
                self._marker.acollect(self._stdout.readline, self._encoding),
                self._marker.acollect(self._stderr.readline, self._encoding),
                return_exceptions=True,
            )
            try:
                self._stdin.write(payload)
                await self._stdin.drain()
            except (OSError, RuntimeError) as e:
                # The readers would wait forever for a marker that was never sent
                kill_process_group(self._process.pid, self._process.kill)
                await readers
                raise ShellIOError(command, str(e)) from e
            except asyncio.CancelledError:
                readers.cancel()
                raise

            # return_exceptions so a failing channel never leaves the other task orphaned
            output_lines, error_lines = await readers
            for outcome in (output_lines, error_lines):
                if isinstance(outcome, (EndOfStreamError, OSError, ValueError)):
                    raise ShellIOError(command, str(outcome)) from outcome
                if isinstance(outcome, BaseException):
                    raise outcome

        return CommandResult(
            command=command,
            output_lines=tuple(output_lines),
            error_lines=tuple(error_lines),
        )

    async def execute_many(self, commands: Iterable[str]) -> list[CommandResult]:
        """Run commands in order; the first failure aborts the batch."""
        return [await self.execute(command) for command in commands]

    async def execute_piped(self, producer: str, consumer: str) -> CommandResult:
        """Run ``producer | consumer`` as one command."""
        return await self.execute(pipe(producer, consumer))

    async def execute_piped_echo(self, message: str, consumer: str) -> CommandResult:
        """Pipe a single-quoted literal into ``consumer``.

        ``message`` must not contain single quotes.
        """
        return await self.execute_piped(echo_literal(message), consumer)

    async def terminate(self) -> None:
        """Kill the shell and release its streams.

        The read side of stdout and stderr is closed by the subprocess
        transport once the process is reaped.
        """
        # No await between the check and the set, so only one caller kills
        first = not self._exited
        self._exited = True

        if first:
            kill_process_group(self._process.pid, self._process.kill)

        try:
            self._stdin.close()
            await self._stdin.wait_closed()
        except (OSError, RuntimeError) as e:
            self._log.debug("Ignoring error closing shell stdin: %s", e)

        if first:
            with contextlib.suppress(ProcessLookupError):
                await self._process.wait()
            self._log.debug(
                "Terminated shell '%s' (exit %s)",
                self._launch_command,
                self._process.returncode,
            )

    async def __aenter__(self) -> AsyncShellSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.terminate()

    def __repr__(self) -> str:
        state = "terminated" if self._exited else "running"
        return f"<AsyncShellSession '{self._launch_command}' pid={self.pid} {state}>"
