"""Create sessions from flavor names and configuration."""

from __future__ import annotations

from collections.abc import Mapping

from shellwrapper.config import Config, get_config
from shellwrapper.shell.async_session import AsyncShellSession
from shellwrapper.shell.flavors import ShellFlavor, get_flavor
from shellwrapper.shell.session import ShellSession


def resolve_flavor(flavor: str | ShellFlavor | None, config: Config) -> ShellFlavor:
    """Turn a flavor name (or None for the configured default) into a ShellFlavor."""
    if isinstance(flavor, ShellFlavor):
        return flavor
    return get_flavor(flavor or config.shell.default_flavor, config)


def create_session(
    flavor: str | ShellFlavor | None = None,
    *,
    config: Config | None = None,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> ShellSession:
    """Start a shell session.

    Args:
        flavor: Flavor name ("bash", "sh", or one from config), a ShellFlavor,
            or None for ``shell.default_flavor``.
        config: Configuration to use. Defaults to the global config.
        cwd: Working directory for the shell.
        env: Extra environment variables for the shell.

    Raises:
        UnknownShellFlavorError: If the flavor name is not known.
        ShellStartupError: If the shell cannot be started.
    """
    config = config or get_config()
    resolved = resolve_flavor(flavor, config)
    return ShellSession(
        resolved.command,
        cwd=cwd,
        env=env,
        encoding=config.shell.encoding,
        marker_prefix=config.shell.marker_prefix,
        error_redirect=resolved.error_redirect,
        terminator=config.shell.terminator,
    )


async def create_async_session(
    flavor: str | ShellFlavor | None = None,
    *,
    config: Config | None = None,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> AsyncShellSession:
    """Start an asyncio shell session. See create_session()."""
    config = config or get_config()
    resolved = resolve_flavor(flavor, config)
    return await AsyncShellSession.create(
        resolved.command,
        cwd=cwd,
        env=env,
        encoding=config.shell.encoding,
        marker_prefix=config.shell.marker_prefix,
        error_redirect=resolved.error_redirect,
        terminator=config.shell.terminator,
        line_limit=config.shell.line_limit,
    )
