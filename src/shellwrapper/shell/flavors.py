"""Known shells and their launch commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shellwrapper.errors import UnknownShellFlavorError

if TYPE_CHECKING:
    from shellwrapper.config.schema import Config


@dataclass(frozen=True)
class ShellFlavor:
    """A named shell launch command.

    The command must start a shell that reads commands from stdin.
    """

    name: str
    command: str
    error_redirect: str = ">&2"


BASH = ShellFlavor("bash", "bash -s")
SH = ShellFlavor("sh", "sh -s")

BUILTIN_FLAVORS: dict[str, ShellFlavor] = {f.name: f for f in (BASH, SH)}


def list_flavors(config: Config | None = None) -> dict[str, ShellFlavor]:
    """All flavors by name; config-defined flavors shadow built-ins."""
    flavors = dict(BUILTIN_FLAVORS)
    if config is not None:
        for fc in config.shell.flavors:
            flavors[fc.name] = ShellFlavor(fc.name, fc.command, fc.error_redirect)
    return flavors


def get_flavor(name: str, config: Config | None = None) -> ShellFlavor:
    """Look up a flavor by name.

    Raises:
        UnknownShellFlavorError: If no flavor has that name.
    """
    flavors = list_flavors(config)
    try:
        return flavors[name]
    except KeyError:
        raise UnknownShellFlavorError(name, sorted(flavors)) from None
