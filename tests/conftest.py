"""Root pytest configuration for all tests."""

from __future__ import annotations

import shutil

import pytest

from shellwrapper.config import reset_config
from shellwrapper.logging import reset_logging
from shellwrapper.shell.flavors import BASH, SH, ShellFlavor

pytest_plugins = ("pytest_asyncio",)


def _flavor_param(flavor: ShellFlavor):
    binary = flavor.command.split()[0]
    return pytest.param(
        flavor,
        id=flavor.name,
        marks=pytest.mark.skipif(shutil.which(binary) is None, reason=f"{binary} not installed"),
    )


SHELL_FLAVORS = [_flavor_param(BASH), _flavor_param(SH)]


@pytest.fixture(params=SHELL_FLAVORS)
def flavor(request: pytest.FixtureRequest) -> ShellFlavor:
    """Every built-in shell flavor available on this machine."""
    return request.param


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch):
    """Keep user config files and environment overrides out of tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    monkeypatch.delenv("SHELLWRAPPER_LOG", raising=False)
    monkeypatch.delenv("SHELLWRAPPER_SHELL", raising=False)
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()
