"""Tests for shell flavors and the session factory."""

from __future__ import annotations

import pytest

from shellwrapper.config import Config, ShellConfig, ShellFlavorConfig
from shellwrapper.errors import ShellError, UnknownShellFlavorError
from shellwrapper.shell.factory import create_async_session, create_session, resolve_flavor
from shellwrapper.shell.flavors import BASH, SH, ShellFlavor, get_flavor, list_flavors


class TestFlavors:
    """Built-in and configured flavor lookup."""

    def test_builtins(self):
        assert get_flavor("bash") == BASH
        assert BASH.command == "bash -s"
        assert get_flavor("sh") == SH
        assert SH.command == "sh -s"

    def test_unknown_flavor(self):
        with pytest.raises(UnknownShellFlavorError) as exc_info:
            get_flavor("fish")
        assert isinstance(exc_info.value, KeyError)
        assert isinstance(exc_info.value, ShellError)
        assert "fish" in str(exc_info.value)
        assert exc_info.value.known == ["bash", "sh"]

    def test_config_flavors(self):
        config = Config(
            shell=ShellConfig(flavors=[ShellFlavorConfig(name="dash", command="dash -s")])
        )
        assert get_flavor("dash", config) == ShellFlavor("dash", "dash -s")
        assert set(list_flavors(config)) == {"bash", "sh", "dash"}

    def test_config_flavor_shadows_builtin(self):
        config = Config(shell=ShellConfig(flavors=[ShellFlavorConfig(name="sh", command="/bin/sh -s")]))
        assert get_flavor("sh", config).command == "/bin/sh -s"


class TestFactory:
    """create_session applies flavor and config settings."""

    def test_resolve_default_flavor(self):
        config = Config(shell=ShellConfig(default_flavor="sh"))
        assert resolve_flavor(None, config) == SH
        assert resolve_flavor(BASH, config) == BASH

    def test_create_session_from_config(self):
        config = Config(shell=ShellConfig(default_flavor="sh", marker_prefix="MARK-"))
        with create_session(config=config) as shell:
            assert shell.launch_command == "sh -s"
            assert shell.marker.startswith("MARK-")
            assert shell.execute("echo hi").output_lines == ("hi",)

    def test_create_session_unknown_flavor(self):
        with pytest.raises(UnknownShellFlavorError):
            create_session("nope", config=Config())

    @pytest.mark.asyncio
    async def test_create_async_session(self):
        async with await create_async_session("sh", config=Config()) as shell:
            result = await shell.execute("echo hi")
        assert result.output_lines == ("hi",)
