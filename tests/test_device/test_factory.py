"""Tests for transport factory."""

import pytest

from airgraph.config.settings import Settings
from airgraph.device.factory import create_transport
from airgraph.device.ssh_exec_driver import SSHExecDriver
from airgraph.device.telnet_driver import TelnetDriver
from airgraph.errors import ConfigurationError


def test_factory_telnet():
    settings = Settings(transport="telnet", password="pw", prompt_pattern="#")
    transport = create_transport(settings, "10.20.0.2")
    assert isinstance(transport, TelnetDriver)
    assert transport.port == 23
    assert transport.prompt_pattern == "#"


def test_factory_ssh_password():
    settings = Settings(transport="ssh-password", password="pw", port=2222)
    transport = create_transport(settings, "10.20.0.2")
    assert isinstance(transport, SSHExecDriver)
    assert transport.port == 2222
    assert transport.uses_key is False


def test_factory_ssh_key():
    settings = Settings(transport="ssh-key", ssh_key="/etc/munin/airos_id",
                        password="ignored")
    transport = create_transport(settings, "10.20.0.2")
    assert isinstance(transport, SSHExecDriver)
    assert transport.uses_key is True
    assert transport.password is None


def test_factory_ssh_key_without_key_raises():
    with pytest.raises(ConfigurationError, match="ssh_key"):
        create_transport(Settings(transport="ssh-key"), "10.20.0.2")


def test_factory_unknown_raises():
    settings = Settings.model_construct(transport="rsh")
    with pytest.raises(ConfigurationError, match="Unsupported transport"):
        create_transport(settings, "10.20.0.2")


def test_factory_unknown_constructs_nothing(monkeypatch):
    constructed = []
    monkeypatch.setattr(TelnetDriver, "__init__",
                        lambda self, *a, **kw: constructed.append(self))
    monkeypatch.setattr(SSHExecDriver, "__init__",
                        lambda self, *a, **kw: constructed.append(self))
    with pytest.raises(ConfigurationError):
        create_transport(Settings.model_construct(transport=""), "10.20.0.2")
    assert constructed == []
