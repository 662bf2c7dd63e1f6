"""Factory for creating device transports based on configuration."""

from __future__ import annotations

from typing import Callable

from airgraph.config.settings import Settings
from airgraph.device.base import Transport
from airgraph.device.models import TransportMode
from airgraph.errors import ConfigurationError


def _telnet(settings: Settings, host: str) -> Transport:
    from airgraph.device.telnet_driver import TelnetDriver
    return TelnetDriver(
        host=host, username=settings.username, password=settings.password,
        port=settings.effective_port, timeout=settings.command_timeout,
        prompt_pattern=settings.prompt_pattern,
    )


def _ssh_password(settings: Settings, host: str) -> Transport:
    from airgraph.device.ssh_exec_driver import SSHExecDriver
    return SSHExecDriver(
        host=host, username=settings.username, password=settings.password,
        port=settings.effective_port, timeout=settings.command_timeout,
    )


def _ssh_key(settings: Settings, host: str) -> Transport:
    from airgraph.device.ssh_exec_driver import SSHExecDriver
    if not settings.ssh_key:
        raise ConfigurationError("Transport 'ssh-key' requires the ssh_key option")
    return SSHExecDriver(
        host=host, username=settings.username, ssh_key=settings.ssh_key,
        port=settings.effective_port, timeout=settings.command_timeout,
    )


TransportFactory = Callable[[Settings, str], Transport]

TRANSPORTS: dict[TransportMode, TransportFactory] = {
    TransportMode.TELNET: _telnet,
    TransportMode.SSH_PASSWORD: _ssh_password,
    TransportMode.SSH_KEY: _ssh_key,
}


def create_transport(settings: Settings, host: str) -> Transport:
    """Create the transport selected by ``settings.transport``."""
    try:
        mode = TransportMode(settings.transport)
    except ValueError:
        raise ConfigurationError(
            f"Unsupported transport mode: {settings.transport!r}"
        ) from None
    return TRANSPORTS[mode](settings, host)
