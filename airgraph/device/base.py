"""Abstract transport interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from airgraph.device.models import CommandResult


class Transport(ABC):
    """Base class for device transports.

    A transport opens one session to a device and runs shell commands on it,
    returning the output as ordered lines.  ``connect`` raises
    ``ConnectError`` (or ``AuthenticationError``), ``run_command`` raises
    ``CommandError`` (or ``CommandTimeout``).  ``disconnect`` never raises and
    may be called any number of times, including after a failed connect.
    """

    def __init__(self, host: str, username: str, password: str | None = None,
                 ssh_key: str | None = None, port: int = 22,
                 timeout: float = 10.0):
        self.host = host
        self.username = username
        self.password = password
        self.ssh_key = ssh_key
        self.port = port
        self.timeout = timeout
        self._connected = False

    @abstractmethod
    async def connect(self) -> None:
        """Open the session and authenticate."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the session."""

    @abstractmethod
    async def run_command(self, command: str,
                          timeout: float | None = None) -> CommandResult:
        """Execute a shell command and return its output lines."""

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def driver_name(self) -> str:
        return self.__class__.__name__
