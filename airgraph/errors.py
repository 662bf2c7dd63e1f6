"""Exception hierarchy shared by transports, the poller and the CLI."""

from __future__ import annotations


class AirgraphError(Exception):
    """Base class for all airgraph errors."""


class ConfigurationError(AirgraphError):
    """Invalid or incomplete configuration, detected before any network I/O."""


class ConnectError(AirgraphError):
    """The device could not be reached or the session could not be opened."""

    def __init__(self, host: str, reason: str) -> None:
        super().__init__(f"{host}: {reason}")
        self.host = host
        self.reason = reason


class AuthenticationError(ConnectError):
    """The device rejected the configured credentials."""


class CommandError(AirgraphError):
    """A single command failed; only that command's metrics are affected."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"{command!r}: {reason}")
        self.command = command
        self.reason = reason


class CommandTimeout(CommandError):
    """A command did not complete within its timeout."""


class UnknownMetricError(AirgraphError, KeyError):
    """A metric name outside the declared definitions was used."""

    def __str__(self) -> str:
        return f"Undeclared metric: {self.args[0]}"
