"""Transport data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TransportMode(str, Enum):
    TELNET = "telnet"
    SSH_PASSWORD = "ssh-password"
    SSH_KEY = "ssh-key"


DEFAULT_PORTS: dict[TransportMode, int] = {
    TransportMode.TELNET: 23,
    TransportMode.SSH_PASSWORD: 22,
    TransportMode.SSH_KEY: 22,
}


@dataclass
class CommandResult:
    command: str
    lines: list[str] = field(default_factory=list)
    driver_used: str = ""
    success: bool = True
    error: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def output(self) -> str:
        return "\n".join(self.lines)


def split_output(output: str) -> list[str]:
    """Split raw command output into lines, dropping CRs and blank tails."""
    lines = [line.rstrip("\r") for line in output.splitlines()]
    while lines and not lines[-1].strip():
        lines.pop()
    return lines
