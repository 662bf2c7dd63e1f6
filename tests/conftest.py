"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from airgraph.config.settings import Settings
from airgraph.device.base import Transport
from airgraph.device.models import CommandResult, split_output
from airgraph.errors import CommandError
from airgraph.metrics.ping import ping_command
from airgraph.metrics.system import CPU_COMMAND, LOADAVG_COMMAND, UPTIME_COMMAND
from airgraph.metrics.wireless import STATUS_COMMAND


LOADAVG_OUTPUT = "0.42 0.31 0.27 2/48 1893\n"

CPU_OUTPUT = "CPU:   3% usr   6% sys   0% nic  88% idle   1% io   0% irq   2% sirq\n"

UPTIME_OUTPUT = "432000.00 418311.52\n"

MCA_STATUS_OUTPUT = """\
deviceName=Tower-North,deviceId=00:27:22:AA:BB:CC,firmwareVersion=XM.ar7240.v5.6.3.28591.151130.1749,firmwareBuild=28591,platform=NanoStation M5,deviceIp=10.20.0.2
wlanOpmode=sta
wlanConnections=1
signal=-61
rssi=35
noise=-96
ccq=947
wlanTxRate=130
wlanRxRate=117
uptime=432000
memTotal=29864
memFree=11640
memBuffers=2344
lanRxBytes=884211
lanTxBytes=1920443
wlanRxBytes=1920000
wlanTxBytes=884000
wlanRxErrNwid=12
wlanRxErrCrypt=0
wlanRxErrFrag=0
wlanRxErrRetries=41
wlanRxErrBmiss=3
wlanRxErrOther=0
wlanTxErrRetries=155
"""

REMOTE_PING_OUTPUT = """\
PING 8.8.8.8 (8.8.8.8): 56 data bytes

--- 8.8.8.8 ping statistics ---
3 packets transmitted, 3 packets received, 0% packet loss
round-trip min/avg/max = 11.204/14.500/19.877 ms
"""

LOCAL_PING_OUTPUT = """\
PING 10.20.0.2 (10.20.0.2) 56(84) bytes of data.

--- 10.20.0.2 ping statistics ---
3 packets transmitted, 3 received, 0% packet loss, time 2003ms
rtt min/avg/max/mdev = 0.811/1.250/1.902/0.412 ms
"""


class FakeTransport(Transport):
    """Transport double answering from a command → output mapping.

    A mapped value that is an exception instance is raised instead.
    """

    def __init__(self, outputs: dict[str, object] | None = None,
                 connect_error: Exception | None = None) -> None:
        super().__init__(host="10.20.0.2", username="ubnt", password="ubnt")
        self.outputs = outputs or {}
        self.connect_error = connect_error
        self.calls: list[str] = []
        self.commands: list[str] = []
        self.disconnect_count = 0

    async def connect(self) -> None:
        self.calls.append("connect")
        if self.connect_error is not None:
            raise self.connect_error
        self._connected = True

    async def disconnect(self) -> None:
        self.calls.append("disconnect")
        self.disconnect_count += 1
        self._connected = False

    async def run_command(self, command: str,
                          timeout: float | None = None) -> CommandResult:
        self.calls.append("run_command")
        self.commands.append(command)
        if not self._connected:
            raise CommandError(command, "not connected")
        output = self.outputs.get(command, "")
        if isinstance(output, Exception):
            raise output
        return CommandResult(command=command, lines=split_output(str(output)),
                             driver_used="fake")


class FakePinger:
    def __init__(self, output: str | Exception = LOCAL_PING_OUTPUT) -> None:
        self.output = output
        self.targets: list[str] = []

    async def ping(self, host: str, count: int = 3,
                   timeout: float = 10.0) -> list[str]:
        self.targets.append(host)
        if isinstance(self.output, Exception):
            raise self.output
        return split_output(self.output)


@pytest.fixture
def sample_settings() -> Settings:
    return Settings(transport="telnet", username="ubnt", password="ubnt",
                    command_timeout=5)


@pytest.fixture
def ping_settings() -> Settings:
    return Settings(
        transport="telnet", username="ubnt", password="ubnt",
        ping_target="8.8.8.8", ping_name="google-dns",
    )


@pytest.fixture
def device_outputs() -> dict[str, object]:
    return {
        LOADAVG_COMMAND: LOADAVG_OUTPUT,
        CPU_COMMAND: CPU_OUTPUT,
        UPTIME_COMMAND: UPTIME_OUTPUT,
        STATUS_COMMAND: MCA_STATUS_OUTPUT,
        ping_command("8.8.8.8", 3): REMOTE_PING_OUTPUT,
    }


@pytest.fixture
def make_transport():
    """Factory for transport doubles: ``make_transport(outputs, connect_error=...)``."""
    return FakeTransport


@pytest.fixture
def fake_transport(device_outputs: dict[str, object]) -> FakeTransport:
    return FakeTransport(device_outputs)


@pytest.fixture
def make_pinger():
    """Factory for local ping doubles: ``make_pinger(output_or_error)``."""
    return FakePinger


@pytest.fixture
def fake_pinger() -> FakePinger:
    return FakePinger()


@pytest.fixture
def no_sleep() -> AsyncMock:
    return AsyncMock(return_value=None)
