"""Poll orchestrator — runs one collection cycle against one device."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

from airgraph.config.settings import Settings
from airgraph.device.base import Transport
from airgraph.device.factory import TransportFactory, create_transport
from airgraph.device.local_ping import LocalPinger
from airgraph.device.models import CommandResult
from airgraph.errors import CommandError, ConnectError, UnknownMetricError
from airgraph.metrics import RULESETS
from airgraph.metrics.base import ExtractionRule, extract
from airgraph.metrics.definitions import GraphDefinition
from airgraph.metrics.ping import ping_command, ping_rules
from airgraph.metrics.system import CPU_COMMAND, LOADAVG_COMMAND, UPTIME_COMMAND
from airgraph.metrics.table import MetricTable
from airgraph.metrics.wireless import STATUS_COMMAND, derive_status_metrics
from airgraph.report.munin import render_values

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class PollState(str, Enum):
    INIT = "init"
    CONNECT = "connect"
    RUN = "run"
    DISCONNECT = "disconnect"
    REPORT = "report"
    DONE = "done"


@dataclass
class PollStep:
    name: str
    command: str
    rules: list[ExtractionRule]
    delay_before: float = 0.0
    delay_after: float = 0.0
    after: Callable[[MetricTable], None] | None = None


@dataclass
class PollSession:
    """One open transport plus the table it fills, for a single run."""
    host: str
    transport: Transport
    table: MetricTable
    closed: bool = field(default=False, init=False)

    async def run(self, command: str) -> CommandResult:
        """Run a command, turning command errors into a failed result."""
        try:
            return await self.transport.run_command(command)
        except CommandError as exc:
            logger.warning("Command failed on %s: %s", self.host, exc)
            return CommandResult(
                command=command, success=False, error=exc.reason,
                driver_used=self.transport.driver_name,
            )

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self.transport.disconnect()


class Poller:
    """Sequences the diagnostic commands for one device.

    INIT → CONNECT → RUN → DISCONNECT → REPORT → DONE.  A failed connect or
    login skips straight to REPORT with every metric Unknown; a failed
    command only loses that command's metrics.
    """

    def __init__(
        self,
        settings: Settings,
        host: str,
        definitions: tuple[GraphDefinition, ...],
        transport_factory: TransportFactory = create_transport,
        pinger: LocalPinger | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.host = host
        self.definitions = definitions
        self._transport_factory = transport_factory
        self._pinger = pinger or LocalPinger()
        self._sleep = sleep
        self.state = PollState.INIT
        self.history: list[PollState] = [PollState.INIT]

    def _enter(self, state: PollState) -> None:
        logger.debug("%s: %s -> %s", self.host, self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def build_steps(self) -> list[PollStep]:
        s = self.settings
        steps = [
            PollStep("loadavg", LOADAVG_COMMAND, RULESETS["loadavg"]),
            PollStep("cpu", CPU_COMMAND, RULESETS["cpu"],
                     delay_before=s.cpu_settle, delay_after=s.cpu_settle),
            PollStep("uptime", UPTIME_COMMAND, RULESETS["uptime"]),
            PollStep("status", STATUS_COMMAND, RULESETS["status"],
                     after=derive_status_metrics),
        ]
        if s.ping_target:
            steps.append(PollStep(
                "remote-ping", ping_command(s.ping_target, s.ping_count),
                ping_rules("remote_rtt", "remote_loss"),
                delay_before=s.ping_settle,
            ))
        return steps

    async def poll(self) -> MetricTable:
        """Run one cycle and return the filled table.  Never raises for device faults."""
        table = MetricTable(self.definitions)
        transport = self._transport_factory(self.settings, self.host)
        session = PollSession(host=self.host, transport=transport, table=table)
        try:
            self._enter(PollState.CONNECT)
            try:
                await transport.connect()
            except ConnectError as exc:
                logger.error("Cannot connect to %s: %s", self.host, exc)
                return table
            except Exception as exc:
                logger.error("Unexpected error connecting to %s: %s", self.host, exc)
                return table

            self._enter(PollState.RUN)
            for step in self.build_steps():
                await self._run_step(session, step)
            await self._local_ping(table)
            return table
        finally:
            # a failed connect goes straight to REPORT
            if self.state is not PollState.CONNECT:
                self._enter(PollState.DISCONNECT)
            await session.close()
            self._enter(PollState.REPORT)

    async def run(self) -> str:
        """Poll the device and render the value report."""
        table = await self.poll()
        output = render_values(self.definitions, table)
        self._enter(PollState.DONE)
        return output

    async def _run_step(self, session: PollSession, step: PollStep) -> None:
        if step.delay_before:
            await self._sleep(step.delay_before)
        try:
            result = await session.run(step.command)
            if result.success:
                session.table.update(extract(step.rules, result.lines))
                if step.after is not None:
                    step.after(session.table)
            else:
                logger.info("Step %s on %s produced no output", step.name, self.host)
        except UnknownMetricError:
            raise
        except Exception as exc:
            logger.error("Step %s failed on %s: %s", step.name, self.host, exc)
        if step.delay_after:
            await self._sleep(step.delay_after)

    async def _local_ping(self, table: MetricTable) -> None:
        try:
            lines = await self._pinger.ping(
                self.host, count=self.settings.ping_count,
                timeout=self.settings.command_timeout,
            )
        except CommandError as exc:
            logger.warning("Local ping to %s failed: %s", self.host, exc)
            return
        table.update(extract(ping_rules("rtt", "loss"), lines))
