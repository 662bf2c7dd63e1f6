"""Application wiring — builds the schema, runs a poll, sets up logging."""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console
from rich.logging import RichHandler

from airgraph.agent.poller import Poller, SleepFunc
from airgraph.config.settings import Settings
from airgraph.device.factory import TransportFactory, create_transport
from airgraph.device.local_ping import LocalPinger
from airgraph.metrics.definitions import GraphDefinition, build_definitions
from airgraph.report.munin import render_config

logger = logging.getLogger(__name__)


class Application:
    """One plugin invocation for one device."""

    def __init__(
        self,
        settings: Settings,
        host: str,
        transport_factory: TransportFactory | None = None,
        pinger: LocalPinger | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.host = host
        self.definitions: tuple[GraphDefinition, ...] = build_definitions(
            settings.ping_display_name if settings.ping_target else None,
        )
        self._transport_factory = transport_factory or create_transport
        self._pinger = pinger
        self._sleep = sleep

    def config(self) -> str:
        """Schema only.  Never touches the device."""
        return render_config(self.definitions, host_name=self.host)

    async def fetch(self) -> str:
        """Poll the device and return the value report."""
        poller = Poller(
            settings=self.settings,
            host=self.host,
            definitions=self.definitions,
            transport_factory=self._transport_factory,
            pinger=self._pinger,
            sleep=self._sleep,
        )
        output = await poller.run()
        logger.info("Poll of %s finished", self.host)
        return output


def setup_logging(level: str = "WARNING") -> None:
    """Send log records to stderr; stdout carries the Munin protocol."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )

    # Connection failures are reported by the transports themselves; the
    # client libraries' own tracebacks only add noise to munin-node.log.
    logging.getLogger("paramiko").setLevel(logging.CRITICAL)
    logging.getLogger("netmiko").setLevel(logging.CRITICAL)
