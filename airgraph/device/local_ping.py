"""Local ping — measures the path from the collector host to the device."""

from __future__ import annotations

import asyncio
import logging

from airgraph.device.models import split_output
from airgraph.errors import CommandError, CommandTimeout

logger = logging.getLogger(__name__)


class LocalPinger:
    """Runs the operating system ``ping`` utility as a subprocess."""

    def __init__(self, executable: str = "ping") -> None:
        self.executable = executable

    def build_command(self, host: str, count: int) -> list[str]:
        return [self.executable, "-c", str(count), "-q", host]

    async def ping(self, host: str, count: int = 3,
                   timeout: float = 10.0) -> list[str]:
        """Ping *host* and return the utility's output lines.

        A non-zero exit status is expected for unreachable hosts and is not
        an error; the summary is still returned for parsing.
        """
        argv = self.build_command(host, count)
        command = " ".join(argv)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            raise CommandError(command, str(exc)) from exc

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise CommandTimeout(command, f"no result within {timeout}s") from None

        if proc.returncode:
            logger.debug("%s exited with status %d", command, proc.returncode)
        return split_output(stdout.decode("utf-8", errors="replace"))
