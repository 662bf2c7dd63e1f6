"""Netmiko/Telnet driver — interactive line session with prompt matching."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from airgraph.device.base import Transport
from airgraph.device.models import CommandResult, split_output
from airgraph.errors import (
    AuthenticationError,
    CommandError,
    CommandTimeout,
    ConnectError,
)

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(max_workers=1)


class TelnetDriver(Transport):
    """Device transport driving a login shell over Telnet via Netmiko.

    Netmiko handles the login handshake (username prompt, password prompt,
    shell prompt) and reads each command's output until the prompt comes
    back.  ``prompt_pattern`` overrides prompt detection for firmware whose
    prompt Netmiko cannot guess.
    """

    def __init__(self, host: str, username: str, password: str | None = None,
                 ssh_key: str | None = None, port: int = 23,
                 timeout: float = 10.0, prompt_pattern: str | None = None):
        super().__init__(host, username, password, ssh_key, port, timeout)
        self.prompt_pattern = prompt_pattern
        self._conn = None

    async def connect(self) -> None:
        from netmiko import ConnectHandler
        from netmiko.exceptions import (
            NetmikoAuthenticationException,
            NetmikoTimeoutException,
        )

        kwargs: dict = {
            "device_type": "generic_telnet",
            "host": self.host,
            "username": self.username,
            "password": self.password or "",
            "port": self.port,
            "conn_timeout": self.timeout,
            "auth_timeout": self.timeout,
            "fast_cli": False,
        }

        loop = asyncio.get_running_loop()
        try:
            self._conn = await loop.run_in_executor(
                _executor, partial(ConnectHandler, **kwargs)
            )
        except NetmikoAuthenticationException as exc:
            raise AuthenticationError(self.host, str(exc)) from exc
        except NetmikoTimeoutException as exc:
            raise ConnectError(self.host, f"timed out: {exc}") from exc
        except OSError as exc:
            raise ConnectError(self.host, str(exc)) from exc
        except Exception as exc:
            # generic_telnet reports a failed login handshake as ValueError
            raise ConnectError(self.host, f"login failed: {exc}") from exc

        self._connected = True
        logger.info("Telnet session open to %s:%d", self.host, self.port)

    async def disconnect(self) -> None:
        if self._conn is None:
            return
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(_executor, self._conn.disconnect)
        except Exception as exc:
            logger.warning("Telnet close error for %s: %s", self.host, exc)
        self._connected = False
        self._conn = None
        logger.info("Telnet session to %s closed", self.host)

    async def run_command(self, command: str,
                          timeout: float | None = None) -> CommandResult:
        if not self._connected or self._conn is None:
            raise CommandError(command, "not connected")

        from netmiko.exceptions import ReadTimeout

        kwargs: dict = {"read_timeout": timeout or self.timeout}
        if self.prompt_pattern:
            kwargs["expect_string"] = self.prompt_pattern

        loop = asyncio.get_running_loop()
        try:
            output = await loop.run_in_executor(
                _executor,
                partial(self._conn.send_command, command, **kwargs),
            )
        except ReadTimeout as exc:
            raise CommandTimeout(command, str(exc)) from exc
        except (OSError, EOFError) as exc:
            raise CommandError(command, f"session lost: {exc}") from exc

        return CommandResult(
            command=command, lines=split_output(output),
            driver_used="telnet", success=True,
        )
