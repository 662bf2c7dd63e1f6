"""Paramiko/SSH driver — non-interactive remote execution, one channel per command."""

from __future__ import annotations

import asyncio
import logging
import socket
from concurrent.futures import ThreadPoolExecutor
from functools import partial

import paramiko

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


class SSHExecDriver(Transport):
    """Device transport using SSH ``exec`` requests.

    Authenticates with either the password or the private key (never both,
    and never an agent or ``~/.ssh`` keys).  Every command runs on a fresh
    exec channel with stderr merged into stdout, so there is no prompt
    state to track between commands.
    """

    def __init__(self, host: str, username: str, password: str | None = None,
                 ssh_key: str | None = None, port: int = 22,
                 timeout: float = 10.0):
        super().__init__(host, username, password, ssh_key, port, timeout)
        self._client: paramiko.SSHClient | None = None

    @property
    def uses_key(self) -> bool:
        return self.ssh_key is not None

    def _open(self) -> paramiko.SSHClient:
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        kwargs: dict = {
            "hostname": self.host,
            "port": self.port,
            "username": self.username,
            "timeout": self.timeout,
            "auth_timeout": self.timeout,
            "banner_timeout": self.timeout,
            "look_for_keys": False,
            "allow_agent": False,
        }
        if self.uses_key:
            kwargs["key_filename"] = self.ssh_key
        else:
            kwargs["password"] = self.password
        try:
            client.connect(**kwargs)
        except paramiko.AuthenticationException as exc:
            client.close()
            raise AuthenticationError(self.host, str(exc)) from exc
        except (paramiko.SSHException, OSError) as exc:
            client.close()
            raise ConnectError(self.host, str(exc)) from exc
        return client

    async def connect(self) -> None:
        loop = asyncio.get_running_loop()
        self._client = await loop.run_in_executor(_executor, self._open)
        self._connected = True
        logger.info("SSH %s authentication to %s:%d succeeded",
                    "key" if self.uses_key else "password", self.host, self.port)

    async def disconnect(self) -> None:
        if self._client is None:
            return
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(_executor, self._client.close)
        except Exception as exc:
            logger.warning("SSH close error for %s: %s", self.host, exc)
        self._connected = False
        self._client = None
        logger.info("SSH session to %s closed", self.host)

    def _exec(self, command: str, timeout: float) -> str:
        assert self._client is not None
        transport = self._client.get_transport()
        if transport is None or not transport.is_active():
            raise CommandError(command, "SSH session is closed")
        try:
            channel = transport.open_session(timeout=timeout)
        except (paramiko.SSHException, OSError, EOFError) as exc:
            raise CommandError(command, str(exc)) from exc
        try:
            # merge before exec so early stderr is not split off
            channel.set_combined_stderr(True)
            channel.settimeout(timeout)
            channel.exec_command(command)
            data = channel.makefile("rb").read()
            status = channel.recv_exit_status()
        except socket.timeout as exc:
            raise CommandTimeout(command, f"no output within {timeout}s") from exc
        except (paramiko.SSHException, OSError, EOFError) as exc:
            raise CommandError(command, str(exc)) from exc
        finally:
            channel.close()
        if status != 0:
            logger.debug("%r exited with status %d on %s", command, status, self.host)
        return data.decode("utf-8", errors="replace")

    async def run_command(self, command: str,
                          timeout: float | None = None) -> CommandResult:
        if not self._connected or self._client is None:
            raise CommandError(command, "not connected")

        loop = asyncio.get_running_loop()
        output = await loop.run_in_executor(
            _executor, partial(self._exec, command, timeout or self.timeout),
        )
        return CommandResult(
            command=command, lines=split_output(output),
            driver_used="ssh-key" if self.uses_key else "ssh-password",
            success=True,
        )
