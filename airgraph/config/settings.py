"""Plugin configuration — YAML file plus Munin-style environment options."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from airgraph.device.models import DEFAULT_PORTS, TransportMode
from airgraph.errors import ConfigurationError

CONFIG_ENV_VAR = "AIRGRAPH_CONFIG"

# Munin exposes ``env.<name>`` plugin options as plain environment variables.
ENV_OPTIONS: dict[str, str] = {
    "transport": "transport",
    "port": "port",
    "user": "username",
    "username": "username",
    "password": "password",
    "ssh_key": "ssh_key",
    "ping_target": "ping_target",
    "ping_name": "ping_name",
    "host": "host",
    "timeout": "command_timeout",
    "prompt": "prompt_pattern",
    "AIRGRAPH_LOG_LEVEL": "log_level",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

PLUGIN_NAME_PATTERN = re.compile(r"^airos_(?P<host>[A-Za-z0-9][A-Za-z0-9.\-]*)$")


def _expand_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""
    pattern = re.compile(r"\$\{([^}]+)\}")
    def replacer(match: re.Match) -> str:
        var = match.group(1)
        return os.environ.get(var, match.group(0))
    return pattern.sub(replacer, value)


def _walk_and_expand(obj: object) -> object:
    """Recursively expand environment variables in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_expand(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_expand(item) for item in obj]
    return obj


class Settings(BaseModel):
    transport: TransportMode
    port: int | None = None
    username: str = "ubnt"
    password: str | None = None
    ssh_key: str | None = None
    host: str | None = None
    ping_target: str | None = None
    ping_name: str | None = None
    ping_count: int = 3
    command_timeout: float = 10.0
    prompt_pattern: str | None = None
    cpu_settle: float = 1.0
    ping_settle: float = 1.0
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def effective_port(self) -> int:
        if self.port is not None:
            return self.port
        return DEFAULT_PORTS[self.transport]

    @property
    def ping_display_name(self) -> str | None:
        return self.ping_name or self.ping_target


def _from_environ(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect recognised options from the environment; empty values are unset."""
    raw: dict[str, str] = {}
    for env_name, option in ENV_OPTIONS.items():
        value = environ.get(env_name)
        if value:
            raw[option] = value
    return raw


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build settings from an optional YAML file overlaid with the environment.

    Raises ConfigurationError for unreadable files and invalid values,
    including a missing or unsupported transport mode.
    """
    if environ is None:
        environ = os.environ
    if path is None:
        path = environ.get(CONFIG_ENV_VAR) or None

    raw: dict = {}
    if path is not None:
        path = Path(path).expanduser()
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        raw.update(_walk_and_expand(loaded))

    raw.update(_from_environ(environ))

    if not raw.get("transport"):
        modes = ", ".join(m.value for m in TransportMode)
        raise ConfigurationError(f"No transport mode configured (expected one of: {modes})")

    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def resolve_host(settings: Settings, prog_name: str) -> str:
    """Work out the target device.

    An explicit ``host`` option wins; otherwise the plugin must be invoked
    through a symlink named ``airos_<host>``.
    """
    if settings.host:
        return settings.host
    name = Path(prog_name).name
    m = PLUGIN_NAME_PATTERN.match(name)
    if not m:
        raise ConfigurationError(
            f"Cannot derive target host from plugin name {name!r} "
            "(expected airos_<host>)"
        )
    return m.group("host")
