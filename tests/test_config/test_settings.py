"""Tests for configuration loading and target resolution."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from airgraph.config.settings import Settings, load_config, resolve_host
from airgraph.device.models import TransportMode
from airgraph.errors import ConfigurationError


def _write_yaml(path: Path, data: dict) -> None:
    with open(path, "w") as f:
        yaml.dump(data, f)


# --- Loading ---


def test_defaults_with_only_transport():
    settings = load_config(environ={"transport": "telnet"})
    assert settings.transport == TransportMode.TELNET
    assert settings.effective_port == 23
    assert settings.username == "ubnt"
    assert settings.ping_target is None
    assert settings.ping_display_name is None
    assert settings.command_timeout == 10.0


def test_munin_environment_options():
    env = {
        "transport": "ssh-password",
        "port": "2222",
        "user": "admin",
        "password": "secret",
        "ping_target": "8.8.8.8",
        "ping_name": "google-dns",
        "timeout": "4",
    }
    settings = load_config(environ=env)
    assert settings.transport == TransportMode.SSH_PASSWORD
    assert settings.effective_port == 2222
    assert settings.username == "admin"
    assert settings.password == "secret"
    assert settings.ping_display_name == "google-dns"
    assert settings.command_timeout == 4.0


def test_ping_name_defaults_to_target():
    settings = load_config(environ={"transport": "telnet", "ping_target": "10.0.0.1"})
    assert settings.ping_display_name == "10.0.0.1"


def test_empty_env_values_are_ignored():
    settings = load_config(environ={"ping_target": "", "transport": "ssh-password"})
    assert settings.ping_target is None


@pytest.mark.parametrize("environ", [{}, {"transport": ""}, {"user": "admin"}])
def test_missing_transport_raises(environ):
    with pytest.raises(ConfigurationError, match="No transport mode configured"):
        load_config(environ=environ)


@pytest.mark.parametrize("value", ["", None])
def test_empty_transport_in_file_raises(tmp_path, value):
    path = tmp_path / "airgraph.yaml"
    _write_yaml(path, {"transport": value, "password": "pw"})
    with pytest.raises(ConfigurationError, match="No transport mode configured"):
        load_config(path, environ={})


def test_settings_model_requires_transport():
    with pytest.raises(ValidationError):
        Settings(username="ubnt")


def test_ssh_mode_default_port():
    settings = load_config(environ={"transport": "ssh-key", "ssh_key": "/k"})
    assert settings.effective_port == 22


def test_yaml_file_with_env_expansion(tmp_path, monkeypatch):
    monkeypatch.setenv("AIROS_SECRET", "s3cret")
    path = tmp_path / "airgraph.yaml"
    _write_yaml(path, {"transport": "ssh-password", "password": "${AIROS_SECRET}",
                       "cpu_settle": 2})
    settings = load_config(path, environ={})
    assert settings.password == "s3cret"
    assert settings.cpu_settle == 2.0


def test_environment_overrides_yaml(tmp_path):
    path = tmp_path / "airgraph.yaml"
    _write_yaml(path, {"transport": "telnet", "username": "fromfile", "port": 23})
    settings = load_config(path, environ={"user": "fromenv"})
    assert settings.username == "fromenv"
    assert settings.port == 23


def test_config_path_from_environment(tmp_path):
    path = tmp_path / "airgraph.yaml"
    _write_yaml(path, {"transport": "telnet", "ping_target": "1.1.1.1"})
    settings = load_config(environ={"AIRGRAPH_CONFIG": str(path)})
    assert settings.ping_target == "1.1.1.1"


def test_unexpanded_variable_kept_verbatim(tmp_path, monkeypatch):
    monkeypatch.delenv("AIRGRAPH_UNSET_VAR", raising=False)
    path = tmp_path / "airgraph.yaml"
    _write_yaml(path, {"transport": "telnet", "password": "${AIRGRAPH_UNSET_VAR}"})
    assert load_config(path, environ={}).password == "${AIRGRAPH_UNSET_VAR}"


def test_unsupported_transport_raises():
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_config(environ={"transport": "rsh"})


def test_invalid_port_raises():
    with pytest.raises(ConfigurationError):
        load_config(environ={"transport": "telnet", "port": "telnet"})


def test_invalid_log_level_raises():
    with pytest.raises(ConfigurationError):
        load_config(environ={"transport": "telnet", "AIRGRAPH_LOG_LEVEL": "chatty"})


def test_log_level_normalised():
    assert load_config(environ={"transport": "telnet", "AIRGRAPH_LOG_LEVEL": "debug"}).log_level == "DEBUG"


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigurationError, match="Cannot read"):
        load_config(tmp_path / "nope.yaml", environ={})


def test_non_mapping_file_raises(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- one\n- two\n")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_config(path, environ={})


# --- Host resolution ---


@pytest.mark.parametrize("prog, host", [
    ("airos_10.20.0.2", "10.20.0.2"),
    ("/etc/munin/plugins/airos_tower-north.example.net", "tower-north.example.net"),
])
def test_resolve_host_from_plugin_name(prog, host):
    assert resolve_host(Settings(transport="telnet"), prog) == host


@pytest.mark.parametrize("prog", ["airos_", "airos", "/usr/bin/airgraph", "__main__.py"])
def test_resolve_host_rejects_other_names(prog):
    with pytest.raises(ConfigurationError, match="Cannot derive target host"):
        resolve_host(Settings(transport="telnet"), prog)


def test_explicit_host_wins():
    assert resolve_host(Settings(transport="telnet", host="192.168.1.20"), "airgraph") == "192.168.1.20"
