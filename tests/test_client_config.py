"""Tests for configuration defaults and host resolution."""

import pytest

from pjlink_client import (
    DEFAULT_PORT,
    IDLE_DISCONNECT_TIMEOUT,
    POLL_INTERVAL,
    REFRESH_INTERVAL,
    PJLinkClientConfig,
    PJLinkError,
    resolve_projector_tcp_host,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("PJLINK_HOST", "PJLINK_PORT", "PJLINK_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = PJLinkClientConfig()
    assert config.default_host is None
    assert config.default_port == DEFAULT_PORT == 4352
    assert config.password is None
    assert config.poll_interval_secs == POLL_INTERVAL == 0.1
    assert config.refresh_secs == REFRESH_INTERVAL == 1.0
    assert config.idle_disconnect_secs == IDLE_DISCONNECT_TIMEOUT == 4.0


def test_environment(clean_env):
    clean_env.setenv("PJLINK_HOST", "10.0.0.5")
    clean_env.setenv("PJLINK_PORT", "14352")
    clean_env.setenv("PJLINK_PASSWORD", "secret")
    config = PJLinkClientConfig()
    assert config.default_host == "10.0.0.5"
    assert config.default_port == 14352
    assert config.password == "secret"
    assert config.has_password


def test_base_config_and_overrides(clean_env):
    base = PJLinkClientConfig("10.0.0.5", "secret", idle_disconnect_secs=2.0)
    config = PJLinkClientConfig(refresh_secs=0.5, base_config=base)
    assert config.default_host == "10.0.0.5"
    assert config.password == "secret"
    assert config.idle_disconnect_secs == 2.0
    assert config.refresh_secs == 0.5
    assert base.refresh_secs == REFRESH_INTERVAL


def test_invalid_poll_interval(clean_env):
    with pytest.raises(PJLinkError):
        PJLinkClientConfig(poll_interval_secs=0)


def test_resolve_host(clean_env):
    assert resolve_projector_tcp_host("10.0.0.5") == ("10.0.0.5", 4352)
    assert resolve_projector_tcp_host("tcp://10.0.0.5:5000") == ("10.0.0.5", 5000)
    assert resolve_projector_tcp_host("projector.local", 4353) == ("projector.local", 4353)


def test_resolve_host_from_environment(clean_env):
    clean_env.setenv("PJLINK_HOST", "10.0.0.9")
    assert resolve_projector_tcp_host() == ("10.0.0.9", 4352)


def test_resolve_host_errors(clean_env):
    with pytest.raises(PJLinkError):
        resolve_projector_tcp_host()
    with pytest.raises(PJLinkError):
        resolve_projector_tcp_host("sddp://projector")
    with pytest.raises(PJLinkError):
        resolve_projector_tcp_host("10.0.0.5:http")
