from __future__ import annotations

from datetime import timedelta

import pytest

from matchrelay.config import RelayConfig, normalize_store_url
from matchrelay.exceptions import MatchRelayConfigError


def test_normalize_store_url_extracts_url_from_pasted_cli_command() -> None:
    pasted = "redis-cli --tls -u redis://default:pw@eu1-example.upstash.io:6379"
    assert normalize_store_url(pasted) == "rediss://default:pw@eu1-example.upstash.io:6379"


def test_normalize_store_url_leaves_plain_urls_alone() -> None:
    assert normalize_store_url(" redis://localhost:6379/0 ") == "redis://localhost:6379/0"
    assert normalize_store_url("") is None
    assert normalize_store_url(None) is None


def test_normalize_store_url_rejects_cli_command_without_url() -> None:
    with pytest.raises(MatchRelayConfigError):
        normalize_store_url("redis-cli -h localhost")


def test_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("PANDASCORE_API_KEY", " key-123 ")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379")
    monkeypatch.setenv("MATCHRELAY_POLL_INTERVAL", "45")
    monkeypatch.setenv("MATCHRELAY_REMINDER_MINUTES", "10")
    monkeypatch.setenv("MATCHRELAY_NOTIFICATIONS_ENABLED", "off")

    config = RelayConfig.from_env()

    assert config.api_key == "key-123"
    assert config.store_url == "redis://cache:6379"
    assert config.poll_interval == 45.0
    assert config.reminder_window == timedelta(minutes=10)
    assert config.notifications_enabled is False


def test_config_overrides_win_over_env(monkeypatch) -> None:
    monkeypatch.setenv("MATCHRELAY_POLL_INTERVAL", "45")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379")

    config = RelayConfig.from_env(poll_interval=5.0, store_url=None)

    assert config.poll_interval == 5.0
    assert config.store_url is None


def test_config_rejects_non_numeric_env(monkeypatch) -> None:
    monkeypatch.setenv("MATCHRELAY_POLL_INTERVAL", "soon")
    with pytest.raises(MatchRelayConfigError, match="MATCHRELAY_POLL_INTERVAL"):
        RelayConfig.from_env()


def test_config_validates_values() -> None:
    with pytest.raises(MatchRelayConfigError):
        RelayConfig(poll_interval=0)
    with pytest.raises(MatchRelayConfigError):
        RelayConfig(store_timeout=-1)
