"""Tests for settings and the provider configuration snapshot."""

import pytest

from backend.app.config import ProviderConfig, Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HERE_API_KEY", "AMADEUS_CLIENT_ID", "AMADEUS_CLIENT_SECRET", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)  # type: ignore[call-arg]
    config = ProviderConfig.from_settings(settings)

    assert settings.misc_cost_baseline == 500
    assert settings.flight_search_offset_days == 7
    assert settings.narrative_failure_mode == "isolate"
    assert config.timeout_seconds == settings.provider_timeout_seconds
    assert config.here_configured is False
    assert config.amadeus_configured is False
    assert config.narrative_configured is False


def test_secrets_come_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HERE_API_KEY", "here-secret")
    monkeypatch.setenv("AMADEUS_CLIENT_ID", "client")
    monkeypatch.setenv("AMADEUS_CLIENT_SECRET", "amadeus-secret")
    monkeypatch.setenv("NARRATIVE_FAILURE_MODE", "abort")

    settings = Settings(_env_file=None)  # type: ignore[call-arg]
    config = ProviderConfig.from_settings(settings)

    # SecretStr keeps keys out of reprs
    assert "here-secret" not in repr(settings)
    assert config.here_api_key == "here-secret"
    assert config.amadeus_client_secret == "amadeus-secret"
    assert config.here_configured is True
    assert config.amadeus_configured is True
    assert config.narrative_failure_mode == "abort"


def test_amadeus_needs_both_credentials() -> None:
    assert ProviderConfig(amadeus_client_id="id").amadeus_configured is False
    assert ProviderConfig(amadeus_client_secret="s").amadeus_configured is False


def test_invalid_failure_mode_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NARRATIVE_FAILURE_MODE", "explode")

    with pytest.raises(ValueError):
        Settings(_env_file=None)  # type: ignore[call-arg]
