"""Typed settings configuration - single source of truth."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str | None = None

    # UI
    ui_origin: str = "http://localhost:5173"

    # HERE (geocoding + routing share one key)
    here_api_key: SecretStr = SecretStr("")
    here_geocode_url: str = "https://geocode.search.hereapi.com/v1/geocode"
    here_router_url: str = "https://router.hereapi.com/v8/routes"

    # Amadeus flight search
    amadeus_client_id: str = ""
    amadeus_client_secret: SecretStr = SecretStr("")
    amadeus_base_url: str = "https://test.api.amadeus.com"

    # Narrative generator (OpenAI-compatible)
    openai_api_key: SecretStr = SecretStr("")
    openai_base_url: str | None = None
    openai_model: str = "gpt-4.1-nano"
    narrative_max_tokens: int = 1000
    narrative_temperature: float = 0.7
    narrative_failure_mode: Literal["isolate", "abort"] = "isolate"
    narrative_timeout_seconds: float = 30.0

    # Provider call bound (seconds)
    provider_timeout_seconds: float = 4.0

    # Planning constants
    flight_search_offset_days: int = 7
    misc_cost_baseline: int = 500

    # Static data overrides (JSON files)
    airport_codes_path: str | None = None
    visa_rules_path: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@dataclass(frozen=True)
class ProviderConfig:
    """Provider credentials and limits injected into the plan aggregator.

    Built once from Settings so leaf calls never read the environment and
    tests can describe provider availability directly.
    """

    here_api_key: str = ""
    here_geocode_url: str = "https://geocode.search.hereapi.com/v1/geocode"
    here_router_url: str = "https://router.hereapi.com/v8/routes"
    amadeus_client_id: str = ""
    amadeus_client_secret: str = ""
    amadeus_base_url: str = "https://test.api.amadeus.com"
    openai_api_key: str = ""
    openai_base_url: str | None = None
    openai_model: str = "gpt-4.1-nano"
    narrative_max_tokens: int = 1000
    narrative_temperature: float = 0.7
    narrative_failure_mode: Literal["isolate", "abort"] = "isolate"
    narrative_timeout_seconds: float = 30.0
    timeout_seconds: float = 4.0
    flight_search_offset_days: int = 7
    misc_cost_baseline: int = 500

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfig":
        """Snapshot provider configuration from application settings."""
        return cls(
            here_api_key=settings.here_api_key.get_secret_value(),
            here_geocode_url=settings.here_geocode_url,
            here_router_url=settings.here_router_url,
            amadeus_client_id=settings.amadeus_client_id,
            amadeus_client_secret=settings.amadeus_client_secret.get_secret_value(),
            amadeus_base_url=settings.amadeus_base_url,
            openai_api_key=settings.openai_api_key.get_secret_value(),
            openai_base_url=settings.openai_base_url,
            openai_model=settings.openai_model,
            narrative_max_tokens=settings.narrative_max_tokens,
            narrative_temperature=settings.narrative_temperature,
            narrative_failure_mode=settings.narrative_failure_mode,
            narrative_timeout_seconds=settings.narrative_timeout_seconds,
            timeout_seconds=settings.provider_timeout_seconds,
            flight_search_offset_days=settings.flight_search_offset_days,
            misc_cost_baseline=settings.misc_cost_baseline,
        )

    @property
    def here_configured(self) -> bool:
        return bool(self.here_api_key)

    @property
    def amadeus_configured(self) -> bool:
        return bool(self.amadeus_client_id and self.amadeus_client_secret)

    @property
    def narrative_configured(self) -> bool:
        return bool(self.openai_api_key)
