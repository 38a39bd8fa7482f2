"""Application configuration via pydantic settings."""

import enum
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MissingRatePolicy(str, enum.Enum):
    """How the estimator treats stay dates absent from the rate table."""

    FAIL = "fail"
    SKIP = "skip"


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = Field("Villa Rate Estimator", alias="APP_NAME")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    provider_base_url: str = Field("http://localhost:8000", alias="PROVIDER_BASE_URL")
    provider_api_token: str | None = Field(default=None, alias="PROVIDER_API_TOKEN")
    provider_timeout_seconds: float = Field(10.0, alias="PROVIDER_TIMEOUT_SECONDS")

    missing_rate_policy: MissingRatePolicy = Field(
        MissingRatePolicy.FAIL, alias="MISSING_RATE_POLICY"
    )
    default_dp_percentage: int = Field(30, ge=0, le=100, alias="DEFAULT_DP_PERCENTAGE")
    rate_sanity_ceiling: Decimal = Field(
        Decimal("100000000"), alias="RATE_SANITY_CEILING"
    )
    currency_prefix: str = Field("Rp", alias="CURRENCY_PREFIX")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[2] / ".env",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("missing_rate_policy", mode="before")
    @classmethod
    def _normalise_policy(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
