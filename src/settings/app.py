"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.features.translation.config import TranslatorConfig
from src.features.translation.constants import (
    DEFAULT_CLIENT_ID,
    DEFAULT_ENDPOINT,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_TIMEOUT_SECONDS,
)


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    translate_endpoint: str = Field(
        default=DEFAULT_ENDPOINT, validation_alias="TRANSLATE_ENDPOINT"
    )
    translate_client_id: str = Field(
        default=DEFAULT_CLIENT_ID, validation_alias="TRANSLATE_CLIENT_ID"
    )
    translate_timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS, validation_alias="TRANSLATE_TIMEOUT_SECONDS"
    )
    translate_max_concurrency: int = Field(
        default=DEFAULT_MAX_CONCURRENCY, validation_alias="TRANSLATE_MAX_CONCURRENCY"
    )
    translate_fail_fast: bool = Field(
        default=False, validation_alias="TRANSLATE_FAIL_FAST"
    )
    allowed_origins: str = Field(
        default="http://localhost:3000", validation_alias="ALLOWED_ORIGINS"
    )
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def translator_config(self) -> TranslatorConfig:
        """Build the translator configuration from environment values."""
        return TranslatorConfig(
            endpoint=self.translate_endpoint,
            client_id=self.translate_client_id,
            timeout_seconds=self.translate_timeout_seconds,
            max_concurrency=self.translate_max_concurrency,
            fail_fast=self.translate_fail_fast,
        )

    def cors_origins(self) -> list[str]:
        """Return the configured CORS origins."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
