"""Configuration models for the translation client and engine."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.features.translation.constants import (
    DEFAULT_CLIENT_ID,
    DEFAULT_ENDPOINT,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_TIMEOUT_SECONDS,
)


class TranslatorConfig(BaseModel):
    """Configuration for batch translation.

    Central configuration for the remote endpoint and the engine's
    concurrency and failure policy. Holds no record data.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    endpoint: Annotated[str, Field(min_length=1)] = DEFAULT_ENDPOINT
    client_id: Annotated[str, Field(min_length=1)] = DEFAULT_CLIENT_ID
    timeout_seconds: Annotated[float, Field(ge=1.0, le=300.0)] = (
        DEFAULT_TIMEOUT_SECONDS
    )
    max_concurrency: Annotated[int, Field(ge=1, le=256)] = DEFAULT_MAX_CONCURRENCY
    fail_fast: bool = Field(
        default=False,
        description="If True, abort the whole batch on the first unit failure",
    )

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Ensure the endpoint is an http(s) URL without a query string."""
        if not v.startswith(("http://", "https://")):
            msg = f"Endpoint must be an http(s) URL: {v}"
            raise ValueError(msg)
        if "?" in v:
            msg = "Endpoint must not carry a query string; parameters are added per call"
            raise ValueError(msg)
        return v

    def build_params(
        self, text: str, source_lang: str, target_lang: str
    ) -> dict[str, str]:
        """Build query parameters for one translation call.

        Args:
            text: Source text.
            source_lang: Source language code.
            target_lang: Target language code.

        Returns:
            Query parameters; httpx URL-encodes the values.
        """
        return {
            "client": self.client_id,
            "sl": source_lang,
            "tl": target_lang,
            "dt": "t",
            "q": text,
        }
