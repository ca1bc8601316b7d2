"""
Shared configuration management for the commissioning registry client.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://ismp.crpt.ru/api/v3/lk/documents/commissioning/contract/create"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="CRPT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging
    log_level: str = Field(default="info")

    # Observability
    enable_metrics: bool = Field(default=False)


class ClientConfig(BaseConfig):
    """Registry client configuration."""

    # Registry endpoint
    api_url: str = Field(default=DEFAULT_API_URL)
    token: str = Field(default="")
    request_timeout: float = Field(default=10.0)

    # Rate limiting: request_limit submissions per time_unit_seconds
    time_unit_seconds: float = Field(default=1.0)
    request_limit: int = Field(default=5)


def get_config(**overrides) -> ClientConfig:
    """Get client configuration, environment first, then explicit overrides."""
    return ClientConfig(**overrides)
