"""Configuration management using pydantic-settings."""

from functools import lru_cache
from urllib.parse import urlsplit

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="IVAC_PROXY_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Interface the proxy listens on")
    port: int = Field(default=5000, description="Port the proxy listens on", ge=1, le=65535)
    upstream_origin: str = Field(
        default="https://payment.ivacbd.com",
        description="Origin every request is forwarded to",
    )
    max_attempts: int = Field(default=3, description="Upstream attempts per request", ge=1)
    base_delay_ms: int = Field(default=1000, description="First retry backoff in milliseconds", ge=0)
    request_timeout: float = Field(default=30.0, description="Per-attempt timeout in seconds", gt=0)
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def upstream_host(self) -> str:
        """Authority part of the upstream origin, used for the Host header."""
        return urlsplit(self.upstream_origin).netloc


@lru_cache
def get_settings() -> Settings:
    """Get the application settings instance."""
    return Settings()
