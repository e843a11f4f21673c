"""Configuration and settings management using pydantic-settings."""
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable loading."""

    model_config = SettingsConfigDict(
        env_prefix="NODE_SDK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core settings
    env: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(default=True, description="Emit JSON log lines")

    # Transport
    http_timeout_s: float = Field(
        default=30,
        description="Timeout for every outbound HTTP request in seconds",
    )
    user_agent: str = Field(
        default="findymail-nodes/1.0",
        description="User-Agent header sent with every request",
    )

    # FindyMail credential used by the CLI
    findymail_api_key: SecretStr | None = Field(
        default=None,
        description="FindyMail API key (CLI fallback when --api-key is not given)",
    )
    findymail_header_scheme: Literal["apiKey", "bearer"] = Field(
        default="apiKey",
        description="How the API key is sent: X-API-Key header or Bearer token",
    )

    @field_validator("http_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate that the timeout is positive."""
        if v <= 0:
            raise ValueError("http_timeout_s must be positive")
        return v


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
