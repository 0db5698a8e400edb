# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings. The instance is
frozen: it is loaded once at process start and shared read-only by every
request.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is invalid or internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # === Remote model ===
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    openai_base_url: str = "https://api.openai.com"
    openai_system_prompt: str = ""
    request_timeout_seconds: float = 60.0

    # === Image normalization ===
    image_max_dimension: int = 1024
    image_passthrough_max_bytes: int = 1024 * 1024
    image_jpeg_quality: int = 85

    # === HTTP server ===
    server_host: str = "0.0.0.0"
    server_port: int = 8080
    cors_allow_origins: str = "*"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("openai_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate value ranges; all problems are reported together."""
        errors: list[str] = []

        if not self.openai_base_url.startswith(("http://", "https://")):
            errors.append("OPENAI_BASE_URL must start with http:// or https://")

        if self.request_timeout_seconds <= 0:
            errors.append("REQUEST_TIMEOUT_SECONDS must be > 0")

        if self.image_max_dimension <= 0:
            errors.append("IMAGE_MAX_DIMENSION must be > 0")

        if self.image_passthrough_max_bytes <= 0:
            errors.append("IMAGE_PASSTHROUGH_MAX_BYTES must be > 0")

        if not 1 <= self.image_jpeg_quality <= 95:
            errors.append("IMAGE_JPEG_QUALITY must be between 1 and 95")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def cors_allow_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    @property
    def chat_completions_url(self) -> str:
        return f"{self.openai_base_url}/v1/chat/completions"


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-deployment config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
