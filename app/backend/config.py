"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenRouter (OpenAI-compatible endpoint)
    openrouter_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("openrouter_api_key", "xai_api_key"),
    )
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    http_referer: str = "http://localhost:5173"
    app_title: str = "PDF Classifier"

    # Model selection
    default_model: str = "Nvidia-AI"
    extra_models: dict[str, dict] = Field(default_factory=dict)

    # Timeouts (seconds)
    request_timeout_seconds: float = 60.0
    document_timeout_seconds: float = 120.0
    batch_timeout_seconds: float | None = 900.0

    # Upload limits
    max_files: int = 20
    max_file_size_bytes: int = 50 * 1024 * 1024
    repair_filename_encoding: bool = True

    # Server
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",  # Vite development server
        "http://127.0.0.1:5173",
    ]
    host: str = "0.0.0.0"
    port: int = 5000

    # Debug flags
    debug: bool = False

    model_config = SettingsConfigDict(
        # Load from .env file in the backend directory
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.
    """
    return Settings()
