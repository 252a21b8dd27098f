"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file from project root
_project_root = Path(__file__).resolve().parents[3]
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

MAX_UPLOAD_BYTES = 20 * 1024 * 1024  # 20MB


class LLMConfig(BaseSettings):
    """Completion backend configuration."""

    provider: str = "openai"
    model: str = "gpt-4o-mini"
    temperature: float | None = None
    max_tokens: int | None = None
    base_url: str | None = None

    # Read on every chat request, so a key added to the environment later is picked up
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "LLM_OPENAI_API_KEY"),
    )

    model_config = SettingsConfigDict(env_prefix="LLM_", populate_by_name=True)


class UploadConfig(BaseSettings):
    """Document upload limits."""

    max_file_size_bytes: int = MAX_UPLOAD_BYTES

    model_config = SettingsConfigDict(env_prefix="UPLOAD_")


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    app_name: str = "Exam Prep Chat"
    debug: bool = False
    log_level: str = "INFO"
    log_to_file: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list = Field(default_factory=lambda: ["*"])

    llm: LLMConfig = Field(default_factory=LLMConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)

    model_config = SettingsConfigDict(env_file=str(_env_file), env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def load_llm_config() -> LLMConfig:
    """Read the completion backend configuration from the current environment."""
    return LLMConfig()
