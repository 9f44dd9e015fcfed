"""Configuration management - config-driven architecture."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="127.0.0.1", description="Bind host")
    port: int = Field(default=8000, description="Bind port")
    public_url: str = Field(default="http://localhost:8000/", description="Base URL used in share links")

    # LLM (OpenAI-compatible)
    llm_base_url: str | None = Field(default=None, description="OpenAI-compatible API base URL")
    llm_api_key: str = Field(default="", description="API key for LLM provider")
    llm_model: str = Field(default="gpt-4o-mini", description="Model for structured story text")
    llm_temperature: float = Field(default=0.3, description="Kept low for factual consistency")
    llm_timeout_seconds: float | None = Field(default=None, description="Provider request timeout")
    image_model: str = Field(default="gpt-image-1", description="Model for story illustrations")
    image_size: str = Field(default="1024x1024", description="Illustration size")

    # Data
    data_dir: Path = Field(default=Path("data"), description="Directory for JSON persistence")
    redis_url: str | None = Field(default=None, description="Redis URL instead of the file store")
    storage_quota_bytes: int | None = Field(default=None, description="Emulated local storage quota")
    history_limit: int = Field(default=50, description="Max anecdotes kept in history")
    history_fallback_limit: int = Field(default=10, description="History size retried when a write fails")

    # Client
    default_language: str = Field(default="English")
    shared_topic: str | None = Field(default=None, description="Launch parameter from a shared link")

    # Analytics (GA4 Measurement Protocol)
    ga_measurement_id: str = Field(default="", description="GA4 measurement ID, e.g. G-XXXX")
    ga_api_secret: str = Field(default="", description="GA4 Measurement Protocol API secret")


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML config file."""
    if not config_path.exists():
        return {}
    with config_path.open() as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


@lru_cache
def get_catalog(config_dir_str: str = "") -> dict[str, Any]:
    """Load suggestion and language catalog from config."""
    if not config_dir_str:
        config_dir = Path(__file__).parent.parent.parent / "config"
    else:
        config_dir = Path(config_dir_str)
    return load_yaml_config(config_dir / "catalog.yaml")
