"""Application configuration using Pydantic Settings."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# Sections of settings.json that are read by their own loaders
NESTED_SECTIONS = ("matching",)


def _default_data_dir() -> Path:
    # __file__ is backend/shortbox/core/config.py, so go up to backend/ and add data
    return (Path(__file__).parent.parent.parent / "data").resolve()


def json_config_settings_source(
    settings: BaseSettings | None = None,
) -> dict[str, Any]:  # noqa: ANN001
    """Load settings from settings.json file.

    This source has lowest priority - env vars will override JSON values.
    Nested sections such as "matching" are skipped.

    Returns:
        Dictionary with setting keys (lowercase) and values from JSON file.
    """
    # SHORTBOX_DATA_DIR wins so tests and containers can relocate all data
    data_dir_env = os.environ.get("SHORTBOX_DATA_DIR", "")
    data_dir = Path(data_dir_env) if data_dir_env else _default_data_dir()
    settings_file = data_dir / "config" / "settings.json"

    if not settings_file.exists():
        return {}

    try:
        with settings_file.open("r") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}

    if not isinstance(data, dict):
        return {}

    # Nested host format: {"host": {"bind_address": "...", "port": ...}}
    flattened: dict[str, Any] = {}
    if isinstance(data.get("host"), dict):
        host = data["host"]
        if "bind_address" in host:
            flattened["host_bind_address"] = host["bind_address"]
        if "port" in host:
            flattened["host_port"] = host["port"]

    for key, value in data.items():
        if key == "host" or key in NESTED_SECTIONS:
            continue
        flattened[key] = value

    return {k.lower(): v for k, v in flattened.items()}


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from:
    1. JSON file (settings.json in config directory) - lowest priority
    2. .env file
    3. Environment variables - override JSON/.env
    4. Values passed to Settings() - highest priority

    All settings are prefixed with SHORTBOX_ (e.g., SHORTBOX_ENV=production).

    See: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SHORTBOX_",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources - JSON file first, then env vars."""
        return (  # type: ignore[return-value]
            json_config_settings_source,
            dotenv_settings,
            env_settings,
            init_settings,
        )

    # Application
    env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Application environment (development, production, testing)",
    )

    # Host settings
    host_bind_address: str = Field(
        default="127.0.0.1",
        description="Host address to bind the server to",
    )

    host_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port number to bind the server to",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    data_dir: Path = Field(
        default_factory=_default_data_dir,
        description="Base directory for all application data (config, knowledge base, logs)",
    )

    # Processing
    batch_item_delay_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Pause between files in a batch run",
    )

    detect_publishers: bool = Field(
        default=True,
        description="Guess the publisher from well-known character names when nothing matches",
    )

    # Scraper fallback
    comicvine_api_key: str | None = Field(
        default=None,
        description="API key for the remote metadata source",
    )

    marvel_public_key: str | None = Field(
        default=None,
        description="Marvel API public key; Marvel lookups need both keys",
    )

    marvel_private_key: str | None = Field(
        default=None,
        description="Marvel API private key",
    )

    scraper_source: Literal["mock", "comicvine"] = Field(
        default="mock",
        description="Remote metadata source used by the scraper fallback",
    )

    scraper_delay_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Pause before each remote scraper lookup",
    )

    # Subdirectories under data_dir
    @property
    def config_dir(self) -> Path:
        """Directory for configuration files (settings.json, knowledge base)."""
        return self.data_dir / "config"

    @property
    def logs_dir(self) -> Path:
        """Directory for log files."""
        return self.data_dir / "logs"

    @property
    def knowledge_base_file(self) -> Path:
        return self.config_dir / "knowledge_base.json"

    @property
    def is_debug(self) -> bool:
        """Check if running in debug/development mode."""
        return self.env == "development"

    @property
    def is_testing(self) -> bool:
        return self.env == "testing"

    def model_post_init(self, __context: object) -> None:
        """Post-initialization: create data directories if they don't exist."""
        self.data_dir = self.data_dir.resolve()
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance.

    The cache is cleared when reload_settings() is called.
    """
    return Settings()


def reload_settings() -> Settings:
    """Reload settings from all sources (JSON, .env, env vars).

    Returns:
        New Settings instance
    """
    get_settings.cache_clear()
    return get_settings()
