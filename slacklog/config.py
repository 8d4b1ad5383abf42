"""Configuration management for slacklog."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5033)
    log_level: str = Field(default="INFO")

    # Reporters configuration
    reporters_config: str = Field(default="reporters.yaml")

    @property
    def reporters_config_path(self) -> Path:
        return Path(self.reporters_config)


@lru_cache
def get_settings() -> Settings:
    return Settings()
