"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden with a FENGSHUI_-prefixed environment variable
    - get_settings() is cached (lru_cache), single instance per process

Design Decisions:
    - Defaults for everything: the service runs out of the box with no .env
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="FENGSHUI_", case_sensitive=False,
    )

    # Persistence: the catalog document
    data_file: Path = Path("data") / "fengShuiData.json"

    @field_validator("data_file", mode="before")
    @classmethod
    def expand_user(cls, v: object) -> object:
        """Allow ~ in FENGSHUI_DATA_FILE."""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
