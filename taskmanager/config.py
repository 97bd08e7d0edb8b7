from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide settings, read from ``TASKMANAGER_*`` env vars or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="TASKMANAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    database_path: str = "todo.db"

    # JWT
    jwt_secret: Optional[SecretStr] = None
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Server
    host: str = "127.0.0.1"
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    return Settings()
