"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): one instance per process
    - CLI flags override settings by constructing Settings explicitly

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - No env prefix: PORT and HOST work as they do for other dev servers
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    data_file: str = "db.json"

    # Server
    host: str = "localhost"
    port: int = 3000
    static_dirs: list[str] = []

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
