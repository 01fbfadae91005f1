"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - store_backend selects exactly one TabularStore implementation

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults for every non-secret setting: the memory backend runs with no setup
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from boardsync.core.domain_types import (
    DEFAULT_BOARD_ID, DEFAULT_BOARD_TITLE, RETENTION_DAYS, StoreBackend,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    store_backend: StoreBackend = StoreBackend.MEMORY

    # Google Sheets
    spreadsheet_id: str | None = None
    sheets_access_token: str = ""
    sheets_api_base_url: str = "https://sheets.googleapis.com/v4"
    sheets_timeout_seconds: int = 30

    # SQL table store
    database_url: str = "sqlite+aiosqlite:///./boardsync.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Board
    board_id: str = DEFAULT_BOARD_ID
    board_title: str = DEFAULT_BOARD_TITLE
    retention_days: int = RETENTION_DAYS

    # Startup
    provision_on_startup: bool = True
    load_on_startup: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
