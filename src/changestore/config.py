"""
Settings read from the environment (and a local `.env`, if present).

Every field maps to `CHANGESTORE_<FIELD>`, e.g. CHANGESTORE_DATABASE_URL.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server and database settings."""

    model_config = SettingsConfigDict(
        env_prefix="CHANGESTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = "sqlite+aiosqlite:///./changes.db"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    create_schema: bool = True  # create the `changes` table on start-up


def get_settings() -> Settings:
    # not cached, the environment is read on every call
    return Settings()
