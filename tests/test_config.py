"""
Unit tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from changestore.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop any CHANGESTORE_* variables inherited from the shell."""
    for name in Settings.model_fields:
        monkeypatch.delenv(f"CHANGESTORE_{name.upper()}", raising=False)


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.port == 8000
        assert settings.create_schema is True

    def test_prefixed_overrides(self, monkeypatch):
        monkeypatch.setenv("CHANGESTORE_DATABASE_URL", "postgresql+asyncpg://u:p@db/changes")
        monkeypatch.setenv("CHANGESTORE_PORT", "9000")
        monkeypatch.setenv("CHANGESTORE_CREATE_SCHEMA", "false")
        monkeypatch.setenv("DATABASE_URL", "ignored")

        settings = Settings(_env_file=None)

        assert settings.database_url == "postgresql+asyncpg://u:p@db/changes"
        assert settings.port == 9000
        assert settings.create_schema is False

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("CHANGESTORE_LOG_LEVEL=DEBUG\nCHANGESTORE_HOST=127.0.0.1\n")

        settings = Settings(_env_file=env_file)

        assert settings.log_level == "DEBUG"
        assert settings.host == "127.0.0.1"

    def test_get_settings_reads_environment_each_call(self, monkeypatch):
        monkeypatch.setenv("CHANGESTORE_PORT", "8001")
        assert get_settings().port == 8001
        monkeypatch.setenv("CHANGESTORE_PORT", "8002")
        assert get_settings().port == 8002

    def test_invalid_value(self, monkeypatch):
        monkeypatch.setenv("CHANGESTORE_PORT", "not-a-port")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
