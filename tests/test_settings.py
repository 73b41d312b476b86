"""Tests for configuration loading."""

import pytest
from pathlib import Path

from jarbook.config import AppSettings, StorageSettings, get_settings, validate_all_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for pydantic-settings classes."""

    def test_storage_defaults(self, monkeypatch):
        monkeypatch.delenv("JARBOOK_STORAGE_BACKEND", raising=False)
        monkeypatch.delenv("JARBOOK_STORAGE_DATA_DIR", raising=False)
        settings = StorageSettings()
        assert settings.backend == "local"
        assert settings.data_dir == Path("data")

    def test_storage_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("JARBOOK_STORAGE_BACKEND", "sheets")
        monkeypatch.setenv("JARBOOK_STORAGE_DATA_DIR", str(tmp_path))
        settings = StorageSettings()
        assert settings.backend == "sheets"
        assert settings.data_dir == tmp_path

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("JARBOOK_STORAGE_BACKEND", "postgres")
        with pytest.raises(ValueError):
            StorageSettings()

    def test_app_defaults(self):
        settings = AppSettings()
        assert settings.top_categories_limit >= 1
        assert settings.currency_symbol

    def test_sheets_not_checked_for_local_backend(self, monkeypatch):
        monkeypatch.setenv("JARBOOK_STORAGE_BACKEND", "local")
        status = validate_all_settings()
        assert status["storage"] is True
        assert "google_sheets" not in status

    def test_sheets_checked_when_selected(self, monkeypatch):
        monkeypatch.setenv("JARBOOK_STORAGE_BACKEND", "sheets")
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        status = validate_all_settings()
        assert status["google_sheets"] is False
        assert "google_sheets_error" in status
