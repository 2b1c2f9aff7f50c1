"""Tests for settings and logging configuration."""

from pathlib import Path

import pytest

from srecha.config import get_settings, reset_settings
from srecha.config.logging import REDACTED, redact_secrets
from srecha.config.settings import Settings, StorageSettings


class TestSettings:
    def test_paths_derive_from_data_dir(self, tmp_path: Path):
        settings = Settings(storage=StorageSettings(data_dir=tmp_path / "d"))

        assert settings.storage.db_path == tmp_path / "d" / "srecha-invoice.db"
        assert settings.storage.documents_dir == tmp_path / "d" / "invoices"
        assert (tmp_path / "d").is_dir()

    def test_defaults(self, tmp_path: Path):
        settings = Settings(storage=StorageSettings(data_dir=tmp_path))

        assert settings.documents.file_extension == ".html"
        assert settings.documents.require_invoice is False
        assert settings.auth.admin_password is None

    def test_environment_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "env"))
        monkeypatch.setenv("STORAGE_MAX_RETRIES", "7")
        monkeypatch.setenv("DOCUMENTS_REQUIRE_INVOICE", "true")
        monkeypatch.setenv("AUTH_ADMIN_PASSWORD", "s3cret")

        settings = Settings()

        assert settings.storage.data_dir == tmp_path / "env"
        assert settings.storage.max_retries == 7
        assert settings.documents.require_invoice is True
        assert settings.auth.admin_password.get_secret_value() == "s3cret"
        assert "s3cret" not in repr(settings)

    def test_global_settings_reset(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
        reset_settings()
        try:
            assert get_settings() is get_settings()
        finally:
            reset_settings()


class TestRedaction:
    def test_sensitive_keys_masked(self):
        event = redact_secrets(
            None, "info", {"event": "login", "username": "admin", "password": "s3cret"}
        )
        assert event["password"] == REDACTED
        assert event["username"] == "admin"
