from __future__ import annotations

import os
from pathlib import Path

import pytest

from pixel_admin import config


@pytest.fixture(autouse=True)
def _clear_caches(monkeypatch):
    for name in (
        "PIXEL_API_URL",
        "PIXEL_API_TIMEOUT_SECONDS",
        "ENVIRONMENT",
        "PIXEL_EXPORT_DIR",
        "DELETE_DIALOG_DISMISS_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    config.get_backend_settings.cache_clear()
    config.get_deletion_settings.cache_clear()
    yield
    config.get_backend_settings.cache_clear()
    config.get_deletion_settings.cache_clear()


def test_local_environment_uses_localhost() -> None:
    settings = config.get_backend_settings()
    assert settings.base_url == config.LOCAL_API_URL
    assert settings.timeout_seconds == 30.0


def test_production_environment_uses_public_api(monkeypatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    assert config.get_backend_settings().base_url == config.PRODUCTION_API_URL


def test_explicit_url_wins_and_is_trimmed(monkeypatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("PIXEL_API_URL", " https://staging.example/ ")
    assert config.get_backend_settings().base_url == "https://staging.example"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("PIXEL_API_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("DELETE_DIALOG_DISMISS_SECONDS", "-3")
    assert config.get_backend_settings().timeout_seconds == 30.0
    assert config.get_deletion_settings().dismiss_delay_seconds == 0.0


def test_deletion_settings_defaults() -> None:
    settings = config.get_deletion_settings()
    assert settings.export_dir == Path("exports")
    assert settings.dismiss_delay_seconds == 2.0


def test_load_env_files_does_not_override(tmp_path, monkeypatch) -> None:
    (tmp_path / ".env").write_text(
        "# comment\nPIXEL_EXPORT_DIR='/tmp/exports'\nENVIRONMENT=staging\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("ENVIRONMENT", "local")
    # registers PIXEL_EXPORT_DIR with monkeypatch so it is removed afterwards
    monkeypatch.setenv("PIXEL_EXPORT_DIR", "unset")
    monkeypatch.delenv("PIXEL_EXPORT_DIR")

    config.load_env_files(tmp_path)

    assert os.environ["PIXEL_EXPORT_DIR"] == "/tmp/exports"
    assert os.environ["ENVIRONMENT"] == "local"


def test_blank_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("PIXEL_API_URL", "   ")
    monkeypatch.setenv("PIXEL_API_TIMEOUT_SECONDS", "")
    monkeypatch.setenv("PIXEL_EXPORT_DIR", " ")
    assert config.get_backend_settings() == config.BackendSettings(config.LOCAL_API_URL, 30.0)
    assert config.get_deletion_settings().export_dir == Path("exports")


def test_load_env_files_skips_commented_assignments(tmp_path, monkeypatch) -> None:
    (tmp_path / ".env.local").write_text("#LOG_LEVEL=DEBUG\nnot a pair\n", encoding="utf-8")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    config.load_env_files(tmp_path)

    assert "LOG_LEVEL" not in os.environ
