"""
pixel_admin/config.py

Environment-driven configuration for the pixel admin tools.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

LOCAL_API_URL = "http://localhost:4000"
PRODUCTION_API_URL = "https://api.thynkdata.com"

_LOCAL_ENVIRONMENTS = {"local", "development", "dev"}


def load_env_files(project_root: Path | None = None) -> None:
    """
    Merge KEY=VALUE lines from `.env` then `.env.local` into the process
    environment. Variables that are already set keep their value.
    """

    root = project_root or Path(__file__).resolve().parents[1]
    for env_path in (root / ".env", root / ".env.local"):
        if not env_path.is_file():
            continue
        for line in env_path.read_text(encoding="utf-8").splitlines():
            key, sep, value = line.strip().partition("=")
            key = key.strip()
            if not sep or not key or key.startswith("#"):
                continue
            os.environ.setdefault(key, value.strip().strip("\"'"))


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _env(name: str) -> str | None:
    """
    Return the stripped value of *name*, or None when unset or blank.
    """

    _load_env_once()
    value = (os.getenv(name) or "").strip()
    return value or None


def _env_float(name: str, default: float) -> float:
    value = _env(name)
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


def _default_api_url() -> str:
    environment = (_env("ENVIRONMENT") or "local").lower()
    if environment in _LOCAL_ENVIRONMENTS:
        return LOCAL_API_URL
    return PRODUCTION_API_URL


@dataclass(frozen=True)
class BackendSettings:
    """
    Connection settings for the pixel REST backend.
    """

    base_url: str = LOCAL_API_URL
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class DeletionSettings:
    """
    Runtime settings for the deletion workflow host surfaces.
    """

    export_dir: Path = Path("exports")
    dismiss_delay_seconds: float = 2.0


@lru_cache(maxsize=1)
def get_backend_settings() -> BackendSettings:
    """
    Return cached backend settings from environment variables.

    PIXEL_API_URL wins; otherwise the URL follows ENVIRONMENT
    (local/development use the localhost backend).
    """

    base_url = _env("PIXEL_API_URL") or _default_api_url()
    return BackendSettings(
        base_url=base_url.rstrip("/"),
        timeout_seconds=max(1.0, _env_float("PIXEL_API_TIMEOUT_SECONDS", 30.0)),
    )


@lru_cache(maxsize=1)
def get_deletion_settings() -> DeletionSettings:
    """
    Return cached deletion workflow settings from environment variables.
    """

    return DeletionSettings(
        export_dir=Path(_env("PIXEL_EXPORT_DIR") or "exports"),
        dismiss_delay_seconds=max(0.0, _env_float("DELETE_DIALOG_DISMISS_SECONDS", 2.0)),
    )


def get_log_level() -> str:
    return (_env("LOG_LEVEL") or "INFO").upper()
