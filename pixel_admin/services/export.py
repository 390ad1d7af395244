"""
pixel_admin/services/export.py

Saving exported client data as JSON documents.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Protocol

from pixel_admin.logging_utils import log_event

logger = logging.getLogger(__name__)


def export_filename(client_name: str, on: date) -> str:
    """
    Build `<clientName>_data_<YYYY-MM-DD>.json`.
    """

    safe_name = client_name.replace("/", "_").replace("\\", "_")
    return f"{safe_name}_data_{on.isoformat()}.json"


def render_export(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, default=str)


class ClientDataExporter(Protocol):
    def save(self, filename: str, payload: dict[str, Any]) -> str:
        """Persist *payload* under *filename* and return where it went."""


class JsonFileExporter:
    """
    Writes exports into a local directory.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def save(self, filename: str, payload: dict[str, Any]) -> str:
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self._directory / filename
        target.write_text(render_export(payload), encoding="utf-8")
        log_event(logger, logging.INFO, "client_data_exported", path=str(target))
        return str(target)
