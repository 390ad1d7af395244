"""
pixel_admin/schemas/pixels.py

Wire schemas for the pixel admin backend contract.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class _WireModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class PixelRecord(_WireModel):
    """
    One provisioned pixel as returned by `GET /admin/pixels`.
    """

    id: str = Field(min_length=1)
    client_name: str = Field(alias="clientName")
    website: str
    sheet_url: str | None = Field(default=None, alias="sheetUrl")
    created_at: datetime = Field(alias="createdAt")
    industry: str | None = None
    event_count: int = Field(default=0, ge=0, alias="eventCount")
    visitor_count: int = Field(default=0, ge=0, alias="visitorCount")
    deletion_scheduled: datetime | None = Field(default=None, alias="deletionScheduled")

    @field_validator("created_at", "deletion_scheduled")
    @classmethod
    def _normalize_timezone(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value) if value is not None else None

    @field_validator("industry", "sheet_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PixelListResponse(_WireModel):
    pixels: list[PixelRecord] = Field(default_factory=list)


class BulkDeleteRequest(_WireModel):
    """
    Body of `POST /admin/pixels/delete`.
    """

    pixel_ids: list[str] = Field(min_length=1, alias="pixelIds")


class ClientDataExport(_WireModel):
    """
    Body of `GET /admin/pixels/{id}/download`.

    `data` is kept as the raw mapping so the saved file mirrors the backend.
    """

    data: dict[str, Any]

    @property
    def client_name(self) -> str | None:
        value = self.data.get("clientName")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None


class GeneratePixelRequest(_WireModel):
    client: str = Field(min_length=1)
    website: str = Field(min_length=1)


class GeneratePixelResponse(_WireModel):
    """
    Body of a successful `POST /generate`.
    """

    pixel_snippet: str | None = Field(default=None, alias="pixelSnippet")
    sheet_url: str | None = Field(default=None, alias="sheetUrl")
    error: str | None = None
