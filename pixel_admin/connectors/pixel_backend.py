"""
pixel_admin/connectors/pixel_backend.py

Client for the pixel admin REST backend.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from urllib.parse import quote

import requests
from pydantic import ValidationError

from pixel_admin.config import BackendSettings
from pixel_admin.connectors.base import BaseBackendClient
from pixel_admin.errors import BackendRequestError
from pixel_admin.logging_utils import log_event
from pixel_admin.schemas.pixels import (
    BulkDeleteRequest,
    ClientDataExport,
    GeneratePixelRequest,
    GeneratePixelResponse,
    PixelListResponse,
    PixelRecord,
)

logger = logging.getLogger(__name__)


def _pixel_path(pixel_id: str, action: str) -> str:
    return f"/admin/pixels/{quote(pixel_id, safe='')}/{action}"


class PixelBackendClient(BaseBackendClient):
    """
    Typed access to the admin endpoints used by the listing and deletion flows.
    """

    def __init__(
        self,
        *,
        settings: BackendSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="pixel_backend", settings=settings, session=session)

    def list_pixels(self) -> list[PixelRecord]:
        payload = self._request_json(method="GET", path="/admin/pixels")
        if not isinstance(payload, dict):
            raise BackendRequestError(f"{self.source}: pixel listing was not an object.")
        try:
            parsed = PixelListResponse.model_validate(payload)
        except ValidationError as exc:
            raise BackendRequestError(f"{self.source}: pixel listing was malformed: {exc}") from exc
        log_event(logger, logging.DEBUG, "pixels_listed", count=len(parsed.pixels))
        return parsed.pixels

    def bulk_delete(self, pixel_ids: Sequence[str]) -> None:
        """
        Schedule a soft-delete of every id in one request.
        """

        body = BulkDeleteRequest(pixel_ids=list(pixel_ids))
        self._request(
            method="POST",
            path="/admin/pixels/delete",
            json_body=body.model_dump(by_alias=True),
        )
        log_event(logger, logging.INFO, "pixels_soft_deleted", pixel_ids=body.pixel_ids)

    def download_client_data(self, pixel_id: str) -> ClientDataExport:
        payload = self._request_json(method="GET", path=_pixel_path(pixel_id, "download"))
        try:
            return ClientDataExport.model_validate(payload)
        except ValidationError as exc:
            raise BackendRequestError(f"{self.source}: export payload was malformed: {exc}") from exc

    def delete_from_simpleaudience(self, pixel_id: str) -> None:
        self._request(method="POST", path=_pixel_path(pixel_id, "delete-from-simpleaudience"))

    def delete_from_database(self, pixel_id: str) -> None:
        self._request(method="POST", path=_pixel_path(pixel_id, "delete-from-database"))

    def generate_pixel(self, *, client: str, website: str) -> GeneratePixelResponse:
        """
        Ask the backend to provision a pixel for a client.

        Unlike the admin endpoints, a failed generation still returns JSON
        with an `error` field, which is carried on the raised exception.
        """

        body = GeneratePixelRequest(client=client, website=website)
        payload = self._request_json(method="POST", path="/generate", json_body=body.model_dump())
        try:
            return GeneratePixelResponse.model_validate(payload)
        except ValidationError as exc:
            raise BackendRequestError(f"{self.source}: generate response was malformed: {exc}") from exc
