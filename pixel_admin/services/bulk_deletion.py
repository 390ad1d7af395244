"""
pixel_admin/services/bulk_deletion.py

Soft-delete of several selected pixels in one request.

The backend schedules the hard delete 30 days out; nothing here touches the
staged export/deprovision/purge workflow.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from pixel_admin.errors import BackendRequestError, BulkDeletionError
from pixel_admin.logging_utils import log_event
from pixel_admin.services.listing import PixelListing

logger = logging.getLogger(__name__)

BULK_DELETE_FAILED = "Failed to delete pixels"


class BulkDeleteBackend(Protocol):
    def bulk_delete(self, pixel_ids: list[str]) -> None: ...


class BulkDeletionService:
    def __init__(self, *, backend: BulkDeleteBackend, listing: PixelListing) -> None:
        self._backend = backend
        self._listing = listing

    def delete(self, pixel_ids: Iterable[str]) -> list[str]:
        """
        Soft-delete *pixel_ids*; on success drop them and clear the selection.

        All-or-nothing: a rejected request leaves the listing untouched.
        """

        ids = list(dict.fromkeys(pixel_ids))
        if not ids:
            raise ValueError("Select at least one pixel to delete.")

        try:
            self._backend.bulk_delete(ids)
        except BackendRequestError as exc:
            log_event(
                logger,
                logging.ERROR,
                "pixel_bulk_delete_failed",
                pixel_ids=ids,
                status=exc.status_code,
            )
            message = f"{BULK_DELETE_FAILED}: {exc.detail}" if exc.detail else BULK_DELETE_FAILED
            raise BulkDeletionError(message) from exc

        self._listing.remove_by_ids(ids)
        self._listing.clear_selection()
        log_event(logger, logging.INFO, "pixel_bulk_delete_completed", count=len(ids))
        return ids

    def delete_selected(self) -> list[str]:
        return self.delete(sorted(self._listing.selected_ids))
