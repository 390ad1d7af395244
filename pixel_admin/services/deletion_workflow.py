"""
pixel_admin/services/deletion_workflow.py

Staged single-pixel deletion: optional export, SimpleAudience deprovision,
database purge, then listing reconciliation.

Only one attempt exists at a time. Steps run one after another; a failing
step sends the attempt back to `confirm` with a message, and nothing that
already succeeded is rolled back. Retrying re-runs every step from the top.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from typing import Protocol

from pixel_admin.config import get_backend_settings, get_deletion_settings
from pixel_admin.connectors.pixel_backend import PixelBackendClient
from pixel_admin.domain.deletion import (
    Complete,
    Confirm,
    DeletionAttempt,
    DeletionMode,
    DeletionPhase,
    Deleting,
    Downloading,
)
from pixel_admin.errors import (
    BackendRequestError,
    DeletionInProgressError,
    DeletionWorkflowError,
    StepFailure,
)
from pixel_admin.logging_utils import log_event
from pixel_admin.schemas.pixels import ClientDataExport
from pixel_admin.services.export import ClientDataExporter, JsonFileExporter, export_filename
from pixel_admin.services.listing import PixelListing

logger = logging.getLogger(__name__)

EXPORT_FAILED = "Failed to download client data"
DEPROVISION_FAILED = "Failed to delete pixel from SimpleAudience"
PURGE_FAILED = "Failed to delete client from database"
PURGE_PARTIAL_NOTE = "pixel was already removed from SimpleAudience; retry to finish the purge"

DEPROVISION_PROGRESS = "Deleting pixel from SimpleAudience..."
PURGE_PROGRESS = "Deleting client data from database..."

PhaseListener = Callable[[DeletionAttempt], None]


class DeletionBackend(Protocol):
    def download_client_data(self, pixel_id: str) -> ClientDataExport: ...

    def delete_from_simpleaudience(self, pixel_id: str) -> None: ...

    def delete_from_database(self, pixel_id: str) -> None: ...


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _failure_message(base: str, exc: Exception) -> str:
    detail = exc.detail if isinstance(exc, BackendRequestError) else None
    return f"{base}: {detail}" if detail else base


class DeletionWorkflowController:
    """
    Drives one `DeletionAttempt` at a time through its phases.
    """

    def __init__(
        self,
        *,
        backend: DeletionBackend,
        listing: PixelListing,
        exporter: ClientDataExporter,
        today: Callable[[], date] = _utc_today,
        dismiss_delay_seconds: float = 2.0,
    ) -> None:
        self._backend = backend
        self._listing = listing
        self._exporter = exporter
        self._today = today
        self._listeners: list[PhaseListener] = []
        self._attempt: DeletionAttempt | None = None
        self.dismiss_delay_seconds = dismiss_delay_seconds
        self.last_export_location: str | None = None

    @property
    def active(self) -> DeletionAttempt | None:
        return self._attempt

    def subscribe(self, listener: PhaseListener) -> Callable[[], None]:
        """
        Register *listener* for every phase change; returns an unsubscribe hook.
        """

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def begin(self, pixel_id: str) -> DeletionAttempt:
        if self._attempt is not None:
            raise DeletionInProgressError(
                f"A deletion for pixel '{self._attempt.pixel_id}' is already in progress."
            )
        self._attempt = DeletionAttempt(pixel_id=pixel_id)
        self.last_export_location = None
        log_event(logger, logging.INFO, "pixel_deletion_opened", pixel_id=pixel_id)
        self._publish(self._attempt)
        return self._attempt

    def cancel(self) -> None:
        attempt = self._require_attempt()
        if not isinstance(attempt.phase, Confirm):
            raise DeletionWorkflowError(f"Cannot cancel a deletion in phase '{attempt.phase.name}'.")
        log_event(logger, logging.INFO, "pixel_deletion_cancelled", pixel_id=attempt.pixel_id)
        self._attempt = None

    def dismiss(self) -> None:
        attempt = self._require_attempt()
        if not isinstance(attempt.phase, Complete):
            raise DeletionWorkflowError(f"Cannot dismiss a deletion in phase '{attempt.phase.name}'.")
        self._attempt = None

    def run(self, mode: DeletionMode | str) -> DeletionAttempt:
        """
        Execute the steps for *mode* from the `confirm` phase.

        Step failures never escape: the attempt returns to `confirm` with the
        failure message and stays open for a retry or a cancel.
        """

        attempt = self._require_attempt()
        if not isinstance(attempt.phase, Confirm):
            raise DeletionWorkflowError(f"Cannot start a deletion in phase '{attempt.phase.name}'.")

        attempt.mode = DeletionMode(mode)
        pixel_id = attempt.pixel_id
        log_event(
            logger,
            logging.INFO,
            "pixel_deletion_started",
            pixel_id=pixel_id,
            mode=attempt.mode.value,
        )

        try:
            if attempt.mode is DeletionMode.SAVE_AND_DELETE:
                self._transition(attempt, Downloading())
                self._export(pixel_id)

            self._transition(attempt, Deleting(message=DEPROVISION_PROGRESS))
            self._deprovision(pixel_id)

            self._transition(attempt, Deleting(message=PURGE_PROGRESS))
            self._purge(pixel_id)
        except StepFailure as failure:
            log_event(
                logger,
                logging.ERROR,
                "pixel_deletion_step_failed",
                pixel_id=pixel_id,
                step=failure.step,
                message=failure.message,
            )
            self._transition(attempt, Confirm(last_error=failure.message))
            return attempt

        self._listing.remove_by_ids([pixel_id])
        self._transition(attempt, Complete())
        log_event(logger, logging.INFO, "pixel_deletion_completed", pixel_id=pixel_id)
        return attempt

    def _export(self, pixel_id: str) -> None:
        try:
            export = self._backend.download_client_data(pixel_id)
        except BackendRequestError as exc:
            raise StepFailure("export", _failure_message(EXPORT_FAILED, exc)) from exc

        client_name = export.client_name
        if client_name is None:
            record = self._listing.get(pixel_id)
            client_name = record.client_name if record is not None else pixel_id

        try:
            self.last_export_location = self._exporter.save(
                export_filename(client_name, self._today()),
                export.data,
            )
        except OSError as exc:
            raise StepFailure("export", f"{EXPORT_FAILED}: {exc}") from exc

    def _deprovision(self, pixel_id: str) -> None:
        try:
            self._backend.delete_from_simpleaudience(pixel_id)
        except BackendRequestError as exc:
            raise StepFailure("deprovision", _failure_message(DEPROVISION_FAILED, exc)) from exc

    def _purge(self, pixel_id: str) -> None:
        try:
            self._backend.delete_from_database(pixel_id)
        except BackendRequestError as exc:
            message = f"{_failure_message(PURGE_FAILED, exc)} ({PURGE_PARTIAL_NOTE})"
            raise StepFailure("purge", message) from exc

    def _transition(self, attempt: DeletionAttempt, phase: DeletionPhase) -> None:
        attempt.phase = phase
        self._publish(attempt)

    def _publish(self, attempt: DeletionAttempt) -> None:
        for listener in list(self._listeners):
            try:
                listener(attempt)
            except Exception as exc:  # noqa: BLE001
                # A broken observer must not leave the attempt stuck mid-phase.
                log_event(
                    logger,
                    logging.WARNING,
                    "pixel_deletion_listener_failed",
                    pixel_id=attempt.pixel_id,
                    phase=attempt.phase.name,
                    error=str(exc),
                )

    def _require_attempt(self) -> DeletionAttempt:
        if self._attempt is None:
            raise DeletionWorkflowError("No deletion is in progress.")
        return self._attempt


def build_deletion_controller(
    listing: PixelListing,
    *,
    backend: DeletionBackend | None = None,
    exporter: ClientDataExporter | None = None,
) -> DeletionWorkflowController:
    """
    Build a controller wired to the configured backend and export directory.
    """

    settings = get_deletion_settings()
    return DeletionWorkflowController(
        backend=backend or PixelBackendClient(settings=get_backend_settings()),
        listing=listing,
        exporter=exporter or JsonFileExporter(settings.export_dir),
        dismiss_delay_seconds=settings.dismiss_delay_seconds,
    )
