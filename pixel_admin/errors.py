"""
pixel_admin/errors.py

Exceptions shared by the pixel admin services.
"""

from __future__ import annotations


class PixelAdminError(Exception):
    """Base exception for pixel admin failures."""


class BackendRequestError(PixelAdminError):
    """
    Raised when a backend call fails at the transport, status or JSON level.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class FetchError(PixelAdminError):
    """Raised when the pixel listing cannot be loaded."""


class StepFailure(PixelAdminError):
    """
    Raised when one deletion step (export, deprovision, purge) fails.
    """

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        self.message = message
        super().__init__(message)


class DeletionWorkflowError(PixelAdminError):
    """Raised when a controller call is not allowed in the current phase."""


class DeletionInProgressError(DeletionWorkflowError):
    """Raised when a deletion is started while another one is active."""


class BulkDeletionError(PixelAdminError):
    """Raised when a bulk soft-delete request is rejected."""


class ProvisioningError(PixelAdminError):
    """Raised when a pixel cannot be generated for a client."""
