"""
pixel_admin/services/provisioning.py

Validation and submission of new pixel requests.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pixel_admin.errors import BackendRequestError, ProvisioningError
from pixel_admin.logging_utils import log_event
from pixel_admin.schemas.pixels import GeneratePixelResponse

logger = logging.getLogger(__name__)

_CLIENT_NAME_RE = re.compile(r"^[_a-zA-Z0-9]+$")
_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def validate_client_name(client_name: str) -> str:
    name = client_name.strip()
    if not name:
        raise ProvisioningError("Client name is required")
    if not _CLIENT_NAME_RE.match(name):
        raise ProvisioningError(
            "Client name can only contain letters, numbers, and underscores (no hyphens)"
        )
    return name


def format_website_url(url: str) -> str:
    """
    Prefix `https://` when no http(s) scheme is given; otherwise keep as entered.
    """

    formatted = url.strip()
    if not formatted:
        raise ProvisioningError("Website URL is required")
    if not _SCHEME_RE.match(formatted):
        formatted = "https://" + formatted
    return formatted


@dataclass(frozen=True)
class ProvisionedPixel:
    client_name: str
    website: str
    pixel_snippet: str
    sheet_url: str | None = None


class GenerateBackend(Protocol):
    def generate_pixel(self, *, client: str, website: str) -> GeneratePixelResponse: ...


class PixelProvisioner:
    def __init__(self, *, backend: GenerateBackend) -> None:
        self._backend = backend

    def generate(self, client_name: str, website: str) -> ProvisionedPixel:
        name = validate_client_name(client_name)
        url = format_website_url(website)

        try:
            response = self._backend.generate_pixel(client=name, website=url)
        except BackendRequestError as exc:
            log_event(logger, logging.ERROR, "pixel_generate_failed", client=name, status=exc.status_code)
            raise ProvisioningError(exc.detail or "Failed to generate pixel") from exc

        if not response.pixel_snippet:
            raise ProvisioningError(response.error or "Unknown error")

        log_event(logger, logging.INFO, "pixel_generated", client=name, website=url)
        return ProvisionedPixel(
            client_name=name,
            website=url,
            pixel_snippet=response.pixel_snippet,
            sheet_url=response.sheet_url,
        )
