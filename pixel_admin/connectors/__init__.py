"""
pixel_admin/connectors package marker.
"""

from pixel_admin.connectors.base import BaseBackendClient
from pixel_admin.connectors.pixel_backend import PixelBackendClient

__all__ = [
    "BaseBackendClient",
    "PixelBackendClient",
]
