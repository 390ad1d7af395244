"""
pixel_admin/schemas package marker.
"""

from pixel_admin.schemas.pixels import (
    BulkDeleteRequest,
    ClientDataExport,
    GeneratePixelRequest,
    GeneratePixelResponse,
    PixelListResponse,
    PixelRecord,
)

__all__ = [
    "BulkDeleteRequest",
    "ClientDataExport",
    "GeneratePixelRequest",
    "GeneratePixelResponse",
    "PixelListResponse",
    "PixelRecord",
]
