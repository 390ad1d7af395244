"""
pixel_admin/services package marker.
"""

from pixel_admin.services.bulk_deletion import BulkDeletionService
from pixel_admin.services.deletion_workflow import (
    DeletionWorkflowController,
    build_deletion_controller,
)
from pixel_admin.services.export import JsonFileExporter, export_filename
from pixel_admin.services.listing import ListingSummary, PixelListing, apply_view
from pixel_admin.services.provisioning import PixelProvisioner, ProvisionedPixel

__all__ = [
    "BulkDeletionService",
    "DeletionWorkflowController",
    "JsonFileExporter",
    "ListingSummary",
    "PixelListing",
    "PixelProvisioner",
    "ProvisionedPixel",
    "apply_view",
    "build_deletion_controller",
    "export_filename",
]
