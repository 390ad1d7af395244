"""
pixel_admin/domain package marker.
"""

from pixel_admin.domain.deletion import (
    Complete,
    Confirm,
    DeletionAttempt,
    DeletionMode,
    DeletionPhase,
    Deleting,
    Downloading,
)

__all__ = [
    "Complete",
    "Confirm",
    "DeletionAttempt",
    "DeletionMode",
    "DeletionPhase",
    "Deleting",
    "Downloading",
]
