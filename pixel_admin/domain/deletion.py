"""
pixel_admin/domain/deletion.py

Domain models for the staged single-pixel deletion workflow.

A deletion attempt moves through four phases:

    confirm      waiting for the operator; carries the last failure, if any
    downloading  exporting the client's data (save-and-delete only)
    deleting     deprovisioning from SimpleAudience, then purging the database
    complete     terminal; the attempt is dismissed by the host surface

Each phase is its own frozen dataclass so that only the fields that make
sense for it exist (a `Complete` phase cannot carry an error).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union


class DeletionMode(str, Enum):
    SAVE_AND_DELETE = "save-and-delete"
    DELETE_ONLY = "delete-only"


@dataclass(frozen=True)
class Confirm:
    name: ClassVar[str] = "confirm"

    last_error: str | None = None

    @property
    def message(self) -> str:
        return self.last_error or ""


@dataclass(frozen=True)
class Downloading:
    name: ClassVar[str] = "downloading"

    message: str = "Downloading client data..."


@dataclass(frozen=True)
class Deleting:
    name: ClassVar[str] = "deleting"

    message: str


@dataclass(frozen=True)
class Complete:
    name: ClassVar[str] = "complete"

    message: str = "Deletion completed successfully!"


DeletionPhase = Union[Confirm, Downloading, Deleting, Complete]


@dataclass
class DeletionAttempt:
    """
    One in-flight deletion of a single pixel. Never persisted.
    """

    pixel_id: str
    mode: DeletionMode | None = None
    phase: DeletionPhase = field(default_factory=Confirm)

    @property
    def message(self) -> str:
        return self.phase.message

    @property
    def is_busy(self) -> bool:
        return isinstance(self.phase, (Downloading, Deleting))

    @property
    def is_complete(self) -> bool:
        return isinstance(self.phase, Complete)
