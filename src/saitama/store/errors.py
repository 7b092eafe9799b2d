"""Record store errors."""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for record store operations."""


class DirectoryUnavailableError(StoreError):
    """Raised when the per-user data directory cannot be determined or created."""


class CorruptStoreError(StoreError):
    """Raised when a data or import file cannot be read as a problem collection."""


class StoreWriteError(StoreError):
    """Raised when serialized problems cannot be written or moved into place."""


class BackupError(StoreError):
    """Raised when a snapshot of the data file cannot be taken."""


class ImportValidationError(StoreError):
    """Raised when an imported record is missing its identifier or name.

    Attributes:
        index: Zero-based position of the first offending record.
    """

    def __init__(self, index: int, message: str | None = None) -> None:
        self.index = index
        super().__init__(message or f"Invalid problem at index {index} (id or name is empty)")
