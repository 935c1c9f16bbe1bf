"""
Exception hierarchy for ChestTracker.

Only the file store raises these. The memory database catches them at its
load/save boundary, logs them and degrades to an empty or unsaved state, so
callers of the database never see them.
"""

from datetime import datetime
from pathlib import Path
from typing import Any


class ChestTrackerError(Exception):
    """
    Base exception for all ChestTracker errors.

    Carries a technical message plus structured details for logging.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class MemoryFileError(ChestTrackerError):
    """A memory file could not be read, decoded, validated or written."""

    def __init__(self, message: str, file_path: Path, operation: str = "unknown", **kwargs):
        super().__init__(message, **kwargs)
        self.file_path = file_path
        self.operation = operation
        self.details["file_path"] = str(file_path)
        self.details["operation"] = operation
