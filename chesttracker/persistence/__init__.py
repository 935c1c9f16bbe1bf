"""Persistence layer for ChestTracker memory files."""

from .memory_file_store import MemoryFileStore

__all__ = ["MemoryFileStore"]
