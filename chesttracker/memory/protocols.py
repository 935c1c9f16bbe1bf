"""
Collaborator protocols for the memory core.

The game client supplies these; the core only depends on the contracts.
"""

# pylint: disable=unnecessary-ellipsis  # Reason: Protocol method bodies use ... per typing.Protocol convention

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..schemas.memory import Memory
    from .session import ConnectionState


class LivenessCheck(Protocol):
    """Answers whether a container still exists at a memory's position in the live world."""

    def __call__(self, memory: Memory) -> bool:
        """Return False if the remembered container is gone."""
        ...


class ConnectionStateSource(Protocol):
    """Snapshot of what the client is currently connected to."""

    def __call__(self) -> ConnectionState:
        """Return the current connection state."""
        ...
