"""Memory core: item matching, per-dimension indexes, the database and session handling."""

from .database import MemoryDatabase
from .item_matching import FULL_DURABILITY_TAG, are_stacks_equivalent, should_ignore_durability
from .session import ConnectionState, MemorySession, RealmInfo, RemoteAddress, resolve_session_key
from .world_index import WorldIndex

__all__ = [
    "FULL_DURABILITY_TAG",
    "ConnectionState",
    "MemoryDatabase",
    "MemorySession",
    "RealmInfo",
    "RemoteAddress",
    "WorldIndex",
    "are_stacks_equivalent",
    "resolve_session_key",
    "should_ignore_durability",
]
