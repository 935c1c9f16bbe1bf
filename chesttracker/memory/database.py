"""
Memory database for ChestTracker.

One database holds every remembered container of a single world session,
split into one WorldIndex per dimension, and snapshots itself to a JSON file.
Nothing raised while loading or saving escapes: failures are logged and the
database degrades to an empty or unsaved state.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from ..exceptions import MemoryFileError
from ..persistence.memory_file_store import MemoryFileStore
from ..schemas.memory import BlockPos, ItemStack, Memory
from ..structured_logging.enhanced_logging_config import get_logger
from .item_matching import are_stacks_equivalent, should_ignore_durability
from .protocols import LivenessCheck
from .world_index import WorldIndex

logger = get_logger(__name__)


class MemoryDatabase:
    """
    All container memories of one session, keyed by dimension and position.

    Args:
        session_id: Session key; immutable for the lifetime of the instance
        store: File store the database loads from and saves to
        current_database: Returns whichever database is live right now. Stale
            search hits are removed from that database, which may differ from
            this one after a session switch. Defaults to this database.
    """

    def __init__(
        self,
        session_id: str,
        store: MemoryFileStore,
        current_database: Callable[[], MemoryDatabase | None] | None = None,
    ) -> None:
        self._id = session_id
        self._store = store
        self._current_database = current_database or (lambda: self)
        self._dimensions: dict[str, WorldIndex] = {}
        # set after a failed load so the unreadable file is not overwritten by an untouched database
        self._protect_file = False

    @property
    def id(self) -> str:
        return self._id

    @property
    def file_path(self) -> Path:
        return self._store.get_file_path(self._id)

    def __repr__(self) -> str:
        return f"<MemoryDatabase(id={self._id}, dimensions={len(self._dimensions)})>"

    def get_dimensions(self) -> set[str]:
        """Dimension identifiers that currently hold an index."""
        return set(self._dimensions)

    def get_index(self, dimension: str) -> WorldIndex | None:
        return self._dimensions.get(dimension)

    def _index_for(self, dimension: str) -> WorldIndex:
        index = self._dimensions.get(dimension)
        if index is None:
            index = WorldIndex()
            self._dimensions[dimension] = index
        return index

    def _mutated(self) -> None:
        self._protect_file = False

    # Lifecycle

    def load(self) -> None:
        """
        Replace the in-memory state with the session's file.

        A missing file gives an empty database. An unreadable or invalid file is
        logged, left untouched on disk and also gives an empty database.
        """
        file_path = self.file_path
        try:
            loaded = self._store.load(self._id)
        except MemoryFileError as e:
            logger.error("Error reading memory file", session_id=self._id, **e.to_dict())
            self._dimensions = {}
            self._protect_file = True
            return

        self._protect_file = False
        if loaded is None:
            logger.info("No data found", session_id=self._id, file_path=str(file_path))
            self._dimensions = {}
            return

        self._dimensions = {dimension: WorldIndex(memories) for dimension, memories in loaded.items()}
        logger.info(
            "Found data",
            session_id=self._id,
            file_path=str(file_path),
            dimensions=len(self._dimensions),
            memories=sum(len(index) for index in self._dimensions.values()),
        )

    def save(self) -> bool:
        """
        Write the database to its file.

        Returns:
            True if the file was written, False if saving failed or was skipped
        """
        if self._protect_file:
            logger.warning(
                "Skipping save of unmodified database loaded from an unreadable file",
                session_id=self._id,
                file_path=str(self.file_path),
            )
            return False
        try:
            file_path = self._store.save(
                self._id, {dimension: index.values() for dimension, index in self._dimensions.items()}
            )
        except MemoryFileError as e:
            logger.error("Error saving memory file", session_id=self._id, **e.to_dict())
            return False
        logger.info("Saved data", session_id=self._id, file_path=str(file_path))
        return True

    # Mutation

    def merge_items(self, dimension: str, memory: Memory) -> None:
        """
        Store the result of scanning one container.

        A memory with no items and no title is ignored. The stored value is a
        copy, so later changes to ``memory`` do not leak into the database.
        """
        if memory.is_empty():
            return
        self._index_for(dimension).upsert(memory.model_copy(deep=True))
        self._mutated()

    def merge_items_with_eviction(self, dimension: str, memory: Memory, to_remove: Iterable[BlockPos]) -> None:
        """
        Store a scan result after forgetting its own position and ``to_remove``.

        Used when one scan covers several positions (e.g. both halves of a double
        chest): positions no longer part of the container disappear.
        """
        index = self._dimensions.get(dimension)
        if index is not None:
            removed = index.remove(memory.position)
            removed = index.remove_many(to_remove) > 0 or removed
            if removed:
                self._mutated()
        self.merge_items(dimension, memory)

    def remove_pos(self, dimension: str, position: BlockPos) -> None:
        """Forget one position; unknown dimensions and positions are ignored."""
        index = self._dimensions.get(dimension)
        if index is not None and index.remove(position):
            self._mutated()

    def clear_dimension(self, dimension: str) -> None:
        """Drop every memory of a dimension."""
        if self._dimensions.pop(dimension, None) is not None:
            self._mutated()
            logger.info("Dimension cleared", session_id=self._id, dimension=dimension)

    # Queries

    def get_all_memories(self, dimension: str) -> list[Memory]:
        index = self._dimensions.get(dimension)
        return [memory.model_copy(deep=True) for memory in index.values()] if index is not None else []

    def get_named_memories(self, dimension: str) -> list[Memory]:
        index = self._dimensions.get(dimension)
        return [memory.model_copy(deep=True) for memory in index.named_values()] if index is not None else []

    def get_items(self, dimension: str) -> list[ItemStack]:
        """Total of every item kind in a dimension, one stack per kind and tag."""
        index = self._dimensions.get(dimension)
        return index.aggregate_items() if index is not None else []

    def find_items(self, to_find: ItemStack, dimension: str, exists_in_world: LivenessCheck) -> list[Memory]:
        """
        Find memories holding an item equivalent to ``to_find``.

        Each hit is checked against the live world. Hits whose container is
        gone are left out of the result and removed from the current database.

        Args:
            to_find: Item to look for; count is ignored
            dimension: Dimension to search
            exists_in_world: Liveness check supplied by the game client

        Returns:
            Matching memories whose containers still exist
        """
        index = self._dimensions.get(dimension)
        if index is None:
            return []

        ignore_durability = should_ignore_durability(to_find)
        found: list[Memory] = []
        for position, memory in index.items():
            if not any(are_stacks_equivalent(to_find, candidate, ignore_durability) for candidate in memory.items):
                continue
            if exists_in_world(memory):
                found.append(memory.model_copy(deep=True))
                continue
            current = self._current_database()
            if current is not None:
                current.remove_pos(dimension, position)
                logger.info(
                    "Removed memory of missing container",
                    session_id=current.id,
                    dimension=dimension,
                    position=position.to_key(),
                )
        return found
