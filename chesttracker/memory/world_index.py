"""
Per-dimension index of container memories.

Holds every scanned position plus a secondary index of the titled ones. Both
maps are only ever changed through the methods below so they cannot drift.
"""

from collections.abc import Iterable

from ..schemas.memory import BlockPos, ItemStack, Memory


class WorldIndex:
    """
    All memories of one dimension, keyed by position.

    Invariant: every position in the named index is also in the full index
    with a non-null title.
    """

    def __init__(self, memories: Iterable[Memory] = ()) -> None:
        self._all: dict[BlockPos, Memory] = {}
        self._named: dict[BlockPos, Memory] = {}
        for memory in memories:
            self.upsert(memory)

    def __len__(self) -> int:
        return len(self._all)

    def __contains__(self, position: object) -> bool:
        return position in self._all

    def get(self, position: BlockPos) -> Memory | None:
        """Point lookup in the full index."""
        return self._all.get(position)

    def upsert(self, memory: Memory) -> None:
        """
        Insert or replace the memory at its position.

        A titled memory also lands in the named index. An untitled one never
        clears a named entry at the same position: it inherits that title
        instead. Use remove() to drop a label.
        """
        previous = self._named.get(memory.position)
        if memory.title is None and previous is not None:
            # an untitled rescan keeps the existing label
            memory = memory.model_copy(update={"title": previous.title})
        self._all[memory.position] = memory
        if memory.title is not None:
            self._named[memory.position] = memory

    def remove(self, position: BlockPos) -> bool:
        """
        Delete a position from both indexes; absent positions are ignored.

        Returns:
            True if something was removed
        """
        removed = self._all.pop(position, None) is not None
        removed = self._named.pop(position, None) is not None or removed
        return removed

    def remove_many(self, positions: Iterable[BlockPos]) -> int:
        """Remove several positions, returning how many were present."""
        return sum(1 for position in positions if self.remove(position))

    def positions(self) -> set[BlockPos]:
        return set(self._all)

    def named_positions(self) -> set[BlockPos]:
        return set(self._named)

    def values(self) -> list[Memory]:
        """Every memory in the dimension, in insertion order."""
        return list(self._all.values())

    def named_values(self) -> list[Memory]:
        """Only memories carrying a title."""
        return list(self._named.values())

    def items(self) -> list[tuple[BlockPos, Memory]]:
        return list(self._all.items())

    def aggregate_item_counts(self) -> dict[tuple[str, str], int]:
        """
        Sum item counts across the dimension, grouped by exact kind and tag.

        Returns:
            Mapping of ItemStack.kind_key() to the total count
        """
        counts: dict[tuple[str, str], int] = {}
        for memory in self._all.values():
            for stack in memory.items:
                key = stack.kind_key()
                counts[key] = counts.get(key, 0) + stack.count
        return counts

    def aggregate_items(self) -> list[ItemStack]:
        """aggregate_item_counts() expressed as concrete stacks, one per kind key."""
        first_seen: dict[tuple[str, str], ItemStack] = {}
        counts: dict[tuple[str, str], int] = {}
        for memory in self._all.values():
            for stack in memory.items:
                key = stack.kind_key()
                first_seen.setdefault(key, stack)
                counts[key] = counts.get(key, 0) + stack.count
        return [
            stack.model_copy(update={"count": counts[key]}, deep=True) for key, stack in first_seen.items()
        ]
