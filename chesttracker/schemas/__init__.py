"""Memory domain schemas: positions, item stacks, memories and the persisted file."""

from .memory import BlockPos, ItemStack, Memory, MemoryFile, StoredMemory

__all__ = [
    "BlockPos",
    "ItemStack",
    "Memory",
    "MemoryFile",
    "StoredMemory",
]
