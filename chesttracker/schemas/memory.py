"""
Memory schemas for ChestTracker.

Defines the value types that flow through the memory core (block positions,
item stacks and memories) and the explicit on-disk schema of a memory file.
"""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, JsonValue, RootModel, field_validator, model_validator

POSITION_SEPARATOR = ","


class BlockPos(BaseModel):
    """
    Integer block coordinate of a container.

    Frozen so it can be used as a dictionary key.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    x: int = Field(..., description="East/west coordinate")
    y: int = Field(..., description="Vertical coordinate")
    z: int = Field(..., description="North/south coordinate")

    def to_key(self) -> str:
        """Serialize to the stable ``"x,y,z"`` key used in memory files."""
        return f"{self.x}{POSITION_SEPARATOR}{self.y}{POSITION_SEPARATOR}{self.z}"

    @classmethod
    def from_key(cls, key: str) -> BlockPos:
        """
        Parse a ``"x,y,z"`` key back into a position.

        Raises:
            ValueError: If the key is not exactly three integers in canonical form
        """
        parts = key.split(POSITION_SEPARATOR)
        if len(parts) != 3:
            raise ValueError(f"Invalid position key: {key!r}")
        try:
            x, y, z = (int(part) for part in parts)
        except ValueError as err:
            raise ValueError(f"Invalid position key: {key!r}") from err
        position = cls(x=x, y=y, z=z)
        # only the canonical spelling is accepted, so two keys can never name one position
        if position.to_key() != key:
            raise ValueError(f"Non-canonical position key: {key!r}")
        return position

    def __str__(self) -> str:
        return self.to_key()


class ItemStack(BaseModel):
    """
    One observed stack of items: item kind, optional tag data and count.

    The tag is an opaque structured blob (enchantments, custom names, damage...)
    restricted to JSON values so it can always be written to a memory file.
    On disk the item kind is stored as ``itemKind``.
    Only ``item_kind`` and ``tag`` take part in kind-equivalence; count never does.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    item_kind: str = Field(
        ..., alias="itemKind", min_length=1, description="Namespaced item identifier, e.g. minecraft:diamond"
    )
    tag: dict[str, JsonValue] | None = Field(default=None, description="Opaque item tag data")
    count: int = Field(default=1, ge=1, description="Number of items in the stack")

    def kind_key(self) -> tuple[str, str]:
        """
        Hashable kind-equivalence key (item kind plus canonical tag).

        Two stacks with equal keys are the same kind of item with exactly
        equal tags, regardless of count.
        """
        return self.item_kind, canonical_tag(self.tag)


def canonical_tag(tag: dict[str, JsonValue] | None) -> str:
    """Order-independent string form of a tag, used for grouping."""
    if tag is None:
        return ""
    return json.dumps(tag, sort_keys=True, separators=(",", ":"))


class Memory(BaseModel):
    """
    Last-known state of one container position.

    A memory with no items and no title carries no information and is never
    stored.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    position: BlockPos = Field(..., description="Container position, unique within a dimension")
    title: str | None = Field(default=None, description="Optional user-given label")
    items: list[ItemStack] = Field(default_factory=list, description="Full contents at the last scan")

    def is_empty(self) -> bool:
        """True when the memory has neither items nor a title."""
        return not self.items and self.title is None


class StoredMemory(BaseModel):
    """On-disk form of a memory; the position lives in the enclosing key."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, description="Optional user-given label")
    items: list[ItemStack] = Field(default_factory=list, description="Full contents at the last scan")

    @classmethod
    def from_memory(cls, memory: Memory) -> StoredMemory:
        """Drop the position, keep the payload."""
        return cls(title=memory.title, items=[item.model_copy(deep=True) for item in memory.items])

    def to_memory(self, position: BlockPos) -> Memory:
        """Re-attach the position taken from the file key."""
        return Memory(position=position, title=self.title, items=self.items)


class MemoryFile(RootModel[dict[str, dict[str, StoredMemory]]]):
    """
    Complete content of one memory file.

    ``{dimension id: {"x,y,z": {"title": ..., "items": [...]}}}``
    """

    root: dict[str, dict[str, StoredMemory]] = Field(default_factory=dict)

    @field_validator("root")
    @classmethod
    def validate_keys(cls, v: dict[str, dict[str, StoredMemory]]) -> dict[str, dict[str, StoredMemory]]:
        """Every dimension id must be non-empty and every position key must parse."""
        for dimension, entries in v.items():
            if not dimension.strip():
                raise ValueError("Dimension identifier must not be empty")
            for key in entries:
                BlockPos.from_key(key)
        return v

    @model_validator(mode="after")
    def drop_empty_records(self) -> MemoryFile:
        """Empty, untitled records are never stored, so discard any found on disk."""
        for dimension, entries in self.root.items():
            self.root[dimension] = {
                key: stored for key, stored in entries.items() if stored.items or stored.title is not None
            }
        return self
