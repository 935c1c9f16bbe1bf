"""Item equivalence rules used by memory search."""

from typing import Any

from ..schemas.memory import ItemStack

DAMAGE_KEY = "Damage"
FULL_DURABILITY_TAG: dict[str, Any] = {DAMAGE_KEY: 0}


def _without_damage(tag: dict[str, Any] | None) -> dict[str, Any] | None:
    """Normalize a tag as if the item were at full durability."""
    if tag is None:
        return None
    stripped = {key: value for key, value in tag.items() if key != DAMAGE_KEY}
    return stripped or None


def should_ignore_durability(query: ItemStack) -> bool:
    """
    Default durability policy for a search query.

    Durability is ignored when the query has no tag at all, or only the
    full-durability sentinel tag.
    """
    return query.tag is None or query.tag == FULL_DURABILITY_TAG


def are_stacks_equivalent(query: ItemStack, candidate: ItemStack, ignore_durability: bool) -> bool:
    """
    Decide whether two stacks are the same kind of item.

    Args:
        query: The stack being searched for
        candidate: A stack found in a memory
        ignore_durability: Mask the damage value out of both tags before comparing

    Returns:
        True if item kinds match and tags match under the chosen rule
    """
    if query.item_kind != candidate.item_kind:
        return False
    if ignore_durability:
        return _without_damage(query.tag) == _without_damage(candidate.tag)
    return query.tag == candidate.tag
