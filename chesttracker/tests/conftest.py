"""
Test configuration and fixtures for the ChestTracker test suite.

Every test gets its own game directory under tmp_path, so nothing touches a
real data directory.
"""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from chesttracker.config import reset_config
from chesttracker.memory.session import ConnectionState
from chesttracker.persistence.memory_file_store import MemoryFileStore
from chesttracker.schemas.memory import BlockPos, ItemStack, Memory


@pytest.fixture(autouse=True)
def reset_config_singleton() -> Generator[None, None, None]:
    """Reset the config cache before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory inside a throwaway game directory."""
    return tmp_path / "game" / "chesttracker"


@pytest.fixture
def store(data_dir: Path) -> MemoryFileStore:
    return MemoryFileStore(data_dir)


@pytest.fixture
def make_item() -> Callable[..., ItemStack]:
    """Build an item stack; tag defaults to None and count to 1."""

    def _make(item_kind: str = "minecraft:diamond", count: int = 1, tag: dict[str, Any] | None = None) -> ItemStack:
        return ItemStack(item_kind=item_kind, count=count, tag=tag)

    return _make


@pytest.fixture
def make_memory(make_item: Callable[..., ItemStack]) -> Callable[..., Memory]:
    """Build a memory at (x, y, z) holding the given items (one diamond by default)."""

    def _make(
        x: int = 0,
        y: int = 64,
        z: int = 0,
        items: list[ItemStack] | None = None,
        title: str | None = None,
    ) -> Memory:
        return Memory(
            position=BlockPos(x=x, y=y, z=z),
            title=title,
            items=[make_item()] if items is None else items,
        )

    return _make


class MutableConnection:
    """Connection source whose state tests can change between calls."""

    def __init__(self, state: ConnectionState | None = None) -> None:
        self.state = state or ConnectionState()

    def __call__(self) -> ConnectionState:
        return self.state

    def singleplayer(self, save_name: str) -> None:
        self.state = ConnectionState(singleplayer_save_name=save_name)

    def disconnect(self) -> None:
        self.state = ConnectionState()


@pytest.fixture
def connection() -> MutableConnection:
    return MutableConnection()
