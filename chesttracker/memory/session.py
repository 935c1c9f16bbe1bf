"""
Session identity and the live memory database handle.

resolve_session_key() turns a snapshot of the client's connection into the
key a database is stored under. MemorySession owns the single "current"
database and performs the save/load dance when the key changes.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..config import get_config
from ..config.models import StorageConfig
from ..persistence.memory_file_store import MemoryFileStore
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.filenames import sanitize_for_filename
from .database import MemoryDatabase
from .protocols import ConnectionStateSource

logger = get_logger(__name__)

DEFAULT_SERVER_PORT = 25565


class RealmInfo(BaseModel):
    """Metadata of a hosted realm."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    owner: str = Field(..., description="Realm owner name")
    name: str = Field(..., description="Realm name")


class RemoteAddress(BaseModel):
    """Structured address of a remote server."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field(..., min_length=1, description="Host address")
    port: int = Field(..., ge=0, le=65535, description="Server port")


class ConnectionState(BaseModel):
    """
    Snapshot of what the client is connected to.

    Fields are checked in order: a singleplayer save wins over a realm, which
    wins over a remote server.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    singleplayer_save_name: str | None = Field(default=None, description="Folder name of the open local save")
    connected_to_realms: bool = Field(default=False, description="Connected through the realms service")
    realm: RealmInfo | None = Field(default=None, description="Last joined realm, if known")
    connection_open: bool = Field(default=False, description="A network connection is open")
    remote: RemoteAddress | None = Field(default=None, description="Structured remote address")
    raw_address: str | None = Field(default=None, description="Address string when no structured form exists")


def resolve_session_key(state: ConnectionState, default_port: int = DEFAULT_SERVER_PORT) -> str | None:
    """
    Compute the storage key for the current session.

    Returns:
        ``singleplayer-<save>``, ``realms-<owner>-<name>``,
        ``multiplayer-<host>[-<port>]`` or None when there is no usable session
    """
    if state.singleplayer_save_name is not None:
        return "singleplayer-" + sanitize_for_filename(state.singleplayer_save_name)

    if state.connected_to_realms:
        if state.realm is None:
            return None
        return "realms-" + sanitize_for_filename(f"{state.realm.owner}-{state.realm.name}")

    if not state.connection_open:
        return None
    if state.remote is not None:
        port_suffix = "" if state.remote.port == default_port else f"-{state.remote.port}"
        return f"multiplayer-{state.remote.host}{port_suffix}"
    if state.raw_address is not None:
        return "multiplayer-" + sanitize_for_filename(state.raw_address)
    return None


class MemorySession:
    """
    Holder of the one live memory database.

    The event handling code keeps a single MemorySession and calls
    get_current() whenever it needs the database and clear_current() when the
    player leaves a world.
    """

    def __init__(
        self,
        connection_state: ConnectionStateSource,
        store: MemoryFileStore,
        default_port: int = DEFAULT_SERVER_PORT,
    ) -> None:
        self._connection_state = connection_state
        self._store = store
        self._default_port = default_port
        self._current: MemoryDatabase | None = None

    @classmethod
    def from_config(
        cls, connection_state: ConnectionStateSource, storage: StorageConfig | None = None
    ) -> MemorySession:
        """Build a session whose files live in the configured data directory."""
        storage = storage or get_config().storage
        return cls(connection_state, MemoryFileStore(storage.data_dir), default_port=storage.default_port)

    @property
    def current(self) -> MemoryDatabase | None:
        """The live database, without resolving or loading anything."""
        return self._current

    def resolve_key(self) -> str | None:
        return resolve_session_key(self._connection_state(), self._default_port)

    def get_current(self) -> MemoryDatabase | None:
        """
        Return the database for the session the client is in right now.

        The cached database is returned when its id still matches. Otherwise the
        previous database is saved and dropped before the new one is loaded.

        Returns:
            The live database, or None when no session key can be resolved
        """
        session_id = self.resolve_key()
        if session_id is None:
            return None
        if self._current is not None and self._current.id == session_id:
            return self._current

        if self._current is not None:
            previous_id = self._current.id
            self._current.save()
            self._current = None
            logger.info("Session switched", previous_session_id=previous_id, session_id=session_id)

        database = MemoryDatabase(session_id, self._store, current_database=self.get_current)
        database.load()
        self._current = database
        logger.info("Loaded database", session_id=session_id)
        return database

    def clear_current(self) -> None:
        """Save and drop the live database, if any."""
        if self._current is None:
            return
        session_id = self._current.id
        self._current.save()
        self._current = None
        logger.info("Session cleared", session_id=session_id)
