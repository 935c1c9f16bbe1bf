"""
JSON storage for memory databases.

Each session key gets its own file:
<game_dir>/<data_dir_name>/<sanitized session key>.json

The store raises MemoryFileError for anything that goes wrong; deciding how to
degrade is left to the caller.
"""

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from ..exceptions import MemoryFileError
from ..schemas.memory import BlockPos, Memory, MemoryFile, StoredMemory
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.filenames import sanitize_for_filename

logger = get_logger(__name__)

DimensionMemories = dict[str, list[Memory]]


class MemoryFileStore:
    """Reads and writes memory files in a single data directory."""

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)

    def get_file_path(self, session_id: str) -> Path:
        """Get the file path for a session's memories."""
        return self.data_dir / f"{sanitize_for_filename(session_id)}.json"

    def exists(self, session_id: str) -> bool:
        return self.get_file_path(session_id).exists()

    def load(self, session_id: str) -> DimensionMemories | None:
        """
        Load every memory stored for a session.

        Returns:
            Memories grouped by dimension, or None if no file exists

        Raises:
            MemoryFileError: If the file cannot be read, is not JSON or does not match the schema
        """
        file_path = self.get_file_path(session_id)
        if not file_path.exists():
            return None

        try:
            raw = file_path.read_bytes()
            payload = json.loads(raw.decode("utf-8"))
            stored = MemoryFile.model_validate(payload)
        except OSError as e:
            raise MemoryFileError(f"Cannot read memory file: {e}", file_path, operation="load") from e
        except UnicodeDecodeError as e:
            raise MemoryFileError(f"Memory file is not valid UTF-8: {e}", file_path, operation="load") from e
        except json.JSONDecodeError as e:
            raise MemoryFileError(f"Memory file is not valid JSON: {e}", file_path, operation="load") from e
        except ValidationError as e:
            raise MemoryFileError(
                "Memory file does not match schema",
                file_path,
                operation="load",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e
        except (ValueError, RecursionError) as e:
            raise MemoryFileError(
                f"Memory file could not be decoded: {type(e).__name__}", file_path, operation="load"
            ) from e

        return {
            dimension: [record.to_memory(BlockPos.from_key(key)) for key, record in entries.items()]
            for dimension, entries in stored.root.items()
        }

    def save(self, session_id: str, dimensions: DimensionMemories) -> Path:
        """
        Write every memory of a session, replacing the previous file atomically.

        Returns:
            The path written

        Raises:
            MemoryFileError: If the memories cannot be serialized or the directory or file cannot be written
        """
        file_path = self.get_file_path(session_id)
        try:
            document = MemoryFile(
                {
                    dimension: {memory.position.to_key(): StoredMemory.from_memory(memory) for memory in memories}
                    for dimension, memories in dimensions.items()
                }
            )
            payload = document.model_dump(mode="json", by_alias=True, exclude_none=True)
        except (ValidationError, PydanticSerializationError, ValueError, RecursionError) as e:
            raise MemoryFileError(
                f"Memories cannot be serialized: {type(e).__name__}: {e}", file_path, operation="save"
            ) from e

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MemoryFileError(f"Cannot create data directory: {e}", file_path, operation="save") from e

        tmp_path: str | None = None
        try:
            tmp_fd, tmp_path = tempfile.mkstemp(prefix=".memories_", suffix=".json", dir=str(file_path.parent))
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, file_path)
        except OSError as e:
            raise MemoryFileError(f"Cannot write memory file: {e}", file_path, operation="save") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

        return file_path
