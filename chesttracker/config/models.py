"""
Pydantic-based configuration models for ChestTracker.

Type-safe, validated configuration using Pydantic BaseSettings. Values come
from environment variables (and a .env file when present).
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ..structured_logging.enhanced_logging_config import VALID_LOG_LEVELS, get_logger

logger = get_logger(__name__)


class StorageConfig(BaseSettings):
    """Where memory files live and how session keys are derived."""

    game_dir: Path = Field(default=Path("."), description="Game directory root")
    data_dir_name: str = Field(default="chesttracker", description="Data directory under the game directory")
    default_port: int = Field(default=25565, description="Server port omitted from multiplayer session keys")

    @field_validator("data_dir_name")
    @classmethod
    def validate_data_dir_name(cls, v: str) -> str:
        """Reject empty or nested data directory names."""
        stripped = v.strip()
        if not stripped or "/" in stripped or "\\" in stripped:
            logger.error("Invalid data directory name", data_dir_name=v)
            raise ValueError("data_dir_name must be a single non-empty path component")
        return stripped

    @field_validator("default_port")
    @classmethod
    def validate_default_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1 <= v <= 65535:
            logger.error("Invalid default port", port=v, valid_range="1-65535")
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def data_dir(self) -> Path:
        """Directory holding one JSON file per session key."""
        return self.game_dir / self.data_dir_name

    model_config = {"env_prefix": "CHESTTRACKER_", "case_sensitive": False, "extra": "ignore"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(default="production", description="Logging environment")
    level: str = Field(default="INFO", description="Log level")
    json_output: bool = Field(default=False, description="Render log events as JSON lines")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is a standard level name."""
        upper = v.upper()
        if upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(VALID_LOG_LEVELS)}")
        return upper

    model_config = {"env_prefix": "LOGGING_", "case_sensitive": False, "extra": "ignore"}


class AppConfig(BaseSettings):
    """Top-level configuration composed of the section configs."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}
