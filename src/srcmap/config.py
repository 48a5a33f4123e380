"""Configuration management for srcmap using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from srcmap.errors import InvalidArgument
from srcmap.models.source_file import SourceFileIdType
from srcmap.utils.paths import validate_base_dir

CONFIG_FILENAME = ".srcmap.json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"

    def to_logging(self) -> int:
        return {
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
        }[self]


class NormalizeConfig(BaseModel):
    """Path normalization configuration section."""
    base_dir: str = Field(alias="baseDir", default="base")
    default_id_type: str = Field(alias="defaultIdType", default="none")

    @field_validator("base_dir")
    @classmethod
    def validate_base_dir_name(cls, v):
        try:
            validate_base_dir(v)
        except InvalidArgument as e:
            raise ValueError(str(e))
        return v

    @field_validator("default_id_type")
    @classmethod
    def validate_default_id_type(cls, v):
        try:
            return SourceFileIdType.parse(v).value
        except InvalidArgument as e:
            raise ValueError(str(e))

    model_config = ConfigDict(populate_by_name=True)


class ProcessorsConfig(BaseModel):
    """Processor registry configuration section."""
    ldefs: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN


class SrcmapConfig(BaseModel):
    """Complete srcmap configuration model."""
    normalize: NormalizeConfig = Field(default_factory=NormalizeConfig)
    processors: ProcessorsConfig = Field(default_factory=ProcessorsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> SrcmapConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .srcmap.json

    Returns:
        SrcmapConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If config file specified but not found
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path is None:
        return create_default_config()

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = json.load(f)
        return SrcmapConfig(**config_data)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .srcmap.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILENAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> SrcmapConfig:
    """Create default configuration for zero-config operation."""
    return SrcmapConfig()
