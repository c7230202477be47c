"""waviewer Configuration System.

Loads and validates configuration from ~/.waviewer/config.json.
Uses Pydantic for schema validation with sensible defaults.

Usage:
    from waviewer.config import get_config, save_config

    config = get_config()
    print(config.store.message_timestamp_unit)

    # Modify and save
    config.store.timeout_seconds = 10.0
    save_config(config)
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from contracts.msgstore import TimestampUnit
from waviewer.errors import ConfigurationError, ErrorCode

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".waviewer" / "config.json"

# Current config schema version
CONFIG_VERSION = 1


def validate_path(path: str | Path, description: str = "path") -> Path:
    """Validate a user-supplied filesystem path and resolve it.

    Relative paths, ``..`` segments and ``~`` are allowed; the result is the
    absolute path they name.

    Args:
        path: The path to validate.
        description: Human-readable description for error messages.

    Returns:
        Resolved Path object.

    Raises:
        ValueError: If the path contains a null byte.
    """
    path_str = str(path)
    if "\x00" in path_str:
        raise ValueError(f"Null byte detected in {description}")
    return Path(path_str).expanduser().resolve()


class StoreConfig(BaseModel):
    """Message store access settings.

    Attributes:
        timeout_seconds: SQLite busy timeout for read connections.
        conversation_timestamp_unit: Unit of ``chat.created_timestamp``.
        message_timestamp_unit: Unit of ``message.timestamp``.
        required_tables: Tables a store must have to be imported.
    """

    timeout_seconds: float = Field(default=5.0, gt=0, le=120)
    conversation_timestamp_unit: TimestampUnit = TimestampUnit.MILLISECONDS
    message_timestamp_unit: TimestampUnit = TimestampUnit.MILLISECONDS
    required_tables: list[str] = Field(default_factory=lambda: ["chat", "jid", "message"])


class ContactsConfig(BaseModel):
    """Address book settings.

    Attributes:
        source_path: Optional default contact source (JSON export or contacts2.db).
    """

    source_path: str | None = None


class LoggingConfig(BaseModel):
    """Logging preferences for scripts."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: str | None = None


class WaviewerConfig(BaseModel):
    """waviewer configuration schema.

    Attributes:
        config_version: Schema version for migration tracking.
        store: Message store access settings.
        contacts: Address book settings.
        logging: Logging preferences.
    """

    config_version: int = CONFIG_VERSION
    store: StoreConfig = Field(default_factory=StoreConfig)
    contacts: ContactsConfig = Field(default_factory=ContactsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Module-level singleton with thread safety
_config: WaviewerConfig | None = None
_config_lock = threading.Lock()


def load_config(config_path: Path | None = None, *, strict: bool = False) -> WaviewerConfig:
    """Load configuration from file, return defaults if missing/invalid.

    Args:
        config_path: Optional path to config file. Defaults to ~/.waviewer/config.json.
        strict: Raise instead of falling back to defaults, for files the
            user named explicitly.

    Returns:
        WaviewerConfig instance with loaded or default values.

    Raises:
        ConfigurationError: Only when ``strict`` is set and the file is
            missing or invalid.
    """
    path = config_path or CONFIG_PATH

    try:
        return _read_config(path)
    except ConfigurationError as e:
        if strict:
            raise
        if e.code is ErrorCode.CFG_MISSING:
            logger.debug("%s, using defaults", e)
        else:
            logger.warning("%s, using defaults", e)
        return WaviewerConfig()


def _read_config(path: Path) -> WaviewerConfig:
    if not path.exists():
        raise ConfigurationError(
            f"Config file not found at {path}",
            config_path=str(path),
            code=ErrorCode.CFG_MISSING,
        )

    try:
        with path.open() as f:
            data: dict[str, Any] = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file {path}: {e}", config_path=str(path), cause=e
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read config file {path}: {e}", config_path=str(path), cause=e
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {path} does not contain an object", config_path=str(path)
        )

    data["config_version"] = CONFIG_VERSION

    try:
        return WaviewerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Config validation failed for {path}: {e}", config_path=str(path), cause=e
        ) from e


def save_config(config: WaviewerConfig, config_path: Path | None = None) -> bool:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to config file. Defaults to ~/.waviewer/config.json.

    Returns:
        True if saved successfully, False otherwise.
    """
    path = config_path or CONFIG_PATH

    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w") as f:
            json.dump(config.model_dump(mode="json"), f, indent=2)

        os.chmod(path, 0o600)

        logger.debug("Configuration saved to %s", path)
        return True

    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        return False


def get_config() -> WaviewerConfig:
    """Get singleton configuration instance.

    Uses double-check locking for thread safety.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config()
    return _config


def reset_config() -> None:
    """Reset singleton configuration for testing."""
    global _config
    with _config_lock:
        _config = None
