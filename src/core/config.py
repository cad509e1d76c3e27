"""Runtime configuration model for shardkv.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_ATOMIC_WRITES,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STORE_ROOT,
    FALSE_FLAG_VALUES,
    SUPPORTED_LOG_LEVELS,
    TRUE_FLAG_VALUES,
)
from core.errors import ShardKVConfigError


@dataclass(frozen=True)
class ShardKVConfig:
    """Validated runtime configuration.

    Attributes:
        store_root: Root directory holding shard directories.
        atomic_writes: Whether mapping files are written via temp file and rename.
        log_level: Minimum structured log level.
    """

    store_root: Path
    atomic_writes: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "ShardKVConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ShardKVConfigError: If environment values are invalid.
        """
        store_root_value = os.getenv("SHARDKV_STORE_ROOT", str(DEFAULT_STORE_ROOT))
        if not store_root_value.strip():
            raise ShardKVConfigError(
                "Invalid SHARDKV_STORE_ROOT value: expected a directory path, got ''. "
                "Unset SHARDKV_STORE_ROOT or point it at a writable directory."
            )
        atomic_writes = _parse_flag(
            "SHARDKV_ATOMIC_WRITES",
            os.getenv("SHARDKV_ATOMIC_WRITES"),
            DEFAULT_ATOMIC_WRITES,
        )
        log_level = _parse_log_level(os.getenv("SHARDKV_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            store_root=Path(store_root_value).expanduser().resolve(),
            atomic_writes=atomic_writes,
            log_level=log_level,
        )


def _parse_flag(name: str, raw_value: str | None, default: bool) -> bool:
    """Parse a boolean environment flag.

    Args:
        name: Environment variable name, used in error messages.
        raw_value: Raw string from environment, or None when unset.
        default: Value used when the variable is unset.

    Returns:
        Parsed boolean.

    Raises:
        ShardKVConfigError: If value is not a recognized flag literal.
    """
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if normalized in TRUE_FLAG_VALUES:
        return True
    if normalized in FALSE_FLAG_VALUES:
        return False
    raise ShardKVConfigError(
        f"Invalid {name} value: expected one of "
        f"{', '.join(TRUE_FLAG_VALUES + FALSE_FLAG_VALUES)}, got '{raw_value}'."
    )


def _parse_log_level(raw_value: str) -> str:
    """Parse the log level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Upper-case standard level name.

    Raises:
        ShardKVConfigError: If value is not a standard level name.
    """
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise ShardKVConfigError(
            f"Invalid SHARDKV_LOG_LEVEL value: expected one of "
            f"{', '.join(SUPPORTED_LOG_LEVELS)}, got '{raw_value}'."
        )
    return level
