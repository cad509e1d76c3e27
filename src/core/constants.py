"""Core constants used across shardkv modules.

This module centralizes the on-disk layout and configuration defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_STORE_ROOT = Path("store")
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ATOMIC_WRITES = True
HASH_ALGORITHM = "sha256"
SHARD_PREFIX_LENGTH = 10
KEY_FILE_SUFFIX = ".key"
VALUE_FILE_SUFFIX = ".value"
TEMP_FILE_SUFFIX = ".tmp"
TEXT_ENCODING = "utf-8"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TRUE_FLAG_VALUES = ("1", "true", "yes", "on")
FALSE_FLAG_VALUES = ("0", "false", "no", "off")
