"""Shard and mapping file path resolution."""

from __future__ import annotations

from pathlib import Path

from core.constants import KEY_FILE_SUFFIX, SHARD_PREFIX_LENGTH, VALUE_FILE_SUFFIX
from core.types import MappingPaths


def shard_name(key_fingerprint: str) -> str:
    """Return the shard directory name for a fingerprint."""
    return key_fingerprint[:SHARD_PREFIX_LENGTH]


def resolve_mapping_paths(root_path: Path, key_fingerprint: str) -> MappingPaths:
    """Resolve shard directory and file paths for one mapping.

    Args:
        root_path: Store root directory.
        key_fingerprint: Fingerprint of the encoded key.

    Returns:
        Paths for the shard directory, key file, and value file.
    """
    shard_dir = Path(root_path) / shard_name(key_fingerprint)
    return MappingPaths(
        shard_dir=shard_dir,
        key_file=shard_dir / f"{key_fingerprint}{KEY_FILE_SUFFIX}",
        value_file=shard_dir / f"{key_fingerprint}{VALUE_FILE_SUFFIX}",
    )
