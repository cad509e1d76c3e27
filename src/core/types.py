"""Shared typed models.

This module defines immutable data models passed between the path
scheme, initialization scan, and store engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class MappingPaths:
    """Filesystem locations of one mapping.

    Attributes:
        shard_dir: Shard directory named by the fingerprint prefix.
        key_file: File holding the encoded key bytes.
        value_file: File holding the encoded value bytes.
    """

    shard_dir: Path
    key_file: Path
    value_file: Path


@dataclass(frozen=True)
class ScanSummary:
    """Result of walking a store root at open time.

    Attributes:
        key_files: Number of key files found.
        value_files: Number of value files found.
        skipped_entries: Entries skipped because they could not be read.
    """

    key_files: int
    value_files: int
    skipped_entries: int = 0

    @property
    def is_consistent(self) -> bool:
        """Return whether every key file has a value file counterpart."""
        return self.key_files == self.value_files
