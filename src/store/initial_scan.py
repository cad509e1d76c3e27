"""Store root scan used to recover the mapping count at open time.

The filesystem is the only source of truth: there is no separate
metadata file, so the count is rebuilt from key files on every open.
"""

from __future__ import annotations

import os
from pathlib import Path

from core.constants import KEY_FILE_SUFFIX, VALUE_FILE_SUFFIX
from core.types import ScanSummary


def scan_store_root(root_path: Path) -> ScanSummary:
    """Count key and value files below a store root.

    Symbolic links are followed. Directories reached twice through
    links are visited once. Entries that cannot be listed or stat'ed
    are skipped rather than failing the scan.

    Args:
        root_path: Store root directory.

    Returns:
        Counts of key files, value files, and skipped entries.
    """
    key_files = 0
    value_files = 0
    skipped_entries = 0
    visited: set[tuple[int, int]] = set()
    pending = [Path(root_path)]
    while pending:
        directory = pending.pop()
        try:
            stat_result = directory.stat()
        except OSError:
            skipped_entries += 1
            continue
        identity = (stat_result.st_dev, stat_result.st_ino)
        if identity in visited:
            continue
        visited.add(identity)
        try:
            entries = list(os.scandir(directory))
        except OSError:
            skipped_entries += 1
            continue
        for entry in entries:
            try:
                is_dir = entry.is_dir()
                is_file = entry.is_file()
            except OSError:
                skipped_entries += 1
                continue
            if is_dir:
                pending.append(Path(entry.path))
            elif not is_file:
                # dangling symlink or special file
                skipped_entries += 1
            elif entry.name.endswith(KEY_FILE_SUFFIX):
                key_files += 1
            elif entry.name.endswith(VALUE_FILE_SUFFIX):
                value_files += 1
    return ScanSummary(
        key_files=key_files,
        value_files=value_files,
        skipped_entries=skipped_entries,
    )
