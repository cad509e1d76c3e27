"""Sharded filesystem key-value store.

This module maps encoded keys onto fingerprint-addressed file pairs
and keeps an in-memory mapping count consistent with the disk layout.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from core.config import ShardKVConfig
from core.constants import TEMP_FILE_SUFFIX
from core.errors import (
    ShardKVConfigError,
    ShardKVKeyExistsError,
    ShardKVKeyNotFoundError,
    ShardKVStoreError,
)
from core.logging_config import get_logger
from core.types import MappingPaths
from store.codec import Codec, JsonCodec
from store.initial_scan import scan_store_root
from store.key_digest import fingerprint
from store.path_scheme import resolve_mapping_paths

_LOGGER = get_logger(__name__)


class ShardedKVStore:
    """Persistent key-value store with one file pair per mapping.

    Mappings live at ``<root>/<fp[:10]>/<fp>.key`` and ``<fp>.value``
    where ``fp`` is the fingerprint of the encoded key. The instance
    assumes exclusive ownership of its root for its whole lifetime.
    """

    def __init__(
        self,
        root_path: Path,
        entry_count: int,
        codec: Codec,
        atomic_writes: bool = True,
    ) -> None:
        """Bind a store to an already prepared root.

        Use ``open`` or ``from_config`` instead of calling this directly.

        Args:
            root_path: Existing store root directory.
            entry_count: Number of mappings currently on disk.
            codec: Key and value codec.
            atomic_writes: Write files through a temp file and rename.
        """
        self._root_path = root_path
        self._entry_count = entry_count
        self._codec = codec
        self._atomic_writes = atomic_writes

    @classmethod
    def open(
        cls,
        path: str | os.PathLike[str],
        codec: Codec | None = None,
        atomic_writes: bool = True,
    ) -> "ShardedKVStore":
        """Open a store, creating its root directory when absent.

        Args:
            path: Store root directory. An empty string is rejected; note that
                ``Path("")`` already normalizes to ``Path(".")`` and so opens
                the current directory.
            codec: Optional codec; JSON when omitted.
            atomic_writes: Write files through a temp file and rename.

        Returns:
            Store with its mapping count recovered from disk.

        Raises:
            ShardKVConfigError: If the path is empty or cannot be used as a directory.
        """
        if not os.fspath(path):
            raise ShardKVConfigError(
                "Cannot open store: root path is empty. Pass a directory path."
            )
        root_path = Path(path)
        try:
            root_path.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise ShardKVConfigError(
                f"Cannot create store root at {root_path}: {error}. "
                "Check the path and directory permissions."
            ) from error
        summary = scan_store_root(root_path)
        if not summary.is_consistent:
            _LOGGER.warning(
                "store_orphan_files_detected",
                root_path=str(root_path),
                key_files=summary.key_files,
                value_files=summary.value_files,
            )
        _LOGGER.info(
            "store_opened",
            root_path=str(root_path),
            entry_count=summary.key_files,
            skipped_entries=summary.skipped_entries,
        )
        return cls(
            root_path=root_path,
            entry_count=summary.key_files,
            codec=codec or JsonCodec(),
            atomic_writes=atomic_writes,
        )

    @classmethod
    def from_config(
        cls,
        config: ShardKVConfig,
        codec: Codec | None = None,
    ) -> "ShardedKVStore":
        """Open the store described by a runtime config."""
        return cls.open(config.store_root, codec=codec, atomic_writes=config.atomic_writes)

    @property
    def root_path(self) -> Path:
        """Store root directory."""
        return self._root_path

    def size(self) -> int:
        """Return the number of stored mappings."""
        return self._entry_count

    def __len__(self) -> int:
        return self._entry_count

    def insert(self, key: Any, value: Any) -> None:
        """Insert a new mapping.

        Existing mappings are never overwritten.

        Args:
            key: Key to store.
            value: Value to store.

        Raises:
            ShardKVCodecError: If key or value cannot be encoded.
            ShardKVKeyExistsError: If the key already has a mapping.
            ShardKVStoreError: If shard creation or a file write fails.
        """
        encoded_key = self._codec.encode(key)
        encoded_value = self._codec.encode(value)
        paths = self._paths_for(encoded_key)
        try:
            paths.shard_dir.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise ShardKVStoreError(
                f"Failed to create shard directory {paths.shard_dir}: {error}."
            ) from error
        if paths.key_file.exists() or paths.value_file.exists():
            raise ShardKVKeyExistsError(
                f"Mapping for key {key!r} already exists. Remove it before inserting again."
            )
        self._write_file(paths.key_file, encoded_key)
        self._write_file(paths.value_file, encoded_value)
        self._entry_count += 1
        _LOGGER.debug(
            "mapping_inserted",
            shard=paths.shard_dir.name,
            entry_count=self._entry_count,
        )

    def lookup(self, key: Any, value_type: Any = None) -> Any:
        """Return the value stored for a key.

        Args:
            key: Key to look up.
            value_type: Optional expected value type passed to the codec.

        Returns:
            Decoded value.

        Raises:
            ShardKVKeyNotFoundError: If the key has no mapping.
            ShardKVStoreError: If the value file cannot be read.
            ShardKVCodecError: If stored bytes cannot be decoded.
        """
        paths = self._paths_for(self._codec.encode(key))
        if not paths.value_file.is_file():
            raise ShardKVKeyNotFoundError(f"No mapping found for key {key!r}.")
        return self._codec.decode(_read_file(paths.value_file), value_type)

    def contains(self, key: Any) -> bool:
        """Return whether both mapping files exist for a key."""
        paths = self._paths_for(self._codec.encode(key))
        return paths.key_file.is_file() and paths.value_file.is_file()

    def remove(self, key: Any, value_type: Any = None) -> Any:
        """Remove a mapping and return its value.

        The shard directory is deleted when its last mapping goes.

        Args:
            key: Key to remove.
            value_type: Optional expected value type passed to the codec.

        Returns:
            Decoded value that was stored for the key.

        Raises:
            ShardKVKeyNotFoundError: If the shard directory or either mapping file is missing.
            ShardKVStoreError: If reading, deleting, or listing fails.
            ShardKVCodecError: If the stored value cannot be decoded.
        """
        paths = self._paths_for(self._codec.encode(key))
        if not (
            paths.shard_dir.is_dir()
            and paths.key_file.is_file()
            and paths.value_file.is_file()
        ):
            raise ShardKVKeyNotFoundError(f"No mapping found for key {key!r}.")
        value = self._codec.decode(_read_file(paths.value_file), value_type)
        _delete_file(paths.key_file)
        _delete_file(paths.value_file)
        self._entry_count -= 1
        _LOGGER.debug(
            "mapping_removed",
            shard=paths.shard_dir.name,
            entry_count=self._entry_count,
        )
        if _is_empty_dir(paths.shard_dir):
            try:
                paths.shard_dir.rmdir()
            except OSError as error:
                raise ShardKVStoreError(
                    f"Failed to remove empty shard directory {paths.shard_dir}: {error}."
                ) from error
            _LOGGER.debug("shard_removed", shard=paths.shard_dir.name)
        return value

    def _paths_for(self, encoded_key: bytes) -> MappingPaths:
        return resolve_mapping_paths(self._root_path, fingerprint(encoded_key))

    def _write_file(self, file_path: Path, data: bytes) -> None:
        """Write one mapping file, atomically when configured.

        Raises:
            ShardKVStoreError: If the write fails.
        """
        try:
            if self._atomic_writes:
                _write_file_atomic(file_path, data)
            else:
                with open(file_path, "wb") as handle:
                    handle.write(data)
                    handle.flush()
        except OSError as error:
            raise ShardKVStoreError(f"Failed to write {file_path}: {error}.") from error


def _write_file_atomic(file_path: Path, data: bytes) -> None:
    """Write bytes via a synced temp sibling moved into place."""
    file_descriptor, temp_name = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
        suffix=TEMP_FILE_SUFFIX,
    )
    try:
        with os.fdopen(file_descriptor, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, file_path)
    except OSError:
        Path(temp_name).unlink(missing_ok=True)
        raise


def _read_file(file_path: Path) -> bytes:
    """Read a mapping file.

    Raises:
        ShardKVStoreError: If the read fails.
    """
    try:
        return file_path.read_bytes()
    except OSError as error:
        raise ShardKVStoreError(f"Failed to read {file_path}: {error}.") from error


def _delete_file(file_path: Path) -> None:
    """Delete a mapping file.

    Raises:
        ShardKVStoreError: If the delete fails.
    """
    try:
        file_path.unlink()
    except OSError as error:
        raise ShardKVStoreError(f"Failed to delete {file_path}: {error}.") from error


def _is_empty_dir(directory: Path) -> bool:
    """Return whether a directory listing yields no entries.

    Raises:
        ShardKVStoreError: If the directory cannot be listed.
    """
    try:
        return next(directory.iterdir(), None) is None
    except OSError as error:
        raise ShardKVStoreError(f"Failed to list shard directory {directory}: {error}.") from error
