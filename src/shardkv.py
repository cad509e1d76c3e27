"""Public SDK surface for shardkv.

This module provides a stable import path for library users.
It re-exports the store, codec protocol, config, and error types.
"""

from __future__ import annotations

from core.config import ShardKVConfig
from core.errors import (
    ShardKVCodecError,
    ShardKVConfigError,
    ShardKVError,
    ShardKVKeyExistsError,
    ShardKVKeyNotFoundError,
    ShardKVMappingError,
    ShardKVStoreError,
)
from store.codec import Codec, JsonCodec
from store.kv_store import ShardedKVStore

__all__ = [
    "Codec",
    "JsonCodec",
    "ShardKVCodecError",
    "ShardKVConfig",
    "ShardKVConfigError",
    "ShardKVError",
    "ShardKVKeyExistsError",
    "ShardKVKeyNotFoundError",
    "ShardKVMappingError",
    "ShardKVStoreError",
    "ShardedKVStore",
]
