"""shardkv exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure class maps to one recovery policy for callers.
"""

from __future__ import annotations


class ShardKVError(Exception):
    """Base exception for all shardkv failures."""


class ShardKVConfigError(ShardKVError):
    """Raised for invalid configuration or an unusable store root."""


class ShardKVStoreError(ShardKVError):
    """Raised for filesystem read, write, delete, and listing failures."""


class ShardKVCodecError(ShardKVError):
    """Raised when a key or value cannot be encoded or decoded."""


class ShardKVMappingError(ShardKVError):
    """Base for expected mapping-level failures that leave state untouched."""


class ShardKVKeyExistsError(ShardKVMappingError):
    """Raised when inserting a key that already has a mapping."""


class ShardKVKeyNotFoundError(ShardKVMappingError):
    """Raised when looking up or removing a key without a mapping."""
