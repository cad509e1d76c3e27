"""Integration test for store reuse across process-style reopen cycles."""

from __future__ import annotations

import pytest

from core.errors import ShardKVKeyNotFoundError
from shardkv import ShardedKVStore


def test_store_survives_reopen_cycles(tmp_path) -> None:
    """Mappings and size should persist across independent store instances."""
    root = tmp_path / "test-KV" / "data"
    first = ShardedKVStore.open(root)
    first.insert("Sine", 360)
    first.insert("Wave", 180)
    first.insert(["composite", 1], {"nested": [True, None]})

    second = ShardedKVStore.open(root)
    assert second.size() == 3
    assert second.remove("Sine") == 360
    assert second.lookup(["composite", 1]) == {"nested": [True, None]}

    third = ShardedKVStore.open(root)
    assert third.size() == 2
    with pytest.raises(ShardKVKeyNotFoundError):
        third.lookup("Sine")
    third.remove("Wave")
    third.remove(["composite", 1])

    assert ShardedKVStore.open(root).size() == 0
    assert list(root.iterdir()) == []
