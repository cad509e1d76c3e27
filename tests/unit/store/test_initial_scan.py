"""Unit tests for the store root scan."""

from __future__ import annotations

import os

import pytest

from store.initial_scan import scan_store_root


def _write_mapping(shard_dir, name: str) -> None:
    shard_dir.mkdir(parents=True, exist_ok=True)
    (shard_dir / f"{name}.key").write_bytes(b'"k"')
    (shard_dir / f"{name}.value").write_bytes(b"1")


def test_scan_empty_root_counts_nothing(tmp_path) -> None:
    """A fresh root should hold no mappings."""
    summary = scan_store_root(tmp_path)

    assert summary.key_files == 0 and summary.is_consistent


def test_scan_counts_key_files_across_shards(tmp_path) -> None:
    """Every key file in every shard should be counted once."""
    _write_mapping(tmp_path / "aaaaaaaaaa", "aaaaaaaaaa01")
    _write_mapping(tmp_path / "aaaaaaaaaa", "aaaaaaaaaa02")
    _write_mapping(tmp_path / "bbbbbbbbbb", "bbbbbbbbbb01")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    summary = scan_store_root(tmp_path)

    assert summary.key_files == 3 and summary.value_files == 3


def test_scan_reports_orphan_key_file(tmp_path) -> None:
    """A key file without its value file should make the summary inconsistent."""
    shard_dir = tmp_path / "cccccccccc"
    shard_dir.mkdir()
    (shard_dir / "cccccccccc01.key").write_bytes(b'"k"')

    summary = scan_store_root(tmp_path)

    assert summary.key_files == 1 and not summary.is_consistent


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_scan_follows_symlinks_without_looping(tmp_path) -> None:
    """Linked directories should be followed, and link cycles visited once."""
    external = tmp_path / "external"
    _write_mapping(external / "dddddddddd", "dddddddddd01")
    root = tmp_path / "root"
    root.mkdir()
    (root / "linked").symlink_to(external, target_is_directory=True)
    (external / "loop").symlink_to(external, target_is_directory=True)

    summary = scan_store_root(root)

    assert summary.key_files == 1


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_scan_skips_dangling_symlink(tmp_path) -> None:
    """Entries that cannot be stat'ed should be skipped, not fatal."""
    (tmp_path / "gone.key").symlink_to(tmp_path / "missing-target")

    summary = scan_store_root(tmp_path)

    assert summary.key_files == 0 and summary.skipped_entries == 1
