"""shardkv CLI entry points.
This module exposes one subcommand per store operation.
It maps argparse commands onto ShardedKVStore calls.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import ShardKVConfig
from core.constants import SUPPORTED_LOG_LEVELS
from core.errors import ShardKVConfigError, ShardKVMappingError
from core.logging_config import configure_logging
from store.kv_store import ShardedKVStore


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="shardkv", description="Sharded filesystem key-value store")
    parser.add_argument("--store-root", help="Override SHARDKV_STORE_ROOT for this command")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=SUPPORTED_LOG_LEVELS,
        help="Override SHARDKV_LOG_LEVEL for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_insert_command(subparsers)
    _add_lookup_command(subparsers)
    _add_remove_command(subparsers)
    _add_size_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the shardkv CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _build_config(args.store_root, args.log_level)
    configure_logging(config.log_level)
    store = ShardedKVStore.from_config(config)
    try:
        if args.command == "insert":
            return _run_insert_command(store, args)
        if args.command == "lookup":
            return _run_lookup_command(store, args)
        if args.command == "remove":
            return _run_remove_command(store, args)
        if args.command == "size":
            return _run_size_command(store)
    except ShardKVMappingError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(store_root: str | None, log_level: str | None) -> ShardKVConfig:
    """Build config with optional command-line overrides.

    Args:
        store_root: Optional store root override.
        log_level: Optional log level override.

    Returns:
        Runtime configuration.
    """
    config = ShardKVConfig.from_env()
    if store_root is not None:
        if not store_root.strip():
            raise ShardKVConfigError(
                "Invalid --store-root value: expected a directory path, got ''."
            )
        config = replace(config, store_root=Path(store_root).expanduser().resolve())
    if log_level:
        config = replace(config, log_level=log_level)
    return config


def _parse_literal(raw_value: str) -> Any:
    """Parse a JSON literal, falling back to the raw string."""
    try:
        return json.loads(raw_value)
    except json.JSONDecodeError:
        return raw_value


def _render_value(value: Any) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def _run_insert_command(store: ShardedKVStore, args: argparse.Namespace) -> int:
    """Handle insert command."""
    store.insert(_parse_literal(args.key), _parse_literal(args.value))
    print(f"size={store.size()}")
    return 0


def _run_lookup_command(store: ShardedKVStore, args: argparse.Namespace) -> int:
    """Handle lookup command."""
    print(_render_value(store.lookup(_parse_literal(args.key))))
    return 0


def _run_remove_command(store: ShardedKVStore, args: argparse.Namespace) -> int:
    """Handle remove command."""
    print(_render_value(store.remove(_parse_literal(args.key))))
    return 0


def _run_size_command(store: ShardedKVStore) -> int:
    """Handle size command."""
    print(store.size())
    return 0


def _add_insert_command(subparsers: Any) -> None:
    """Register insert subcommand."""
    parser = subparsers.add_parser("insert", help="Insert a new key-value mapping")
    parser.add_argument("key", help="Key as a JSON literal or plain string")
    parser.add_argument("value", help="Value as a JSON literal or plain string")


def _add_lookup_command(subparsers: Any) -> None:
    """Register lookup subcommand."""
    parser = subparsers.add_parser("lookup", help="Print the value stored for a key")
    parser.add_argument("key", help="Key as a JSON literal or plain string")


def _add_remove_command(subparsers: Any) -> None:
    """Register remove subcommand."""
    parser = subparsers.add_parser("remove", help="Remove a mapping and print its value")
    parser.add_argument("key", help="Key as a JSON literal or plain string")


def _add_size_command(subparsers: Any) -> None:
    """Register size subcommand."""
    subparsers.add_parser("size", help="Print the number of stored mappings")
