"""Key and value encoding for on-disk mappings.

The store engine only depends on the ``Codec`` protocol. ``JsonCodec``
is the default implementation: compact, key-sorted JSON so that equal
keys always encode to equal bytes and therefore equal fingerprints.
"""

from __future__ import annotations

import dataclasses
import json
import types
import typing
from typing import Any, Protocol, Union

from core.constants import TEXT_ENCODING
from core.errors import ShardKVCodecError


class Codec(Protocol):
    """Encode/decode capability consumed by the store engine."""

    def encode(self, value: Any) -> bytes:
        """Encode a key or value into bytes."""
        ...

    def decode(self, data: bytes, value_type: Any = None) -> Any:
        """Decode bytes, optionally checking them against ``value_type``."""
        ...


class JsonCodec:
    """JSON codec supporting scalars, sequences, string-keyed maps and dataclasses.

    Tuples are written as JSON arrays, so decoding without ``value_type``
    returns them as lists; pass ``tuple`` or ``tuple[...]`` to get a tuple back.
    Dataclass fields declared with ``init=False`` are not stored and are
    rebuilt by the class on decode.
    """

    def encode(self, value: Any) -> bytes:
        """Encode a value into compact, key-sorted JSON bytes.

        Args:
            value: Value to encode.

        Returns:
            UTF-8 encoded JSON document.

        Raises:
            ShardKVCodecError: If the value has no JSON representation.
        """
        try:
            payload = _to_payload(value)
        except RecursionError as error:
            raise ShardKVCodecError(
                f"Cannot encode value of type {type(value).__name__}: "
                "it is self-referencing or nested too deeply."
            ) from error
        try:
            text = json.dumps(
                payload,
                separators=(",", ":"),
                sort_keys=True,
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError) as error:
            raise ShardKVCodecError(
                f"Cannot encode value of type {type(value).__name__}: {error}. "
                "Use scalars, lists, string-keyed dicts, or dataclasses."
            ) from error
        return text.encode(TEXT_ENCODING)

    def decode(self, data: bytes, value_type: Any = None) -> Any:
        """Decode JSON bytes.

        Args:
            data: Bytes previously produced by ``encode``.
            value_type: Optional expected type. Builtins are shape-checked,
                dataclasses (and containers of them) are rebuilt.

        Returns:
            Decoded value.

        Raises:
            ShardKVCodecError: If bytes are malformed or do not match ``value_type``.
        """
        try:
            payload = json.loads(data.decode(TEXT_ENCODING))
        except (UnicodeDecodeError, json.JSONDecodeError) as error:
            raise ShardKVCodecError(
                f"Stored bytes are not valid JSON: {error}. "
                "The mapping file may be corrupted."
            ) from error
        if value_type is None:
            return payload
        return _from_payload(payload, value_type)


def _to_payload(value: Any) -> Any:
    """Convert dataclasses and tuples into JSON-ready structures."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            item.name: _to_payload(getattr(value, item.name))
            for item in dataclasses.fields(value)
            if item.init
        }
    if isinstance(value, dict):
        payload: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ShardKVCodecError(
                    f"Cannot encode dict key {key!r}: only string keys are supported."
                )
            payload[key] = _to_payload(item)
        return payload
    if isinstance(value, (list, tuple)):
        return [_to_payload(item) for item in value]
    return value


def _from_payload(payload: Any, value_type: Any) -> Any:
    """Rebuild a decoded JSON payload as ``value_type``."""
    if value_type is Any:
        return payload
    origin = typing.get_origin(value_type)
    if origin is not None:
        return _from_generic_payload(payload, value_type, origin)
    if dataclasses.is_dataclass(value_type) and isinstance(value_type, type):
        return _dataclass_from_payload(payload, value_type)
    if value_type is type(None):
        if payload is None:
            return None
        raise _mismatch(payload, value_type)
    if value_type is bool:
        if isinstance(payload, bool):
            return payload
        raise _mismatch(payload, value_type)
    if value_type is int:
        if isinstance(payload, int) and not isinstance(payload, bool):
            return payload
        raise _mismatch(payload, value_type)
    if value_type is float:
        if isinstance(payload, (int, float)) and not isinstance(payload, bool):
            return float(payload)
        raise _mismatch(payload, value_type)
    if value_type is tuple:
        if isinstance(payload, list):
            return tuple(payload)
        raise _mismatch(payload, value_type)
    if isinstance(value_type, type) and isinstance(payload, value_type):
        return payload
    raise _mismatch(payload, value_type)


def _from_generic_payload(payload: Any, value_type: Any, origin: Any) -> Any:
    """Rebuild payloads for parameterized hints such as ``list[Address]``."""
    args = typing.get_args(value_type)
    if origin is Union or origin is types.UnionType:
        if payload is None and type(None) in args:
            return None
        candidates = [arg for arg in args if arg is not type(None)]
        for candidate in candidates:
            try:
                return _from_payload(payload, candidate)
            except ShardKVCodecError:
                continue
        raise _mismatch(payload, value_type)
    if origin in (list, tuple):
        if not isinstance(payload, list):
            raise _mismatch(payload, value_type)
        if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
            return tuple(_from_payload(item, args[0]) for item in payload)
        if origin is tuple and args:
            if len(args) != len(payload):
                raise _mismatch(payload, value_type)
            return tuple(_from_payload(item, arg) for item, arg in zip(payload, args))
        item_type = args[0] if args else Any
        return [_from_payload(item, item_type) for item in payload]
    if origin is dict:
        if not isinstance(payload, dict):
            raise _mismatch(payload, value_type)
        item_type = args[1] if len(args) == 2 else Any
        return {key: _from_payload(item, item_type) for key, item in payload.items()}
    return _from_payload(payload, origin)


def _dataclass_from_payload(payload: Any, record_type: type) -> Any:
    """Build a dataclass instance, filling missing fields from defaults."""
    if not isinstance(payload, dict):
        raise _mismatch(payload, record_type)
    record_fields = {item.name: item for item in dataclasses.fields(record_type) if item.init}
    unknown = sorted(set(payload) - set(record_fields))
    if unknown:
        raise ShardKVCodecError(
            f"Cannot decode {record_type.__name__}: unexpected fields {unknown}."
        )
    try:
        hints = typing.get_type_hints(record_type)
    except (NameError, TypeError):
        hints = {}
    kwargs = {
        name: _from_payload(item, hints.get(name, Any))
        for name, item in payload.items()
    }
    try:
        return record_type(**kwargs)
    except TypeError as error:
        raise ShardKVCodecError(
            f"Cannot decode {record_type.__name__}: {error}."
        ) from error


def _mismatch(payload: Any, value_type: Any) -> ShardKVCodecError:
    """Build a type-mismatch error for a decoded payload."""
    expected = getattr(value_type, "__name__", str(value_type))
    return ShardKVCodecError(
        f"Stored value of type {type(payload).__name__} does not match expected type {expected}."
    )
