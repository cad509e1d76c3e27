"""Unit tests for the JSON codec."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from core.errors import ShardKVCodecError
from store.codec import JsonCodec


@dataclass(frozen=True)
class Address:
    street: str
    city: str


@dataclass(frozen=True)
class Customer:
    name: str
    addresses: list[Address] = field(default_factory=list)
    nickname: str | None = None
    visits: int = 0


def test_encode_string_key_matches_plain_json() -> None:
    """String keys should encode to a quoted JSON string."""
    assert JsonCodec().encode("Pizza") == b'"Pizza"'


def test_encode_sorts_map_keys() -> None:
    """Maps with equal content should encode to identical bytes."""
    codec = JsonCodec()

    assert codec.encode({"b": 1, "a": 2}) == codec.encode({"a": 2, "b": 1}) == b'{"a":2,"b":1}'


def test_encode_rejects_non_string_map_keys() -> None:
    """Only string-keyed maps should be encodable."""
    with pytest.raises(ShardKVCodecError):
        JsonCodec().encode({1: "one"})


def test_encode_rejects_unrepresentable_value() -> None:
    """Values without a JSON form should raise a codec error."""
    with pytest.raises(ShardKVCodecError):
        JsonCodec().encode({"items": {1, 2}})


def test_decode_rebuilds_nested_dataclasses() -> None:
    """Structured records should decode back into dataclass instances."""
    codec = JsonCodec()
    customer = Customer(name="Ada", addresses=[Address("10 Downing Street", "London")])

    decoded = codec.decode(codec.encode(customer), Customer)

    assert decoded == customer


def test_decode_fills_missing_fields_from_defaults() -> None:
    """Missing record fields should fall back to dataclass defaults."""
    decoded = JsonCodec().decode(b'{"name":"Ada"}', Customer)

    assert decoded.visits == 0 and decoded.addresses == []


def test_decode_rejects_unknown_record_fields() -> None:
    """Unexpected fields should signal a type mismatch."""
    with pytest.raises(ShardKVCodecError):
        JsonCodec().decode(b'{"street":"a","city":"b","zip":"c"}', Address)


def test_decode_rejects_bool_as_int() -> None:
    """A stored boolean should not satisfy an int expectation."""
    with pytest.raises(ShardKVCodecError):
        JsonCodec().decode(b"true", int)


def test_decode_checks_container_item_types() -> None:
    """Parameterized containers should validate their items."""
    codec = JsonCodec()

    assert codec.decode(b'{"Blue":10,"Yellow":50}', dict[str, int]) == {"Blue": 10, "Yellow": 50}
    with pytest.raises(ShardKVCodecError):
        codec.decode(b"[1,\"two\"]", list[int])


def test_decode_rejects_malformed_bytes() -> None:
    """Corrupted stored bytes should raise a codec error."""
    with pytest.raises(ShardKVCodecError):
        JsonCodec().decode(b"{not json")


@dataclass
class Order:
    item: str
    quantity: int = 1
    total: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.total = self.quantity * 10


def test_decode_round_trips_records_with_non_init_fields() -> None:
    """Fields excluded from __init__ should not block decoding."""
    codec = JsonCodec()

    encoded = codec.encode(Order("pizza", quantity=2))
    decoded = codec.decode(encoded, Order)

    assert encoded == b'{"item":"pizza","quantity":2}'
    assert decoded == Order("pizza", quantity=2) and decoded.total == 20


def test_encode_rejects_self_referencing_values() -> None:
    """Cyclic containers should raise a codec error, not RecursionError."""
    looped: list[object] = []
    looped.append(looped)
    mapping: dict[str, object] = {}
    mapping["self"] = mapping

    with pytest.raises(ShardKVCodecError):
        JsonCodec().encode(looped)
    with pytest.raises(ShardKVCodecError):
        JsonCodec().encode(mapping)


def test_tuples_decode_as_lists_unless_typed() -> None:
    """Tuples come back as lists without a value type and as tuples with one."""
    codec = JsonCodec()
    encoded = codec.encode((1, 2))

    assert codec.decode(encoded) == [1, 2]
    assert codec.decode(encoded, tuple[int, ...]) == (1, 2)
