import json
import math

import pytest

from conftest import make_slot
from models.slot import DemoSlot
from utils.booking_codec import (
    BOOKINGS_KEY,
    CHUNK_COUNT_KEY,
    METADATA_VALUE_LIMIT,
    decode_bookings,
    encode_bookings,
)


def _cart(n):
    return [
        make_slot(date=f"2026-04-{(i % 28) + 1:02d}", time="3:00 PM" if i % 2 else "11:00 AM",
                  location=f"Location {i}")
        for i in range(n)
    ]


@pytest.mark.parametrize("size", [0, 1, 3, 12, 50])
def test_round_trip_preserves_slots(size):
    cart = _cart(size)
    decoded = decode_bookings(encode_bookings(cart))
    assert [s.to_dict() for s in decoded] == cart


def test_small_cart_uses_single_key():
    meta = encode_bookings(_cart(2))
    assert set(meta) == {BOOKINGS_KEY}
    assert len(meta[BOOKINGS_KEY]) <= METADATA_VALUE_LIMIT


def test_large_cart_is_chunked():
    meta = encode_bookings(_cart(20))
    assert BOOKINGS_KEY not in meta
    count = int(meta[CHUNK_COUNT_KEY])
    blob = "".join(meta[f"bookings_{i}"] for i in range(count))
    assert count == math.ceil(len(blob) / METADATA_VALUE_LIMIT)
    assert all(len(meta[f"bookings_{i}"]) <= METADATA_VALUE_LIMIT for i in range(count))


def _cart_with_blob_length(target):
    # One slot, padded through the location so the JSON is exactly ``target`` long
    base = make_slot(location="")
    overhead = len(json.dumps([base], separators=(",", ":")))
    return [make_slot(location="x" * (target - overhead))]


def test_exactly_limit_stays_single_key():
    meta = encode_bookings(_cart_with_blob_length(500))
    assert list(meta) == [BOOKINGS_KEY]
    assert len(meta[BOOKINGS_KEY]) == 500


def test_one_over_limit_splits_into_two_chunks():
    meta = encode_bookings(_cart_with_blob_length(501))
    assert meta[CHUNK_COUNT_KEY] == "2"
    assert len(meta["bookings_0"]) == 500
    assert len(meta["bookings_1"]) == 1


def test_empty_cart():
    meta = encode_bookings([])
    assert meta == {BOOKINGS_KEY: "[]"}
    assert decode_bookings(meta) == []


def test_date_str_is_normalised():
    meta = encode_bookings([{"dateStr": "2026-05-01", "time": "11:00 AM", "location": "Aptos",
                             "displayDate": "Fri, May 1"}])
    slot = decode_bookings(meta)[0]
    assert slot == DemoSlot(date="2026-05-01", time="11:00 AM", location="Aptos", display_date="Fri, May 1")


def test_non_ascii_counts_stored_characters():
    cart = [make_slot(location="Café " * 40)]
    meta = encode_bookings(cart)
    assert all(len(v) <= METADATA_VALUE_LIMIT for v in meta.values())
    assert decode_bookings(meta)[0].location == "Café " * 40


@pytest.mark.parametrize("metadata", [
    None,
    {},
    {"customerName": "Ana"},
    {BOOKINGS_KEY: "{not json"},
    {BOOKINGS_KEY: '{"date": "2026-01-01"}'},
    {BOOKINGS_KEY: "[1, 2]"},
    {CHUNK_COUNT_KEY: "abc"},
    {CHUNK_COUNT_KEY: "2", "bookings_0": '[{"date":'},
])
def test_malformed_metadata_decodes_to_empty(metadata):
    assert decode_bookings(metadata) == []
