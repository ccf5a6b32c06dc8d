"""
Cart <-> checkout session metadata.

Stripe caps every metadata value at 500 characters, so a cart that does not
fit under the single ``bookings`` key is split across ``bookings_0``,
``bookings_1``, ... with the chunk count stored under ``bookings_chunks``.
"""
import json
import logging
import math

from models.slot import DemoSlot

logger = logging.getLogger(__name__)

METADATA_VALUE_LIMIT = 500
BOOKINGS_KEY = "bookings"
CHUNK_COUNT_KEY = "bookings_chunks"


def chunk_key(index: int) -> str:
    return f"{BOOKINGS_KEY}_{index}"


def encode_bookings(cart, limit: int = METADATA_VALUE_LIMIT) -> dict:
    slim = [DemoSlot.coerce(item).to_dict() for item in cart]
    # ensure_ascii keeps len(blob) equal to the characters Stripe counts
    blob = json.dumps(slim, separators=(",", ":"))

    if len(blob) <= limit:
        return {BOOKINGS_KEY: blob}

    meta = {}
    for i in range(0, len(blob), limit):
        meta[chunk_key(i // limit)] = blob[i:i + limit]
    meta[CHUNK_COUNT_KEY] = str(math.ceil(len(blob) / limit))
    return meta


def _reassemble(metadata) -> str:
    if metadata.get(BOOKINGS_KEY):
        return metadata[BOOKINGS_KEY]

    count = int(metadata.get(CHUNK_COUNT_KEY) or 0)
    return "".join(metadata.get(chunk_key(i)) or "" for i in range(count))


def decode_bookings(metadata) -> list:
    """Rebuild the slot list; anything missing or malformed yields []."""
    if not metadata:
        return []

    try:
        blob = _reassemble(metadata)
        if not blob:
            return []
        items = json.loads(blob)
        if not isinstance(items, list):
            raise TypeError("bookings payload is not a list")
        return [DemoSlot.from_dict(item) for item in items]
    except (ValueError, TypeError) as exc:
        logger.warning("Could not decode bookings metadata: %s", exc)
        return []
