"""ZMQ multipart framing for peer snapshots.

Publish (PUB/SUB)
    topic, json_body

The JSON body is a list with one object per peer, in snapshot order:
    {"host": str, "port": int, "payload": str, "last_seen": float}
"""

from __future__ import annotations

import json
from typing import Sequence, Tuple

from ...location import Location
from ..base import DecodeError


def to_pub_frames(topic: str, snapshot: Sequence[Location]) -> Tuple[bytes, bytes]:
    """Encode a snapshot as PUB frames."""

    peers = []
    for location in snapshot:
        peers.append({
            "host":      location.host,
            "port":      location.port,
            "payload":   location.payload,
            "last_seen": location.last_seen,
        })

    body = json.dumps(
        peers,
        separators=(",", ":"),          # compact JSON
    ).encode("utf-8")

    return (topic.encode(), body)


def from_pub_frames(parts: Sequence[bytes]) -> Tuple[Location, ...]:
    """Decode SUB parts back into a snapshot."""

    if len(parts) != 2:
        raise DecodeError(f"expected 2 frames, got {len(parts)}")

    try:
        peers = json.loads(parts[1].decode("utf-8"))
        return tuple(
            Location((p["host"], p["port"]), p["payload"], p["last_seen"])
            for p in peers
        )
    except (ValueError, KeyError, TypeError) as exc:
        raise DecodeError("malformed snapshot body") from exc
