"""
Peeling the frames of the watch-streams into the raw events.

Every frame is one JSON line of the streaming response's body:
``{"type": "ADDED", "object": {...}}``. The object is left undecoded:
it is kept as a JSON-decoded payload until the typed decoding is requested
(see :class:`kubetype.clients.watching.WatchEvent`).

The decoder is stateless: one frame in, one raw event out. The splitting of
the byte stream into the frames is done by the transport (`api.iter_jsonlines`).
"""
import dataclasses
import json
from typing import Any

from kubetype.clients import errors


@dataclasses.dataclass(frozen=True)
class RawFrame:
    """
    A raw watch-event: the declared event type and the opaque object payload.

    The type is usually one of ``ADDED``, ``MODIFIED``, ``DELETED``, ``ERROR``,
    but the unknown types are passed through as declared.
    """
    type: str
    payload: Any


def decode_frame(line: bytes) -> RawFrame:
    """
    Decode one transport frame (one JSON line) into a raw event.

    There is no valid frame without an object for any event type,
    so an absent or null object is as malformed as broken JSON.
    """
    try:
        raw = json.loads(line.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise errors.MalformedFrame(f"Frame is not a valid JSON document: {e}") from e

    if not isinstance(raw, dict):
        raise errors.MalformedFrame(f"Frame is not a JSON object: {type(raw).__name__}")

    raw_type = raw.get('type')
    if not isinstance(raw_type, str) or not raw_type:
        raise errors.MalformedFrame(f"Frame has no event type: {raw_type!r}")

    payload = raw.get('object')
    if payload is None:
        raise errors.MalformedFrame(f"Object is empty in event of type {raw_type!r}", type=raw_type)

    return RawFrame(type=raw_type, payload=payload)
