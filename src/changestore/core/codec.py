"""
Change payload codec: payloads are stored as opaque JSON text.

Only JSON-compatible values round-trip exactly (dicts with string keys,
lists, strings, finite numbers, booleans, None).
"""

from __future__ import annotations

import json
from typing import Any

from ..errors import SerializationError


def encode_change(change: Any) -> str:
    """Payload ➜ JSON text. NaN/Infinity are rejected since they never compare equal on read."""
    try:
        return json.dumps(change, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Change payload is not JSON-serialisable: {exc}") from exc


def decode_change(data: str) -> Any:
    try:
        return json.loads(data)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Stored change is not valid JSON: {exc}") from exc
