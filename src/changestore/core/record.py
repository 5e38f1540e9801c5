"""
Change record kernel – *pure Pydantic* (no SQLAlchemy imports).

* One ChangeRecord per row in `changes`; records are never mutated.
* `id` is derived from (document, pos), it is never generated on its own.
* DocumentChanges is what a history query hands back to the caller.
"""

from __future__ import annotations

import time
from typing import Any, List

from pydantic import BaseModel, Field

from .codec import encode_change


def now_ms() -> int:  # Unix epoch in milliseconds
    return int(time.time() * 1000)


def record_id(document_id: str, version: int) -> str:
    return f"{document_id}/{version}"


class ChangeRecord(BaseModel):
    """Immutable row shape: `{id, document, pos, data, timestamp}`."""

    id: str
    document: str
    pos: int = Field(ge=1)
    data: str  # JSON text, see core.codec
    timestamp: int = Field(default_factory=now_ms)

    model_config = {"frozen": True}

    @classmethod
    def for_change(cls, document_id: str, version: int, change: Any) -> "ChangeRecord":
        """Build the record that places `change` at position `version`."""
        return cls(
            id=record_id(document_id, version),
            document=document_id,
            pos=version,
            data=encode_change(change),
        )


class DocumentChanges(BaseModel):
    """Head version plus the requested slice of history, oldest first."""

    version: int = 0
    changes: List[Any] = Field(default_factory=list)
