"""Storage change events.

Delivered to every browsing context attached to a shared storage area
except the one that performed the write.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class StorageEvent(BaseModel):
    """A key changed in shared storage."""

    model_config = ConfigDict(frozen=True)

    key: str | None = Field(..., description="Changed key, or None when storage was cleared")
    old_value: str | None = None
    new_value: str | None = None
    source: str = Field(default="", description="Context id of the writer")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
