"""Commit records.

Every externally visible change to the store is exactly one commit;
these records describe what a commit touched.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class StateSection(StrEnum):
    INVENTORY = "inventory"
    CART = "cart"


class Commit(BaseModel):
    """A committed replacement of one or both collections."""

    model_config = ConfigDict(frozen=True)

    revision: int = Field(..., ge=1, description="Monotonic commit counter")
    sections: frozenset[StateSection]
    committed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
