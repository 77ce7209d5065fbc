"""Base model for remote store payloads.

Every item model inherits from :class:`CartSyncBaseModel` which provides:

* frozen instances, so a snapshot handed to a subscriber can never be
  mutated behind the store's back;
* ``extra="ignore"`` so additional server-side fields are tolerated;
* a ``model_validator(mode="before")`` that drops ``null`` values so
  the field default is used instead.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class CartSyncBaseModel(BaseModel):
    """Base for remote store item models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}
