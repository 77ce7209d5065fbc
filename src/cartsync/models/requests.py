"""Pydantic request models for controller entrypoints.

These models provide a consistent "validate → normalize → execute" flow.
They are used internally by :class:`cartsync.controller.ReconciliationController`.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from cartsync.exceptions import ValidationError

_R = TypeVar("_R", bound=BaseModel)


class ItemRequest(BaseModel):
    """Request referencing a single item id."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    id: int


class AddToCartRequest(ItemRequest):
    amount: int = Field(gt=0)


class AdjustInventoryRequest(ItemRequest):
    delta: int


def parse_request(model: type[_R], **fields: Any) -> _R:
    """Validate *fields* into *model*, mapping pydantic errors to :class:`ValidationError`."""
    try:
        return model.model_validate(fields)
    except PydanticValidationError as exc:
        raise ValidationError(f"invalid {model.__name__}: {exc.errors(include_url=False)}") from exc
