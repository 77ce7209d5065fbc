"""Shared helpers for remote store endpoint modules.

This module centralizes the most repeated patterns:
- validating a decoded JSON object into a typed model
- validating a decoded JSON array into a list of typed models
- mapping payload validation failures to :class:`RemoteError`

It is internal to cartsync and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cartsync.exceptions import RemoteError

_M = TypeVar("_M", bound=BaseModel)


def decode_item(*, endpoint: str, payload: Any, model: type[_M]) -> _M:
    """Validate a single JSON object returned by *endpoint*."""
    if not isinstance(payload, dict):
        raise RemoteError(
            f"{endpoint} returned {type(payload).__name__}, expected an object",
            endpoint=endpoint,
        )
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise RemoteError(
            f"{endpoint} returned an invalid {model.__name__}: {exc.errors(include_url=False)}",
            endpoint=endpoint,
        ) from exc


def decode_items(*, endpoint: str, payload: Any, model: type[_M]) -> list[_M]:
    """Validate a JSON array of objects returned by *endpoint*."""
    if not isinstance(payload, list):
        raise RemoteError(
            f"{endpoint} returned {type(payload).__name__}, expected an array",
            endpoint=endpoint,
        )
    return [decode_item(endpoint=endpoint, payload=item, model=model) for item in payload]
