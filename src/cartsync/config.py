"""Client configuration for cartsync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from cartsync._constants import BASE_URL, CHECKOUT_MODES
from cartsync.exceptions import CartSyncConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class CartSyncConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Root URL of the remote store exposing ``/inventory`` and ``/cart``.
        A trailing slash is stripped.
    request_timeout : float
        Total seconds allowed per HTTP request. Expiry surfaces as a
        :class:`~cartsync.exceptions.RemoteError` with ``status=None``.
    checkout_mode : str
        ``"bulk"`` clears the cart with a single ``DELETE /cart``.
        ``"per_item"`` fetches the remote cart and deletes each entry,
        for servers that do not support collection-level deletes.
    concurrent_load : bool
        Fetch inventory and cart concurrently during the initial load.
    """

    base_url: str = BASE_URL
    request_timeout: float = 10.0
    checkout_mode: str = "bulk"
    concurrent_load: bool = True

    def __post_init__(self) -> None:
        base_url = self.base_url.strip().rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            raise CartSyncConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        # Frozen dataclass: normalise through object.__setattr__.
        object.__setattr__(self, "base_url", base_url)

        if self.request_timeout <= 0:
            raise CartSyncConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.checkout_mode not in CHECKOUT_MODES:
            raise CartSyncConfigError(
                f"checkout_mode must be one of {sorted(CHECKOUT_MODES)}, got {self.checkout_mode!r}"
            )

    @classmethod
    def from_env(cls, **overrides: Any) -> CartSyncConfig:
        """Create configuration from environment variables.

        Reads ``CARTSYNC_BASE_URL``, ``CARTSYNC_REQUEST_TIMEOUT``,
        ``CARTSYNC_CHECKOUT_MODE`` and ``CARTSYNC_CONCURRENT_LOAD``.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        CartSyncConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_CONFIG_MAP = {
            "CARTSYNC_BASE_URL": "base_url",
            "CARTSYNC_CHECKOUT_MODE": "checkout_mode",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip()

        # request_timeout is numeric, handle separately
        timeout_env = env.get("CARTSYNC_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise CartSyncConfigError(f"CARTSYNC_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "concurrent_load" not in overrides:
            config_kwargs["concurrent_load"] = _env_bool(env.get("CARTSYNC_CONCURRENT_LOAD"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
