from __future__ import annotations

import pytest

from cartsync.config import CartSyncConfig
from cartsync.exceptions import CartSyncConfigError


def test_defaults() -> None:
    config = CartSyncConfig()
    assert config.base_url == "http://localhost:3000"
    assert config.request_timeout == 10.0
    assert config.checkout_mode == "bulk"
    assert config.concurrent_load is True


def test_trailing_slash_stripped() -> None:
    assert CartSyncConfig(base_url="http://shop.test:8080/").base_url == "http://shop.test:8080"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_url": "shop.test"},
        {"request_timeout": 0},
        {"checkout_mode": "everything"},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(CartSyncConfigError):
        CartSyncConfig(**kwargs)  # type: ignore[arg-type]


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARTSYNC_BASE_URL", "http://store.test/")
    monkeypatch.setenv("CARTSYNC_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("CARTSYNC_CHECKOUT_MODE", "per_item")
    monkeypatch.setenv("CARTSYNC_CONCURRENT_LOAD", "off")

    config = CartSyncConfig.from_env()

    assert config.base_url == "http://store.test"
    assert config.request_timeout == 2.5
    assert config.checkout_mode == "per_item"
    assert config.concurrent_load is False


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARTSYNC_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("CARTSYNC_CONCURRENT_LOAD", "no")

    config = CartSyncConfig.from_env(request_timeout=4.0, concurrent_load=True)

    assert config.request_timeout == 4.0
    assert config.concurrent_load is True


def test_from_env_unparseable_bool_keeps_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARTSYNC_CONCURRENT_LOAD", "maybe")
    assert CartSyncConfig.from_env().concurrent_load is True


def test_from_env_bad_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARTSYNC_REQUEST_TIMEOUT", "soon")
    with pytest.raises(CartSyncConfigError, match="CARTSYNC_REQUEST_TIMEOUT"):
        CartSyncConfig.from_env()
