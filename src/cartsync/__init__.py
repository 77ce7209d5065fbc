"""cartsync - Observable inventory/cart mirror kept in sync with a remote store."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cartsync")
except PackageNotFoundError:
    __version__ = "0+local"
from cartsync.client import CartSyncClient, SyncClient
from cartsync.config import CartSyncConfig
from cartsync.controller import ReconciliationController
from cartsync.exceptions import (
    CartSyncConfigError,
    CartSyncError,
    NotFoundError,
    ReentrantMutationError,
    RemoteError,
    ValidationError,
)
from cartsync.models import CartItem, CartPatch, CartState, InventoryItem
from cartsync.state.events import Commit, StateSection
from cartsync.state.store import StateStore

__all__ = [
    "__version__",
    "CartItem",
    "CartPatch",
    "CartState",
    "CartSyncClient",
    "CartSyncConfig",
    "CartSyncConfigError",
    "CartSyncError",
    "Commit",
    "InventoryItem",
    "NotFoundError",
    "ReconciliationController",
    "ReentrantMutationError",
    "RemoteError",
    "StateSection",
    "StateStore",
    "SyncClient",
    "ValidationError",
]
