"""State/store layer.

This package is the single source of truth for the mirrored inventory
and cart. Only :class:`cartsync.state.store.StateStore` holds state;
the reconciliation controller computes new collections with the pure
helpers in :mod:`cartsync.state.policy` and commits them on the store.
"""
