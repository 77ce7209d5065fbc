#!/usr/bin/env python3
"""Dump the mirrored inventory and cart.

This script loads both collections from the remote store through the
reconciliation controller and prints them, either as a readable table
or as JSON. With ``--add ID AMOUNT`` it also adds an item to the cart
first, which is handy to check a server's ``POST``/``PUT`` echo.

Usage
-----
Point at a running store and run::

    export CARTSYNC_BASE_URL="http://localhost:3000"
    python scripts/dump_state.py

Options::

    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --add ID AMOUNT      Add AMOUNT of item ID to the cart before dumping
    --checkout           Check out after dumping
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from cartsync import (  # noqa: E402
    CartSyncClient,
    CartSyncConfig,
    CartSyncError,
    ReconciliationController,
    StateStore,
)


def _section(title: str) -> str:
    return f"\n── {title} {'─' * max(0, 50 - len(title))}"


def _render(store: StateStore) -> list[str]:
    out: list[str] = []
    out.append(_section("INVENTORY"))
    for item in store.inventory:
        out.append(f"  {item.id:>5}  {item.name:<30} count={item.count}")
    out.append(_section("CART"))
    if not store.cart:
        out.append("  (empty)")
    for entry in store.cart:
        out.append(f"  {entry.id:>5}  {entry.name:<30} amount={entry.amount}")
    return out


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Dump the inventory/cart mirror for debugging / development.",
    )
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--add", nargs=2, type=int, metavar=("ID", "AMOUNT"), help="Add to cart before dumping")
    parser.add_argument("--checkout", action="store_true", help="Check out after dumping")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = CartSyncConfig.from_env()
    store = StateStore()
    commits: list[int] = []
    store.subscribe(lambda: commits.append(store.revision))

    async with CartSyncClient(config) as client:
        controller = ReconciliationController(store, client, config=config)
        try:
            await controller.load_all()
            if args.add:
                await controller.add_to_cart(args.add[0], args.add[1])
        except CartSyncError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1

        result: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "base_url": config.base_url,
            "revision": store.revision,
            "commits": commits,
            **store.snapshot().model_dump(mode="json"),
        }
        rendered = _render(store)

        if args.checkout:
            try:
                await controller.checkout()
            except CartSyncError as exc:
                print(f"checkout failed: {exc}", file=sys.stderr)
                return 1
        await controller.drain()

    if args.json_mode or args.output:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    else:
        out = [_section("cartsync dump_state"), f"  time      : {result['timestamp']}", f"  base_url  : {config.base_url}"]
        out.extend(rendered)
        if args.checkout:
            out.append(_section("CHECKOUT"))
            out.append("  cart cleared")
        print("\n".join(out))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
