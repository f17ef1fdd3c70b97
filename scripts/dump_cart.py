#!/usr/bin/env python3
"""Inspect a persisted cart and, optionally, the item pages it links to.

Reads the cart stored under ``OPO_STORAGE_PATH``, prints each line with
its totals, and when a catalog is configured resolves every line's slug
the same way the item page does.

Usage
-----
Set environment variables and run::

    export OPO_STORAGE_PATH="$HOME/.opostore/storage.json"
    export OPO_CATALOG_URL="https://db.example.com"
    export OPO_CATALOG_API_KEY="anon-key"
    python scripts/dump_cart.py

Options::

    --storage FILE      Storage file (default: OPO_STORAGE_PATH)
    --resolve           Resolve each line's slug through the catalog
    --json              Output as machine-readable JSON
    --verbose, -v       Enable debug logging
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

from opostore import CatalogClient, ItemPageLoader, ShopContext, StoreConfig, open_storage  # noqa: E402
from opostore.formatting import format_won  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


async def _resolve_slugs(config: StoreConfig, slugs: list[str]) -> dict[str, Any]:
    resolved: dict[str, Any] = {}
    async with CatalogClient(config) as catalog:
        loader = ItemPageLoader(catalog, revalidate=config.revalidate_seconds)
        for slug in slugs:
            page = await loader.fetch(slug)
            resolved[slug] = None if page.product is None else page.product.to_wire()
    return resolved


async def main() -> None:
    parser = argparse.ArgumentParser(description="Dump the persisted opostore cart.")
    parser.add_argument("--storage", help="Storage file (default: OPO_STORAGE_PATH)")
    parser.add_argument("--resolve", action="store_true", help="Resolve line slugs through the catalog")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.storage:
        overrides["storage_path"] = Path(args.storage)
    config = StoreConfig.from_env(**overrides)
    if config.storage_path is None:
        parser.error("no storage file: pass --storage or set OPO_STORAGE_PATH")

    tab = ShopContext(open_storage(config), config, context_id="dump")
    try:
        lines = tab.cart.lines
        totals = tab.cart.totals()
    finally:
        tab.close()

    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "storage": str(config.storage_path),
        "lines": [line.to_wire() for line in lines],
        "totals": totals.model_dump(mode="json"),
    }

    if args.resolve:
        result["items"] = await _resolve_slugs(config, [line.slug for line in lines if line.slug])

    if args.json_mode:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return

    out: list[str] = [_section("opostore dump_cart")]
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  storage   : {result['storage']}")
    out.append(_section(f"LINES ({len(lines)})"))
    for line in lines:
        out.append(f"  {line.id}: {line.quantity} x {line.name or line.item_id} @ {format_won(line.price)}")
    out.append(_section("TOTALS"))
    out.append(f"  subtotal  : {format_won(totals.subtotal)}")
    out.append(f"  shipping  : {'Free' if totals.free_shipping else format_won(totals.shipping)}")
    out.append(f"  total     : {format_won(totals.total)}")
    if totals.flagged_line_ids:
        out.append(f"  flagged   : {', '.join(totals.flagged_line_ids)}")
    for slug, product in result.get("items", {}).items():
        out.append(f"  {slug}: {'not found' if product is None else product['name']}")
    print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
