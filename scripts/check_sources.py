#!/usr/bin/env python3
"""Smoke check for the seed and live backends.

Usage:
    # Health of both backends plus a merged product read
    python scripts/check_sources.py

    # Also read orders, show 5 sample products
    python scripts/check_sources.py --orders --sample 5

Requirements:
    - SHOP_SEED_API_URL / SHOP_LIVE_API_URL reachable (see .env)
    - Django settings configured
"""

import argparse
import asyncio
import os
import sys

# Add src to path for Django imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

# Setup Django
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "shopfront.settings.dev")

import django
django.setup()

from shopfront.store.dashboard import product_categories
from shopfront.store.formatting import format_thb
from shopfront.store.services import get_store


async def check(args) -> bool:
    store = get_store()

    print("Backend Configuration:")
    print(f"  {store.seed.label:<6} {store.seed.source.base_url}")
    print(f"  {store.live.label:<6} {store.live.source.base_url}")
    print(f"  Timeout: {store.config.timeout}s")

    health = await store.check_health()
    print("\nHealth:")
    for name, ok in health.items():
        print(f"  {name:<6} {'up' if ok else 'DOWN'}")

    merged = await store.products.all_products()
    print("\nProducts:")
    print(f"  Total:    {len(merged.records)} ({merged.seed_count} seed, {merged.live_count} live)")
    print(f"  Answered: {merged.answered}")
    if merged.used_fallback:
        print("  Served from the primary API fallback")

    for index, product in enumerate(merged.records[: args.sample], start=1):
        print(f"  {index}. {product.name} - {format_thb(product.price)} ({product.category})")

    categories = product_categories(merged.records)
    suffix = "..." if len(categories) > 5 else ""
    print(f"  Categories ({len(categories)}): {', '.join(categories[:5])}{suffix}")

    if args.orders:
        result = await store.orders.list_orders()
        print("\nOrders:")
        print(f"  {result.message}")

    return merged.answered


def main():
    parser = argparse.ArgumentParser(description="Check the seed and live store backends")
    parser.add_argument("--orders", action="store_true", help="Also read and merge orders")
    parser.add_argument("--sample", type=int, default=3, help="Number of sample products to list (default: 3)")
    args = parser.parse_args()

    if not asyncio.run(check(args)):
        print("\nError: neither backend answered.")
        sys.exit(1)


if __name__ == "__main__":
    main()
