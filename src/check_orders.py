"""
Print the profile and order documents currently in the store.

    python src/check_orders.py [--db PATH]
"""
import argparse
import asyncio
import sys

from db import crud
from db.client import PlatformClient
from db.errors import PlatformError
from utils.config import Settings
from utils.logger import get_logger

_logger = get_logger("check_orders")


async def check_orders(client: PlatformClient) -> int:
    """Log a summary of users and orders; return the number of orders found."""
    _logger.info("🔍 Checking store for orders...")

    profiles = await crud.list_customers(client)
    _logger.info(f"✓ Found {len(profiles)} users")
    for profile in profiles:
        _logger.info(f"  - {profile.email} (ID: {profile.uid})")

    orders, total = await crud.list_orders(client, page=1, page_size=None)
    _logger.info(f"✓ Found {total} orders")
    if not total:
        _logger.warning("❌ NO ORDERS FOUND!")
        _logger.info("To create orders, run: python src/seed_data.py")
        return 0

    for order in orders:
        _logger.info(f"  - Order {order.id[:8]}")
        _logger.info(f"    User: {order.userEmail}")
        _logger.info(f"    Total: ${order.total:.2f}")
        _logger.info(f"    Status: {order.status}")
        _logger.info(f"    Created: {order.createdAt}")
    return total


def main(argv=None) -> int:
    settings = Settings.from_env()
    p = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    p.add_argument("--db", default=settings.db_path)
    args = p.parse_args(argv)

    try:
        asyncio.run(check_orders(PlatformClient.open(args.db)))
    except PlatformError as e:
        _logger.error(f"❌ Error checking store: {e}")
    _logger.info("✅ Check complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
