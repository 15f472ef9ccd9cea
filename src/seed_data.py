"""
Seed sample customers, profiles and orders for development.

    python src/seed_data.py [--db PATH] [--seed N]
"""
import argparse
import asyncio
import logging
import random
import sys

from db.client import PlatformClient
from seed.catalog import SAMPLE_CUSTOMERS, SAMPLE_PASSWORD, SAMPLE_PRODUCTS
from seed.workflow import SeedReport, seed_data
from utils.config import Settings
from utils.logger import get_logger, set_log_level

_logger = get_logger("seed_data")


def parse_args(argv=None) -> argparse.Namespace:
    settings = Settings.from_env()
    p = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    p.add_argument("--db", default=settings.db_path, help="sqlite file of the stores")
    p.add_argument("--seed", type=int, default=None, help="random seed for repeatable data")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


async def run(db_path: str, seed=None) -> SeedReport:
    client = PlatformClient.open(db_path)
    report = await seed_data(
        client, SAMPLE_CUSTOMERS, SAMPLE_PRODUCTS, rng=random.Random(seed)
    )
    if report.error is None:
        _logger.info("Sample credentials:")
        _logger.info(f"Email: {SAMPLE_CUSTOMERS[0].email}")
        _logger.info(f"Password: {SAMPLE_PASSWORD}")
        _logger.info(f"(All sample users have the same password: {SAMPLE_PASSWORD})")
    return report


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.verbose:
        set_log_level(logging.DEBUG)
    asyncio.run(run(args.db, args.seed))
    # per-customer failures are logged, never reported through the exit code
    return 0


if __name__ == "__main__":
    sys.exit(main())
