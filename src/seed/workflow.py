# seeding workflow: customers -> accounts + profiles -> orders
from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from db.client import ORDERS, USERS, PlatformClient
from db.errors import EMAIL_ALREADY_EXISTS, PlatformError
from db.models import Customer, Product
from seed.orders import generate_orders, random_timestamp
from utils.logger import get_logger

_logger = get_logger(__name__)

MIN_ORDERS = 2
MAX_ORDERS = 5


@dataclass(frozen=True)
class CustomerSeedResult:
    """
    Outcome for one customer.

    Fields:
      - user_id: account uid, None if the customer was skipped
      - created: True if the account was created by this run
      - order_ids: ids of the order documents added
      - error: message of the failure that caused a skip
    """

    email: str
    user_id: Optional[str] = None
    created: bool = False
    order_ids: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SeedReport:
    results: List[CustomerSeedResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def accounts_created(self) -> int:
        return sum(1 for r in self.results if r.created)

    @property
    def orders_created(self) -> int:
        return sum(len(r.order_ids) for r in self.results)

    @property
    def failures(self) -> List[CustomerSeedResult]:
        return [r for r in self.results if not r.ok]


def profile_document(
    customer: Customer, rng: random.Random, now: Optional[datetime] = None
) -> dict:
    now = now or datetime.now(timezone.utc)
    address = {
        "address1": customer.shipping_address.address1,
        "address2": customer.shipping_address.address2,
        "city": customer.shipping_address.city,
        "state": customer.shipping_address.state,
        "zip": customer.shipping_address.zip,
        "country": customer.shipping_address.country,
    }
    return {
        "displayName": customer.display_name,
        "email": customer.email,
        "phoneNumber": customer.phone_number,
        "emailVerified": True,
        "status": "active",
        "createdAt": random_timestamp(rng, 180, now),
        "updatedAt": now,
        "lastLogin": random_timestamp(rng, 7, now),
        "shippingAddress": address,
        "billingAddress": dict(address),
        "photoURL": None,
        "preferences": {
            "newsletter": True,
            "notifications": True,
        },
    }


async def _resolve_account(
    client: PlatformClient, customer: Customer, rng: random.Random, now: datetime
) -> CustomerSeedResult:
    """Create the account and profile, or recover the uid of an existing one."""
    _logger.info(f"Creating customer: {customer.email}")
    try:
        user = await client.auth.create_user(
            email=customer.email,
            password=customer.password,
            display_name=customer.display_name,
            email_verified=True,
        )
        await client.firestore.set_document(
            USERS, user.uid, profile_document(customer, rng, now)
        )
        _logger.info(f"✓ Created user profile for {customer.email}")
        return CustomerSeedResult(email=customer.email, user_id=user.uid, created=True)
    except PlatformError as e:
        if e.code != EMAIL_ALREADY_EXISTS:
            _logger.error(f"✗ Error creating {customer.email}: {e.message}")
            return CustomerSeedResult(email=customer.email, error=e.message)

    _logger.warning(f"⚠ User {customer.email} already exists")
    try:
        user = await client.auth.get_user_by_email(customer.email)
    except PlatformError as e:
        _logger.error(f"✗ Could not get user {customer.email}: {e.message}")
        return CustomerSeedResult(email=customer.email, error=e.message)
    _logger.info(f"✓ Found existing user ID for {customer.email}")
    return CustomerSeedResult(email=customer.email, user_id=user.uid)


async def seed_customer(
    client: PlatformClient,
    customer: Customer,
    products: Sequence[Product],
    rng: random.Random,
    now: Optional[datetime] = None,
) -> CustomerSeedResult:
    """
    Seed one customer: account, profile, then 2-5 new orders.

    Account/profile failures come back as a result with `error` set and no
    orders. Failures while writing orders propagate.
    """
    now = now or datetime.now(timezone.utc)
    result = await _resolve_account(client, customer, rng, now)
    if result.user_id:
        await _write_orders(client, result, customer, products, rng, now)
    return result


async def _write_orders(
    client: PlatformClient,
    result: CustomerSeedResult,
    customer: Customer,
    products: Sequence[Product],
    rng: random.Random,
    now: datetime,
) -> None:
    """Add 2-5 orders, recording each id on `result` as soon as it is written."""
    count = rng.randint(MIN_ORDERS, MAX_ORDERS)
    orders = generate_orders(
        rng,
        result.user_id,
        customer.email,
        customer.display_name,
        products,
        count=count,
        now=now,
    )
    for order in orders:
        result.order_ids.append(
            await client.firestore.add_document(ORDERS, order.to_document())
        )
    _logger.info(f"✓ Created {count} orders for {customer.email}")


async def seed_data(
    client: PlatformClient,
    customers: Sequence[Customer],
    products: Sequence[Product],
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> SeedReport:
    """
    Run the whole workflow, one customer at a time.

    Never raises: an unexpected error stops the run and is recorded on the
    report alongside the results gathered so far.
    """
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    report = SeedReport()
    _logger.info("🌱 Starting data seeding...")
    try:
        for customer in customers:
            # appended before any order is written
            result = await _resolve_account(client, customer, rng, now)
            report.results.append(result)
            if result.user_id:
                await _write_orders(client, result, customer, products, rng, now)
    except Exception as e:
        _logger.exception(f"❌ Error seeding data: {e}")
        report.error = str(e)
        return report

    for failed in report.failures:
        _logger.warning(f"Skipped {failed.email}: {failed.error}")
    _logger.info(
        f"✅ Data seeding completed: {report.accounts_created} new accounts, "
        f"{report.orders_created} orders"
    )
    return report
