# synthetic order generation; pure apart from the random source passed in
from __future__ import annotations

import random
import string
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from db.models import Order, OrderItem, Product, ShippingAddress

SHIPPING_FEE = 9.99
TAX_RATE = 0.10
PAYMENT_STATUS = "completed"
PAYMENT_METHOD = "Credit Card"

# delivered is weighted 3x
STATUS_CHOICES = ["processing", "shipped", "delivered", "delivered", "delivered"]
ORDER_STATUSES = ["processing", "shipped", "delivered", "cancelled"]

TRACKING_PREFIX = "TRK"
TRACKING_ALPHABET = string.ascii_uppercase + string.digits


def random_timestamp(
    rng: random.Random, days_ago: int = 90, now: Optional[datetime] = None
) -> datetime:
    """A moment a whole number of days in [0, days_ago) before now."""
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=rng.randrange(days_ago))


def random_status(rng: random.Random) -> str:
    return rng.choice(STATUS_CHOICES)


def random_tracking_number(rng: random.Random) -> Optional[str]:
    if rng.random() > 0.5:
        return TRACKING_PREFIX + "".join(rng.choices(TRACKING_ALPHABET, k=9))
    return None


def placeholder_address(user_name: str) -> ShippingAddress:
    return ShippingAddress(
        name=user_name,
        street="123 Main St",
        city="Anytown",
        state="CA",
        zip="12345",
        country="USA",
        phone="+1-555-0100",
    )


def price_order(items: Sequence[OrderItem]) -> Tuple[float, float, float, float]:
    """Return (subtotal, shipping, tax, total), each rounded to cents."""
    subtotal = round(sum(item.price * item.quantity for item in items), 2)
    tax = round(subtotal * TAX_RATE, 2)
    total = round(subtotal + SHIPPING_FEE + tax, 2)
    return subtotal, SHIPPING_FEE, tax, total


def generate_order(
    rng: random.Random,
    user_id: str,
    user_email: str,
    user_name: str,
    products: Sequence[Product],
    now: Optional[datetime] = None,
) -> Order:
    items: List[OrderItem] = []
    for _ in range(rng.randint(1, 3)):
        product = rng.choice(products)
        items.append(
            OrderItem(
                id=product.id,
                name=product.name,
                price=product.price,
                quantity=rng.randint(1, 2),
                image=product.image,
                productId=product.id,
            )
        )

    subtotal, shipping, tax, total = price_order(items)
    # updatedAt is drawn independently of createdAt and may precede it
    return Order(
        userId=user_id,
        userEmail=user_email,
        userName=user_name,
        items=items,
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=total,
        status=random_status(rng),
        paymentStatus=PAYMENT_STATUS,
        paymentMethod=PAYMENT_METHOD,
        createdAt=random_timestamp(rng, 90, now),
        updatedAt=random_timestamp(rng, 30, now),
        shippingAddress=placeholder_address(user_name),
        trackingNumber=random_tracking_number(rng),
        notes="",
    )


def generate_orders(
    rng: random.Random,
    user_id: str,
    user_email: str,
    user_name: str,
    products: Sequence[Product],
    count: int = 3,
    now: Optional[datetime] = None,
) -> List[Order]:
    """Generate `count` orders for one customer."""
    if not products:
        raise ValueError("Cannot generate orders from an empty catalog.")
    return [
        generate_order(rng, user_id, user_email, user_name, products, now)
        for _ in range(count)
    ]
