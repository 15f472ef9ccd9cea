# src/db/crud.py
# read/update helpers used by the admin console and scripts
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from db import models
from db.client import ORDERS, USERS, PlatformClient
from db.errors import UserNotFoundError
from seed.orders import ORDER_STATUSES


def _to_float(val) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return 0.0


# ---------------------------
# Auth
# ---------------------------


async def login_admin(
    client: PlatformClient, email: str, pwd: str
) -> Optional[models.UserRecord]:
    """Return the account if the credentials match AND it carries the admin claim."""
    user = await client.auth.verify_password(email, pwd)
    if user is None or not user.is_admin:
        return None
    return user


# ---------------------------
# Orders
# ---------------------------


async def list_orders(
    client: PlatformClient,
    page: int = 1,
    page_size: Optional[int] = 5,
    status: Optional[str] = None,
) -> Tuple[List[models.Order], int]:
    """
    Orders newest first, optionally filtered by status ("all" or None = no filter).
    Returns (orders for page, total_count). page_size=None returns every order.
    """
    where = [("status", status)] if status and status != "all" else []
    total = await client.firestore.count(ORDERS, where)
    offset = max(page - 1, 0) * page_size if page_size else 0
    docs = await client.firestore.query(
        ORDERS,
        where,
        order_by="createdAt",
        descending=True,
        limit=page_size,
        offset=offset,
    )
    return [models.Order.from_document(doc_id, data) for doc_id, data in docs], total


async def get_order(client: PlatformClient, order_id: str) -> Optional[models.Order]:
    data = await client.firestore.get_document(ORDERS, order_id)
    if data is None:
        return None
    return models.Order.from_document(order_id, data)


async def update_order_status(
    client: PlatformClient,
    order_id: str,
    status: str,
    when: Optional[datetime] = None,
) -> None:
    """Set the order's status and stamp updatedAt."""
    if status not in ORDER_STATUSES:
        raise ValueError(f"Unknown order status: {status!r}")
    when = when or datetime.now(timezone.utc)
    await client.firestore.update_document(
        ORDERS, order_id, {"status": status, "updatedAt": when}
    )


async def search_orders(client: PlatformClient, term: str) -> List[models.Order]:
    """
    Orders of the customer with this email, or the single order with this id.

    Emails are resolved through the identity store, so the match ignores case
    even though order documents keep the email as it was written.
    """
    term = (term or "").strip()
    if not term:
        return []
    if "@" not in term:
        order = await get_order(client, term)
        return [order] if order else []
    try:
        user = await client.auth.get_user_by_email(term)
    except UserNotFoundError:
        return []
    docs = await client.firestore.query(
        ORDERS, [("userId", user.uid)], order_by="createdAt", descending=True
    )
    return [models.Order.from_document(doc_id, data) for doc_id, data in docs]


async def order_stats(client: PlatformClient) -> Dict[str, object]:
    """Totals over every order: count, revenue, average value, count per status."""
    docs = await client.firestore.query(ORDERS)
    status_counts = {s: 0 for s in ["pending", *ORDER_STATUSES]}
    revenue = 0.0
    for _, data in docs:
        revenue += _to_float(data.get("total"))
        if data.get("status") in status_counts:
            status_counts[data["status"]] += 1
    total_orders = len(docs)
    return {
        "total_orders": total_orders,
        "total_revenue": round(revenue, 2),
        "average_order_value": round(revenue / total_orders, 2) if total_orders else 0.0,
        "status_counts": status_counts,
    }


# ---------------------------
# Customers
# ---------------------------


async def list_customers(client: PlatformClient) -> List[models.Profile]:
    docs = await client.firestore.query(USERS, order_by="createdAt", descending=True)
    return [models.Profile.from_document(doc_id, data) for doc_id, data in docs]


async def get_customer(
    client: PlatformClient, uid: str
) -> Optional[models.CustomerSummary]:
    """Profile plus order count, total spent and most recent order date."""
    data = await client.firestore.get_document(USERS, uid)
    if data is None:
        return None
    return await _summarize(client, models.Profile.from_document(uid, data))


async def _summarize(
    client: PlatformClient, profile: models.Profile
) -> models.CustomerSummary:
    docs = await client.firestore.query(
        ORDERS, [("userId", profile.uid)], order_by="createdAt", descending=True
    )
    totals = [_to_float(d.get("total")) for _, d in docs]
    return models.CustomerSummary(
        profile=profile,
        orders=len(docs),
        total_spent=round(sum(totals), 2),
        last_order=models.Order.from_document(*docs[0]).createdAt if docs else None,
    )


async def search_customers(
    client: PlatformClient, term: str = "", status: Optional[str] = None
) -> List[models.CustomerSummary]:
    """
    Customers whose display name or email contains `term`, ignoring case.
    An empty term matches everyone; status "all" or None disables the status filter.
    """
    needle = (term or "").strip().lower()
    summaries = []
    for profile in await list_customers(client):
        if status and status != "all" and profile.status != status:
            continue
        if needle and not (
            needle in (profile.displayName or "").lower()
            or needle in (profile.email or "").lower()
        ):
            continue
        summaries.append(await _summarize(client, profile))
    return summaries


async def customer_stats(
    client: PlatformClient, now: Optional[datetime] = None
) -> Dict[str, int]:
    """Customer counts; "new" means the profile was created in the last 30 days."""
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=30)
    profiles = await list_customers(client)
    active = sum(1 for p in profiles if p.status == "active")
    new = sum(1 for p in profiles if p.createdAt and p.createdAt >= since)
    return {
        "total_customers": len(profiles),
        "new_customers": new,
        "active_customers": active,
        "inactive_customers": len(profiles) - active,
    }

