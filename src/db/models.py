# provide dataclass models

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def _parse_ts(val) -> Optional[datetime]:
    if val is None or isinstance(val, datetime):
        return val
    return datetime.fromisoformat(val)


@dataclass(frozen=True)
class Address:
    address1: str
    address2: str
    city: str
    state: str
    zip: str
    country: str


@dataclass(frozen=True)
class Customer:
    """Seed input: one storefront customer."""

    email: str
    password: str  # plaintext, dev-only
    display_name: str
    phone_number: str
    shipping_address: Address


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: float
    image: str
    category: str
    stock: int


@dataclass(frozen=True)
class UserRecord:
    """An identity-store account."""

    uid: str
    email: str
    display_name: Optional[str]
    email_verified: bool
    disabled: bool
    custom_claims: Dict[str, Any]
    created_at: datetime

    @property
    def is_admin(self) -> bool:
        return bool(self.custom_claims.get("admin"))


@dataclass(frozen=True)
class OrderItem:
    id: str
    name: str
    price: float  # unit price at time of order
    quantity: int
    image: str
    productId: str

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    street: str
    city: str
    state: str
    zip: str
    country: str
    phone: str


@dataclass(frozen=True)
class Order:
    """
    An order document. Field names mirror the stored document so the
    storefront can read them as-is.
    """

    userId: str
    userEmail: str
    userName: str
    items: List[OrderItem]
    subtotal: float
    shipping: float
    tax: float
    total: float
    status: str
    paymentStatus: str
    paymentMethod: str
    createdAt: datetime
    updatedAt: datetime
    shippingAddress: ShippingAddress
    trackingNumber: Optional[str]
    notes: str = ""
    id: Optional[str] = field(default=None, compare=False)

    def to_document(self) -> Dict[str, Any]:
        doc = asdict(self)
        del doc["id"]
        return doc

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Order":
        return cls(
            id=doc_id,
            userId=data["userId"],
            userEmail=data["userEmail"],
            userName=data["userName"],
            items=[OrderItem(**item) for item in data.get("items", [])],
            subtotal=data["subtotal"],
            shipping=data["shipping"],
            tax=data["tax"],
            total=data["total"],
            status=data["status"],
            paymentStatus=data["paymentStatus"],
            paymentMethod=data["paymentMethod"],
            createdAt=_parse_ts(data["createdAt"]),
            updatedAt=_parse_ts(data["updatedAt"]),
            shippingAddress=ShippingAddress(**data["shippingAddress"]),
            trackingNumber=data.get("trackingNumber"),
            notes=data.get("notes", ""),
        )


@dataclass(frozen=True)
class Profile:
    """A `users/{uid}` profile document, as read back by the admin console."""

    uid: str
    displayName: str
    email: str
    phoneNumber: str
    status: str
    createdAt: Optional[datetime]
    lastLogin: Optional[datetime]
    shippingAddress: Optional[Address]

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Profile":
        addr = data.get("shippingAddress")
        return cls(
            uid=doc_id,
            displayName=data.get("displayName", ""),
            email=data.get("email", ""),
            phoneNumber=data.get("phoneNumber", ""),
            status=data.get("status", "active"),
            createdAt=_parse_ts(data.get("createdAt")),
            lastLogin=_parse_ts(data.get("lastLogin")),
            shippingAddress=Address(**addr) if addr else None,
        )


@dataclass(frozen=True)
class CustomerSummary:
    profile: Profile
    orders: int
    total_spent: float
    last_order: Optional[datetime]
