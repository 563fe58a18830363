"""
Store API types — the slice of the commerce backend the reconciler reads.

Parsed leniently from JSON: unknown fields are ignored, missing optional
fields default to None.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from reconciler._types import JsonObject


# Field projection for cart lookups. Keep it narrow: the cart endpoint
# returns the full graph (line items, shipping, promotions) otherwise.
CART_FIELDS = ",".join(
    (
        "id",
        "region_id",
        "completed_at",
        "*payment_collection",
        "*payment_collection.payment_sessions",
        "*items",
        "*region",
    )
)

# Sent with every placement call so the backend does not wait for further
# gateway input on an already-authorized session.
PLACEMENT_PAYMENT_DATA: JsonObject = {
    "payment_status": "completed",
    "status": "authorized",
    "fully_authorized": True,
    "requires_more": False,
}


# ═══════════════════════════════════════════════════════════════════════════════
# Payment Sessions & Collections
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PaymentSessionInfo:
    """Read-only view of one payment session."""

    id: str
    provider_id: str
    status: str

    @classmethod
    def from_json(cls, data: JsonObject) -> PaymentSessionInfo:
        return cls(
            id=str(data["id"]),
            provider_id=str(data.get("provider_id") or ""),
            status=str(data.get("status") or ""),
        )


@dataclass(frozen=True, slots=True)
class PaymentCollection:
    id: str
    status: str
    sessions: tuple[PaymentSessionInfo, ...] = ()

    @classmethod
    def from_json(cls, data: JsonObject) -> PaymentCollection:
        return cls(
            id=str(data["id"]),
            status=str(data.get("status") or ""),
            sessions=tuple(
                PaymentSessionInfo.from_json(s)
                for s in data.get("payment_sessions") or ()
            ),
        )

    def session(self, session_id: str) -> PaymentSessionInfo | None:
        for candidate in self.sessions:
            if candidate.id == session_id:
                return candidate
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartSnapshot:
    """Cart as seen at return time."""

    id: str
    region_id: str | None
    completed_at: str | None
    item_count: int
    payment_collection: PaymentCollection | None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @classmethod
    def from_json(cls, data: JsonObject) -> CartSnapshot:
        collection = data.get("payment_collection")
        return cls(
            id=str(data["id"]),
            region_id=data.get("region_id"),
            completed_at=data.get("completed_at"),
            item_count=len(data.get("items") or ()),
            payment_collection=(
                PaymentCollection.from_json(collection) if collection else None
            ),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderDetails:
    id: str
    display_id: int | None
    status: str
    payment_status: str
    total: Any = None
    currency_code: str | None = None

    @classmethod
    def from_json(cls, data: JsonObject) -> OrderDetails:
        return cls(
            id=str(data["id"]),
            display_id=data.get("display_id"),
            status=str(data.get("status") or ""),
            payment_status=str(data.get("payment_status") or ""),
            total=data.get("total"),
            currency_code=data.get("currency_code"),
        )


__all__ = (
    "CART_FIELDS",
    "PLACEMENT_PAYMENT_DATA",
    "PaymentSessionInfo",
    "PaymentCollection",
    "CartSnapshot",
    "OrderDetails",
)
