"""
Fake store API — scripted in-memory backend for tests and demos.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from kungfu import Result, Ok, Error

from reconciler._types import JsonObject
from reconciler.backend._types import CART_FIELDS
from reconciler.errors import BackendError

type Reply = Result[JsonObject, BackendError]


def retryable_failure(message: str = "Internal Server Error") -> Reply:
    return Error(BackendError(f"Failed to complete cart: {message}", 500))


@dataclass
class FakeStoreApi:
    """
    In-memory StoreApi.

    Placement is idempotent per cart the way the real backend is: once a cart
    is completed, further placement calls return the same order.

    Scripts are consumed front to back; when one runs dry the default
    behaviour applies.

        api = FakeStoreApi().with_cart("c1", sessions=[("s1", "pp_payu-blik")])
        api.placement_script = [retryable_failure(), Ok({"order": {"id": "o2"}})]
    """

    carts: dict[str, JsonObject] = field(default_factory=dict)
    payment_sessions: dict[str, JsonObject] = field(default_factory=dict)
    orders: dict[str, JsonObject] = field(default_factory=dict)
    placement_script: list[Reply] = field(default_factory=list)
    authorize_script: list[Reply] = field(default_factory=list)
    payment_status_script: list[str] = field(default_factory=list)
    calls: list[tuple[str, Any]] = field(default_factory=list)
    orders_created: int = 0
    _placed: dict[str, JsonObject] = field(default_factory=dict)

    # ─── Setup ───

    def with_cart(
        self,
        cart_id: str,
        *,
        collection_id: str | None = None,
        sessions: Sequence[tuple[str, str]] = (),
        items: int = 1,
    ) -> FakeStoreApi:
        collection = None
        if collection_id is not None or sessions:
            collection = {
                "id": collection_id or f"paycol_{cart_id}",
                "status": "not_paid",
                "payment_sessions": [
                    {"id": sid, "provider_id": provider, "status": "pending"}
                    for sid, provider in sessions
                ],
            }
            for session in collection["payment_sessions"]:
                self.payment_sessions[session["id"]] = dict(session)
        self.carts[cart_id] = {
            "id": cart_id,
            "region_id": "reg_pl",
            "completed_at": None,
            "items": [{"id": f"item_{n}"} for n in range(items)],
            "payment_collection": collection,
        }
        return self

    def with_order(self, order_id: str, payment_status: str = "awaiting") -> FakeStoreApi:
        self.orders[order_id] = {
            "id": order_id,
            "display_id": len(self.orders) + 1,
            "status": "pending",
            "payment_status": payment_status,
            "total": 100,
            "currency_code": "pln",
        }
        return self

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    # ─── StoreApi ───

    async def get_cart(
        self, cart_id: str, fields: str = CART_FIELDS
    ) -> Result[JsonObject, BackendError]:
        self.calls.append(("get_cart", cart_id))
        cart = self.carts.get(cart_id)
        if cart is None:
            return Error(BackendError(f"Cart with id: {cart_id} was not found", 404))
        return Ok(cart)

    async def get_payment_session(
        self, session_id: str
    ) -> Result[JsonObject, BackendError]:
        self.calls.append(("get_payment_session", session_id))
        session = self.payment_sessions.get(session_id)
        if session is None:
            return Error(BackendError("Payment session not found", 404))
        return Ok(session)

    async def authorize_payment_collection(
        self, collection_id: str, body: JsonObject
    ) -> Result[JsonObject, BackendError]:
        self.calls.append(("authorize", body))
        if self.authorize_script:
            return self.authorize_script.pop(0)
        return Ok({"payment_collection": {"id": collection_id, "status": "authorized"}})

    async def complete_cart(
        self, cart_id: str, payment_data: JsonObject
    ) -> Result[JsonObject, BackendError]:
        self.calls.append(("complete_cart", cart_id))
        if self.placement_script:
            return self.placement_script.pop(0)
        if cart_id in self._placed:
            return Ok({"type": "order", "order": self._placed[cart_id]})
        if cart_id not in self.carts:
            return Error(BackendError("Failed to complete cart: Not Found", 404))
        self.orders_created += 1
        order_id = f"order_{self.orders_created:02d}"
        self.with_order(order_id, payment_status="authorized")
        self.carts[cart_id]["completed_at"] = "2026-01-01T00:00:00Z"
        self._placed[cart_id] = self.orders[order_id]
        return Ok({"type": "order", "order": self.orders[order_id]})

    async def get_order(self, order_id: str) -> Result[JsonObject, BackendError]:
        self.calls.append(("get_order", order_id))
        order = self.orders.get(order_id)
        if order is None:
            return Error(BackendError("Order not found", 404))
        if self.payment_status_script:
            order["payment_status"] = self.payment_status_script.pop(0)
        return Ok(dict(order))


__all__ = ("FakeStoreApi", "retryable_failure")
