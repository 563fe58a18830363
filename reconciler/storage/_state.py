"""
In-memory cart state — snapshots fetched during a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reconciler.backend._types import CartSnapshot


@dataclass(slots=True)
class CartStateCache:
    """
    Process-local cache of cart snapshots keyed by cart id.

    Lookup fills it; cleanup evicts the cart once an order exists, so no
    stale "still open" cart is served after finalization.
    """

    carts: dict[str, CartSnapshot] = field(default_factory=dict)

    def remember(self, snapshot: CartSnapshot) -> None:
        self.carts[snapshot.id] = snapshot

    def get(self, cart_id: str) -> CartSnapshot | None:
        return self.carts.get(cart_id)

    def forget(self, cart_id: str) -> bool:
        return self.carts.pop(cart_id, None) is not None


__all__ = ("CartStateCache",)
