"""
Return event types — what a gateway redirect tells us.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Provider(StrEnum):
    PAYU = "payu"
    STRIPE = "stripe"


class ReturnStatus(StrEnum):
    """
    Canonical gateway status.

    SUCCEEDED is the only status that lets the pipeline continue.
    """

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class PaymentReturnEvent:
    """
    One shopper return from a gateway. Created once, never mutated.

    session_id: payment session id the gateway echoes back (PayU), if any.
    external_order_id: gateway-side reference (PayU ext_order_id, Stripe
        payment intent).
    provider_order_ref: PayU order reference forwarded to the backend for
        reconciliation: ``orderId``, else ``ext_order_id``.
    """

    provider: Provider
    cart_id: str
    session_id: str | None
    external_order_id: str | None
    raw_status: str
    status: ReturnStatus = ReturnStatus.SUCCEEDED
    provider_order_ref: str | None = None

    def __post_init__(self) -> None:
        if not (self.session_id or self.external_order_id):
            raise ValueError("session_id or external_order_id is required")
        if not self.cart_id:
            raise ValueError("cart_id is required")

    @property
    def reference(self) -> str:
        """Best identifier to quote in logs and payloads."""
        return self.session_id or self.external_order_id or ""


__all__ = ("Provider", "ReturnStatus", "PaymentReturnEvent")
