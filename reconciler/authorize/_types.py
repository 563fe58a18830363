"""
Authorization types — payload envelope and outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from reconciler._types import JsonObject
from reconciler.methods import PaymentMethod
from reconciler.returns import PaymentReturnEvent, Provider


@dataclass(frozen=True, slots=True)
class AttemptContext:
    """
    Which authorization call this is.

    reauthorization: True for the nudges the Finalizer sends between
    placement attempts; they force a completed flow-state.
    """

    attempt_number: int
    session_id: str
    payment_method: PaymentMethod
    reauthorization: bool = False

    @classmethod
    def initial(cls, session_id: str, method: PaymentMethod) -> AttemptContext:
        return cls(1, session_id, method)

    def reauthorize(self, attempt_number: int) -> AttemptContext:
        return AttemptContext(
            attempt_number=attempt_number,
            session_id=self.session_id,
            payment_method=self.payment_method,
            reauthorization=True,
        )


@dataclass(frozen=True, slots=True)
class AuthorizationPayload:
    """
    Enrichment envelope for the authorize endpoint.

    The hints let the backend accept a confirmation that arrives before (or
    instead of) the gateway's own webhook.
    """

    session_id: str
    cart_id: str
    provider: Provider
    payment_method: PaymentMethod
    provider_order_ref: str | None
    external_order_id: str | None
    reconciliation_timestamp: datetime
    attempt_number: int = 1
    flow_state: str | None = None
    force_status: str = "authorized"
    fully_authorized: bool = True
    requires_more: bool = False

    @classmethod
    def build(
        cls,
        event: PaymentReturnEvent,
        context: AttemptContext,
        now: datetime,
    ) -> AuthorizationPayload:
        return cls(
            session_id=context.session_id,
            cart_id=event.cart_id,
            provider=event.provider,
            payment_method=context.payment_method,
            provider_order_ref=event.provider_order_ref,
            external_order_id=event.external_order_id,
            reconciliation_timestamp=now,
            attempt_number=context.attempt_number,
            flow_state="COMPLETED" if context.reauthorization else None,
        )

    def to_body(self) -> JsonObject:
        data: JsonObject = {
            f"return_from_{self.provider.value}": True,
            "payment_status": "COMPLETED",
            "status": "COMPLETED",
            "cart_id": self.cart_id,
            "payment_method": self.payment_method.value,
            "provider_order_ref": self.provider_order_ref,
            "ext_order_id": self.external_order_id,
            "force_status": self.force_status,
            "fully_authorized": self.fully_authorized,
            "requires_more": self.requires_more,
            "redirect_url": None,
            "authorize_status": "success",
            "authorized_at": self.reconciliation_timestamp.isoformat(),
            "reconciliation_attempt": self.attempt_number,
        }
        match self.provider:
            case Provider.PAYU:
                data["payu_order_id"] = self.provider_order_ref
            case Provider.STRIPE:
                data["payment_intent"] = self.external_order_id
        if self.flow_state is not None:
            data["flow_state"] = self.flow_state
        return {"session_id": self.session_id, "data": data}


@dataclass(frozen=True, slots=True)
class AuthorizationOutcome:
    """
    Advisory result of one authorize call. ok=False is a soft failure:
    logged, never escalated.
    """

    ok: bool
    raw: Any
    status: int | None = None
    reauthorization: bool = False


__all__ = ("AttemptContext", "AuthorizationPayload", "AuthorizationOutcome")
