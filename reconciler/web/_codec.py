"""
Request/response models for the HTTP surface.
"""

from __future__ import annotations

from typing import Any

from kungfu import Error, Ok, Result
from pydantic import BaseModel, Field

from reconciler.errors import BackendError
from reconciler.flow import Failed
from reconciler.poller import PaymentConfirmation


class CartReferenceIn(BaseModel):
    cart_id: str = Field(min_length=1)

    def to_domain(self) -> str:
        return self.cart_id.strip()


class PaymentConfirmedIn(BaseModel):
    order_id: str = Field(min_length=1)
    status: str | None = None


class ReturnFailedOut(BaseModel):
    status: str = "failed"
    kind: str
    message: str
    redirect_to: str | None
    redirect_after_seconds: float

    @classmethod
    def from_domain(cls, dom: Failed) -> "ReturnFailedOut":
        return cls(
            kind=dom.error.kind.name.lower(),
            message=dom.message,
            redirect_to=dom.redirect_to,
            redirect_after_seconds=dom.redirect_after_seconds,
        )


class OrderOut(BaseModel):
    id: str
    display_id: int | None
    status: str
    payment_status: str
    total: Any = None
    currency_code: str | None = None


class PaymentConfirmedOut(BaseModel):
    status: str
    outcome: str | None = None
    checks: int = 0
    order: OrderOut | None = None
    error: str | None = None

    @classmethod
    def from_domain(
        cls, dom: Result[PaymentConfirmation, BackendError]
    ) -> "PaymentConfirmedOut":
        match dom:
            case Ok(confirmation):
                order = confirmation.order
                return cls(
                    status="ok",
                    outcome=confirmation.outcome.value,
                    checks=confirmation.checks,
                    order=(
                        OrderOut(
                            id=order.id,
                            display_id=order.display_id,
                            status=order.status,
                            payment_status=order.payment_status,
                            total=order.total,
                            currency_code=order.currency_code,
                        )
                        if order is not None
                        else None
                    ),
                )
            case Error(err):
                return cls(status="error", error=err.message)


__all__ = (
    "CartReferenceIn",
    "PaymentConfirmedIn",
    "ReturnFailedOut",
    "OrderOut",
    "PaymentConfirmedOut",
)
