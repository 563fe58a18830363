"""
Payment status poller — the gateway-confirmed return path.

Some gateways send the shopper to the confirmation page while the backend is
still capturing. The poller waits a bounded time for a definitive status and
then shows the order anyway, reporting that as ASSUMED_COMPLETE rather than
CONFIRMED.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

import structlog
from kungfu import Result, Ok, Error

from reconciler.backend import OrderDetails, StoreApi
from reconciler.errors import BackendError
from reconciler.poller._policy import PollPolicy
from reconciler.scheduler import CancellationToken, Scheduler

logger = structlog.get_logger(__name__)

URL_CONFIRMED = frozenset({"COMPLETED", "SUCCESS"})
URL_FAILED = frozenset({"FAILED", "CANCELED"})


class PaymentOutcome(StrEnum):
    CONFIRMED = "confirmed"
    FAILED = "failed"
    ASSUMED_COMPLETE = "assumed_complete"


@dataclass(frozen=True, slots=True)
class PaymentConfirmation:
    order_id: str
    outcome: PaymentOutcome
    order: OrderDetails | None = None
    checks: int = 0

    def error_path(self, locale: str) -> str:
        return f"/{locale}/checkout/payment-error?order_id={self.order_id}"


async def _fetch_order(api: StoreApi, order_id: str) -> Result[OrderDetails, BackendError]:
    match await api.get_order(order_id):
        case Ok(data):
            try:
                return Ok(OrderDetails.from_json(data))
            except KeyError as exc:
                return Error(BackendError(f"Malformed order payload: {exc}", body=data))
        case Error(err):
            return Error(err)


async def confirm_payment(
    api: StoreApi,
    order_id: str,
    status_param: str | None,
    scheduler: Scheduler,
    token: CancellationToken,
    policy: PollPolicy = PollPolicy(),
) -> Result[PaymentConfirmation, BackendError]:
    """
    Resolve the payment status of a placed order.

    COMPLETED/SUCCESS in the URL skips polling; FAILED/CANCELED short-circuits
    to FAILED without touching the backend.
    """
    status = (status_param or "").strip().upper()
    log = logger.bind(order_id=order_id, url_status=status or None)

    if status in URL_FAILED:
        log.info("payment_reported_failed")
        return Ok(PaymentConfirmation(order_id, PaymentOutcome.FAILED))

    if status in URL_CONFIRMED:
        return (await _fetch_order(api, order_id)).map(
            lambda order: PaymentConfirmation(order_id, PaymentOutcome.CONFIRMED, order)
        )

    for check in range(1, policy.max_checks + 1):
        await scheduler.sleep(policy.interval_seconds, token)
        match await _fetch_order(api, order_id):
            case Ok(order) if order.payment_status in policy.confirmed_statuses:
                log.info("payment_confirmed", checks=check)
                return Ok(
                    PaymentConfirmation(order_id, PaymentOutcome.CONFIRMED, order, check)
                )
            case Ok(order):
                log.debug("payment_pending", checks=check, status=order.payment_status)
            case Error(err):
                log.warning("payment_status_check_failed", checks=check, error=err.message)

    log.warning(
        "payment_status_unconfirmed",
        checks=policy.max_checks,
        waited_seconds=policy.budget_seconds,
    )
    return (await _fetch_order(api, order_id)).map(
        lambda order: PaymentConfirmation(
            order_id, PaymentOutcome.ASSUMED_COMPLETE, order, policy.max_checks
        )
    )


__all__ = (
    "URL_CONFIRMED",
    "URL_FAILED",
    "PaymentOutcome",
    "PaymentConfirmation",
    "confirm_payment",
)
