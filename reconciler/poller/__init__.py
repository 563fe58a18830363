"""
Poller — bounded payment status polling.

    from reconciler import poller as P

    match await P.confirm_payment(api, order_id, "PENDING", scheduler, token):
        case Ok(confirmation):
            confirmation.outcome   # CONFIRMED / FAILED / ASSUMED_COMPLETE
        case Error(err):
            ...                    # order could not be fetched

ASSUMED_COMPLETE means the cap (10 checks, 3s apart by default) was reached
without a captured/confirmed status and the order was shown anyway.
"""

from reconciler.poller._policy import PollPolicy
from reconciler.poller._run import (
    URL_CONFIRMED,
    URL_FAILED,
    PaymentOutcome,
    PaymentConfirmation,
    confirm_payment,
)

__all__ = (
    "PollPolicy",
    "URL_CONFIRMED",
    "URL_FAILED",
    "PaymentOutcome",
    "PaymentConfirmation",
    "confirm_payment",
)
