"""
Returns — provider return adapters.

    from reconciler import returns as R

    match R.parse(request.query_params, R.Provider.STRIPE):
        case Ok(event):
            ...  # PaymentReturnEvent, status SUCCEEDED
        case Error(err):
            ...  # FinalizeError: MISSING_SESSION / CART_LOOKUP /
                 # PAYMENT_FAILED / UNKNOWN_STATUS

Parsing is pure; a failed parse short-circuits the whole pipeline.
"""

from reconciler.returns._types import Provider, ReturnStatus, PaymentReturnEvent
from reconciler.returns._parse import (
    SUCCESS_STATUSES,
    FAILURE_STATUSES,
    canonical_status,
    parse_payu,
    parse_stripe,
    parse,
    legacy_payu_return_path,
)

__all__ = (
    "Provider",
    "ReturnStatus",
    "PaymentReturnEvent",
    "SUCCESS_STATUSES",
    "FAILURE_STATUSES",
    "canonical_status",
    "parse_payu",
    "parse_stripe",
    "parse",
    "legacy_payu_return_path",
)
