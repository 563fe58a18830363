"""
Provider return adapters — query params → PaymentReturnEvent.

Pure: no I/O. The PayU cart id is not in the redirect; the caller reads the
stored cart reference once and passes it in.
"""

from __future__ import annotations

from urllib.parse import urlencode

from kungfu import Result, Ok, Error

from reconciler._types import QueryParams
from reconciler.errors import FinalizeError
from reconciler.returns._types import PaymentReturnEvent, Provider, ReturnStatus


SUCCESS_STATUSES = frozenset({"succeeded", "success"})
FAILURE_STATUSES = frozenset({"failed"})


def _param(params: QueryParams, name: str) -> str | None:
    value = params.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def canonical_status(raw: str) -> ReturnStatus:
    lowered = raw.strip().lower()
    if lowered in SUCCESS_STATUSES:
        return ReturnStatus.SUCCEEDED
    if lowered in FAILURE_STATUSES:
        return ReturnStatus.FAILED
    return ReturnStatus.UNKNOWN


# ═══════════════════════════════════════════════════════════════════════════════
# PayU
# ═══════════════════════════════════════════════════════════════════════════════


def parse_payu(
    params: QueryParams, stored_cart_id: str | None
) -> Result[PaymentReturnEvent, FinalizeError]:
    """
    PayU continueUrl return.

    PayU only comes back on completed flows; an ``error`` param (PayU appends
    ``error=501`` when the buyer abandons) means the payment did not go through.
    """
    session_id = _param(params, "session_id")
    ext_order_id = _param(params, "ext_order_id")

    if session_id is None and ext_order_id is None:
        return Error(FinalizeError.missing_session(Provider.PAYU.value))
    if stored_cart_id is None:
        return Error(FinalizeError.cart_not_found(None))

    error_code = _param(params, "error")
    if error_code is not None:
        return Error(FinalizeError.payment_failed(stored_cart_id, error_code))

    return Ok(
        PaymentReturnEvent(
            provider=Provider.PAYU,
            cart_id=stored_cart_id,
            session_id=session_id or ext_order_id,
            external_order_id=ext_order_id,
            raw_status="COMPLETED",
            provider_order_ref=_param(params, "orderId") or ext_order_id,
        )
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Stripe
# ═══════════════════════════════════════════════════════════════════════════════


def _intent_from_secret(client_secret: str | None) -> str | None:
    # "pi_123_secret_456" → "pi_123"
    if client_secret is None or "_secret_" not in client_secret:
        return None
    return client_secret.split("_secret_", 1)[0]


def parse_stripe(params: QueryParams) -> Result[PaymentReturnEvent, FinalizeError]:
    """
    Stripe return_url.

    redirect_status is primary; some flows only carry our own ``status`` param.
    """
    cart_id = _param(params, "cart_id")
    if cart_id is None:
        return Error(FinalizeError.cart_not_found(None, "cart_id missing from return"))

    raw_status = _param(params, "redirect_status") or _param(params, "status") or ""
    status = canonical_status(raw_status)
    match status:
        case ReturnStatus.FAILED:
            return Error(FinalizeError.payment_failed(cart_id, raw_status))
        case ReturnStatus.UNKNOWN:
            return Error(FinalizeError.unknown_status(cart_id, raw_status))
        case ReturnStatus.SUCCEEDED:
            pass

    intent = _param(params, "payment_intent") or _intent_from_secret(
        _param(params, "payment_intent_client_secret")
    )
    if intent is None:
        return Error(FinalizeError.missing_session(Provider.STRIPE.value))

    return Ok(
        PaymentReturnEvent(
            provider=Provider.STRIPE,
            cart_id=cart_id,
            session_id=None,
            external_order_id=intent,
            raw_status=raw_status,
            status=status,
        )
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Dispatch
# ═══════════════════════════════════════════════════════════════════════════════


def parse(
    params: QueryParams,
    provider: Provider,
    *,
    stored_cart_id: str | None = None,
) -> Result[PaymentReturnEvent, FinalizeError]:
    match provider:
        case Provider.PAYU:
            return parse_payu(params, stored_cart_id)
        case Provider.STRIPE:
            return parse_stripe(params)


def legacy_payu_return_path(locale: str, params: QueryParams) -> str:
    """Older PayU orders were created with /{locale}/store/payu/return."""
    path = f"/{locale}/payu/return"
    query = urlencode(list(params.items()))
    return f"{path}?{query}" if query else path


__all__ = (
    "SUCCESS_STATUSES",
    "FAILURE_STATUSES",
    "canonical_status",
    "parse_payu",
    "parse_stripe",
    "parse",
    "legacy_payu_return_path",
)
