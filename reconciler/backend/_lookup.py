"""
Session/cart lookup — resolve what a return event refers to.
"""

from __future__ import annotations

from typing import Any

import structlog
from kungfu import Result, Ok, Error

from reconciler.backend._client import StoreApi
from reconciler.backend._types import CART_FIELDS, CartSnapshot, PaymentSessionInfo
from reconciler.errors import ErrorKind, FinalizeError
from reconciler.methods import provider_family
from reconciler.returns import PaymentReturnEvent

logger = structlog.get_logger(__name__)


async def fetch_cart_with_payment_collection(
    api: StoreApi,
    cart_id: str,
    session_id: str | None = None,
) -> Result[CartSnapshot, FinalizeError]:
    """
    Fetch the cart with the narrow payment projection.

    On failure the payment session is fetched directly, only to enrich the
    error with diagnostics. A cart without a payment collection can't be
    finalized and is reported as NO_PAYMENT_COLLECTION.
    """
    match await api.get_cart(cart_id, CART_FIELDS):
        case Error(err):
            diagnostics: dict[str, Any] = {
                "status": err.status,
                "backend_message": err.message,
            }
            if session_id is not None:
                diagnostics.update(await _session_diagnostics(api, session_id))
            logger.warning("cart_lookup_failed", cart_id=cart_id, **diagnostics)
            return Error(
                FinalizeError(
                    ErrorKind.CART_LOOKUP,
                    f"Cart {cart_id} could not be loaded: {err.message}",
                    cart_id=cart_id,
                    details=diagnostics,
                )
            )
        case Ok(data):
            pass

    try:
        snapshot = CartSnapshot.from_json(data)
    except (KeyError, TypeError) as exc:
        logger.error("cart_payload_malformed", cart_id=cart_id, error=str(exc))
        return Error(FinalizeError.cart_not_found(cart_id, f"Malformed cart payload: {exc}"))

    if snapshot.payment_collection is None:
        logger.error("cart_without_payment_collection", cart_id=cart_id)
        return Error(FinalizeError.no_payment_collection(cart_id))

    return Ok(snapshot)


async def _session_diagnostics(api: StoreApi, session_id: str) -> dict[str, Any]:
    match await api.get_payment_session(session_id):
        case Ok(data):
            return {
                "payment_session": {
                    "id": data.get("id"),
                    "provider_id": data.get("provider_id"),
                    "status": data.get("status"),
                }
            }
        case Error(err):
            return {"payment_session_error": err.message}


async def resolve_session(
    api: StoreApi,
    snapshot: CartSnapshot,
    event: PaymentReturnEvent,
) -> PaymentSessionInfo | None:
    """
    Pick the payment session the event refers to.

    Exact id first, then the first session of the returning gateway, then any
    session. If the projection carried no sessions at all, fetch the one the
    gateway echoed back.
    """
    collection = snapshot.payment_collection
    sessions = collection.sessions if collection is not None else ()

    if event.session_id is not None and collection is not None:
        exact = collection.session(event.session_id)
        if exact is not None:
            return exact

    for session in sessions:
        if provider_family(session.provider_id) is event.provider:
            return session

    if sessions:
        return sessions[0]

    if event.session_id is None:
        return None

    match await api.get_payment_session(event.session_id):
        case Ok(data):
            try:
                return PaymentSessionInfo.from_json(data)
            except KeyError:
                return None
        case Error(err):
            logger.warning(
                "payment_session_unresolved",
                session_id=event.session_id,
                error=err.message,
            )
            return None


__all__ = ("fetch_cart_with_payment_collection", "resolve_session")
