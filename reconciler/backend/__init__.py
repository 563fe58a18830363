"""
Backend — commerce backend store API and cart lookup.

    from reconciler import backend as B

    api = B.HttpStoreApi.from_settings(settings)
    match await B.fetch_cart_with_payment_collection(api, "cart_01"):
        case Ok(snapshot):
            session = await B.resolve_session(api, snapshot, event)
        case Error(err):
            ...  # CART_LOOKUP / NO_PAYMENT_COLLECTION

``FakeStoreApi`` is an in-memory backend with scripted replies for tests.
"""

from reconciler.backend._types import (
    CART_FIELDS,
    PLACEMENT_PAYMENT_DATA,
    PaymentSessionInfo,
    PaymentCollection,
    CartSnapshot,
    OrderDetails,
)
from reconciler.backend._client import StoreApi, HttpStoreApi
from reconciler.backend._fake import FakeStoreApi, retryable_failure
from reconciler.backend._lookup import (
    fetch_cart_with_payment_collection,
    resolve_session,
)

__all__ = (
    "CART_FIELDS",
    "PLACEMENT_PAYMENT_DATA",
    "PaymentSessionInfo",
    "PaymentCollection",
    "CartSnapshot",
    "OrderDetails",
    "StoreApi",
    "HttpStoreApi",
    "FakeStoreApi",
    "retryable_failure",
    "fetch_cart_with_payment_collection",
    "resolve_session",
)
