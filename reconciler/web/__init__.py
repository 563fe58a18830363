"""
Web — HTTP surface of the reconciler.

    from reconciler.web import create_app

    app = create_app()            # httpx backend from RECONCILER_* settings
    app = create_app(settings, api=FakeStoreApi(), scheduler=RecordingScheduler())

Routes:
    GET  /{locale}/payu/return               303 → /{locale}/order/{id}/confirmed
    GET  /{locale}/stripe/return             or 200 JSON + Refresh → checkout
    GET  /{locale}/store/payu/return         307 → /{locale}/payu/return
    POST /checkout/cart-reference            204, sets the cart reference cookie
    GET  /{locale}/checkout/payment-confirmed
"""

from reconciler.web._app import create_app
from reconciler.web._cookies import CookieCartStore
from reconciler.web._codec import (
    CartReferenceIn,
    PaymentConfirmedIn,
    ReturnFailedOut,
    OrderOut,
    PaymentConfirmedOut,
)

__all__ = (
    "create_app",
    "CookieCartStore",
    "CartReferenceIn",
    "PaymentConfirmedIn",
    "ReturnFailedOut",
    "OrderOut",
    "PaymentConfirmedOut",
)
