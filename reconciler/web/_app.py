"""
FastAPI surface — gateway return pages and the payment-confirmed page.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

import fastapi
import structlog
from fastapi import Query, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from kungfu import Error, Ok

from reconciler.backend import HttpStoreApi, StoreApi
from reconciler.config import Settings, get_settings
from reconciler.errors import ErrorKind, OperationCancelled
from reconciler.flow import Confirmed, Failed, FlowOutcome, ReturnFlow
from reconciler.poller import PaymentOutcome, confirm_payment
from reconciler.returns import Provider, legacy_payu_return_path
from reconciler.scheduler import AsyncioScheduler, CancellationToken, Scheduler
from reconciler.web._codec import (
    CartReferenceIn,
    PaymentConfirmedIn,
    PaymentConfirmedOut,
    ReturnFailedOut,
)
from reconciler.web._cookies import CookieCartStore

logger = structlog.get_logger(__name__)

# nginx convention; the client is gone and never reads it.
CLIENT_CLOSED_REQUEST = 499


# ═══════════════════════════════════════════════════════════════════════════════
# Request plumbing
# ═══════════════════════════════════════════════════════════════════════════════


async def _cancel_on_disconnect(request: Request, token: CancellationToken) -> None:
    """The shopper closing the tab is this service's "unmount"."""
    while not token.cancelled:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            token.cancel()
            return


def _store_for(request: Request, settings: Settings) -> CookieCartStore:
    return CookieCartStore(
        request.cookies,
        max_age=settings.cookie_max_age_seconds,
        secure=settings.cookie_secure,
    )


def _render(outcome: FlowOutcome, store: CookieCartStore) -> Response:
    response: Response
    match outcome:
        case Confirmed(redirect_to=url):
            response = RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)
        case Failed() as failed:
            body = ReturnFailedOut.from_domain(failed).model_dump()
            code = (
                status.HTTP_409_CONFLICT
                if failed.error.kind is ErrorKind.IN_PROGRESS
                else status.HTTP_200_OK
            )
            response = JSONResponse(body, status_code=code)
            if failed.redirect_to is not None:
                response.headers["Refresh"] = (
                    f"{failed.redirect_after_seconds:g}; url={failed.redirect_to}"
                )
    return store.apply(response)


# ═══════════════════════════════════════════════════════════════════════════════
# App factory
# ═══════════════════════════════════════════════════════════════════════════════


def create_app(
    settings: Settings | None = None,
    *,
    api: StoreApi | None = None,
    scheduler: Scheduler | None = None,
) -> fastapi.FastAPI:
    """
    Build the service.

    With no ``api`` an httpx client is created from settings and closed on
    shutdown; tests pass ``FakeStoreApi`` and ``RecordingScheduler``.
    """
    settings = settings if settings is not None else get_settings()
    owned: HttpStoreApi | None = None
    store_api: StoreApi
    if api is None:
        owned = HttpStoreApi.from_settings(settings)
        store_api = owned
    else:
        store_api = api
    sleeper = scheduler if scheduler is not None else AsyncioScheduler()
    flow = ReturnFlow(store_api, sleeper, settings)

    @asynccontextmanager
    async def lifespan(_: fastapi.FastAPI) -> AsyncIterator[None]:
        yield
        if owned is not None:
            await owned.aclose()

    app = fastapi.FastAPI(title="storefront-reconciler", lifespan=lifespan)
    app.state.flow = flow
    app.state.settings = settings

    async def run_return(
        provider: Provider, locale: str, request: Request
    ) -> Response:
        store = _store_for(request, settings)
        token = CancellationToken()
        watcher = asyncio.create_task(_cancel_on_disconnect(request, token))
        try:
            outcome = await flow.handle(
                provider,
                request.query_params,
                settings.resolve_locale(locale),
                store,
                token,
            )
        finally:
            watcher.cancel()
        return _render(outcome, store)

    @app.get("/{locale}/payu/return")
    async def payu_return(locale: str, request: Request) -> Response:
        return await run_return(Provider.PAYU, locale, request)

    @app.get("/{locale}/stripe/return")
    async def stripe_return(locale: str, request: Request) -> Response:
        return await run_return(Provider.STRIPE, locale, request)

    @app.get("/{locale}/store/payu/return")
    async def legacy_payu_return(locale: str, request: Request) -> Response:
        target = legacy_payu_return_path(
            settings.resolve_locale(locale), request.query_params
        )
        logger.info("legacy_payu_return_forwarded", target=target)
        return RedirectResponse(target, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    @app.post("/checkout/cart-reference", status_code=status.HTTP_204_NO_CONTENT)
    async def remember_cart(body: CartReferenceIn, request: Request) -> Response:
        store = _store_for(request, settings)
        await store.set(settings.cart_reference_key, body.to_domain())
        return store.apply(Response(status_code=status.HTTP_204_NO_CONTENT))

    @app.get("/{locale}/checkout/payment-confirmed")
    async def payment_confirmed(
        locale: str,
        query: Annotated[PaymentConfirmedIn, Query()],
        request: Request,
    ) -> Response:
        token = CancellationToken()
        watcher = asyncio.create_task(_cancel_on_disconnect(request, token))
        try:
            result = await confirm_payment(
                store_api,
                query.order_id,
                query.status,
                sleeper,
                token,
                settings.poll_policy(),
            )
        except OperationCancelled:
            return JSONResponse({"status": "cancelled"}, status_code=CLIENT_CLOSED_REQUEST)
        finally:
            watcher.cancel()

        match result:
            case Ok(confirmation) if confirmation.outcome is PaymentOutcome.FAILED:
                return RedirectResponse(
                    confirmation.error_path(settings.resolve_locale(locale)),
                    status_code=status.HTTP_303_SEE_OTHER,
                )
            case Ok(_):
                return JSONResponse(PaymentConfirmedOut.from_domain(result).model_dump())
            case Error(_):
                return JSONResponse(
                    PaymentConfirmedOut.from_domain(result).model_dump(),
                    status_code=status.HTTP_502_BAD_GATEWAY,
                )

    return app


__all__ = ("create_app",)
