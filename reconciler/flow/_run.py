"""
Return flow — one gateway return, end to end.

    parse → guard → lookup → classify → authorize → finalize → cleanup → redirect
"""

from __future__ import annotations

import structlog
from kungfu import Result, Ok, Error

from reconciler._types import Clock, QueryParams, utc_now
from reconciler.authorize import AttemptContext, Authorizer
from reconciler.backend import (
    StoreApi,
    fetch_cart_with_payment_collection,
    resolve_session,
)
from reconciler.cleanup import CartCleanup
from reconciler.config import Settings
from reconciler.errors import ErrorKind, FinalizeError, OperationCancelled
from reconciler.finalize import OrderFinalizer, ProgressCallback
from reconciler.flow._types import Confirmed, Failed, FlowOutcome, checkout_path
from reconciler.messages import for_error
from reconciler.methods import classify
from reconciler.results import CanonicalOrderResult
from reconciler.returns import PaymentReturnEvent, Provider, parse
from reconciler.scheduler import CancellationToken, Scheduler
from reconciler.storage import CartReferenceStore, CartStateCache

logger = structlog.get_logger(__name__)

_NO_REDIRECT = frozenset({ErrorKind.IN_PROGRESS, ErrorKind.CANCELLED})


class ReturnFlow:
    """
    Application-scoped orchestrator.

    One instance serves every return request; the client's key-value store is
    passed per call. A cart already being finalized is refused with
    IN_PROGRESS instead of being finalized twice concurrently.

    Example:
        flow = ReturnFlow(api, AsyncioScheduler(), settings)
        outcome = await flow.handle(Provider.PAYU, query, "pl", store)
        match outcome:
            case Confirmed(redirect_to=url): ...
            case Failed(message=text, redirect_to=url): ...
    """

    __slots__ = ("_api", "_scheduler", "_settings", "_cache", "_clock", "_in_flight")

    def __init__(
        self,
        api: StoreApi,
        scheduler: Scheduler,
        settings: Settings,
        *,
        cache: CartStateCache | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._api = api
        self._scheduler = scheduler
        self._settings = settings
        self._cache = cache if cache is not None else CartStateCache()
        self._clock = clock
        self._in_flight: set[str] = set()

    @property
    def cache(self) -> CartStateCache:
        return self._cache

    def is_running(self, cart_id: str) -> bool:
        return cart_id in self._in_flight

    async def handle(
        self,
        provider: Provider,
        params: QueryParams,
        locale: str,
        store: CartReferenceStore,
        token: CancellationToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> FlowOutcome:
        token = token if token is not None else CancellationToken()
        cleanup = self._cleanup_for(store)

        with structlog.contextvars.bound_contextvars(provider=provider.value, locale=locale):
            result = await self._run(provider, params, store, cleanup, token, on_progress)

        match result:
            case Ok(order):
                return Confirmed(order, order.confirmation_path(locale))
            case Error(err):
                if err.cart_id is not None and err.kind is not ErrorKind.IN_PROGRESS:
                    cleanup.on_failure(err, err.cart_id)
                if err.kind in _NO_REDIRECT:
                    return Failed(err, for_error(err, locale), None)
                return Failed(
                    err,
                    for_error(err, locale),
                    checkout_path(err.cart_id),
                    self._settings.failure_redirect_delay_seconds,
                )

    # ─── Steps ───

    def _cleanup_for(self, store: CartReferenceStore) -> CartCleanup:
        return CartCleanup(
            store,
            self._cache,
            reference_key=self._settings.cart_reference_key,
            redundant_keys=self._settings.redundant_cart_keys,
        )

    async def _read_reference(
        self, store: CartReferenceStore
    ) -> Result[str | None, FinalizeError]:
        match await store.get(self._settings.cart_reference_key):
            case Ok(value):
                return Ok(value)
            case Error(err):
                logger.error("cart_reference_unreadable", error=err.message)
                return Error(
                    FinalizeError.cart_not_found(
                        None, f"Stored cart reference unreadable: {err.message}"
                    )
                )

    async def _run(
        self,
        provider: Provider,
        params: QueryParams,
        store: CartReferenceStore,
        cleanup: CartCleanup,
        token: CancellationToken,
        on_progress: ProgressCallback | None,
    ) -> Result[CanonicalOrderResult, FinalizeError]:
        stored_cart_id: str | None = None
        if provider is Provider.PAYU:
            match await self._read_reference(store):
                case Ok(value):
                    stored_cart_id = value
                case Error(err):
                    return Error(err)

        match parse(params, provider, stored_cart_id=stored_cart_id):
            case Ok(event):
                pass
            case Error(err):
                logger.warning("return_rejected", kind=err.kind.name, error=err.message)
                return Error(err)

        if event.cart_id in self._in_flight:
            logger.warning("finalization_already_running", cart_id=event.cart_id)
            return Error(FinalizeError.in_progress(event.cart_id))

        self._in_flight.add(event.cart_id)
        try:
            with structlog.contextvars.bound_contextvars(cart_id=event.cart_id):
                return await self._finalize(event, cleanup, token, on_progress)
        except OperationCancelled:
            logger.info("finalization_cancelled", cart_id=event.cart_id)
            return Error(FinalizeError.cancelled(event.cart_id))
        finally:
            self._in_flight.discard(event.cart_id)

    async def _finalize(
        self,
        event: PaymentReturnEvent,
        cleanup: CartCleanup,
        token: CancellationToken,
        on_progress: ProgressCallback | None,
    ) -> Result[CanonicalOrderResult, FinalizeError]:
        match await fetch_cart_with_payment_collection(
            self._api, event.cart_id, event.session_id
        ):
            case Ok(snapshot):
                self._cache.remember(snapshot)
            case Error(err):
                return Error(err)

        collection = snapshot.payment_collection
        if collection is None:
            return Error(FinalizeError.no_payment_collection(event.cart_id))

        session = await resolve_session(self._api, snapshot, event)
        method = classify(session.provider_id if session is not None else None)
        session_id = session.id if session is not None else event.reference

        policy = self._settings.finalize_policy()
        authorizer = Authorizer(
            self._api,
            self._scheduler,
            settle_seconds=policy.authorization_settle_seconds,
            clock=self._clock,
        )
        finalizer = OrderFinalizer(
            self._api, authorizer, cleanup, self._scheduler, policy, clock=self._clock
        )
        return await finalizer.run(
            event,
            collection.id,
            AttemptContext.initial(session_id, method),
            token,
            on_progress,
        )


__all__ = ("ReturnFlow",)
