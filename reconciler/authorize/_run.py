"""
Authorization reconciler — primary and re-authorization calls.
"""

from __future__ import annotations

import structlog
from kungfu import Ok, Error

from reconciler._types import Clock, utc_now
from reconciler.authorize._types import (
    AttemptContext,
    AuthorizationOutcome,
    AuthorizationPayload,
)
from reconciler.backend import StoreApi
from reconciler.returns import PaymentReturnEvent
from reconciler.scheduler import CancellationToken, Scheduler

logger = structlog.get_logger(__name__)


class Authorizer:
    """
    Sends the enriched authorize call, then waits out the settling delay.

    Never fails: a non-2xx reply or transport error becomes
    ``AuthorizationOutcome(ok=False)``. Only cancellation escapes, from the
    settling sleep.
    """

    __slots__ = ("_api", "_scheduler", "_settle_seconds", "_clock")

    def __init__(
        self,
        api: StoreApi,
        scheduler: Scheduler,
        settle_seconds: float = 1.0,
        clock: Clock = utc_now,
    ) -> None:
        self._api = api
        self._scheduler = scheduler
        self._settle_seconds = settle_seconds
        self._clock = clock

    async def authorize(
        self,
        collection_id: str,
        event: PaymentReturnEvent,
        context: AttemptContext,
        token: CancellationToken,
    ) -> AuthorizationOutcome:
        payload = AuthorizationPayload.build(event, context, self._clock())
        log = logger.bind(
            cart_id=event.cart_id,
            collection_id=collection_id,
            session_id=context.session_id,
            attempt=context.attempt_number,
            reauthorization=context.reauthorization,
        )

        match await self._api.authorize_payment_collection(
            collection_id, payload.to_body()
        ):
            case Ok(body):
                log.info("authorization_sent")
                outcome = AuthorizationOutcome(
                    ok=True, raw=body, status=200, reauthorization=context.reauthorization
                )
            case Error(err):
                log.warning(
                    "authorization_soft_failure",
                    status=err.status,
                    error=err.message,
                )
                outcome = AuthorizationOutcome(
                    ok=False,
                    raw=err.body,
                    status=err.status,
                    reauthorization=context.reauthorization,
                )

        await self._scheduler.sleep(self._settle_seconds, token)
        return outcome


__all__ = ("Authorizer",)
