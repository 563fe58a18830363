"""
Order finalizer — the bounded placement loop.

Authorization is advisory: the run proceeds to placement whatever the
authorize call reported, because the gateway's webhook may already have
authorized the session on the backend. Placement is idempotent on the
backend, so repeating it is always safe; the loop only decides how long to
keep trying.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from kungfu import Result, Ok, Error

from reconciler._types import Clock, utc_now
from reconciler.authorize import AttemptContext, Authorizer
from reconciler.backend import PLACEMENT_PAYMENT_DATA, StoreApi
from reconciler.cleanup import CartCleanup
from reconciler.errors import ErrorKind, FinalizeError
from reconciler.finalize._classify import (
    FAILURE_TABLE,
    Disposition,
    FailureRule,
    classify_failure,
)
from reconciler.finalize._policy import FinalizePolicy
from reconciler.finalize._types import (
    AttemptOutcome,
    FinalizationAttempt,
    FinalizationState,
    Progress,
)
from reconciler.messages import MessageKey
from reconciler.results import CanonicalOrderResult, resolve_placement, to_canonical
from reconciler.returns import PaymentReturnEvent
from reconciler.scheduler import CancellationToken, Scheduler

logger = structlog.get_logger(__name__)

type ProgressCallback = Callable[[Progress], None]

UNEXPECTED_FORMAT_MESSAGE = "Unexpected placement result format"
# An unparseable success is retried once; a second one ends the run.
UNEXPECTED_FORMAT_LIMIT = 2


def _ignore_progress(_: Progress) -> None:
    return None


class OrderFinalizer:
    """
    Runs one finalization:

        authorize → settle → "preparing" → settle
        → place #1 … place #max (backoff, re-authorize on even attempts)

    Only the cleanup component touches the stored cart reference, and only
    after a canonical result exists.

    Example:
        finalizer = OrderFinalizer(api, authorizer, cleanup, scheduler)
        match await finalizer.run(event, collection_id, ctx, token):
            case Ok(result):
                redirect(result.confirmation_path(locale))
            case Error(err):
                show(err)
    """

    __slots__ = (
        "_api",
        "_authorizer",
        "_cleanup",
        "_scheduler",
        "_policy",
        "_clock",
        "_table",
    )

    def __init__(
        self,
        api: StoreApi,
        authorizer: Authorizer,
        cleanup: CartCleanup,
        scheduler: Scheduler,
        policy: FinalizePolicy = FinalizePolicy(),
        *,
        clock: Clock = utc_now,
        failure_table: tuple[FailureRule, ...] = FAILURE_TABLE,
    ) -> None:
        self._api = api
        self._authorizer = authorizer
        self._cleanup = cleanup
        self._scheduler = scheduler
        self._policy = policy
        self._clock = clock
        self._table = failure_table

    @property
    def policy(self) -> FinalizePolicy:
        return self._policy

    async def run(
        self,
        event: PaymentReturnEvent,
        collection_id: str,
        context: AttemptContext,
        token: CancellationToken,
        on_progress: ProgressCallback | None = None,
    ) -> Result[CanonicalOrderResult, FinalizeError]:
        """
        Raises ``OperationCancelled`` if the token fires; the stored cart
        reference is untouched in that case.
        """
        emit = on_progress or _ignore_progress
        policy = self._policy
        total = policy.max_attempts
        log = logger.bind(cart_id=event.cart_id, collection_id=collection_id)

        # ─── Authorize & settle ───
        emit(Progress(FinalizationState.AUTHORIZING, MessageKey.AUTHORIZING))
        authorization = await self._authorizer.authorize(
            collection_id, event, context, token
        )
        if not authorization.ok:
            log.info("proceeding_without_confirmed_authorization")

        emit(Progress(FinalizationState.SETTLING))
        await self._scheduler.sleep(policy.initial_settle_seconds, token)
        emit(Progress(FinalizationState.SETTLING, MessageKey.PREPARING))
        await self._scheduler.sleep(policy.preparing_settle_seconds, token)

        # ─── Placement loop ───
        attempts: list[FinalizationAttempt] = []
        unexpected_formats = 0
        last_message = ""
        exhausted = False

        for attempt in range(1, total + 1):
            if attempt > 1:
                await self._scheduler.sleep(policy.backoff_for(attempt), token)
                if policy.reauthorizes_on(attempt):
                    emit(Progress(FinalizationState.AUTHORIZING, None, attempt, total))
                    await self._authorizer.authorize(
                        collection_id, event, context.reauthorize(attempt), token
                    )

            emit(
                Progress(
                    FinalizationState.PLACING_ORDER,
                    MessageKey.PLACING_ATTEMPT,
                    attempt,
                    total,
                )
            )
            started_at = self._clock()
            log.info("placement_attempt", attempt=attempt, max_attempts=total)
            reply = await self._api.complete_cart(event.cart_id, PLACEMENT_PAYMENT_DATA)
            # The call itself is allowed to finish; its outcome is not
            # reported to a run that has been abandoned.
            token.raise_if_cancelled()

            match reply:
                case Ok(raw):
                    result = to_canonical(await resolve_placement(raw))
                    if result is not None:
                        attempts.append(
                            FinalizationAttempt(attempt, started_at, AttemptOutcome.SUCCESS)
                        )
                        log.info(
                            "order_placed",
                            attempt=attempt,
                            kind=result.kind.value,
                            order_id=result.id,
                        )
                        emit(Progress(FinalizationState.SUCCESS, None, attempt, total))
                        await self._cleanup.on_success(result, event.cart_id)
                        return Ok(result)

                    unexpected_formats += 1
                    last_message = UNEXPECTED_FORMAT_MESSAGE
                    attempts.append(
                        FinalizationAttempt(
                            attempt,
                            started_at,
                            AttemptOutcome.UNEXPECTED_FORMAT,
                            last_message,
                        )
                    )
                    log.error("placement_unexpected_format", attempt=attempt, raw=raw)
                    if unexpected_formats >= UNEXPECTED_FORMAT_LIMIT:
                        break
                    emit(
                        Progress(FinalizationState.RETRYABLE_FAILURE, None, attempt, total)
                    )

                case Error(err):
                    last_message = err.message
                    if classify_failure(err.message, self._table) is Disposition.RETRYABLE:
                        attempts.append(
                            FinalizationAttempt(
                                attempt, started_at, AttemptOutcome.RETRYABLE, err.message
                            )
                        )
                        log.warning(
                            "placement_retryable_failure",
                            attempt=attempt,
                            status=err.status,
                            error=err.message,
                        )
                        emit(
                            Progress(
                                FinalizationState.RETRYABLE_FAILURE, None, attempt, total
                            )
                        )
                        continue

                    attempts.append(
                        FinalizationAttempt(
                            attempt, started_at, AttemptOutcome.TERMINAL, err.message
                        )
                    )
                    log.error(
                        "placement_terminal_failure",
                        attempt=attempt,
                        status=err.status,
                        error=err.message,
                    )
                    break
        else:
            exhausted = True

        emit(Progress(FinalizationState.TERMINAL_FAILURE, None, len(attempts), total))
        if exhausted:
            log.error("placement_attempts_exhausted", attempts=len(attempts))

        return Error(
            FinalizeError(
                ErrorKind.FINALIZATION_TERMINAL,
                last_message,
                cart_id=event.cart_id,
                attempts=tuple(attempts),
                details={"exhausted": exhausted},
            )
        )


__all__ = (
    "ProgressCallback",
    "UNEXPECTED_FORMAT_MESSAGE",
    "UNEXPECTED_FORMAT_LIMIT",
    "OrderFinalizer",
)
