"""
Finalize — the order placement state machine.

    from reconciler import finalize as F

    finalizer = F.OrderFinalizer(
        api,
        authorizer,
        cleanup,
        scheduler,
        F.FinalizePolicy().with_max_attempts(4),
    )
    result = await finalizer.run(event, collection_id, ctx, token, on_progress=show)

Failure classification:

    F.classify_failure("Failed to complete cart: Internal Server Error")
    # Disposition.RETRYABLE
    F.classify_failure("Cart is missing a shipping method")
    # Disposition.TERMINAL
"""

from reconciler.finalize._policy import FinalizePolicy
from reconciler.finalize._classify import (
    Disposition,
    FailureRule,
    FAILURE_TABLE,
    classify_failure,
)
from reconciler.finalize._types import (
    FinalizationState,
    AttemptOutcome,
    FinalizationAttempt,
    Progress,
)
from reconciler.finalize._run import (
    ProgressCallback,
    UNEXPECTED_FORMAT_MESSAGE,
    UNEXPECTED_FORMAT_LIMIT,
    OrderFinalizer,
)

__all__ = (
    "FinalizePolicy",
    "Disposition",
    "FailureRule",
    "FAILURE_TABLE",
    "classify_failure",
    "FinalizationState",
    "AttemptOutcome",
    "FinalizationAttempt",
    "Progress",
    "ProgressCallback",
    "UNEXPECTED_FORMAT_MESSAGE",
    "UNEXPECTED_FORMAT_LIMIT",
    "OrderFinalizer",
)
