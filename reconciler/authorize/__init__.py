"""
Authorize — authorization reconciler.

    from reconciler import authorize as A

    authorizer = A.Authorizer(api, scheduler, settle_seconds=1.0)
    ctx = A.AttemptContext.initial(session_id, PaymentMethod.BLIK)
    outcome = await authorizer.authorize(collection_id, event, ctx, token)
    outcome.ok   # advisory only

Re-authorization uses ``ctx.reauthorize(n)``: same session, fresh timestamp,
flow_state forced to COMPLETED.
"""

from reconciler.authorize._types import (
    AttemptContext,
    AuthorizationPayload,
    AuthorizationOutcome,
)
from reconciler.authorize._run import Authorizer

__all__ = (
    "AttemptContext",
    "AuthorizationPayload",
    "AuthorizationOutcome",
    "Authorizer",
)
