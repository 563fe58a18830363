"""
reconciler — post-payment order finalization for a headless storefront.

    from reconciler import returns as R     # Gateway return adapters
    from reconciler import backend as B     # Store API client + cart lookup
    from reconciler import methods as M     # Payment method classifier
    from reconciler import authorize as A   # Authorization reconciler
    from reconciler import finalize as F    # Placement retry state machine
    from reconciler import results as Rs    # Placement result normalizer
    from reconciler import cleanup as Cl    # Client state cleanup
    from reconciler import poller as P      # Payment status poller
    from reconciler import flow as Fl       # End-to-end return flow

A shopper comes back from PayU or Stripe; the flow turns that redirect into
a confirmed order, or a clear message and a way back to checkout.
"""

from reconciler import returns
from reconciler import backend
from reconciler import methods
from reconciler import authorize
from reconciler import finalize
from reconciler import results
from reconciler import cleanup
from reconciler import poller
from reconciler import flow
from reconciler import scheduler
from reconciler import storage
from reconciler._types import JsonObject, QueryParams
from reconciler.errors import ErrorKind, FinalizeError, OperationCancelled

__version__ = "0.1.0"

__all__ = (
    "returns",
    "backend",
    "methods",
    "authorize",
    "finalize",
    "results",
    "cleanup",
    "poller",
    "flow",
    "scheduler",
    "storage",
    "JsonObject",
    "QueryParams",
    "ErrorKind",
    "FinalizeError",
    "OperationCancelled",
)
