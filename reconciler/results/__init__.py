"""
Results — placement result normalization.

    from reconciler import results as Rs

    await Rs.normalize({"id": "o1", "type": "order"})
    # CanonicalOrderResult(kind=OrderKind.ORDER, id="o1")

    await Rs.resolve_placement({"order_set": {"id": "os1"}})
    # OrderSet(id="os1")

    await Rs.normalize({"type": "redirect"})   # None

Priority: typed id → order_set.id → order.id → bare id.
"""

from reconciler.results._types import (
    OrderKind,
    CanonicalOrderResult,
    Order,
    OrderSet,
    Unrecognized,
    OrderResult,
    to_canonical,
)
from reconciler.results._graph import (
    PlacementPayload,
    PlacementShape,
    NormalizedResultNode,
    resolve_placement,
    normalize,
)

__all__ = (
    "OrderKind",
    "CanonicalOrderResult",
    "Order",
    "OrderSet",
    "Unrecognized",
    "OrderResult",
    "to_canonical",
    "PlacementPayload",
    "PlacementShape",
    "NormalizedResultNode",
    "resolve_placement",
    "normalize",
)
