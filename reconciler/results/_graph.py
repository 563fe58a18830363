"""
Result normalizer graph — placement shapes as nodnod nodes.

Architecture:
    PlacementPayload (injected)
         │
         ▼
    PayloadNode
         │
         ├── TypedIdNode ─────────┐   {id, type: "order" | "order_set"}
         ├── NestedOrderSetNode ──┤   {order_set: {id}}
         ├── NestedOrderNode ─────┼── PlacementShape (@polymorphic)
         ├── BareIdNode ──────────┤   {id} without type
         └── (fallthrough) ───────┘   Unrecognized
                                           │
                                           ▼
                                   NormalizedResultNode

Cases are tried in declaration order; the first state node that validates
wins, which is what gives the shapes their priority.

No 'from __future__ import annotations' here: nodnod resolves dependencies
from runtime type hints.
"""

from dataclasses import dataclass
from typing import Any

from nodnod import NodeError, polymorphic, case

from reconciler import graph as G
from reconciler.results._types import (
    CanonicalOrderResult,
    Order,
    OrderKind,
    OrderResult,
    OrderSet,
    Unrecognized,
    to_canonical,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Input
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class PlacementPayload:
    """Raw placement response, as decoded from JSON."""

    raw: Any


@G.node
class PayloadNode:
    def __init__(self, raw: Any, body: dict[str, Any]) -> None:
        self.raw = raw
        self.body = body

    @classmethod
    def __compose__(cls, payload: PlacementPayload) -> "PayloadNode":
        body = payload.raw if isinstance(payload.raw, dict) else {}
        return cls(payload.raw, body)


def _id_of(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _nested_id(body: dict[str, Any], key: str) -> str | None:
    nested = body.get(key)
    if not isinstance(nested, dict):
        return None
    return _id_of(nested.get("id"))


# ═══════════════════════════════════════════════════════════════════════════════
# Shape Nodes — Each validates one response shape
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class TypedIdNode:
    """Validates: top-level id with a recognized type discriminator."""

    def __init__(self, id: str, kind: OrderKind) -> None:
        self.id = id
        self.kind = kind

    @classmethod
    def __compose__(cls, payload: PayloadNode) -> "TypedIdNode":
        order_id = _id_of(payload.body.get("id"))
        if order_id is None:
            raise NodeError("No top-level id")
        match payload.body.get("type"):
            case "order":
                return cls(order_id, OrderKind.ORDER)
            case "order_set":
                return cls(order_id, OrderKind.ORDER_SET)
            case _:
                raise NodeError("No recognized type")


@G.node
class NestedOrderSetNode:
    """Validates: order_set.id."""

    def __init__(self, id: str) -> None:
        self.id = id

    @classmethod
    def __compose__(cls, payload: PayloadNode) -> "NestedOrderSetNode":
        set_id = _nested_id(payload.body, "order_set")
        if set_id is None:
            raise NodeError("No order_set.id")
        return cls(set_id)


@G.node
class NestedOrderNode:
    """Validates: order.id."""

    def __init__(self, id: str) -> None:
        self.id = id

    @classmethod
    def __compose__(cls, payload: PayloadNode) -> "NestedOrderNode":
        order_id = _nested_id(payload.body, "order")
        if order_id is None:
            raise NodeError("No order.id")
        return cls(order_id)


@G.node
class BareIdNode:
    """Validates: top-level id and no type discriminator at all."""

    def __init__(self, id: str) -> None:
        self.id = id

    @classmethod
    def __compose__(cls, payload: PayloadNode) -> "BareIdNode":
        if "type" in payload.body:
            raise NodeError("Has type discriminator")
        order_id = _id_of(payload.body.get("id"))
        if order_id is None:
            raise NodeError("No top-level id")
        return cls(order_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Polymorphic Shape
# ═══════════════════════════════════════════════════════════════════════════════


@polymorphic[OrderResult]
class PlacementShape:
    """Router — each @case depends on one validated shape node."""

    @case
    def typed_id(cls, node: TypedIdNode) -> OrderResult:
        if node.kind is OrderKind.ORDER_SET:
            return OrderSet(node.id)
        return Order(node.id)

    @case
    def nested_order_set(cls, node: NestedOrderSetNode) -> OrderResult:
        return OrderSet(node.id)

    @case
    def nested_order(cls, node: NestedOrderNode) -> OrderResult:
        return Order(node.id)

    @case
    def bare_id(cls, node: BareIdNode) -> OrderResult:
        return Order(node.id)

    @case
    def unrecognized(cls, node: PayloadNode) -> OrderResult:
        return Unrecognized(node.raw)


# ═══════════════════════════════════════════════════════════════════════════════
# Final Node
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class NormalizedResultNode:
    def __init__(self, result: OrderResult) -> None:
        self.result = result

    @classmethod
    def __compose__(cls, shape: PlacementShape) -> "NormalizedResultNode":
        return cls(shape.value)

    def canonical(self) -> CanonicalOrderResult | None:
        return to_canonical(self.result)


# ═══════════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════════


async def resolve_placement(raw: Any) -> OrderResult:
    node = await G.run(NormalizedResultNode).inject(PlacementPayload(raw))
    return node.result


async def normalize(raw: Any) -> CanonicalOrderResult | None:
    """Canonical {kind, id}, or None for an unrecognized shape."""
    return to_canonical(await resolve_placement(raw))


__all__ = (
    "PlacementPayload",
    "PayloadNode",
    "TypedIdNode",
    "NestedOrderSetNode",
    "NestedOrderNode",
    "BareIdNode",
    "PlacementShape",
    "NormalizedResultNode",
    "resolve_placement",
    "normalize",
)
