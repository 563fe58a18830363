"""
Placement result types.

The placement endpoint answers in several shapes depending on backend
version and cart contents; they are resolved into one tagged union and then
into the canonical {kind, id} used for redirection.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class OrderKind(StrEnum):
    ORDER = "order"
    ORDER_SET = "order_set"


@dataclass(frozen=True, slots=True)
class CanonicalOrderResult:
    """Single normalized output of a successful finalization."""

    kind: OrderKind
    id: str

    def confirmation_path(self, locale: str) -> str:
        return f"/{locale}/order/{self.id}/confirmed"


# ═══════════════════════════════════════════════════════════════════════════════
# OrderResult — Tagged Union
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Order:
    id: str


@dataclass(frozen=True, slots=True)
class OrderSet:
    id: str


@dataclass(frozen=True, slots=True)
class Unrecognized:
    raw: Any


type OrderResult = Order | OrderSet | Unrecognized


def to_canonical(result: OrderResult) -> CanonicalOrderResult | None:
    match result:
        case Order(id=order_id):
            return CanonicalOrderResult(OrderKind.ORDER, order_id)
        case OrderSet(id=set_id):
            return CanonicalOrderResult(OrderKind.ORDER_SET, set_id)
        case Unrecognized():
            return None


__all__ = (
    "OrderKind",
    "CanonicalOrderResult",
    "Order",
    "OrderSet",
    "Unrecognized",
    "OrderResult",
    "to_canonical",
)
