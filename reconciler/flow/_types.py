"""
Flow outcomes — what the hosting page does next.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from reconciler.errors import FinalizeError
from reconciler.results import CanonicalOrderResult


@dataclass(frozen=True, slots=True)
class Confirmed:
    result: CanonicalOrderResult
    redirect_to: str


@dataclass(frozen=True, slots=True)
class Failed:
    """
    Shown to the shopper for redirect_after_seconds, then redirected.

    redirect_to is None when there is nobody to redirect: the run was
    cancelled, or another run for the same cart is still going.
    """

    error: FinalizeError
    message: str
    redirect_to: str | None
    redirect_after_seconds: float = 0.0


type FlowOutcome = Confirmed | Failed


def checkout_path(cart_id: str | None) -> str:
    query = {"step": "payment"}
    if cart_id:
        query["cart_id"] = cart_id
    return f"/checkout?{urlencode(query)}"


__all__ = ("Confirmed", "Failed", "FlowOutcome", "checkout_path")
