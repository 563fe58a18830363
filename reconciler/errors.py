"""
Error model — errors are values.

Every fallible reconciler operation returns ``Result[T, FinalizeError]``.
Store API failures travel as ``BackendError`` until a component decides what
they mean; key-value store failures travel as ``StoreError``.

Only ``OperationCancelled`` is raised: it unwinds a run whose hosting request
went away, the same way ``asyncio.CancelledError`` would.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from reconciler.finalize._types import FinalizationAttempt


# ═══════════════════════════════════════════════════════════════════════════════
# Error Kinds — what reaches the user-visible layer
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorKind(Enum):
    """
    Kinds of surfaced finalization errors.

    Retryable placement failures and unexpected result shapes never appear
    here: the Finalizer absorbs them as attempt outcomes and only reports
    FINALIZATION_TERMINAL once the budget is spent.
    """

    MISSING_SESSION = auto()  # Return lacks session / external reference
    CART_LOOKUP = auto()  # Cart reference or cart not found
    NO_PAYMENT_COLLECTION = auto()  # Cart has no payment collection
    PAYMENT_FAILED = auto()  # Gateway reported failure
    UNKNOWN_STATUS = auto()  # Gateway reported something we can't map
    FINALIZATION_TERMINAL = auto()  # Placement failed for good
    IN_PROGRESS = auto()  # Another run holds the cart
    CANCELLED = auto()  # Hosting request went away


@dataclass(frozen=True, slots=True)
class FinalizeError:
    """
    Surfaced reconciler error.

    cart_id is kept whenever it is known so the failure redirect can send the
    shopper back to the same cart.
    """

    kind: ErrorKind
    message: str
    cart_id: str | None = None
    attempts: tuple[FinalizationAttempt, ...] = ()
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def exhausted(self) -> bool:
        return self.details.get("exhausted", False) is True

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.kind.name.lower(),
            "message": self.message,
            "cart_id": self.cart_id,
            "attempts": len(self.attempts),
            "details": self.details,
        }

    # ─── Constructors ───

    @classmethod
    def missing_session(cls, provider: str) -> FinalizeError:
        return cls(
            ErrorKind.MISSING_SESSION,
            f"{provider} return carries no session or order reference",
        )

    @classmethod
    def cart_not_found(
        cls, cart_id: str | None, reason: str = "cart data not found"
    ) -> FinalizeError:
        return cls(ErrorKind.CART_LOOKUP, reason, cart_id=cart_id)

    @classmethod
    def no_payment_collection(cls, cart_id: str) -> FinalizeError:
        return cls(
            ErrorKind.NO_PAYMENT_COLLECTION,
            f"Cart {cart_id} has no payment collection",
            cart_id=cart_id,
        )

    @classmethod
    def payment_failed(cls, cart_id: str | None, status: str) -> FinalizeError:
        return cls(
            ErrorKind.PAYMENT_FAILED,
            f"Gateway reported payment status {status!r}",
            cart_id=cart_id,
            details={"status": status},
        )

    @classmethod
    def unknown_status(cls, cart_id: str | None, status: str) -> FinalizeError:
        return cls(
            ErrorKind.UNKNOWN_STATUS,
            f"Unrecognized payment status {status!r}",
            cart_id=cart_id,
            details={"status": status},
        )

    @classmethod
    def in_progress(cls, cart_id: str) -> FinalizeError:
        return cls(
            ErrorKind.IN_PROGRESS,
            f"Finalization already running for cart {cart_id}",
            cart_id=cart_id,
        )

    @classmethod
    def cancelled(cls, cart_id: str | None) -> FinalizeError:
        return cls(ErrorKind.CANCELLED, "Finalization cancelled", cart_id=cart_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Collaborator Errors
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class BackendError:
    """
    Store API call failed.

    status is None for transport failures (connect, timeout, bad JSON).
    """

    message: str
    status: int | None = None
    body: Any = None


@dataclass(frozen=True)
class StoreError:
    """Key-value store operation error."""

    message: str
    cause: Exception | None = None


class OperationCancelled(Exception):
    """A scheduled wait was cancelled through its token."""


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ErrorKind",
    "FinalizeError",
    "BackendError",
    "StoreError",
    "OperationCancelled",
)
