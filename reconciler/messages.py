"""
Localized shopper-facing messages.

Technical error messages stay in English on ``FinalizeError.message``; this
table is what the shopper reads. Unknown locales fall back to Polish, the
storefront's default market.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from reconciler.errors import ErrorKind, FinalizeError


class MessageKey(StrEnum):
    MISSING_SESSION = "missing_session"
    CART_NOT_FOUND = "cart_not_found"
    NO_PAYMENT_COLLECTION = "no_payment_collection"
    PAYMENT_FAILED = "payment_failed"
    UNKNOWN_STATUS = "unknown_status"
    AUTHORIZING = "authorizing"
    PREPARING = "preparing"
    PLACING_ATTEMPT = "placing_attempt"
    FINALIZATION_FAILED = "finalization_failed"
    UNKNOWN_REASON = "unknown_reason"
    CANCELLED = "cancelled"
    IN_PROGRESS = "in_progress"


FALLBACK_LOCALE = "pl"

MESSAGES: dict[str, dict[MessageKey, str]] = {
    "pl": {
        MessageKey.MISSING_SESSION: "Brak identyfikatora sesji płatności.",
        MessageKey.CART_NOT_FOUND: "Nie można znaleźć danych koszyka.",
        MessageKey.NO_PAYMENT_COLLECTION: "Koszyk nie ma przypisanej płatności.",
        MessageKey.PAYMENT_FAILED: "Płatność nie powiodła się. Spróbuj ponownie.",
        MessageKey.UNKNOWN_STATUS: (
            "Nieznany status płatności. Skontaktuj się z obsługą klienta."
        ),
        MessageKey.AUTHORIZING: "Autoryzacja płatności...",
        MessageKey.PREPARING: "Przygotowanie do finalizacji zamówienia...",
        MessageKey.PLACING_ATTEMPT: (
            "Finalizowanie zamówienia... (próba {attempt}/{max_attempts})"
        ),
        MessageKey.FINALIZATION_FAILED: (
            "Nie udało się sfinalizować zamówienia: {reason}"
        ),
        MessageKey.UNKNOWN_REASON: "Nieznany błąd",
        MessageKey.CANCELLED: "Finalizacja zamówienia została przerwana.",
        MessageKey.IN_PROGRESS: "Zamówienie jest już finalizowane.",
    },
    "en": {
        MessageKey.MISSING_SESSION: "Missing payment session identifier.",
        MessageKey.CART_NOT_FOUND: "Cart data could not be found.",
        MessageKey.NO_PAYMENT_COLLECTION: "The cart has no payment attached.",
        MessageKey.PAYMENT_FAILED: "Payment failed. Please try again.",
        MessageKey.UNKNOWN_STATUS: "Unknown payment status. Please contact support.",
        MessageKey.AUTHORIZING: "Authorizing payment...",
        MessageKey.PREPARING: "Preparing to finalize your order...",
        MessageKey.PLACING_ATTEMPT: (
            "Finalizing order... (attempt {attempt}/{max_attempts})"
        ),
        MessageKey.FINALIZATION_FAILED: "Could not finalize the order: {reason}",
        MessageKey.UNKNOWN_REASON: "Unknown error",
        MessageKey.CANCELLED: "Order finalization was interrupted.",
        MessageKey.IN_PROGRESS: "The order is already being finalized.",
    },
}


def message(key: MessageKey, locale: str | None = None, **params: Any) -> str:
    table = MESSAGES.get(locale or FALLBACK_LOCALE, MESSAGES[FALLBACK_LOCALE])
    return table[key].format(**params)


_KIND_TO_KEY: dict[ErrorKind, MessageKey] = {
    ErrorKind.MISSING_SESSION: MessageKey.MISSING_SESSION,
    ErrorKind.CART_LOOKUP: MessageKey.CART_NOT_FOUND,
    ErrorKind.NO_PAYMENT_COLLECTION: MessageKey.NO_PAYMENT_COLLECTION,
    ErrorKind.PAYMENT_FAILED: MessageKey.PAYMENT_FAILED,
    ErrorKind.UNKNOWN_STATUS: MessageKey.UNKNOWN_STATUS,
    ErrorKind.CANCELLED: MessageKey.CANCELLED,
    ErrorKind.IN_PROGRESS: MessageKey.IN_PROGRESS,
}


def for_error(error: FinalizeError, locale: str | None = None) -> str:
    """Shopper-facing text for a surfaced error."""
    if error.kind is ErrorKind.FINALIZATION_TERMINAL:
        reason = error.message or message(MessageKey.UNKNOWN_REASON, locale)
        return message(MessageKey.FINALIZATION_FAILED, locale, reason=reason)
    return message(_KIND_TO_KEY[error.kind], locale)


__all__ = ("MessageKey", "MESSAGES", "FALLBACK_LOCALE", "message", "for_error")
