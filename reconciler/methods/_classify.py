"""
Payment method classifier — provider id → canonical method tag.
"""

from __future__ import annotations

from enum import StrEnum

import structlog

from reconciler.returns._types import Provider

logger = structlog.get_logger(__name__)


class PaymentMethod(StrEnum):
    BLIK = "blik"
    CARD = "card"
    TRANSFER = "transfer"
    GOOGLEPAY = "googlepay"
    PRZELEWY24 = "przelewy24"
    PAYPAL = "paypal"
    MANUAL = "manual"


DEFAULT_METHOD = PaymentMethod.BLIK

# Registered provider ids, with and without the "pp_" prefix the backend adds.
METHOD_TABLE: dict[str, PaymentMethod] = {
    "pp_payu-blik": PaymentMethod.BLIK,
    "payu-blik": PaymentMethod.BLIK,
    "pp_payu-card": PaymentMethod.CARD,
    "payu-card": PaymentMethod.CARD,
    "pp_payu-transfer": PaymentMethod.TRANSFER,
    "payu-transfer": PaymentMethod.TRANSFER,
    "pp_payu-googlepay": PaymentMethod.GOOGLEPAY,
    "payu-googlepay": PaymentMethod.GOOGLEPAY,
    "pp_stripe-blik_stripe-connect": PaymentMethod.BLIK,
    "pp_stripe-przelewy24_stripe-connect": PaymentMethod.PRZELEWY24,
    "pp_stripe_stripe_connect": PaymentMethod.CARD,
    "pp_card_stripe-connect": PaymentMethod.CARD,
    "pp_paypal_paypal": PaymentMethod.PAYPAL,
    "pp_system_default": PaymentMethod.MANUAL,
}


def classify(provider_id: str | None) -> PaymentMethod:
    """
    Never raises: an unknown or missing id logs a warning and maps to BLIK.

    The tag only feeds the authorization payload and display; a wrong guess
    does not change whether the order can be placed.
    """
    if provider_id:
        method = METHOD_TABLE.get(provider_id.strip().lower())
        if method is not None:
            return method
    logger.warning(
        "payment_method_unclassified",
        provider_id=provider_id,
        default=DEFAULT_METHOD.value,
    )
    return DEFAULT_METHOD


def provider_family(provider_id: str | None) -> Provider | None:
    """Which gateway owns a provider id; None for PayPal, manual, unknown."""
    if not provider_id:
        return None
    normalized = provider_id.lower().removeprefix("pp_")
    if normalized.startswith("payu"):
        return Provider.PAYU
    if "stripe" in normalized:
        return Provider.STRIPE
    return None


__all__ = (
    "PaymentMethod",
    "DEFAULT_METHOD",
    "METHOD_TABLE",
    "classify",
    "provider_family",
)
