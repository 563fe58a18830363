"""
Methods — payment method classification.

    from reconciler import methods as M

    M.classify("pp_payu-card")        # PaymentMethod.CARD
    M.classify("pp_unknown-method")   # PaymentMethod.BLIK (logged)
    M.provider_family("pp_card_stripe-connect")  # Provider.STRIPE
"""

from reconciler.methods._classify import (
    PaymentMethod,
    DEFAULT_METHOD,
    METHOD_TABLE,
    classify,
    provider_family,
)

__all__ = (
    "PaymentMethod",
    "DEFAULT_METHOD",
    "METHOD_TABLE",
    "classify",
    "provider_family",
)
