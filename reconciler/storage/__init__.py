"""
Storage — the stored cart reference and in-memory cart state.

    from reconciler import storage as St

    store = St.MemoryCartStore()
    await store.set("payu_cart_id", "cart_01")   # before gateway redirect
    match await store.get("payu_cart_id"):       # on return
        case Ok(cart_id): ...

Any object with async get/set/delete returning Result satisfies
``CartReferenceStore``; ``web.CookieCartStore`` is the request-scoped one.
"""

from reconciler.storage._store import (
    CartReferenceStore,
    MemoryCartStore,
)
from reconciler.storage._state import CartStateCache

__all__ = (
    "CartReferenceStore",
    "MemoryCartStore",
    "CartStateCache",
)
