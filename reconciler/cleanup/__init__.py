"""
Cleanup — client state after finalization.

    from reconciler import cleanup as Cl

    cleanup = Cl.CartCleanup(store, cache, reference_key="payu_cart_id")
    await cleanup.cleanup(Ok(result), cart_id)   # clears reference + cache
    await cleanup.cleanup(Error(err), cart_id)   # leaves everything intact
"""

from reconciler.cleanup._run import CleanupReport, CartCleanup

__all__ = ("CleanupReport", "CartCleanup")
