"""
Client state cleanup — the only writer of the stored cart reference after
the gateway redirect.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from kungfu import Result, Ok, Error

from reconciler.errors import FinalizeError
from reconciler.results import CanonicalOrderResult
from reconciler.storage import CartReferenceStore, CartStateCache

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CleanupReport:
    cart_id: str
    reference_removed: bool = False
    cache_evicted: bool = False
    redundant_removed: tuple[str, ...] = ()
    left_intact: bool = False


class CartCleanup:
    """
    Success clears, failure preserves.

    Safe to call any number of times: a second success cleanup finds nothing
    to delete and reports so.
    """

    __slots__ = ("_store", "_cache", "_reference_key", "_redundant_keys")

    def __init__(
        self,
        store: CartReferenceStore,
        cache: CartStateCache,
        *,
        reference_key: str = "payu_cart_id",
        redundant_keys: tuple[str, ...] = ("_medusa_cart_id", "medusa_cart_id"),
    ) -> None:
        self._store = store
        self._cache = cache
        self._reference_key = reference_key
        self._redundant_keys = redundant_keys

    async def cleanup(
        self,
        outcome: Result[CanonicalOrderResult, FinalizeError],
        cart_id: str,
    ) -> CleanupReport:
        match outcome:
            case Ok(result):
                return await self.on_success(result, cart_id)
            case Error(err):
                return self.on_failure(err, cart_id)

    async def on_success(
        self, result: CanonicalOrderResult, cart_id: str
    ) -> CleanupReport:
        log = logger.bind(cart_id=cart_id, order_id=result.id)

        reference_removed = False
        match await self._store.delete(self._reference_key):
            case Ok(existed):
                reference_removed = existed
            case Error(err):
                # The key stays as it was; a reload re-enters idempotently.
                log.error("cart_reference_delete_failed", error=err.message)

        cache_evicted = self._cache.forget(cart_id)

        removed: list[str] = []
        for key in self._redundant_keys:
            match await self._store.delete(key):
                case Ok(True):
                    removed.append(key)
                case Ok(False):
                    pass
                case Error(err):
                    log.warning("redundant_cart_key_not_removed", key=key, error=err.message)

        log.info(
            "cart_state_cleared",
            reference_removed=reference_removed,
            cache_evicted=cache_evicted,
            redundant_removed=removed,
        )
        return CleanupReport(
            cart_id=cart_id,
            reference_removed=reference_removed,
            cache_evicted=cache_evicted,
            redundant_removed=tuple(removed),
        )

    def on_failure(self, error: FinalizeError, cart_id: str) -> CleanupReport:
        logger.info(
            "cart_state_preserved",
            cart_id=cart_id,
            kind=error.kind.name,
        )
        return CleanupReport(cart_id=cart_id, left_intact=True)


__all__ = ("CleanupReport", "CartCleanup")
