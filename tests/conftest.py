"""Shared fixtures: fake backend, in-memory store, recording scheduler."""

from datetime import UTC, datetime

import pytest

from reconciler.authorize import AttemptContext, Authorizer
from reconciler.backend import FakeStoreApi
from reconciler.cleanup import CartCleanup
from reconciler.config import Settings
from reconciler.finalize import FinalizePolicy, OrderFinalizer
from reconciler.methods import PaymentMethod
from reconciler.returns import PaymentReturnEvent, Provider
from reconciler.scheduler import CancellationToken, RecordingScheduler
from reconciler.storage import CartStateCache, MemoryCartStore

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        backend_url="http://backend.test",
        publishable_key="pk_test",
    )


@pytest.fixture
def api() -> FakeStoreApi:
    return FakeStoreApi().with_cart(
        "c1", collection_id="paycol_1", sessions=[("s1", "pp_payu-blik")]
    )


@pytest.fixture
def store() -> MemoryCartStore:
    return MemoryCartStore(data={"payu_cart_id": "c1"})


@pytest.fixture
def cache() -> CartStateCache:
    return CartStateCache()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def token() -> CancellationToken:
    return CancellationToken()


@pytest.fixture
def payu_event() -> PaymentReturnEvent:
    return PaymentReturnEvent(
        provider=Provider.PAYU,
        cart_id="c1",
        session_id="s1",
        external_order_id=None,
        raw_status="COMPLETED",
        provider_order_ref="PAYU-ORDER-1",
    )


@pytest.fixture
def context() -> AttemptContext:
    return AttemptContext.initial("s1", PaymentMethod.BLIK)


@pytest.fixture
def cleanup(store: MemoryCartStore, cache: CartStateCache) -> CartCleanup:
    return CartCleanup(store, cache)


@pytest.fixture
def finalizer(
    api: FakeStoreApi,
    cleanup: CartCleanup,
    scheduler: RecordingScheduler,
) -> OrderFinalizer:
    authorizer = Authorizer(api, scheduler, settle_seconds=1.0, clock=fixed_clock)
    return OrderFinalizer(
        api, authorizer, cleanup, scheduler, FinalizePolicy(), clock=fixed_clock
    )
