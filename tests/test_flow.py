import asyncio

import pytest
from kungfu import Error, Ok
from structlog.testing import capture_logs

from reconciler.backend import FakeStoreApi, retryable_failure
from reconciler.config import Settings
from reconciler.errors import BackendError, ErrorKind
from reconciler.finalize import FinalizationState, Progress
from reconciler.flow import Confirmed, Failed, ReturnFlow, checkout_path
from reconciler.results import CanonicalOrderResult, OrderKind
from reconciler.returns import Provider
from reconciler.scheduler import CancellationToken, RecordingScheduler
from reconciler.storage import CartStateCache, MemoryCartStore

from tests.conftest import fixed_clock

PAYU_RETURN = {"session_id": "s1", "orderId": "PAYU-1", "ext_order_id": "ext-1"}


class GatedScheduler:
    """Holds every wait until the gate opens."""

    def __init__(self) -> None:
        self.gate = asyncio.Event()
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float, token: CancellationToken) -> None:
        token.raise_if_cancelled()
        self.sleeps.append(seconds)
        await self.gate.wait()


@pytest.fixture
def flow(
    api: FakeStoreApi,
    scheduler: RecordingScheduler,
    settings: Settings,
    cache: CartStateCache,
) -> ReturnFlow:
    return ReturnFlow(api, scheduler, settings, cache=cache, clock=fixed_clock)


def authorize_bodies(api: FakeStoreApi) -> list[dict]:
    return [body for name, body in api.calls if name == "authorize"]


class TestPayuReturn:
    async def test_blik_happy_path(
        self,
        flow: ReturnFlow,
        api: FakeStoreApi,
        scheduler: RecordingScheduler,
        cache: CartStateCache,
    ) -> None:
        store = MemoryCartStore(data={"payu_cart_id": "c1", "_medusa_cart_id": "c1"})

        outcome = await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", store)

        assert outcome == Confirmed(
            CanonicalOrderResult(OrderKind.ORDER, "order_01"),
            "/pl/order/order_01/confirmed",
        )
        assert store.data == {}
        assert cache.get("c1") is None
        assert api.orders_created == 1
        assert scheduler.sleeps == [1.0, 5.0, 2.0]

        body = authorize_bodies(api)[0]
        assert body["session_id"] == "s1"
        assert body["data"]["payment_method"] == "blik"
        assert body["data"]["payu_order_id"] == "PAYU-1"
        assert body["data"]["ext_order_id"] == "ext-1"

    async def test_typed_order_reply(
        self, flow: ReturnFlow, api: FakeStoreApi, store: MemoryCartStore
    ) -> None:
        api.placement_script = [Ok({"id": "o1", "type": "order"})]

        outcome = await flow.handle(Provider.PAYU, {"session_id": "s1"}, "pl", store)

        assert outcome == Confirmed(
            CanonicalOrderResult(OrderKind.ORDER, "o1"), "/pl/order/o1/confirmed"
        )
        assert "payu_cart_id" not in store.data

    async def test_ext_order_id_feeds_payu_order_hint(
        self, flow: ReturnFlow, api: FakeStoreApi, store: MemoryCartStore
    ) -> None:
        api.placement_script = [retryable_failure()]

        outcome = await flow.handle(
            Provider.PAYU, {"session_id": "s1", "ext_order_id": "ext-1"}, "pl", store
        )

        assert isinstance(outcome, Confirmed)
        initial, reauth = authorize_bodies(api)
        assert initial["data"]["payu_order_id"] == "ext-1"
        assert reauth["data"]["payu_order_id"] == "ext-1"
        assert reauth["data"]["flow_state"] == "COMPLETED"

    async def test_reports_progress(self, flow: ReturnFlow, store: MemoryCartStore) -> None:
        seen: list[Progress] = []

        await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", store, on_progress=seen.append)

        assert seen[0].state is FinalizationState.AUTHORIZING
        assert seen[-1].state is FinalizationState.SUCCESS

    async def test_missing_stored_reference(
        self, flow: ReturnFlow, api: FakeStoreApi
    ) -> None:
        outcome = await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", MemoryCartStore())

        assert isinstance(outcome, Failed)
        assert outcome.error.kind is ErrorKind.CART_LOOKUP
        assert outcome.message == "Nie można znaleźć danych koszyka."
        assert outcome.redirect_to == "/checkout?step=payment"
        assert api.calls == []

    async def test_unreadable_store(self, flow: ReturnFlow) -> None:
        store = MemoryCartStore(fail_on=frozenset({"payu_cart_id"}))

        outcome = await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", store)

        assert isinstance(outcome, Failed)
        assert outcome.error.kind is ErrorKind.CART_LOOKUP

    async def test_missing_session_and_order(
        self, flow: ReturnFlow, store: MemoryCartStore
    ) -> None:
        outcome = await flow.handle(Provider.PAYU, {"orderId": "X"}, "en", store)

        assert isinstance(outcome, Failed)
        assert outcome.error.kind is ErrorKind.MISSING_SESSION
        assert outcome.message == "Missing payment session identifier."
        assert store.data == {"payu_cart_id": "c1"}

    async def test_cart_lookup_failure_carries_diagnostics(
        self, flow: ReturnFlow, api: FakeStoreApi
    ) -> None:
        store = MemoryCartStore(data={"payu_cart_id": "gone"})

        outcome = await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", store)

        assert isinstance(outcome, Failed)
        assert outcome.error.kind is ErrorKind.CART_LOOKUP
        assert outcome.error.details["status"] == 404
        assert outcome.error.details["payment_session"]["provider_id"] == "pp_payu-blik"
        assert outcome.redirect_to == checkout_path("gone")
        assert store.data == {"payu_cart_id": "gone"}

    async def test_cart_without_payment_collection(
        self, flow: ReturnFlow, api: FakeStoreApi
    ) -> None:
        api.with_cart("c3")
        store = MemoryCartStore(data={"payu_cart_id": "c3"})

        outcome = await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", store)

        assert isinstance(outcome, Failed)
        assert outcome.error.kind is ErrorKind.NO_PAYMENT_COLLECTION
        assert api.count("complete_cart") == 0


class TestStripeReturn:
    async def test_race_then_recovery(
        self,
        flow: ReturnFlow,
        api: FakeStoreApi,
        scheduler: RecordingScheduler,
    ) -> None:
        api.with_cart(
            "c2",
            collection_id="paycol_2",
            sessions=[("ps_2", "pp_stripe-blik_stripe-connect")],
        )
        api.placement_script = [
            retryable_failure(),
            Ok({"order": {"id": "o2"}}),
        ]
        params = {
            "cart_id": "c2",
            "payment_intent": "pi_2",
            "redirect_status": "succeeded",
        }

        outcome = await flow.handle(Provider.STRIPE, params, "en", MemoryCartStore())

        assert isinstance(outcome, Confirmed)
        assert outcome.redirect_to == "/en/order/o2/confirmed"
        assert api.count("complete_cart") == 2
        assert scheduler.sleeps == [1.0, 5.0, 2.0, 4.0, 1.0]
        first, second = authorize_bodies(api)
        assert first["session_id"] == second["session_id"] == "ps_2"
        assert first["data"]["payment_intent"] == "pi_2"
        assert second["data"]["flow_state"] == "COMPLETED"

    async def test_failed_status_skips_backend(
        self, flow: ReturnFlow, api: FakeStoreApi
    ) -> None:
        params = {"cart_id": "c1", "payment_intent": "pi_1", "redirect_status": "failed"}

        outcome = await flow.handle(Provider.STRIPE, params, "en", MemoryCartStore())

        assert isinstance(outcome, Failed)
        assert outcome.error.kind is ErrorKind.PAYMENT_FAILED
        assert outcome.message == "Payment failed. Please try again."
        assert outcome.redirect_to == "/checkout?step=payment&cart_id=c1"
        assert outcome.redirect_after_seconds == 3.0
        assert api.calls == []


class TestClassification:
    async def test_unknown_provider_defaults_to_blik(
        self, flow: ReturnFlow, api: FakeStoreApi, store: MemoryCartStore
    ) -> None:
        api.with_cart("c1", collection_id="paycol_1", sessions=[("s1", "pp_unknown-method")])

        with capture_logs() as logs:
            outcome = await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", store)

        assert isinstance(outcome, Confirmed)
        assert authorize_bodies(api)[0]["data"]["payment_method"] == "blik"
        assert any(entry["event"] == "payment_method_unclassified" for entry in logs)


class TestFailureRedirect:
    async def test_terminal_failure_keeps_reference(
        self, flow: ReturnFlow, api: FakeStoreApi, store: MemoryCartStore
    ) -> None:
        api.placement_script = [
            Error(BackendError("Failed to complete cart: Cart is missing a shipping method", 400))
        ]

        outcome = await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", store)

        assert isinstance(outcome, Failed)
        assert outcome.error.kind is ErrorKind.FINALIZATION_TERMINAL
        assert outcome.message == (
            "Nie udało się sfinalizować zamówienia: "
            "Failed to complete cart: Cart is missing a shipping method"
        )
        assert outcome.redirect_to == "/checkout?step=payment&cart_id=c1"
        assert outcome.redirect_after_seconds == 3.0
        assert store.data == {"payu_cart_id": "c1"}

    async def test_exhausted_retries(
        self, flow: ReturnFlow, api: FakeStoreApi, store: MemoryCartStore
    ) -> None:
        api.placement_script = [retryable_failure() for _ in range(4)]

        outcome = await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", store)

        assert isinstance(outcome, Failed)
        assert outcome.error.exhausted is True
        assert len(outcome.error.attempts) == 4
        assert store.data == {"payu_cart_id": "c1"}


class TestConcurrency:
    async def test_second_return_for_same_cart_is_refused(
        self, api: FakeStoreApi, settings: Settings
    ) -> None:
        scheduler = GatedScheduler()
        flow = ReturnFlow(api, scheduler, settings)

        first = asyncio.create_task(
            flow.handle(Provider.PAYU, PAYU_RETURN, "pl", MemoryCartStore(data={"payu_cart_id": "c1"}))
        )
        while not flow.is_running("c1"):
            await asyncio.sleep(0)

        second = await flow.handle(
            Provider.PAYU, PAYU_RETURN, "pl", MemoryCartStore(data={"payu_cart_id": "c1"})
        )
        scheduler.gate.set()
        first_outcome = await first

        assert isinstance(second, Failed)
        assert second.error.kind is ErrorKind.IN_PROGRESS
        assert second.redirect_to is None
        assert isinstance(first_outcome, Confirmed)
        assert api.orders_created == 1
        assert not flow.is_running("c1")

    async def test_sequential_returns_are_idempotent(
        self, flow: ReturnFlow, api: FakeStoreApi
    ) -> None:
        first = await flow.handle(
            Provider.PAYU, PAYU_RETURN, "pl", MemoryCartStore(data={"payu_cart_id": "c1"})
        )
        second = await flow.handle(
            Provider.PAYU, PAYU_RETURN, "pl", MemoryCartStore(data={"payu_cart_id": "c1"})
        )

        assert isinstance(first, Confirmed)
        assert first == second
        assert api.orders_created == 1


class TestCancellation:
    async def test_cancelled_run_has_no_redirect(
        self,
        flow: ReturnFlow,
        api: FakeStoreApi,
        scheduler: RecordingScheduler,
        store: MemoryCartStore,
    ) -> None:
        scheduler.cancel_after = 1

        outcome = await flow.handle(Provider.PAYU, PAYU_RETURN, "pl", store)

        assert isinstance(outcome, Failed)
        assert outcome.error.kind is ErrorKind.CANCELLED
        assert outcome.redirect_to is None
        assert store.data == {"payu_cart_id": "c1"}
        assert api.count("complete_cart") == 0
        assert not flow.is_running("c1")
