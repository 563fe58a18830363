import pytest

from reconciler.backend import FakeStoreApi
from reconciler.errors import OperationCancelled
from reconciler.poller import PaymentOutcome, PollPolicy, confirm_payment
from reconciler.scheduler import CancellationToken, RecordingScheduler


@pytest.fixture
def orders() -> FakeStoreApi:
    return FakeStoreApi().with_order("o1", payment_status="awaiting")


class TestUrlStatus:
    @pytest.mark.parametrize("status", ["FAILED", "canceled"])
    async def test_failed_short_circuits(
        self,
        orders: FakeStoreApi,
        scheduler: RecordingScheduler,
        token: CancellationToken,
        status: str,
    ) -> None:
        result = await confirm_payment(orders, "o1", status, scheduler, token)

        confirmation = result.unwrap()
        assert confirmation.outcome is PaymentOutcome.FAILED
        assert confirmation.error_path("pl") == "/pl/checkout/payment-error?order_id=o1"
        assert orders.calls == []
        assert scheduler.sleeps == []

    @pytest.mark.parametrize("status", ["COMPLETED", "success"])
    async def test_confirmed_skips_polling(
        self,
        orders: FakeStoreApi,
        scheduler: RecordingScheduler,
        token: CancellationToken,
        status: str,
    ) -> None:
        result = await confirm_payment(orders, "o1", status, scheduler, token)

        confirmation = result.unwrap()
        assert confirmation.outcome is PaymentOutcome.CONFIRMED
        assert confirmation.order is not None
        assert confirmation.order.id == "o1"
        assert scheduler.sleeps == []


class TestPolling:
    async def test_confirms_when_captured(
        self,
        orders: FakeStoreApi,
        scheduler: RecordingScheduler,
        token: CancellationToken,
    ) -> None:
        orders.payment_status_script = ["awaiting", "authorized", "captured"]

        result = await confirm_payment(orders, "o1", None, scheduler, token)

        confirmation = result.unwrap()
        assert confirmation.outcome is PaymentOutcome.CONFIRMED
        assert confirmation.checks == 3
        assert scheduler.sleeps == [3.0, 3.0, 3.0]

    async def test_times_out_to_assumed_complete(
        self,
        orders: FakeStoreApi,
        scheduler: RecordingScheduler,
        token: CancellationToken,
    ) -> None:
        result = await confirm_payment(orders, "o1", "PENDING", scheduler, token)

        confirmation = result.unwrap()
        assert confirmation.outcome is PaymentOutcome.ASSUMED_COMPLETE
        assert confirmation.checks == 10
        assert confirmation.order is not None
        assert scheduler.total_seconds == 30.0
        assert orders.count("get_order") == 11

    async def test_custom_policy(
        self,
        orders: FakeStoreApi,
        scheduler: RecordingScheduler,
        token: CancellationToken,
    ) -> None:
        policy = PollPolicy().with_interval(seconds=1.0).with_max_checks(2)

        result = await confirm_payment(orders, "o1", None, scheduler, token, policy)

        assert result.unwrap().outcome is PaymentOutcome.ASSUMED_COMPLETE
        assert scheduler.sleeps == [1.0, 1.0]

    async def test_check_errors_keep_polling(
        self,
        scheduler: RecordingScheduler,
        token: CancellationToken,
    ) -> None:
        api = FakeStoreApi()
        policy = PollPolicy().with_max_checks(3)

        result = await confirm_payment(api, "missing", None, scheduler, token, policy)

        assert result.unwrap_err().status == 404
        assert api.count("get_order") == 4

    async def test_cancellation(
        self, orders: FakeStoreApi, token: CancellationToken
    ) -> None:
        scheduler = RecordingScheduler(cancel_after=2)

        with pytest.raises(OperationCancelled):
            await confirm_payment(orders, "o1", None, scheduler, token)

        assert orders.count("get_order") == 1


class TestPollPolicy:
    def test_budget(self) -> None:
        assert PollPolicy().budget_seconds == 30.0

    def test_rejects_zero_checks(self) -> None:
        with pytest.raises(ValueError):
            PollPolicy().with_max_checks(0)
