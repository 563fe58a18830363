"""
Payment Status Example — waiting for a gateway-confirmed capture.

Run: uv run python examples/payment_status_example.py
"""

from kungfu import Ok, Error

from reconciler import poller as P
from reconciler.backend import FakeStoreApi
from reconciler.scheduler import CancellationToken, RecordingScheduler
from examples._infra import banner, run


async def check(api: FakeStoreApi, status: str | None) -> None:
    scheduler = RecordingScheduler()
    match await P.confirm_payment(api, "order_01", status, scheduler, CancellationToken()):
        case Ok(confirmation):
            print(
                f"   {confirmation.outcome} after {confirmation.checks} checks"
                f" ({scheduler.total_seconds:g}s)"
            )
        case Error(err):
            print(f"   error: {err.message}")


async def main() -> None:
    banner("Payment Status")

    print("\n1. URL says COMPLETED:")
    await check(FakeStoreApi().with_order("order_01"), "COMPLETED")

    print("\n2. Captured on the third check:")
    api = FakeStoreApi().with_order("order_01")
    api.payment_status_script = ["awaiting", "authorized", "captured"]
    await check(api, None)

    print("\n3. Never captured, shown anyway:")
    await check(FakeStoreApi().with_order("order_01"), "PENDING")

    print("\n4. URL says FAILED:")
    await check(FakeStoreApi().with_order("order_01"), "FAILED")


if __name__ == "__main__":
    run(main)
