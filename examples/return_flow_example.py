"""
Return Flow Example — a shopper comes back from the gateway.

Runs against the in-memory backend with a recording scheduler, so the
minute-long timeline finishes instantly.

Run: uv run python examples/return_flow_example.py
"""

from kungfu import Ok

from reconciler import backend as B
from reconciler import flow as Fl
from reconciler.returns import Provider
from reconciler.scheduler import RecordingScheduler
from reconciler.storage import MemoryCartStore
from examples._infra import banner, run, settings, show_progress


def describe(outcome: Fl.FlowOutcome, scheduler: RecordingScheduler) -> None:
    match outcome:
        case Fl.Confirmed(result=result, redirect_to=url):
            print(f"   confirmed {result.kind} {result.id} → {url}")
        case Fl.Failed(message=text, redirect_to=url, redirect_after_seconds=delay):
            print(f"   failed: {text}")
            if url is not None:
                print(f"   back to {url} in {delay:g}s")
    print(f"   waited {scheduler.total_seconds:g}s in {len(scheduler.sleeps)} steps")


async def main() -> None:
    banner("Return Flow")

    # 1. PayU BLIK, webhook already landed
    print("\n1. PayU return, first placement succeeds:")
    api = B.FakeStoreApi().with_cart("cart_01", sessions=[("ps_01", "pp_payu-blik")])
    scheduler = RecordingScheduler()
    flow = Fl.ReturnFlow(api, scheduler, settings())
    store = MemoryCartStore(data={"payu_cart_id": "cart_01"})
    outcome = await flow.handle(
        Provider.PAYU, {"session_id": "ps_01", "orderId": "PAYU-1"}, "en", store,
        on_progress=show_progress,
    )
    describe(outcome, scheduler)
    print(f"   stored reference left: {store.data or 'none'}")

    # 2. Stripe, the shopper beats the webhook
    print("\n2. Stripe return, webhook still in flight:")
    api = B.FakeStoreApi().with_cart(
        "cart_02", sessions=[("ps_02", "pp_stripe-blik_stripe-connect")]
    )
    api.placement_script = [
        B.retryable_failure("More information is required for payment"),
        Ok({"order": {"id": "order_02"}}),
    ]
    scheduler = RecordingScheduler()
    flow = Fl.ReturnFlow(api, scheduler, settings())
    outcome = await flow.handle(
        Provider.STRIPE,
        {"cart_id": "cart_02", "payment_intent": "pi_02", "redirect_status": "succeeded"},
        "en",
        MemoryCartStore(),
        on_progress=show_progress,
    )
    describe(outcome, scheduler)

    # 3. Backend keeps failing
    print("\n3. Placement never succeeds:")
    api = B.FakeStoreApi().with_cart("cart_03", sessions=[("ps_03", "pp_payu-card")])
    api.placement_script = [B.retryable_failure() for _ in range(4)]
    scheduler = RecordingScheduler()
    flow = Fl.ReturnFlow(api, scheduler, settings())
    store = MemoryCartStore(data={"payu_cart_id": "cart_03"})
    outcome = await flow.handle(Provider.PAYU, {"session_id": "ps_03"}, "en", store)
    describe(outcome, scheduler)
    print(f"   stored reference kept: {store.data}")
    print(f"   placement calls: {api.count('complete_cart')}")


if __name__ == "__main__":
    run(main)
