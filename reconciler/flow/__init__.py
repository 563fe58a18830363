"""
Flow — the post-payment return pipeline.

    from reconciler import flow as Fl

    flow = Fl.ReturnFlow(api, scheduler, settings)
    match await flow.handle(Provider.STRIPE, query, "en", store, token):
        case Fl.Confirmed(result=r, redirect_to=url):
            ...  # /en/order/{id}/confirmed
        case Fl.Failed(message=text, redirect_to=url, redirect_after_seconds=s):
            ...  # show text, go to /checkout?step=payment&cart_id=... after s
"""

from reconciler.flow._types import Confirmed, Failed, FlowOutcome, checkout_path
from reconciler.flow._run import ReturnFlow

__all__ = ("Confirmed", "Failed", "FlowOutcome", "checkout_path", "ReturnFlow")
