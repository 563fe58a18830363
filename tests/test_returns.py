import pytest
from kungfu import Error, Ok

from reconciler.errors import ErrorKind
from reconciler.returns import (
    PaymentReturnEvent,
    Provider,
    ReturnStatus,
    canonical_status,
    legacy_payu_return_path,
    parse,
    parse_payu,
    parse_stripe,
)


class TestCanonicalStatus:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("succeeded", ReturnStatus.SUCCEEDED),
            ("SUCCESS", ReturnStatus.SUCCEEDED),
            (" failed ", ReturnStatus.FAILED),
            ("processing", ReturnStatus.UNKNOWN),
            ("", ReturnStatus.UNKNOWN),
        ],
    )
    def test_maps_raw_statuses(self, raw: str, expected: ReturnStatus) -> None:
        assert canonical_status(raw) is expected


class TestParsePayu:
    def test_uses_stored_cart_reference(self) -> None:
        result = parse_payu(
            {"session_id": "s1", "orderId": "PAYU-1", "ext_order_id": "ext-1"}, "c1"
        )

        event = result.unwrap()
        assert event.provider is Provider.PAYU
        assert event.cart_id == "c1"
        assert event.session_id == "s1"
        assert event.external_order_id == "ext-1"
        assert event.provider_order_ref == "PAYU-1"
        assert event.status is ReturnStatus.SUCCEEDED

    def test_ext_order_id_stands_in_for_session(self) -> None:
        event = parse_payu({"ext_order_id": "ext-1"}, "c1").unwrap()

        assert event.session_id == "ext-1"
        assert event.provider_order_ref == "ext-1"
        assert event.reference == "ext-1"

    def test_missing_session_and_order(self) -> None:
        result = parse_payu({"orderId": "PAYU-1"}, "c1")

        assert isinstance(result, Error)
        assert result.unwrap_err().kind is ErrorKind.MISSING_SESSION

    def test_blank_session_counts_as_missing(self) -> None:
        result = parse_payu({"session_id": "   "}, "c1")

        assert result.unwrap_err().kind is ErrorKind.MISSING_SESSION

    def test_missing_stored_cart(self) -> None:
        result = parse_payu({"session_id": "s1"}, None)

        err = result.unwrap_err()
        assert err.kind is ErrorKind.CART_LOOKUP
        assert err.cart_id is None

    def test_error_param_means_payment_failed(self) -> None:
        result = parse_payu({"session_id": "s1", "error": "501"}, "c1")

        err = result.unwrap_err()
        assert err.kind is ErrorKind.PAYMENT_FAILED
        assert err.cart_id == "c1"
        assert err.details == {"status": "501"}


class TestParseStripe:
    def test_succeeded_return(self) -> None:
        result = parse_stripe(
            {
                "cart_id": "c1",
                "payment_intent": "pi_123",
                "redirect_status": "succeeded",
            }
        )

        event = result.unwrap()
        assert event.provider is Provider.STRIPE
        assert event.cart_id == "c1"
        assert event.session_id is None
        assert event.external_order_id == "pi_123"
        assert event.raw_status == "succeeded"

    def test_status_param_is_fallback(self) -> None:
        event = parse_stripe(
            {"cart_id": "c1", "payment_intent": "pi_1", "status": "success"}
        ).unwrap()

        assert event.status is ReturnStatus.SUCCEEDED

    def test_redirect_status_wins_over_status(self) -> None:
        result = parse_stripe(
            {
                "cart_id": "c1",
                "payment_intent": "pi_1",
                "redirect_status": "failed",
                "status": "success",
            }
        )

        assert result.unwrap_err().kind is ErrorKind.PAYMENT_FAILED

    def test_intent_recovered_from_client_secret(self) -> None:
        event = parse_stripe(
            {
                "cart_id": "c1",
                "payment_intent_client_secret": "pi_777_secret_abc",
                "redirect_status": "succeeded",
            }
        ).unwrap()

        assert event.external_order_id == "pi_777"

    def test_failed_status(self) -> None:
        err = parse_stripe(
            {"cart_id": "c1", "payment_intent": "pi_1", "redirect_status": "failed"}
        ).unwrap_err()

        assert err.kind is ErrorKind.PAYMENT_FAILED
        assert err.cart_id == "c1"

    def test_unknown_status(self) -> None:
        err = parse_stripe(
            {"cart_id": "c1", "payment_intent": "pi_1", "redirect_status": "processing"}
        ).unwrap_err()

        assert err.kind is ErrorKind.UNKNOWN_STATUS
        assert err.details == {"status": "processing"}

    def test_missing_cart_id(self) -> None:
        err = parse_stripe(
            {"payment_intent": "pi_1", "redirect_status": "succeeded"}
        ).unwrap_err()

        assert err.kind is ErrorKind.CART_LOOKUP

    def test_missing_intent(self) -> None:
        err = parse_stripe({"cart_id": "c1", "redirect_status": "succeeded"}).unwrap_err()

        assert err.kind is ErrorKind.MISSING_SESSION


class TestParseDispatch:
    def test_payu_requires_stored_cart(self) -> None:
        assert isinstance(parse({"session_id": "s1"}, Provider.PAYU), Error)

    def test_payu_with_stored_cart(self) -> None:
        result = parse({"session_id": "s1"}, Provider.PAYU, stored_cart_id="c1")

        assert isinstance(result, Ok)

    def test_stripe_ignores_stored_cart(self) -> None:
        result = parse(
            {"cart_id": "c2", "payment_intent": "pi_1", "redirect_status": "succeeded"},
            Provider.STRIPE,
            stored_cart_id="c1",
        )

        assert result.unwrap().cart_id == "c2"


class TestPaymentReturnEvent:
    def test_requires_a_reference(self) -> None:
        with pytest.raises(ValueError):
            PaymentReturnEvent(Provider.PAYU, "c1", None, None, "COMPLETED")

    def test_requires_cart_id(self) -> None:
        with pytest.raises(ValueError):
            PaymentReturnEvent(Provider.PAYU, "", "s1", None, "COMPLETED")


class TestLegacyReturnPath:
    def test_preserves_query(self) -> None:
        path = legacy_payu_return_path("pl", {"session_id": "s1", "orderId": "X"})

        assert path == "/pl/payu/return?session_id=s1&orderId=X"

    def test_without_query(self) -> None:
        assert legacy_payu_return_path("en", {}) == "/en/payu/return"
