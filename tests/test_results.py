import pytest

from reconciler.results import (
    CanonicalOrderResult,
    Order,
    OrderKind,
    OrderSet,
    Unrecognized,
    normalize,
    resolve_placement,
    to_canonical,
)


class TestNormalize:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ({"id": "o1", "type": "order"}, CanonicalOrderResult(OrderKind.ORDER, "o1")),
            (
                {"id": "os1", "type": "order_set"},
                CanonicalOrderResult(OrderKind.ORDER_SET, "os1"),
            ),
            ({"order_set": {"id": "os2"}}, CanonicalOrderResult(OrderKind.ORDER_SET, "os2")),
            ({"order": {"id": "o3"}}, CanonicalOrderResult(OrderKind.ORDER, "o3")),
            ({"id": "o4"}, CanonicalOrderResult(OrderKind.ORDER, "o4")),
        ],
    )
    async def test_known_shapes(self, raw: dict, expected: CanonicalOrderResult) -> None:
        assert await normalize(raw) == expected

    async def test_backend_order_envelope(self) -> None:
        raw = {"type": "order", "order": {"id": "order_01", "status": "pending"}}

        assert await normalize(raw) == CanonicalOrderResult(OrderKind.ORDER, "order_01")

    async def test_typed_id_wins_over_nested(self) -> None:
        raw = {"id": "top", "type": "order", "order": {"id": "nested"}}

        assert await normalize(raw) == CanonicalOrderResult(OrderKind.ORDER, "top")

    async def test_order_set_wins_over_order(self) -> None:
        raw = {"order_set": {"id": "os1"}, "order": {"id": "o1"}}

        assert await normalize(raw) == CanonicalOrderResult(OrderKind.ORDER_SET, "os1")

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "cart", "cart": {"id": "c1"}},
            {"id": "x", "type": "redirect"},
            {"order": {"status": "pending"}},
            {},
            [],
            None,
            "order_01",
        ],
    )
    async def test_unrecognized_shapes(self, raw: object) -> None:
        assert await normalize(raw) is None

    async def test_unrecognized_keeps_raw(self) -> None:
        raw = {"type": "cart"}

        assert await resolve_placement(raw) == Unrecognized(raw)


class TestToCanonical:
    def test_order(self) -> None:
        assert to_canonical(Order("o1")) == CanonicalOrderResult(OrderKind.ORDER, "o1")

    def test_order_set(self) -> None:
        assert to_canonical(OrderSet("s1")).kind is OrderKind.ORDER_SET

    def test_unrecognized(self) -> None:
        assert to_canonical(Unrecognized({})) is None


class TestConfirmationPath:
    def test_uses_locale_and_id(self) -> None:
        result = CanonicalOrderResult(OrderKind.ORDER_SET, "os1")

        assert result.confirmation_path("en") == "/en/order/os1/confirmed"
