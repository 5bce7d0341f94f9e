"""Tests for OrderService."""

from datetime import timedelta

import pytest

from app.services import ErrorKind, OrderService
from app.services.orders import MAX_QUANTITY
from app.stores import MemoryOrderStore, MemoryProductStore, Order, Product
from tests.conftest import NOW, FixedClock


class TestCreateOrder:
    """Tests for OrderService.create_order."""

    @pytest.mark.asyncio
    async def test_prices_and_saves_order(self, order_service, order_store):
        """Two pizzas and a polenta cost 166 and are accepted."""
        result = await order_service.create_order(
            Order(products_ordered={"Margherita Pizza": 2, "Polenta": 1})
        )

        assert result.success is True
        assert result.value.price == 166
        assert result.value.date == NOW
        assert result.value.id is not None

        stored = await order_store.find_all()
        assert len(stored) == 1
        assert stored[0].price == 166
        assert stored[0].products_ordered == {"Margherita Pizza": 2, "Polenta": 1}

    @pytest.mark.asyncio
    async def test_client_price_and_date_are_overwritten(self, order_service):
        """Price and date always come from the server."""
        candidate = Order(
            products_ordered={"Roasted Salmon": 1},
            date=NOW - timedelta(days=30),
            price=1,
        )

        result = await order_service.create_order(candidate)

        assert result.value.price == 108
        assert result.value.date == NOW

    @pytest.mark.asyncio
    async def test_empty_order_rejected(self, order_service, order_store):
        result = await order_service.create_order(Order(products_ordered={}))

        assert result.success is False
        assert result.error_kind == ErrorKind.EMPTY_ORDER
        assert result.error_message == "The order is empty! please add a few products."
        assert await order_store.find_all() == []

    @pytest.mark.asyncio
    async def test_below_minimum_rejected(self, order_service, order_store):
        """A single pizza costs 59, one short of the minimum."""
        result = await order_service.create_order(
            Order(products_ordered={"Margherita Pizza": 1})
        )

        assert result.error_kind == ErrorKind.BELOW_MINIMUM
        assert result.error_message == (
            "The minimum order amount is 60! please add a few more items to your order."
        )
        assert await order_store.find_all() == []

    @pytest.mark.asyncio
    async def test_exactly_minimum_accepted(self, order_service, menu_store):
        """The minimum itself is an acceptable total."""
        await menu_store.save(
            Product(name="Tasting Menu", description="Chef's choice", image="https://x.test/a.png", price=60)
        )

        result = await order_service.create_order(Order(products_ordered={"Tasting Menu": 1}))

        assert result.success is True
        assert result.value.price == 60

    @pytest.mark.asyncio
    async def test_unknown_product_rejected(self, order_service, order_store):
        """An unknown name fails the whole order before any write."""
        result = await order_service.create_order(
            Order(products_ordered={"Roasted Salmon": 3, "Lasagna": 1})
        )

        assert result.error_kind == ErrorKind.PRODUCT_NOT_FOUND
        assert result.error_message == "Lasagna Product not found!"
        assert await order_store.find_all() == []

    @pytest.mark.asyncio
    async def test_uses_current_product_price(self, order_service):
        """compute_order_price multiplies quantity by the stored unit price."""
        result = await order_service.compute_order_price({"Polenta": 3, "Roasted Salmon": 2})

        assert result.value == 3 * 48 + 2 * 108

    @pytest.mark.asyncio
    async def test_quantity_above_limit_rejected(self, order_service, order_store):
        result = await order_service.create_order(
            Order(products_ordered={"Polenta": 1, "Roasted Salmon": MAX_QUANTITY + 1})
        )

        assert result.error_kind == ErrorKind.VALIDATION_FAILURE
        assert result.error_message == f"Quantity of Roasted Salmon must be between 1 and {MAX_QUANTITY}"
        assert await order_store.find_all() == []

    @pytest.mark.asyncio
    async def test_zero_quantity_rejected(self, order_service, order_store):
        result = await order_service.create_order(Order(products_ordered={"Polenta": 0}))

        assert result.error_kind == ErrorKind.VALIDATION_FAILURE
        assert await order_store.find_all() == []

    @pytest.mark.asyncio
    async def test_quantity_at_limit_accepted(self, order_service):
        result = await order_service.create_order(Order(products_ordered={"Polenta": MAX_QUANTITY}))

        assert result.success is True
        assert result.value.price == 48 * MAX_QUANTITY


class TestLastDay:
    """Tests for the last-day window."""

    @pytest.fixture
    def window_service(self):
        return OrderService(MemoryOrderStore(), MemoryProductStore(), clock=FixedClock())

    def test_now_is_within_last_day(self, window_service):
        assert window_service.is_within_last_day(NOW) is True

    def test_twenty_five_hours_ago_is_not(self, window_service):
        assert window_service.is_within_last_day(NOW - timedelta(hours=25)) is False

    def test_boundary_is_excluded(self, window_service):
        """Exactly 24 hours ago falls outside the window."""
        assert window_service.is_within_last_day(NOW - timedelta(hours=24)) is False

    def test_just_inside_boundary(self, window_service):
        assert window_service.is_within_last_day(NOW - timedelta(hours=24) + timedelta(milliseconds=1)) is True

    @pytest.mark.asyncio
    async def test_filters_old_orders(self, order_service, clock):
        """Only orders from the trailing 24 hours are listed."""
        clock.now = NOW - timedelta(hours=30)
        old = await order_service.create_order(Order(products_ordered={"Roasted Salmon": 1}))
        clock.now = NOW - timedelta(hours=2)
        recent = await order_service.create_order(Order(products_ordered={"Polenta": 2}))
        clock.now = NOW

        orders = await order_service.get_all_orders_from_last_day()

        assert [o.id for o in orders] == [recent.value.id]
        assert len(await order_service.get_all_orders()) == 2
        assert old.success is True

    @pytest.mark.asyncio
    async def test_no_orders(self, order_service):
        assert await order_service.get_all_orders() == []
        assert await order_service.get_all_orders_from_last_day() == []
