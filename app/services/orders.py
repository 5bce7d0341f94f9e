"""
Order Service

Business rules for orders:
    - an order names at least one product
    - each quantity is between 1 and MAX_QUANTITY
    - every named product must exist
    - the server computes the price from current unit prices
    - the computed price must reach the minimum order amount
    - the server stamps the creation time

The "last day" listing is a full scan filtered in Python.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from app.services.base import ErrorKind, ServiceResult
from app.services.products import not_found_message
from app.stores.base import BaseOrderStore, BaseProductStore, Order

logger = logging.getLogger(__name__)

EMPTY_ORDER_MESSAGE = "The order is empty! please add a few products."

# Keeps computed prices inside a 64-bit price column
MAX_QUANTITY = 1_000


def quantity_message(name: str) -> str:
    return f"Quantity of {name} must be between 1 and {MAX_QUANTITY}"


def below_minimum_message(minimum_order_amount: int) -> str:
    return (
        f"The minimum order amount is {minimum_order_amount}! "
        "please add a few more items to your order."
    )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderService:
    """
    Creates, prices and lists orders.

    Args:
        order_store: Where orders live
        product_store: Source of unit prices
        minimum_order_amount: Orders priced below this are rejected
        window: Width of the "last day" window
        clock: Returns the current time; injectable for tests
    """

    def __init__(
        self,
        order_store: BaseOrderStore,
        product_store: BaseProductStore,
        minimum_order_amount: int = 60,
        window: timedelta = timedelta(hours=24),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._orders = order_store
        self._products = product_store
        self.minimum_order_amount = minimum_order_amount
        self.window = window
        self._clock = clock or utc_now

    async def create_order(self, candidate: Order) -> ServiceResult[Order]:
        """
        Price, stamp and persist an order.

        Any client-supplied price or date on ``candidate`` is replaced.
        Nothing is written unless every rule passes.
        """
        logger.debug(f"Creating order for {candidate.products_ordered}")

        if not candidate.products_ordered:
            logger.warning("Rejected empty order")
            return ServiceResult.fail(ErrorKind.EMPTY_ORDER, EMPTY_ORDER_MESSAGE)

        for name, quantity in candidate.products_ordered.items():
            if not 1 <= quantity <= MAX_QUANTITY:
                logger.warning(f"Rejected order with {quantity} x {name!r}")
                return ServiceResult.fail(ErrorKind.VALIDATION_FAILURE, quantity_message(name))

        price_result = await self.compute_order_price(candidate.products_ordered)
        if not price_result.success:
            return ServiceResult.fail(price_result.error_kind, price_result.error_message)

        price = price_result.value
        if price < self.minimum_order_amount:
            logger.warning(f"Rejected order priced {price} (minimum {self.minimum_order_amount})")
            return ServiceResult.fail(
                ErrorKind.BELOW_MINIMUM,
                below_minimum_message(self.minimum_order_amount),
            )

        order = Order(
            products_ordered=dict(candidate.products_ordered),
            date=self._clock(),
            price=price,
        )
        saved = await self._orders.save(order)

        logger.info(f"Order {saved.id} saved (price={saved.price})")
        return ServiceResult.ok(saved)

    async def compute_order_price(self, products_ordered: dict[str, int]) -> ServiceResult[int]:
        """Sum quantity x unit price; PRODUCT_NOT_FOUND on the first unknown name."""
        total = 0
        for name, quantity in products_ordered.items():
            product = await self._products.find_by_name(name)
            if product is None:
                logger.warning(f"Order references unknown product {name!r}")
                return ServiceResult.fail(ErrorKind.PRODUCT_NOT_FOUND, not_found_message(name))
            total += product.price * quantity
        return ServiceResult.ok(total)

    async def get_all_orders(self) -> list[Order]:
        orders = await self._orders.find_all()
        if not orders:
            logger.info("There are no orders in the store")
        return orders

    async def get_all_orders_from_last_day(self) -> list[Order]:
        orders = await self._orders.find_all()
        recent = [o for o in orders if o.date is not None and self.is_within_last_day(o.date)]
        logger.debug(f"{len(recent)} of {len(orders)} orders are from the last day")
        return recent

    def is_within_last_day(self, date: datetime) -> bool:
        """Strictly newer than now minus the window."""
        return date > self._clock() - self.window
