"""
In-Memory Store Implementation

Dict-backed stores used in development mode (ENV_MODE=development) and by
the test suite. Records are copied on the way in and out so callers never
share mutable state with the store.

Behavior:
    - Generates opaque ids (uuid4 hex)
    - Enforces product-name uniqueness on save
    - Loses everything on restart
"""

import copy
import logging
import uuid
from dataclasses import replace
from typing import Optional

from app.stores.base import (
    BaseOrderStore,
    BaseProductStore,
    DuplicateProductError,
    Order,
    Product,
)

logger = logging.getLogger(__name__)


def _generate_id() -> str:
    return uuid.uuid4().hex


class MemoryProductStore(BaseProductStore):
    """In-memory product store."""

    def __init__(self):
        self._products: dict[str, Product] = {}

    @property
    def backend_name(self) -> str:
        return "memory"

    async def save(self, product: Product) -> Product:
        if any(p.name == product.name for p in self._products.values()):
            raise DuplicateProductError(product.name)

        stored = replace(product, id=_generate_id())
        self._products[stored.id] = stored
        logger.debug(f"Memory: stored product {stored.id} ({stored.name})")
        return replace(stored)

    async def find_all(self) -> list[Product]:
        return [replace(p) for p in self._products.values()]

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        product = self._products.get(product_id)
        return replace(product) if product else None

    async def find_by_name(self, name: str) -> Optional[Product]:
        for product in self._products.values():
            if product.name == name:
                return replace(product)
        return None

    async def health_check(self) -> bool:
        return True


class MemoryOrderStore(BaseOrderStore):
    """In-memory order store."""

    def __init__(self):
        self._orders: dict[str, Order] = {}

    @property
    def backend_name(self) -> str:
        return "memory"

    async def save(self, order: Order) -> Order:
        stored = copy.deepcopy(order)
        stored.id = _generate_id()
        self._orders[stored.id] = stored
        logger.debug(f"Memory: stored order {stored.id} (price={stored.price})")
        return copy.deepcopy(stored)

    async def find_all(self) -> list[Order]:
        return [copy.deepcopy(o) for o in self._orders.values()]

    async def find_by_id(self, order_id: str) -> Optional[Order]:
        order = self._orders.get(order_id)
        return copy.deepcopy(order) if order else None

    async def health_check(self) -> bool:
        return True
