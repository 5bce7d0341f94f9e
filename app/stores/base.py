"""
Store Abstract Base Classes

Defines the entities and the persistence contract shared by every store
implementation. Both the in-memory stores and the SQLAlchemy stores must
implement these methods, so services behave identically regardless of
which backend is active.

Design Pattern: Strategy Pattern
    - Development runs on the in-memory stores
    - Staging/production run on the database
    - Tests pick whichever backend they exercise

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Product:
    """
    A menu item.

    Attributes:
        name: Display name, unique across products
        description: Free-text description
        image: URL of the product picture
        price: Unit price
        id: Store-assigned identifier (None until saved)
    """
    name: str
    description: str
    image: str
    price: int
    id: Optional[str] = None


@dataclass
class Order:
    """
    A purchase request, priced and timestamped by the server.

    Attributes:
        products_ordered: Product name -> requested quantity
        date: Server time at creation (None until created)
        price: Sum of quantity x unit price (0 until created)
        id: Store-assigned identifier (None until saved)
    """
    products_ordered: dict[str, int] = field(default_factory=dict)
    date: Optional[datetime] = None
    price: int = 0
    id: Optional[str] = None


class DuplicateProductError(Exception):
    """Raised by a store when a product name is already taken."""

    def __init__(self, name: str):
        super().__init__(f"Product {name} already exists")
        self.name = name


class BaseProductStore(ABC):
    """Persistence of products, keyed by id with a lookup by name."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the backend name (e.g. "memory", "sql")."""
        pass

    @abstractmethod
    async def save(self, product: Product) -> Product:
        """
        Persist a new product and assign its id.

        Returns:
            Product: The stored product, carrying its id

        Raises:
            DuplicateProductError: If the name is already taken
        """
        pass

    @abstractmethod
    async def find_all(self) -> list[Product]:
        """Return every stored product (empty list if none)."""
        pass

    @abstractmethod
    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """Return the product with this id, or None."""
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[Product]:
        """Return the product with exactly this name, or None."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify the backend is reachable.

        Returns:
            bool: True if the store can serve requests
        """
        pass


class BaseOrderStore(ABC):
    """Persistence of orders, keyed by id."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the backend name (e.g. "memory", "sql")."""
        pass

    @abstractmethod
    async def save(self, order: Order) -> Order:
        """Persist a new order and return it with its assigned id."""
        pass

    @abstractmethod
    async def find_all(self) -> list[Order]:
        """Return every stored order (empty list if none)."""
        pass

    @abstractmethod
    async def find_by_id(self, order_id: str) -> Optional[Order]:
        """Return the order with this id, or None."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the backend is reachable."""
        pass
