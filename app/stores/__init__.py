"""
Store Factory

Builds the product and order stores for the configured environment.
Called once by the composition root; services receive the stores through
their constructors.

Environment Switching:
    - ENV_MODE=development → MemoryProductStore / MemoryOrderStore
    - ENV_MODE=staging → SqlProductStore / SqlOrderStore
    - ENV_MODE=production → SqlProductStore / SqlOrderStore
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import Settings
from app.stores.base import (
    BaseOrderStore,
    BaseProductStore,
    DuplicateProductError,
    Order,
    Product,
)
from app.stores.memory import MemoryOrderStore, MemoryProductStore
from app.stores.sql import SqlOrderStore, SqlProductStore

logger = logging.getLogger(__name__)


def build_stores(
    settings: Settings,
    session_maker: Optional[async_sessionmaker[AsyncSession]] = None,
) -> tuple[BaseProductStore, BaseOrderStore]:
    """
    Build the store pair for the current environment.

    Args:
        settings: Application settings
        session_maker: Session factory, required outside development

    Returns:
        (product_store, order_store)

    Raises:
        ValueError: If the database stores are selected without a session maker
    """
    if not settings.use_database:
        logger.info("Stores: Using in-memory stores (development mode)")
        return MemoryProductStore(), MemoryOrderStore()

    if session_maker is None:
        raise ValueError(
            f"A database session maker is required in {settings.env_mode.value} mode"
        )

    logger.info(f"Stores: Using SQL stores ({settings.env_mode.value} mode)")
    return SqlProductStore(session_maker), SqlOrderStore(session_maker)


__all__ = [
    "build_stores",
    "BaseProductStore",
    "BaseOrderStore",
    "DuplicateProductError",
    "Product",
    "Order",
    "MemoryProductStore",
    "MemoryOrderStore",
    "SqlProductStore",
    "SqlOrderStore",
]
