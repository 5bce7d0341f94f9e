"""
SQLAlchemy Store Implementation

Production stores backed by the async SQLAlchemy engine.
Used when ENV_MODE=production or ENV_MODE=staging.

Each call opens its own session; nothing is shared between requests
except the connection pool. Product-name uniqueness is backed by the
unique index on products.name, so two concurrent creations of the same
name cannot both be committed.
"""

import logging
import uuid
from datetime import timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import ping
from app.models import OrderRecord, ProductRecord
from app.stores.base import (
    BaseOrderStore,
    BaseProductStore,
    DuplicateProductError,
    Order,
    Product,
)

logger = logging.getLogger(__name__)


def _to_product(record: ProductRecord) -> Product:
    return Product(
        id=record.id,
        name=record.name,
        description=record.description,
        image=record.image,
        price=record.price,
    )


def _to_order(record: OrderRecord) -> Order:
    date = record.date
    # SQLite hands back naive datetimes; everything is stored in UTC
    if date is not None and date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return Order(
        id=record.id,
        products_ordered=dict(record.products_ordered),
        date=date,
        price=record.price,
    )


class _SqlStore:
    """Shared session handling for the SQL stores."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    @property
    def backend_name(self) -> str:
        return "sql"

    async def health_check(self) -> bool:
        try:
            return await ping(self._session_maker)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database health check failed: {e}")
            return False


class SqlProductStore(_SqlStore, BaseProductStore):
    """Product store backed by the products table."""

    async def save(self, product: Product) -> Product:
        record = ProductRecord(
            id=uuid.uuid4().hex,
            name=product.name,
            description=product.description,
            image=product.image,
            price=product.price,
        )
        async with self._session_maker() as session:
            session.add(record)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateProductError(product.name)

        logger.debug(f"SQL: stored product {record.id} ({record.name})")
        return _to_product(record)

    async def find_all(self) -> list[Product]:
        async with self._session_maker() as session:
            result = await session.execute(select(ProductRecord))
            return [_to_product(r) for r in result.scalars().all()]

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        async with self._session_maker() as session:
            record = await session.get(ProductRecord, product_id)
            return _to_product(record) if record else None

    async def find_by_name(self, name: str) -> Optional[Product]:
        async with self._session_maker() as session:
            result = await session.execute(
                select(ProductRecord).where(ProductRecord.name == name)
            )
            record = result.scalar_one_or_none()
            return _to_product(record) if record else None


class SqlOrderStore(_SqlStore, BaseOrderStore):
    """Order store backed by the orders table."""

    async def save(self, order: Order) -> Order:
        record = OrderRecord(
            id=uuid.uuid4().hex,
            products_ordered=dict(order.products_ordered),
            date=order.date,
            price=order.price,
        )
        async with self._session_maker() as session:
            session.add(record)
            await session.commit()

        logger.debug(f"SQL: stored order {record.id} (price={record.price})")
        return _to_order(record)

    async def find_all(self) -> list[Order]:
        async with self._session_maker() as session:
            result = await session.execute(select(OrderRecord))
            return [_to_order(r) for r in result.scalars().all()]

    async def find_by_id(self, order_id: str) -> Optional[Order]:
        async with self._session_maker() as session:
            record = await session.get(OrderRecord, order_id)
            return _to_order(record) if record else None
