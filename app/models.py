"""
SQLAlchemy Database Models

Two tables back the SQL stores:
- products: menu items, unique by name
- orders: priced and timestamped orders, items kept as JSON

Author: Khalil Bannouri
Version: 1.0.0
"""

from sqlalchemy import BigInteger, Column, String, DateTime, Text, JSON
from app.database import Base


class ProductRecord(Base):
    """Menu item row."""
    __tablename__ = "products"

    id = Column(String(32), primary_key=True)
    name = Column(String(30), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    image = Column(String(2048), nullable=False)
    price = Column(BigInteger, nullable=False)

    def __repr__(self):
        return f"<Product {self.id} - {self.name} - {self.price}>"


class OrderRecord(Base):
    """
    Order row.

    products_ordered maps product name to quantity; names are not
    foreign keys, so renaming a product leaves old orders untouched.
    """
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True)
    products_ordered = Column(JSON, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    price = Column(BigInteger, nullable=False)

    def __repr__(self):
        return f"<Order {self.id} - {self.price} - {self.date}>"
