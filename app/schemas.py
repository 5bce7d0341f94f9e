"""
Pydantic Schemas for Request/Response Validation

Request schemas carry the field constraints (sizes, minimums, required
fields); violations surface as 422 responses before any service runs.
Only client-supplied fields are validated here: an order's price and
date are computed by the server afterwards.

Author: Khalil Bannouri
Version: 1.0.0
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.services.orders import MAX_QUANTITY
from app.services.products import MAX_UNIT_PRICE
from app.stores.base import Order, Product


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class ProductCreate(BaseModel):
    """Request schema for creating a product."""
    name: str = Field(..., min_length=2, max_length=30, examples=["Margherita Pizza"])
    description: str = Field(..., examples=["Tomato sauce, Mozzarella and basil"])
    image: str = Field(..., examples=["https://example.com/images/margherita.png"])
    price: int = Field(..., ge=8, le=MAX_UNIT_PRICE, examples=[59])

    def to_product(self) -> Product:
        return Product(
            name=self.name,
            description=self.description,
            image=self.image,
            price=self.price,
        )


class OrderCreate(BaseModel):
    """
    Request schema for creating an order.

    ``price`` and ``date`` may be present in the body but are ignored.
    A missing ``productsOrdered`` is an empty order, rejected by the service.
    """
    model_config = ConfigDict(populate_by_name=True)

    products_ordered: dict[str, Annotated[int, Field(ge=1, le=MAX_QUANTITY)]] = Field(
        default_factory=dict,
        alias="productsOrdered",
        examples=[{"Margherita Pizza": 2, "Polenta": 1}],
    )

    def to_order(self) -> Order:
        return Order(products_ordered=dict(self.products_ordered))


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class ProductResponse(BaseModel):
    """Response schema for a single product."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    image: str
    price: int


class OrderResponse(BaseModel):
    """Response schema for a single order."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    products_ordered: dict[str, int] = Field(..., alias="productsOrdered")
    date: datetime
    price: int

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            products_ordered=order.products_ordered,
            date=order.date,
            price=order.price,
        )


class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    product_store: str
    order_store: str
    timestamp: datetime
    backend: Optional[str] = None
