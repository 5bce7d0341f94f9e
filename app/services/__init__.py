"""
                        Services Module

Business logic for the menu and for orders. Services receive their
stores through their constructors and return ServiceResult values
instead of raising on rejected requests.

Services:
    - products: product creation rules and lookups
    - orders: order pricing, minimum amount, last-day listing
    - images: product image fetch-and-decode check
"""

from app.services.base import ErrorKind, ServiceResult
from app.services.images import ImageValidator
from app.services.orders import OrderService
from app.services.products import ProductService

__all__ = [
    "ErrorKind",
    "ServiceResult",
    "ImageValidator",
    "OrderService",
    "ProductService",
]
