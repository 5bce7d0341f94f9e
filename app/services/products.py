"""
Product Service

Business rules for the menu:
    - product names are unique
    - unit prices stay at or below MAX_UNIT_PRICE
    - a product image must be downloadable and decode as an image
    - lookups by name are exact and case-sensitive
"""

import logging

from app.services.base import ErrorKind, ServiceResult
from app.services.images import ImageValidator
from app.stores.base import BaseProductStore, DuplicateProductError, Product

logger = logging.getLogger(__name__)

IMAGE_UNREACHABLE_MESSAGE = "Problem with reading the product image URL"

# Keeps unit prices inside a 64-bit price column
MAX_UNIT_PRICE = 1_000_000


def already_exists_message(name: str) -> str:
    return f"Product {name} already exists"


def price_message(name: str) -> str:
    return f"Price of {name} must not exceed {MAX_UNIT_PRICE}"


def not_found_message(name: str) -> str:
    return f"{name} Product not found!"


class ProductService:
    """
    Creates and retrieves products.

    Args:
        product_store: Where products live
        image_validator: Fetch-and-decode check for product images
    """

    def __init__(self, product_store: BaseProductStore, image_validator: ImageValidator):
        self._products = product_store
        self._images = image_validator

    async def create_product(self, candidate: Product) -> ServiceResult[Product]:
        """
        Persist a new product.

        Rejected with ALREADY_EXISTS when the name is taken,
        IMAGE_FETCH_ERROR when the image URL is malformed or unreachable,
        and IMAGE_UNREACHABLE when it does not decode as an image.
        """
        logger.debug(f"Creating product {candidate.name!r}")

        if candidate.price > MAX_UNIT_PRICE:
            logger.warning(f"Rejected product {candidate.name!r} priced {candidate.price}")
            return ServiceResult.fail(ErrorKind.VALIDATION_FAILURE, price_message(candidate.name))

        if await self._products.find_by_name(candidate.name) is not None:
            logger.warning(f"Product {candidate.name!r} already exists")
            return ServiceResult.fail(ErrorKind.ALREADY_EXISTS, already_exists_message(candidate.name))

        image_result = await self.validate_image(candidate.image)
        if not image_result.success:
            return ServiceResult.fail(image_result.error_kind, image_result.error_message)
        if not image_result.value:
            logger.warning(f"Image for {candidate.name!r} is not a readable image")
            return ServiceResult.fail(ErrorKind.IMAGE_UNREACHABLE, IMAGE_UNREACHABLE_MESSAGE)

        try:
            saved = await self._products.save(candidate)
        except DuplicateProductError as e:
            # Lost a race with a concurrent creation of the same name
            logger.warning(f"Product {candidate.name!r} created concurrently")
            return ServiceResult.fail(ErrorKind.ALREADY_EXISTS, str(e))

        logger.info(f"Product {saved.name!r} saved as {saved.id}")
        return ServiceResult.ok(saved)

    async def get_all_products(self) -> list[Product]:
        products = await self._products.find_all()
        if not products:
            logger.info("There are no products in the store")
        return products

    async def get_product_by_name(self, name: str) -> ServiceResult[Product]:
        product = await self._products.find_by_name(name)
        if product is None:
            logger.info(f"Product {name!r} not found")
            return ServiceResult.fail(ErrorKind.NOT_FOUND, not_found_message(name))
        return ServiceResult.ok(product)

    async def validate_image(self, url: str) -> ServiceResult[bool]:
        """Whether ``url`` serves a decodable image; IMAGE_FETCH_ERROR if it can't be fetched."""
        return await self._images.validate(url)
