"""Shared test fixtures for the restaurant ordering API."""

import io
from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from PIL import Image

from app.core.config import Settings
from app.main import create_app
from app.services import ImageValidator, OrderService, ProductService
from app.stores import MemoryOrderStore, MemoryProductStore, Product

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)

IMAGE_URL = "https://images.test/margherita.png"
TEXT_URL = "https://images.test/menu.txt"
MISSING_URL = "https://images.test/missing.png"

MENU = [
    Product(
        name="Margherita Pizza",
        description="Tomato sauce, Mozzarella and basil",
        image=IMAGE_URL,
        price=59,
    ),
    Product(
        name="Polenta",
        description="Creamy polenta with mushrooms",
        image=IMAGE_URL,
        price=48,
    ),
    Product(
        name="Roasted Salmon",
        description="Roasted Salmon on pumpkin cream, bonfire potato and broccomini",
        image=IMAGE_URL,
        price=108,
    ),
]


class FixedClock:
    """Clock whose current time is set by the test."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_png() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def image_server(request: httpx.Request) -> httpx.Response:
    """Serves a PNG for *.png, plain text for *.txt, 404 for missing.png."""
    if request.url.path == "/missing.png":
        return httpx.Response(404, text="not found")
    if request.url.path.endswith(".png"):
        return httpx.Response(200, content=make_png(), headers={"content-type": "image/png"})
    return httpx.Response(200, text="today's specials", headers={"content-type": "text/plain"})


@pytest.fixture
def clock():
    """Clock fixed at NOW."""
    return FixedClock()


@pytest.fixture
def image_validator():
    """Image validator talking to the in-process image server."""
    return ImageValidator(timeout=5.0, transport=httpx.MockTransport(image_server))


@pytest.fixture
def product_store():
    return MemoryProductStore()


@pytest.fixture
def order_store():
    return MemoryOrderStore()


@pytest_asyncio.fixture
async def menu_store(product_store):
    """Product store holding the three-item sample menu."""
    for product in MENU:
        await product_store.save(product)
    return product_store


@pytest.fixture
def product_service(product_store, image_validator):
    return ProductService(product_store, image_validator)


@pytest.fixture
def order_service(order_store, menu_store, clock):
    return OrderService(order_store, menu_store, minimum_order_amount=60, clock=clock)


@pytest.fixture
def client(product_store, order_store, image_validator, clock):
    """TestClient over an app wired to in-memory stores."""
    app = create_app(
        settings=Settings(env_mode="development"),
        product_store=product_store,
        order_store=order_store,
        image_validator=image_validator,
        clock=clock,
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def menu_client(client):
    """TestClient whose store already holds the sample menu."""
    for product in MENU:
        response = client.post(
            "/products",
            json={
                "name": product.name,
                "description": product.description,
                "image": product.image,
                "price": product.price,
            },
        )
        assert response.status_code == 200
    return client
