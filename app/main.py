"""
FastAPI Application Entry Point

Restaurant Ordering API - products and orders over a document-shaped store.
Runs on in-memory stores in development and on the database otherwise.

Endpoints:
    - POST /products: Create a product
    - GET /products: List products
    - GET /products/{name}: Get a product by name
    - POST /orders: Create an order
    - GET /orders: List orders
    - GET /orders-from-last-day: List orders from the last day
    - GET /health: System health check

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional
from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings, setup_logging
from app.database import create_engine, create_session_maker, init_db
from app.schemas import (
    ErrorResponse,
    HealthResponse,
    OrderCreate,
    OrderResponse,
    ProductCreate,
    ProductResponse,
)
from app.services import (
    ErrorKind,
    ImageValidator,
    OrderService,
    ProductService,
    ServiceResult,
)
from app.stores import BaseOrderStore, BaseProductStore, build_stores

logger = logging.getLogger(__name__)


# =============================================================================
# ERROR MAPPING
# =============================================================================

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_FAILURE: 422,
    ErrorKind.EMPTY_ORDER: 409,
    ErrorKind.BELOW_MINIMUM: 409,
    ErrorKind.PRODUCT_NOT_FOUND: 409,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.IMAGE_UNREACHABLE: 409,
    ErrorKind.IMAGE_FETCH_ERROR: 400,
    ErrorKind.NOT_FOUND: 404,
}


def raise_for_result(result: ServiceResult) -> None:
    """Turn a rejected service result into an HTTPException."""
    if result.success:
        return
    status_code = ERROR_STATUS[result.error_kind]
    logger.error(f"Request rejected ({status_code}): {result.to_dict()}")
    raise HTTPException(status_code=status_code, detail=result.error_message)


def empty_list_response() -> JSONResponse:
    """Empty listings answer 404 with an empty list body."""
    return JSONResponse(status_code=404, content=[])


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


router = APIRouter()


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@router.get("/", tags=["Root"])
async def root(request: Request) -> dict[str, str]:
    """API root with navigation links."""
    settings: Settings = request.app.state.settings
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(request: Request) -> HealthResponse:
    """Verify both stores are operational."""
    product_store: BaseProductStore = request.app.state.product_store
    order_store: BaseOrderStore = request.app.state.order_store

    product_status = "healthy" if await product_store.health_check() else "unhealthy"
    order_status = "healthy" if await order_store.health_check() else "unhealthy"

    overall = "operational" if product_status == order_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall,
        product_store=product_status,
        order_store=order_status,
        backend=product_store.backend_name,
        timestamp=datetime.now(timezone.utc),
    )


# =============================================================================
# PRODUCT ENDPOINTS
# =============================================================================

@router.post(
    "/products",
    response_model=ProductResponse,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    tags=["Products"],
    summary="Create Product",
)
async def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """
    Create a new product.

    The name must be unused and the image URL must serve a readable image.
    """
    logger.info(f"Creating product: {product_data.name}")

    result = await service.create_product(product_data.to_product())
    raise_for_result(result)

    return ProductResponse.model_validate(result.value)


@router.get(
    "/products",
    response_model=list[ProductResponse],
    tags=["Products"],
    summary="List Products",
)
async def list_products(
    service: ProductService = Depends(get_product_service),
) -> Any:
    """Retrieve every product; 404 when there are none."""
    products = await service.get_all_products()
    if not products:
        return empty_list_response()
    return [ProductResponse.model_validate(p) for p in products]


@router.get(
    "/products/{name}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Products"],
)
async def get_product(
    name: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Get a product by its exact name."""
    result = await service.get_product_by_name(name)
    raise_for_result(result)
    return ProductResponse.model_validate(result.value)


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@router.post(
    "/orders",
    response_model=OrderResponse,
    responses={409: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Create Order",
)
async def create_order(
    order_data: OrderCreate,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """
    Create a new order.

    The price and date are computed by the server.
    """
    logger.info(f"Creating order: {order_data.products_ordered}")

    result = await service.create_order(order_data.to_order())
    raise_for_result(result)

    return OrderResponse.from_order(result.value)


@router.get(
    "/orders",
    response_model=list[OrderResponse],
    tags=["Orders"],
    summary="List Orders",
)
async def list_orders(
    service: OrderService = Depends(get_order_service),
) -> Any:
    """Retrieve every order; 404 when there are none."""
    orders = await service.get_all_orders()
    if not orders:
        return empty_list_response()
    return [OrderResponse.from_order(o) for o in orders]


@router.get(
    "/orders-from-last-day",
    response_model=list[OrderResponse],
    tags=["Orders"],
    summary="List Orders From The Last Day",
)
async def list_orders_from_last_day(
    service: OrderService = Depends(get_order_service),
) -> Any:
    """Retrieve orders created in the last 24 hours; 404 when there are none."""
    orders = await service.get_all_orders_from_last_day()
    if not orders:
        return empty_list_response()
    return [OrderResponse.from_order(o) for o in orders]


# =============================================================================
# ERROR HANDLERS
# =============================================================================

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Log rejected request bodies, then answer with FastAPI's 422."""
    logger.error(
        f"{ErrorKind.VALIDATION_FAILURE.value} on {request.method} {request.url.path}: {exc.errors()}"
    )
    return await request_validation_exception_handler(request, exc)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")
    settings: Settings = request.app.state.settings

    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    product_store: Optional[BaseProductStore] = None,
    order_store: Optional[BaseOrderStore] = None,
    image_validator: Optional[ImageValidator] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """
    Composition root.

    Builds the stores for the configured environment (unless given),
    injects them into the services and attaches everything to
    ``app.state``.
    """
    settings = settings or get_settings()

    engine = None
    if product_store is None or order_store is None:
        session_maker = None
        if settings.use_database:
            engine = create_engine(settings.database_url, echo=settings.database_echo)
            session_maker = create_session_maker(engine)
        built_products, built_orders = build_stores(settings, session_maker)
        product_store = product_store or built_products
        order_store = order_store or built_orders

    image_validator = image_validator or ImageValidator(
        timeout=settings.image_fetch_timeout,
        max_bytes=settings.image_max_bytes,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application startup and shutdown events.
        """
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {settings.app_name}")
        logger.info(f"   Version: {settings.app_version}")
        logger.info(f"   Environment: {settings.env_mode.value}")
        logger.info(f"   Stores: {product_store.backend_name}")
        logger.info("=" * 60)

        if engine is not None:
            await init_db(engine)
            logger.info("✅ Database initialized")

        yield  # Application runs

        logger.info("Shutting down...")
        if engine is not None:
            await engine.dispose()
        logger.info("✅ Cleanup complete")

    app = FastAPI(
        title=settings.app_name,
        description="Products and orders for a restaurant menu.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.product_store = product_store
    app.state.order_store = order_store
    app.state.product_service = ProductService(product_store, image_validator)
    app.state.order_service = OrderService(
        order_store,
        product_store,
        minimum_order_amount=settings.minimum_order_amount,
        window=timedelta(hours=settings.recent_orders_window_hours),
        clock=clock,
    )

    app.include_router(router)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


setup_logging()
app = create_app()


def run() -> None:
    """Console entry point: serve ``app`` with uvicorn."""
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.api_host, port=settings.api_port)
