# farmstore/main.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Header, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core import (
    CategoryIn, ProductIn, AddToCartIn, UpdateCartIn, RemoveFromCartIn,
    ClearCartIn, CheckoutIn
)
from .database import TableError
from .logger import setup_logger
from . import sdk

logger = setup_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_on_startup:
        await sdk.seed_logic()
    yield


app = FastAPI(title="farmstore", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TableError)
async def table_error_handler(request: Request, exc: TableError):
    logger.error("data service error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/")
async def root():
    return {"message": "farmstore API running"}


# ---------------------------
# Catalog
# ---------------------------
@app.get("/categories")
async def list_categories():
    return await sdk.list_categories_logic()


@app.post("/seller/categories", status_code=201)
async def create_category(payload: CategoryIn):
    return await sdk.create_category_logic(payload)


@app.post("/seller/register", status_code=201)
async def seller_register(payload: ProductIn):
    return await sdk.seller_register_logic(payload)


@app.get("/products")
async def list_products(category_id: Optional[str] = None,
                        q: Optional[str] = Query(None, description="search name and description"),
                        available_only: bool = False):
    return await sdk.list_products_logic(category_id=category_id, q=q, available_only=available_only)


@app.get("/products/{product_id}")
async def get_product(product_id: str):
    return await sdk.get_product_logic(product_id)


# ---------------------------
# Cart
# ---------------------------
@app.post("/cart/add")
async def cart_add(payload: AddToCartIn):
    return await sdk.cart_add_logic(payload)


@app.get("/cart/{session_id}")
async def view_cart(session_id: str):
    return await sdk.view_cart_logic(session_id)


@app.post("/cart/update")
async def cart_update(payload: UpdateCartIn):
    return await sdk.cart_update_logic(payload)


@app.post("/cart/remove")
async def cart_remove(payload: RemoveFromCartIn):
    return await sdk.cart_remove_logic(payload)


@app.post("/cart/clear")
async def cart_clear(payload: ClearCartIn):
    return await sdk.cart_clear_logic(payload)


# ---------------------------
# Checkout & orders
# ---------------------------
@app.post("/checkout", status_code=201)
async def checkout(payload: CheckoutIn, idempotency_key: Optional[str] = Header(None)):
    return await sdk.checkout_logic(payload, idempotency_key)


@app.get("/orders")
async def list_orders(email: str = Query(..., min_length=1)):
    return await sdk.list_orders_logic(email)


@app.get("/orders/{order_id}")
async def get_receipt(order_id: str):
    return await sdk.get_receipt_logic(order_id)


# ---------------------------
# Utility: seed / reset (for tests/demo)
# ---------------------------
@app.post("/seed")
async def seed():
    return await sdk.seed_logic()


@app.post("/reset")
async def reset_all():
    return await sdk.reset_all_logic()


def run():
    """Serve the API with uvicorn (`farmstore-server`, or `python -m farmstore.main`)."""
    import uvicorn
    uvicorn.run("farmstore.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
