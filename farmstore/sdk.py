import logging
from typing import Optional, Dict, Any, List
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

# Import from other modules
from .core import (
    CategoryIn, ProductIn, AddToCartIn, UpdateCartIn, RemoveFromCartIn,
    ClearCartIn, CheckoutIn, CustomerIn, _make_product_dict, product_view, filter_products
)
from . import database as db
from .database import _acquire_lock, _release_lock, recall_idempotent, remember_idempotent
from .seed_data import DEMO_CATEGORIES, DEMO_PRODUCTS

# This file contains the core logic for all API endpoints.

logger = logging.getLogger("farmstore.store")


def _cart_key(session_id: str) -> str:
    return f"cart:{session_id}"


def _owned_cart_item(session_id: str, cart_item_id: str) -> Dict[str, Any]:
    item = db.select_one("cart_items", id=cart_item_id)
    if not item or item["session_id"] != session_id:
        raise HTTPException(status_code=404, detail="cart item not found")
    return item


# Categories
async def list_categories_logic():
    return db.select("categories", order_by="name")


async def create_category_logic(payload: CategoryIn):
    category = db.insert("categories", {"name": payload.name, "description": payload.description or ""})
    logger.info("category created id=%s name=%s", category["id"], category["name"])
    return category


# Seller endpoints
async def seller_register_logic(payload: ProductIn):
    if payload.category_id and not db.select_one("categories", id=payload.category_id):
        raise HTTPException(status_code=404, detail="category not found")
    product = db.insert("products", _make_product_dict(payload))
    logger.info("product registered id=%s name=%s", product["id"], product["name"])
    return {"product_id": product["id"], "product": product_view(product)}


# Product endpoints
async def list_products_logic(category_id: Optional[str] = None, q: Optional[str] = None,
                              available_only: bool = False):
    products = filter_products(db.select("products", order_by="name"), category_id=category_id, query=q)
    if available_only:
        products = [p for p in products if p["stock_quantity"] > 0]
    return [product_view(p) for p in products]


async def get_product_logic(product_id: str):
    p = db.select_one("products", id=product_id)
    if not p:
        raise HTTPException(status_code=404, detail="product not found")
    category = db.select_one("categories", id=p["category_id"]) if p.get("category_id") else None
    return product_view(p, category or {})


async def seed_logic():
    if db.count("products") > 0:
        return {"seeded": False, "message": "Products already exist"}
    ids: Dict[str, str] = {}
    for c in DEMO_CATEGORIES:
        existing = db.select_one("categories", name=c["name"])
        ids[c["name"]] = existing["id"] if existing else db.insert("categories", c)["id"]
    for p in DEMO_PRODUCTS:
        row = {k: v for k, v in p.items() if k != "category"}
        row["category_id"] = ids.get(p["category"])
        db.insert("products", row)
    logger.info("seeded %d categories and %d products", len(ids), len(DEMO_PRODUCTS))
    return {"seeded": True, "categories": db.count("categories"), "products": db.count("products")}


# Cart endpoints
async def cart_add_logic(payload: AddToCartIn):
    if payload.quantity <= 0:
        raise HTTPException(status_code=400, detail="quantity must be > 0")
    product = db.select_one("products", id=payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="product not found")
    if product["stock_quantity"] <= 0:
        raise HTTPException(status_code=409, detail="out_of_stock")

    key = _cart_key(payload.session_id)
    lock = await _acquire_lock(key)
    try:
        existing = db.select_one("cart_items", session_id=payload.session_id, product_id=payload.product_id)
        if existing:
            line = db.update("cart_items", existing["id"], {"quantity": existing["quantity"] + payload.quantity})
            logger.info("cart %s: product %s quantity -> %d", payload.session_id, payload.product_id, line["quantity"])
        else:
            line = db.insert("cart_items", {
                "session_id": payload.session_id,
                "product_id": payload.product_id,
                "quantity": payload.quantity,
            })
            logger.info("cart %s: added product %s x%d", payload.session_id, payload.product_id, payload.quantity)
        return {"session_id": payload.session_id, "item": line}
    finally:
        _release_lock(key, lock)


def _cart_lines(session_id: str) -> List[Dict[str, Any]]:
    return db.select("cart_items", order_by="created_at", session_id=session_id)


async def view_cart_logic(session_id: str):
    items = []
    total = 0
    total_items = 0
    for line in _cart_lines(session_id):
        prod = db.select_one("products", id=line["product_id"])
        if not prod:
            items.append({
                "id": line["id"],
                "product_id": line["product_id"],
                "available": False,
                "quantity": line["quantity"],
            })
            continue
        line_total = prod["price_cents"] * line["quantity"]
        total += line_total
        total_items += line["quantity"]
        items.append({
            "id": line["id"],
            "product_id": line["product_id"],
            "available": True,
            "quantity": line["quantity"],
            "name": prod["name"],
            "price_cents": prod["price_cents"],
            "image_url": prod["image_url"],
            "line_total_cents": line_total,
        })
    return {"session_id": session_id, "items": items, "total_cents": total, "total_items": total_items}


async def cart_update_logic(payload: UpdateCartIn):
    key = _cart_key(payload.session_id)
    lock = await _acquire_lock(key)
    try:
        item = _owned_cart_item(payload.session_id, payload.cart_item_id)
        if payload.quantity <= 0:
            db.delete("cart_items", id=item["id"])
            logger.info("cart %s: removed line %s (quantity %d)", payload.session_id, item["id"], payload.quantity)
        else:
            db.update("cart_items", item["id"], {"quantity": payload.quantity})
            logger.info("cart %s: line %s quantity -> %d", payload.session_id, item["id"], payload.quantity)
    finally:
        _release_lock(key, lock)
    return await view_cart_logic(payload.session_id)


async def cart_remove_logic(payload: RemoveFromCartIn):
    key = _cart_key(payload.session_id)
    lock = await _acquire_lock(key)
    try:
        item = _owned_cart_item(payload.session_id, payload.cart_item_id)
        db.delete("cart_items", id=item["id"])
        logger.info("cart %s: removed line %s", payload.session_id, item["id"])
    finally:
        _release_lock(key, lock)
    return await view_cart_logic(payload.session_id)


async def cart_clear_logic(payload: ClearCartIn):
    key = _cart_key(payload.session_id)
    lock = await _acquire_lock(key)
    try:
        removed = db.delete("cart_items", session_id=payload.session_id)
    finally:
        _release_lock(key, lock)
    logger.info("cart %s: cleared %d line(s)", payload.session_id, removed)
    return {"session_id": payload.session_id, "removed": removed}


# Checkout
def _validate_customer(raw: Dict[str, Any]) -> CustomerIn:
    # the form is only checked once the cart is known to be non-empty
    try:
        return CustomerIn.model_validate(raw)
    except ValidationError as e:
        raise RequestValidationError([
            dict(err, loc=("body", "customer") + tuple(err["loc"])) for err in e.errors(include_url=False)
        ])


async def checkout_logic(payload: CheckoutIn, idempotency_key: Optional[str] = None):
    if idempotency_key:
        prev = recall_idempotent(payload.session_id, idempotency_key)
        if prev is not None:
            return prev

    key = _cart_key(payload.session_id)
    lock = await _acquire_lock(key)
    try:
        lines = _cart_lines(payload.session_id)
        if not lines:
            raise HTTPException(status_code=400, detail="cart empty")
        customer = _validate_customer(payload.customer)

        total = 0
        priced = []
        for line in lines:
            prod = db.select_one("products", id=line["product_id"])
            if not prod:
                raise HTTPException(status_code=404, detail=f"product_not_found:{line['product_id']}")
            total += prod["price_cents"] * line["quantity"]
            priced.append((line, prod))

        order = db.insert("orders", {
            "customer_name": customer.name,
            "customer_email": customer.email,
            "customer_phone": customer.phone,
            "delivery_address": customer.address,
            "total_cents": total,
            "status": "pending",
        })
        items = db.insert_many("order_items", [
            {
                "order_id": order["id"],
                "product_id": prod["id"],
                "quantity": line["quantity"],
                "price_cents": prod["price_cents"],
            }
            for line, prod in priced
        ])
        db.delete("cart_items", session_id=payload.session_id)
    finally:
        _release_lock(key, lock)

    logger.info("order %s placed: %d item(s), total_cents=%d", order["id"], len(items), total)
    result = dict(order, items=items)
    if idempotency_key:
        remember_idempotent(payload.session_id, idempotency_key, result)
    return result


# Orders
async def list_orders_logic(email: str):
    return db.select("orders", order_by="created_at", descending=True, customer_email=email)


async def get_receipt_logic(order_id: str):
    order = db.select_one("orders", id=order_id)
    if not order:
        raise HTTPException(status_code=404, detail="order not found")
    items = []
    subtotal = 0
    for it in db.select("order_items", order_id=order_id):
        prod = db.select_one("products", id=it["product_id"]) or {}
        line_total = it["price_cents"] * it["quantity"]
        subtotal += line_total
        items.append(dict(
            it,
            name=prod.get("name", ""),
            image_url=prod.get("image_url", ""),
            line_total_cents=line_total,
        ))
    return {
        "order": order,
        "items": items,
        "subtotal_cents": subtotal,
        "delivery": "Free",
        "total_cents": order["total_cents"],
    }


# Utility: reset (for tests/demo)
async def reset_all_logic():
    db.clear_all()
    logger.info("store reset")
    return {"status": "reset"}
