# sdk/storefront.py
import os
import uuid
import logging
from pathlib import Path
from typing import Optional, Dict, Any

import httpx
import requests
from rich import print

logger = logging.getLogger("farmstore.client")

DEFAULT_BASE_URL = os.getenv("FARMSTORE_API_URL", "http://127.0.0.1:8085")
DEFAULT_SESSION_FILE = os.getenv("FARMSTORE_SESSION_FILE", str(Path.home() / ".farmstore" / "cart_session_id"))


class StoreAPIError(Exception):
    """A non-2xx answer from the store API."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


def get_session_id(session_file: Optional[str] = None) -> str:
    """
    Return the cart session id stored in session_file, creating and
    persisting a fresh one when the file is missing or empty.
    """
    path = Path(session_file or DEFAULT_SESSION_FILE).expanduser()
    if path.exists():
        sid = path.read_text(encoding="utf-8").strip()
        if sid:
            return sid
    sid = str(uuid.uuid4())
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(sid, encoding="utf-8")
    logger.info("new cart session %s stored in %s", sid, path)
    return sid


def _plain_msg(msg: str) -> str:
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg


def _detail(r) -> Any:
    try:
        body = r.json()
    except ValueError:
        return r.text
    if isinstance(body, dict) and "detail" in body:
        detail = body["detail"]
        if isinstance(detail, list) and detail and all(isinstance(e, dict) and "msg" in e for e in detail):
            # request validation errors: keep the human-readable messages only
            return "; ".join(_plain_msg(e["msg"]) for e in detail)
        return detail
    return body


def _check(r) -> Any:
    # works for both requests and httpx responses
    if r.status_code >= 400:
        raise StoreAPIError(r.status_code, _detail(r))
    return r.json()


class StoreClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, session_id: Optional[str] = None,
                 session_file: Optional[str] = None, timeout: int = 10, http=None):
        self.base_url = base_url.rstrip("/")
        self.session = http if http is not None else requests.Session()
        self.timeout = timeout
        self.session_id = session_id or get_session_id(session_file)

    def _make_idempotency_key(self, provided: Optional[str]) -> str:
        return provided if provided else uuid.uuid4().hex

    def _get(self, path: str, **params):
        r = self.session.get(f"{self.base_url}{path}", params=params or None, timeout=self.timeout)
        return _check(r)

    def _post(self, path: str, payload: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None):
        r = self.session.post(f"{self.base_url}{path}", json=payload, headers=headers, timeout=self.timeout)
        return _check(r)

    # Maintenance
    def reset(self):
        return self._post("/reset")

    def seed(self):
        return self._post("/seed")

    # Catalog
    def list_categories(self):
        return self._get("/categories")

    def create_category(self, name: str, description: str = ""):
        return self._post("/seller/categories", {"name": name, "description": description})

    def register_product(self, name: str, price_cents: int, stock_quantity: int, description: str = "",
                         image_url: str = "", category_id: Optional[str] = None):
        return self._post("/seller/register", {
            "name": name, "price_cents": price_cents, "stock_quantity": stock_quantity,
            "description": description, "image_url": image_url, "category_id": category_id,
        })

    def list_products(self, category_id: Optional[str] = None, q: Optional[str] = None, available_only: bool = False):
        params = {}
        if category_id:
            params["category_id"] = category_id
        if q:
            params["q"] = q
        if available_only:
            params["available_only"] = "true"
        return self._get("/products", **params)

    def search_products(self, term: str, category_id: Optional[str] = None):
        return self.list_products(category_id=category_id, q=term)

    def get_product(self, product_id: str):
        return self._get(f"/products/{product_id}")

    # Cart
    def add_to_cart(self, product_id: str, quantity: int = 1):
        return self._post("/cart/add", {"session_id": self.session_id, "product_id": product_id, "quantity": quantity})

    def view_cart(self):
        return self._get(f"/cart/{self.session_id}")

    def update_quantity(self, cart_item_id: str, quantity: int):
        return self._post("/cart/update", {
            "session_id": self.session_id, "cart_item_id": cart_item_id, "quantity": int(quantity)
        })

    def remove_from_cart(self, cart_item_id: str):
        return self._post("/cart/remove", {"session_id": self.session_id, "cart_item_id": cart_item_id})

    def clear_cart(self):
        return self._post("/cart/clear", {"session_id": self.session_id})

    # Checkout / orders
    def _checkout_payload(self, name: str, email: str, phone: str, address: str) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "customer": {"name": name, "email": email, "phone": phone, "address": address},
        }

    def checkout(self, name: str, email: str, phone: str, address: str, idempotency_key: Optional[str] = None):
        headers = {"Idempotency-Key": self._make_idempotency_key(idempotency_key)}
        return self._post("/checkout", self._checkout_payload(name, email, phone, address), headers=headers)

    async def checkout_async(self, name: str, email: str, phone: str, address: str,
                             idempotency_key: Optional[str] = None):
        headers = {"Idempotency-Key": self._make_idempotency_key(idempotency_key)}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(f"{self.base_url}/checkout",
                                  json=self._checkout_payload(name, email, phone, address), headers=headers)
            return _check(r)

    def get_receipt(self, order_id: str):
        return self._get(f"/orders/{order_id}")

    def list_orders(self, email: str):
        return self._get("/orders", email=email)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="farmstore client")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="API base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Catalog commands
    # ---------------------------
    subparsers.add_parser("list-categories", help="List categories")

    lp = subparsers.add_parser("list-products", help="List products")
    lp.add_argument("--category-id", help="Filter products by category id")
    lp.add_argument("--q", help="Search name and description")
    lp.add_argument("--available-only", action="store_true", help="Show only products in stock")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True, help="ID of the product")

    # ---------------------------
    # Cart commands
    # ---------------------------
    add = subparsers.add_parser("add-to-cart", help="Add product to cart")
    add.add_argument("--product-id", required=True, help="Product ID")
    add.add_argument("--qty", type=int, default=1, help="Quantity to add")

    up = subparsers.add_parser("update-quantity", help="Set a cart line quantity (<= 0 removes it)")
    up.add_argument("--item-id", required=True, help="Cart item ID")
    up.add_argument("--qty", type=int, required=True, help="New quantity")

    rm = subparsers.add_parser("remove-from-cart", help="Remove a cart line")
    rm.add_argument("--item-id", required=True, help="Cart item ID")

    subparsers.add_parser("view-cart", help="View cart contents")
    subparsers.add_parser("clear-cart", help="Empty the cart")

    # ---------------------------
    # Order commands
    # ---------------------------
    co = subparsers.add_parser("checkout", help="Place an order for the cart")
    co.add_argument("--name", required=True)
    co.add_argument("--email", required=True)
    co.add_argument("--phone", required=True)
    co.add_argument("--address", required=True)

    rc = subparsers.add_parser("receipt", help="Show an order receipt")
    rc.add_argument("--order-id", required=True)

    lo = subparsers.add_parser("list-orders")
    lo.add_argument("--email", required=True)

    args = parser.parse_args()
    c = StoreClient(base_url=args.base_url)

    try:
        if args.command == "list-categories":
            print(c.list_categories())
        elif args.command == "list-products":
            print(c.list_products(args.category_id, args.q, args.available_only))
        elif args.command == "get-product":
            print(c.get_product(args.product_id))
        elif args.command == "add-to-cart":
            print(c.add_to_cart(args.product_id, args.qty))
        elif args.command == "update-quantity":
            print(c.update_quantity(args.item_id, args.qty))
        elif args.command == "remove-from-cart":
            print(c.remove_from_cart(args.item_id))
        elif args.command == "view-cart":
            print(c.view_cart())
        elif args.command == "clear-cart":
            print(c.clear_cart())
        elif args.command == "checkout":
            print(c.checkout(args.name, args.email, args.phone, args.address))
        elif args.command == "receipt":
            print(c.get_receipt(args.order_id))
        elif args.command == "list-orders":
            print(c.list_orders(args.email))
    except StoreAPIError as e:
        print(f"[red]{e}[/red]")
        raise SystemExit(1)
