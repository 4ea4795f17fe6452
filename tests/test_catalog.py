# tests/test_catalog.py
from fastapi.testclient import TestClient
from farmstore.main import app
from farmstore.core import filter_products, stock_status

client = TestClient(app)


def reset():
    client.post("/reset")


def _category(name):
    return client.post("/seller/categories", json={"name": name, "description": name.lower()}).json()


def _product(name, price_cents=100, stock=10, description="", category_id=None):
    r = client.post("/seller/register", json={
        "name": name, "price_cents": price_cents, "stock_quantity": stock,
        "description": description, "category_id": category_id,
    })
    assert r.status_code == 201
    return r.json()["product"]


def test_categories_and_products_are_ordered_by_name():
    reset()
    _category("Vegetables")
    _category("Fruits")
    _product("Okra")
    _product("Amaranth")
    _product("Mango")
    assert [c["name"] for c in client.get("/categories").json()] == ["Fruits", "Vegetables"]
    assert [p["name"] for p in client.get("/products").json()] == ["Amaranth", "Mango", "Okra"]


def test_filter_by_category_and_search():
    reset()
    greens = _category("Leafy Greens")
    fruit = _category("Fruits")
    _product("Managu", description="African nightshade", category_id=greens["id"])
    _product("Kunde", description="Cowpea leaves", category_id=greens["id"])
    _product("Mango", description="Sweet apple mango", category_id=fruit["id"])

    names = [p["name"] for p in client.get("/products", params={"category_id": greens["id"]}).json()]
    assert names == ["Kunde", "Managu"]

    # search matches description too, case-insensitively
    names = [p["name"] for p in client.get("/products", params={"q": "LEAVES"}).json()]
    assert names == ["Kunde"]

    # category applies before the search term
    names = [p["name"] for p in client.get("/products", params={"category_id": fruit["id"], "q": "man"}).json()]
    assert names == ["Mango"]

    assert client.get("/products", params={"q": "cassava"}).json() == []


def test_available_only_hides_out_of_stock():
    reset()
    _product("Saget", stock=0)
    _product("Terere", stock=3)
    names = [p["name"] for p in client.get("/products", params={"available_only": "true"}).json()]
    assert names == ["Terere"]


def test_product_detail_includes_category_name_and_stock_status():
    reset()
    greens = _category("Leafy Greens")
    p = _product("Kunde", stock=4, category_id=greens["id"])
    r = client.get(f"/products/{p['id']}")
    assert r.status_code == 200
    body = r.json()
    assert body["category_name"] == "Leafy Greens"
    assert body["stock_status"] == "low_stock"


def test_unknown_product_and_category():
    reset()
    assert client.get("/products/nope").status_code == 404
    r = client.post("/seller/register", json={"name": "X", "price_cents": 1, "category_id": "missing"})
    assert r.status_code == 404


def test_register_rejects_negative_price():
    reset()
    r = client.post("/seller/register", json={"name": "X", "price_cents": -1, "stock_quantity": 1})
    assert r.status_code == 422


def test_seed_only_once():
    reset()
    first = client.post("/seed").json()
    assert first["seeded"] is True
    assert first["products"] > 0
    second = client.post("/seed").json()
    assert second["seeded"] is False
    # every seeded product points at a seeded category
    category_ids = {c["id"] for c in client.get("/categories").json()}
    assert all(p["category_id"] in category_ids for p in client.get("/products").json())


def test_stock_status_thresholds():
    assert stock_status(0) == "out_of_stock"
    assert stock_status(1) == "low_stock"
    assert stock_status(5) == "low_stock"
    assert stock_status(6) == "in_stock"


def test_filter_products_with_no_filters_keeps_everything():
    products = [{"name": "A", "description": None, "category_id": "c1"}, {"name": "B", "category_id": None}]
    assert filter_products(products) == products
    assert filter_products(products, category_id="", query="") == products
    assert filter_products(products, query="a") == [products[0]]
