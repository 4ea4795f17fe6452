# tests/test_checkout.py
from fastapi.testclient import TestClient
from farmstore.main import app
from farmstore import database as db

client = TestClient(app)

CUSTOMER = {"name": "Wanjiru", "email": "wanjiru@example.com", "phone": "+254700000000", "address": "Kiambu Rd 12"}


def reset():
    client.post("/reset")


def _fill_cart(session_id="s1"):
    a = client.post("/seller/register", json={"name": "Managu", "price_cents": 300, "stock_quantity": 20,
                                              "image_url": "http://img/managu.jpg"}).json()["product"]["id"]
    b = client.post("/seller/register", json={"name": "Millet Flour", "price_cents": 650,
                                              "stock_quantity": 5}).json()["product"]["id"]
    client.post("/cart/add", json={"session_id": session_id, "product_id": a, "quantity": 2})
    client.post("/cart/add", json={"session_id": session_id, "product_id": b, "quantity": 1})
    return a, b


def _checkout(session_id="s1", customer=None, key=None):
    headers = {"Idempotency-Key": key} if key else {}
    return client.post("/checkout", json={"session_id": session_id, "customer": customer or CUSTOMER}, headers=headers)


def test_checkout_creates_pending_order_and_clears_cart():
    reset()
    a, b = _fill_cart()
    r = _checkout()
    assert r.status_code == 201
    order = r.json()
    assert order["status"] == "pending"
    assert order["total_cents"] == 2 * 300 + 650
    assert order["customer_name"] == "Wanjiru"
    assert order["delivery_address"] == "Kiambu Rd 12"
    assert sorted((it["product_id"], it["quantity"], it["price_cents"]) for it in order["items"]) == sorted(
        [(a, 2, 300), (b, 1, 650)])
    assert client.get("/cart/s1").json()["items"] == []


def test_checkout_does_not_touch_stock():
    reset()
    a, _ = _fill_cart()
    _checkout()
    assert client.get(f"/products/{a}").json()["stock_quantity"] == 20


def test_checkout_empty_cart():
    reset()
    r = _checkout()
    assert r.status_code == 400
    assert r.json()["detail"] == "cart empty"


def test_checkout_validation_leaves_cart_untouched():
    reset()
    _fill_cart()
    cases = [
        ({**CUSTOMER, "name": "  "}, "Please enter your name"),
        ({**CUSTOMER, "email": "not-an-email"}, "Please enter a valid email address"),
        ({**CUSTOMER, "phone": ""}, "Please enter your phone number"),
        ({**CUSTOMER, "address": " "}, "Please enter your delivery address"),
    ]
    for customer, message in cases:
        r = _checkout(customer=customer)
        assert r.status_code == 422
        assert message in str(r.json()["detail"])
    assert len(client.get("/cart/s1").json()["items"]) == 2


def test_checkout_with_same_idempotency_key_places_one_order():
    reset()
    _fill_cart()
    first = _checkout(key="k1").json()
    _fill_cart()
    second = _checkout(key="k1").json()
    assert first["id"] == second["id"]
    assert len(client.get("/orders", params={"email": CUSTOMER["email"]}).json()) == 1
    # the replay did not consume the refilled cart
    assert len(client.get("/cart/s1").json()["items"]) == 2


def test_receipt_totals_match_order():
    reset()
    _fill_cart()
    order = _checkout().json()
    receipt = client.get(f"/orders/{order['id']}").json()
    assert receipt["subtotal_cents"] == order["total_cents"]
    assert receipt["total_cents"] == order["total_cents"]
    assert receipt["delivery"] == "Free"


def test_receipt_joins_product_names():
    reset()
    _fill_cart()
    order = _checkout().json()
    r = client.get(f"/orders/{order['id']}")
    assert r.status_code == 200
    receipt = r.json()
    assert receipt["order"]["id"] == order["id"]
    by_name = {it["name"]: it for it in receipt["items"]}
    assert by_name["Managu"]["line_total_cents"] == 600
    assert by_name["Managu"]["image_url"] == "http://img/managu.jpg"
    assert by_name["Millet Flour"]["quantity"] == 1


def test_receipt_unknown_order():
    reset()
    assert client.get("/orders/nope").status_code == 404


def test_list_orders_by_email_newest_first():
    reset()
    _fill_cart()
    first = _checkout().json()
    _fill_cart()
    second = _checkout().json()
    _fill_cart("s2")
    _checkout("s2", customer={**CUSTOMER, "email": "other@example.com"})
    orders = client.get("/orders", params={"email": CUSTOMER["email"]}).json()
    assert orders[0]["created_at"] >= orders[1]["created_at"]
    assert {o["id"] for o in orders} == {first["id"], second["id"]}


def test_checkout_with_vanished_product_changes_nothing():
    reset()
    _, flour = _fill_cart()
    db.delete("products", id=flour)
    r = _checkout()
    assert r.status_code == 404
    assert r.json()["detail"] == f"product_not_found:{flour}"
    assert len(client.get("/cart/s1").json()["items"]) == 2
    assert db.count("orders") == 0
    assert db.count("order_items") == 0


def test_idempotency_key_is_scoped_to_the_session():
    reset()
    _fill_cart("s1")
    mine = _checkout("s1", key="shared").json()
    _fill_cart("s2")
    theirs = _checkout("s2", customer={**CUSTOMER, "name": "Kamau", "email": "kamau@example.com"}, key="shared")
    assert theirs.status_code == 201
    assert theirs.json()["id"] != mine["id"]
    assert theirs.json()["customer_name"] == "Kamau"


def test_empty_cart_is_reported_before_form_errors():
    reset()
    r = _checkout(customer={**CUSTOMER, "name": "", "email": "nope"})
    assert r.status_code == 400
    assert r.json()["detail"] == "cart empty"


def test_missing_customer_field_is_a_validation_error():
    reset()
    _fill_cart()
    r = _checkout(customer={"name": "Wanjiru", "email": "w@example.com", "phone": "0700"})
    assert r.status_code == 422
    assert r.json()["detail"][0]["loc"] == ["body", "customer", "address"]
