# tests/test_storefront_client.py
import pytest
from fastapi.testclient import TestClient
from farmstore.main import app
from sdk.storefront import StoreClient, StoreAPIError, get_session_id


@pytest.fixture
def store(tmp_path):
    c = StoreClient(base_url="http://testserver", session_file=str(tmp_path / "sid"), http=TestClient(app))
    c.reset()
    return c


def test_session_id_is_created_once_and_reused(tmp_path):
    path = tmp_path / "nested" / "cart_session_id"
    sid = get_session_id(str(path))
    assert path.read_text() == sid
    assert get_session_id(str(path)) == sid


def test_empty_session_file_gets_fresh_id(tmp_path):
    path = tmp_path / "sid"
    path.write_text("  \n")
    sid = get_session_id(str(path))
    assert sid.strip()
    assert path.read_text() == sid


def test_clients_sharing_a_session_file_share_the_cart(store, tmp_path):
    pid = store.register_product("Terere", 250, 10)["product_id"]
    store.add_to_cart(pid)
    other = StoreClient(base_url="http://testserver", session_file=str(tmp_path / "sid"), http=TestClient(app))
    assert other.session_id == store.session_id
    other.add_to_cart(pid, 2)
    assert store.view_cart()["items"][0]["quantity"] == 3


def test_full_shopping_flow(store):
    cat = store.create_category("Leafy Greens")
    pid = store.register_product("Kunde", 200, 8, description="Cowpea leaves", category_id=cat["id"])["product_id"]
    assert [p["id"] for p in store.search_products("cowpea")] == [pid]
    assert store.list_products(category_id=cat["id"], available_only=True)[0]["name"] == "Kunde"

    item = store.add_to_cart(pid, 2)["item"]
    cart = store.update_quantity(item["id"], 3)
    assert cart["total_cents"] == 600

    order = store.checkout("Otieno", "otieno@example.com", "0711", "Kisumu")
    assert order["total_cents"] == 600
    assert store.view_cart()["items"] == []

    receipt = store.get_receipt(order["id"])
    assert receipt["items"][0]["name"] == "Kunde"
    assert [o["id"] for o in store.list_orders("otieno@example.com")] == [order["id"]]


def test_errors_surface_as_store_api_error(store):
    with pytest.raises(StoreAPIError) as exc:
        store.get_product("missing")
    assert exc.value.status_code == 404
    assert exc.value.detail == "product not found"

    with pytest.raises(StoreAPIError) as exc:
        store.checkout("A", "a@example.com", "1", "x")
    assert exc.value.status_code == 400


def test_remove_and_clear(store):
    pid = store.register_product("Okra", 320, 5)["product_id"]
    line = store.add_to_cart(pid)["item"]
    assert store.remove_from_cart(line["id"])["items"] == []
    store.add_to_cart(pid)
    assert store.clear_cart()["removed"] == 1


def test_validation_error_reads_as_plain_message(store):
    pid = store.register_product("Terere", 250, 10)["product_id"]
    store.add_to_cart(pid)
    with pytest.raises(StoreAPIError) as exc:
        store.checkout("  ", "a@example.com", "1", "x")
    assert exc.value.status_code == 422
    assert str(exc.value) == "HTTP 422: Please enter your name"
    assert store.view_cart()["total_items"] == 1
