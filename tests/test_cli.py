# tests/test_cli.py
import io
import logging

from rich.console import Console

import cli
from cli import clamp_quantity, money, save_receipt
from sdk.storefront import StoreAPIError

RECEIPT = {
    "order": {
        "id": "abc123",
        "customer_name": "Achieng",
        "customer_email": "achieng@example.com",
        "customer_phone": "0722",
        "delivery_address": "Nakuru",
        "total_cents": 950,
        "status": "pending",
        "created_at": "2026-10-17T09:30:00+00:00",
    },
    "items": [
        {"product_id": "p1", "name": "Managu", "quantity": 2, "price_cents": 300, "line_total_cents": 600},
        {"product_id": "p2", "name": "Okra", "quantity": 1, "price_cents": 350, "line_total_cents": 350},
    ],
    "subtotal_cents": 950,
    "delivery": "Free",
    "total_cents": 950,
}


def test_money_formats_cents():
    assert money(950) == "$9.50"
    assert money(0) == "$0.00"
    assert money(None) == "$0.00"


def test_clamp_quantity_stays_within_stock():
    assert clamp_quantity(0, 5) == 1
    assert clamp_quantity(3, 5) == 3
    assert clamp_quantity(9, 5) == 5


def test_saved_receipt_contains_order_details(tmp_path):
    path = save_receipt(RECEIPT, str(tmp_path / "receipt.txt"))
    text = open(path, encoding="utf-8").read()
    assert "abc123" in text
    assert "Achieng" in text
    assert "Managu" in text
    assert "Total Paid:" in text
    assert "$9.50" in text
    assert "2026-10-17 09:30" in text


def test_try_api_logs_failure_shows_status_and_returns_none(monkeypatch, caplog):
    out = io.StringIO()
    monkeypatch.setattr(cli, "console", Console(file=out, width=100))

    def checkout():
        raise StoreAPIError(422, "Please enter your name")

    with caplog.at_level(logging.ERROR, logger="farmstore.cli"):
        assert cli.try_api(checkout, success_msg="Order placed") is None
    assert "checkout failed: HTTP 422: Please enter your name" in caplog.text
    assert "Error: HTTP 422: Please enter your name" in out.getvalue()
    assert cli.status_message == "Error: HTTP 422: Please enter your name"
