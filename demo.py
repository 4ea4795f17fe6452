#!/usr/bin/env python
from sdk.storefront import StoreClient


def main():
    c = StoreClient(base_url="http://127.0.0.1:8085")

    # -----------------------------
    # Reset and seed for demo
    # -----------------------------
    print("Resetting store...")
    c.reset()
    print(c.seed())

    # -----------------------------
    # Browse
    # -----------------------------
    print("\nCategories...")
    categories = c.list_categories()
    for cat in categories:
        print(f"  {cat['name']}")

    greens = next(cat for cat in categories if cat["name"] == "Leafy Greens")
    print("\nLeafy greens in stock...")
    in_stock = c.list_products(category_id=greens["id"], available_only=True)
    for p in in_stock:
        print(f"  {p['name']:<32} {p['price_cents'] / 100:>6.2f}  {p['stock_status']}")

    print("\nSearching for 'flour'...")
    flour = c.search_products("flour")
    print([p["name"] for p in flour])

    # -----------------------------
    # Cart
    # -----------------------------
    print(f"\nCart session: {c.session_id}")
    c.add_to_cart(in_stock[0]["id"])
    c.add_to_cart(in_stock[0]["id"], 2)   # merges into the same line
    c.add_to_cart(flour[0]["id"])
    cart = c.view_cart()
    for it in cart["items"]:
        print(f"  {it['name']} x{it['quantity']} = {it['line_total_cents'] / 100:.2f}")
    print(f"  total: {cart['total_cents'] / 100:.2f} ({cart['total_items']} items)")

    # -----------------------------
    # Checkout and receipt
    # -----------------------------
    print("\nPlacing order...")
    order = c.checkout("Demo Shopper", "demo@example.com", "+254700000000", "Ngong Road, Nairobi")
    print(f"  order {order['id']} status={order['status']}")

    print("\nReceipt...")
    print(c.get_receipt(order["id"]))

    print("\nOrders for demo@example.com...")
    print(c.list_orders("demo@example.com"))


if __name__ == "__main__":
    main()
