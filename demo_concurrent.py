import asyncio
import uuid
from sdk.storefront import StoreClient, StoreAPIError


async def shopper(name, product_id, qty):
    # every shopper gets its own cart session
    client = StoreClient(base_url="http://127.0.0.1:8085", session_id=str(uuid.uuid4()))
    try:
        client.add_to_cart(product_id, qty)
        order = await client.checkout_async(name, f"{name.lower()}@example.com", "0700", "Nairobi")
        print(f"✅ {name} placed order {order['id']} total={order['total_cents']} cents")
    except StoreAPIError as e:
        print(f"❌ {name} order failed: {e.detail}")


async def main():
    c = StoreClient(base_url="http://127.0.0.1:8085", session_id="demo-admin")
    c.reset()
    product = c.register_product("Finger Millet Flour", 650, 10)["product"]
    print(f"\n🌾 Registered product: {product['name']} ({product['id']})")

    print("\n⚡ Simulating concurrent checkouts...")
    await asyncio.gather(
        shopper("Amina", product["id"], 2),
        shopper("Baraka", product["id"], 3),
    )

    print("\n🧾 Amina orders:", c.list_orders("amina@example.com"))
    print("🧾 Baraka orders:", c.list_orders("baraka@example.com"))


if __name__ == "__main__":
    asyncio.run(main())
