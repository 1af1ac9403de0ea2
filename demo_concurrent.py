import asyncio
from product_sdk.client import ProductAPIError, ProductClient

async def create(client, name):
    try:
        product = await client.create_product_async(name, "9.99", "Demo")
        print(f"✅ {name} created with id {product['id']}")
        return product
    except ProductAPIError as e:
        print(f"❌ {name} failed: {e}")
        return None

async def main():
    c = ProductClient(base_url="http://127.0.0.1:8085")

    print("\n⚡ Creating 10 products concurrently...")
    results = await asyncio.gather(*(create(c, f"Widget {i}") for i in range(10)))

    ids = [p["id"] for p in results if p]
    print(f"\n🔢 ids: {sorted(ids)}")
    print("✔ all distinct" if len(ids) == len(set(ids)) else "✘ duplicate ids!")
    print("\n📦 Final product count:", len(c.list_products()))

if __name__ == "__main__":
    asyncio.run(main())
