#!/usr/bin/env python
from product_sdk.client import ProductAPIError, ProductClient

def main():
    c = ProductClient(base_url="http://127.0.0.1:8085")

    # -----------------------------
    # Clear out existing products
    # -----------------------------
    print("Deleting existing products...")
    for p in c.list_products():
        c.delete_product(p["id"])

    # -----------------------------
    # Create products
    # -----------------------------
    print("\nCreating products...")
    pen = c.create_product("Pen", "1.50", "Office")
    mug = c.create_product("Mug", "5.00", "Office")
    print(pen)
    print(mug)

    print("\nListing products...")
    print(c.list_products())

    # -----------------------------
    # Update and fetch
    # -----------------------------
    print(f"\nRepricing product {mug['id']}...")
    print(c.update_product(mug["id"], price="4.25"))
    print(c.get_product(mug["id"]))

    # -----------------------------
    # Invalid input is reported field by field
    # -----------------------------
    print("\nCreating an invalid product...")
    try:
        c.create_product("", "-1", "Office")
    except ProductAPIError as e:
        print(e.status_code, e.fields)

    # -----------------------------
    # Delete twice
    # -----------------------------
    print(f"\nDeleting product {pen['id']}...")
    c.delete_product(pen["id"])
    try:
        c.delete_product(pen["id"])
    except ProductAPIError as e:
        print(e.status_code, e.problem["detail"])

    print("\nRemaining products...")
    print(c.list_products())

if __name__ == "__main__":
    main()
