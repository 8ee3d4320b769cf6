"""Seed a catalog (global categories, per-shop brands, tags, attributes, products, coupons) via the API."""

import random
import sys

import requests

random.seed(42)

BASE_URL = "http://localhost:8000"
ADMIN_HEADERS = {"X-User-Id": "seed-admin", "X-User-Role": "admin"}

# ----------------------------------------------------------------
# Catalog Configuration
# ----------------------------------------------------------------

CATEGORY_TREE = {
    "Electronics": ["Smartphones", "Audio", "Computer Accessories"],
    "Fashion": ["Shoes", "Outerwear", "Bags"],
    "Beauty": ["Skincare", "Haircare"],
}

PRODUCT_CFG = {
    "Smartphones": (["Phone X Lite", "Phone X Pro", "Rugged Phone 5G"], (19900, 129900)),
    "Audio": (["Wireless Earbuds Pro", "Compact Bluetooth Speaker", "Noise Cancelling Headphones"], (2900, 39900)),
    "Computer Accessories": (["USB-C Hub Adapter", "Mechanical Keyboard", "4K Webcam"], (1900, 19900)),
    "Shoes": (["Lightweight Running Shoes", "Ankle Boots"], (4900, 18900)),
    "Outerwear": (["Classic Denim Jacket", "Fleece Zip Hoodie"], (3900, 14900)),
    "Bags": (["Leather Crossbody Bag", "Canvas Tote"], (2900, 24900)),
    "Skincare": (["Hydrating Face Serum", "Vitamin C Moisturizer"], (900, 6900)),
    "Haircare": (["Argan Oil Hair Treatment"], (900, 4900)),
}

BRANDS = ["TechPro", "Northwind", "Lumen", "Aurora"]
TAGS = ["New Arrival", "Best Seller", "Eco Friendly", "Limited Edition"]
COLORS = [("Black", "#000000"), ("White", "#FFFFFF"), ("Navy", "#1F2A44"), ("Red", "#C0392B")]
STATUS_POOL = ["active"] * 6 + ["draft"] * 2 + ["archived"]


def post(path, body, headers):
    resp = requests.post(f"{BASE_URL}{path}", headers=headers, json=body)
    resp.raise_for_status()
    return resp.json()


def vendor_headers(shop):
    return {"X-User-Id": shop["vendor_id"], "X-User-Role": "vendor", "X-Shop-Ids": shop["id"]}


def get_shops():
    resp = requests.get(f"{BASE_URL}/api/admin/shops", headers=ADMIN_HEADERS, params={"limit": 100})
    resp.raise_for_status()
    return resp.json()["data"]


def create_global_categories():
    """Create the category tree once, as global categories. Returns {name: id} for leaves."""
    leaves = {}
    for order, (root, children) in enumerate(CATEGORY_TREE.items()):
        parent = post("/api/admin/categories", {"name": root, "sort_order": order, "featured": True}, ADMIN_HEADERS)
        parent_id = parent["category"]["id"]
        for child_order, child in enumerate(children):
            data = post(
                "/api/admin/categories",
                {"name": child, "parent_id": parent_id, "sort_order": child_order},
                ADMIN_HEADERS,
            )
            leaves[child] = data["category"]["id"]
        print(f"Category created: {root} (+{len(children)} subcategories)")
    return leaves


def seed_shop(shop, categories):
    headers = vendor_headers(shop)
    shop_id = shop["id"]

    brand_ids = [
        post("/api/vendor/brands", {"shop_id": shop_id, "name": name, "sort_order": i}, headers)["brand"]["id"]
        for i, name in enumerate(BRANDS)
    ]
    tag_ids = [
        post("/api/vendor/tags", {"shop_id": shop_id, "name": name, "sort_order": i}, headers)["tag"]["id"]
        for i, name in enumerate(TAGS)
    ]
    color = post("/api/vendor/attributes", {
        "shop_id": shop_id,
        "name": "Color",
        "type": "color",
        "values": [{"name": name, "value": hex_value} for name, hex_value in COLORS],
    }, headers)["attribute"]

    count = 0
    for category, (names, price_range) in PRODUCT_CFG.items():
        for name in names:
            selling = random.randint(*price_range)
            body = {
                "shop_id": shop_id,
                "name": name,
                "sku": f"SKU-{shop['slug'][:4].upper()}-{count + 1:04d}",
                "selling_price_cents": selling,
                "regular_price_cents": selling + random.choice([0, 0, 500, 1500]),
                "cost_price_cents": int(selling * random.uniform(0.4, 0.7)),
                "stock": random.choice([0, 3, 25, 120]),
                "status": random.choice(STATUS_POOL),
                "is_featured": random.random() < 0.2,
                "category_id": categories[category],
                "brand_id": random.choice(brand_ids),
                "tag_ids": random.sample(tag_ids, random.randint(0, 2)),
                "attributes": [{"attribute_id": color["id"], "value": random.choice(COLORS)[0]}],
                "images": [
                    {"url": f"https://placehold.co/600x600?text={name.replace(' ', '+')}", "is_primary": True},
                    {"url": "https://placehold.co/600x600?text=Detail"},
                ],
            }
            post("/api/vendor/products", body, headers)
            count += 1

    post("/api/vendor/coupons", {
        "shop_id": shop_id,
        "code": f"WELCOME{random.randint(5, 20)}",
        "type": "percentage",
        "discount_amount": 10,
    }, headers)

    print(f"Shop {shop['name']}: {count} products, {len(BRANDS)} brands, {len(TAGS)} tags")
    return count


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed the catalog via the API.")
    parser.add_argument("--base-url", default=BASE_URL, help="API base url")
    args = parser.parse_args()
    BASE_URL = args.base_url

    shops = get_shops()
    if not shops:
        print("No shops found. Create vendors and shops first.")
        sys.exit(1)

    leaf_categories = create_global_categories()
    total = sum(seed_shop(shop, leaf_categories) for shop in shops)

    print(f"\nDone. {total} products created across {len(shops)} shops.")
