import pytest
from fastapi.testclient import TestClient

from marketplace.api.app import create_app

ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}
VENDOR = {"X-User-Id": "vendor-user-1", "X-User-Role": "vendor", "X-Shop-Ids": "shop-1"}
CUSTOMER = {"X-User-Id": "customer-1", "X-User-Role": "customer"}


@pytest.fixture
def client(database, kafka):
    with TestClient(create_app(database, kafka)) as test_client:
        yield test_client


@pytest.fixture
def category(client):
    response = client.post("/api/admin/categories", json={"name": "Electronics", "featured": True}, headers=ADMIN)
    assert response.status_code == 201
    return response.json()["category"]


def _create_product(client, name, category_id, **fields):
    body = {"shop_id": "shop-1", "name": name, "selling_price_cents": 1000, "status": "active",
            "category_id": category_id, "cost_price_cents": 400, **fields}
    response = client.post("/api/vendor/products", json=body, headers=VENDOR)
    assert response.status_code == 201, response.text
    return response.json()["product"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_missing_identity_is_401(client):
    response = client.get("/api/vendor/brands")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Not authenticated."}

    unknown = client.get("/api/vendor/brands", headers={"X-User-Id": "u", "X-User-Role": "wizard"})
    assert unknown.status_code == 401
    assert unknown.json() == {"success": False, "error": "Unknown role."}


def test_vendor_cannot_use_admin_routes(client):
    response = client.get("/api/admin/users", headers=VENDOR)
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Admin access required."}

    assert client.get("/api/vendor/brands", headers=ADMIN).status_code == 403


def test_create_and_list_brand(client, kafka):
    response = client.post("/api/vendor/brands", json={"shop_id": "shop-1", "name": "TechPro"}, headers=VENDOR)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Brand created successfully"
    assert body["brand"]["slug"] == "techpro"
    assert kafka.types() == ["brand.created"]

    listed = client.get("/api/vendor/brands", params={"limit": 10, "search": "tech"}, headers=VENDOR).json()
    assert listed["success"] is True
    assert listed["total"] == 1
    assert listed["limit"] == 10
    assert listed["offset"] == 0
    assert listed["data"][0]["name"] == "TechPro"


def test_duplicate_is_409(client):
    client.post("/api/vendor/tags", json={"shop_id": "shop-1", "name": "Sale"}, headers=VENDOR)
    response = client.post("/api/vendor/tags", json={"shop_id": "shop-1", "name": "Sale"}, headers=VENDOR)
    assert response.status_code == 409
    assert response.json()["success"] is False
    assert "already exists" in response.json()["error"]


def test_invalid_body_is_400(client):
    response = client.post("/api/vendor/brands", json={"shop_id": "shop-1"}, headers=VENDOR)
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request.")
    assert "name" in response.json()["error"]

    assert client.get("/api/vendor/products", params={"limit": 0}, headers=VENDOR).status_code == 400


def test_unknown_entity_is_404(client):
    response = client.get("/api/vendor/products/missing", headers=VENDOR)
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Product not found."}


def test_update_and_delete_flow(client, category):
    product = _create_product(client, "Speaker", category["id"])

    updated = client.post("/api/vendor/products/update", json={"id": product["id"], "stock": 12}, headers=VENDOR)
    assert updated.status_code == 200
    assert updated.json()["product"]["stock"] == 12
    assert updated.json()["product"]["name"] == "Speaker"

    toggled = client.post("/api/vendor/products/toggle-featured", json={"id": product["id"]}, headers=VENDOR)
    assert toggled.json()["product"]["is_featured"] is True

    deleted = client.post("/api/vendor/products/delete", json={"id": product["id"]}, headers=VENDOR)
    assert deleted.json() == {"success": True, "message": "Product deleted successfully"}


def test_storefront_products(client, category):
    for name in ("Alpha", "Bravo", "Charlie"):
        _create_product(client, name, category["id"], images=[{"url": f"https://img.test/{name}.png"}])

    response = client.get("/api/products", params={"limit": 2, "sortBy": "name", "sortDirection": "asc"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert [p["name"] for p in data["products"]] == ["Alpha", "Bravo"]
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}
    assert "cost_price_cents" not in data["products"][0]
    assert data["products"][0]["images"][0]["is_primary"] is True
    assert data["products"][0]["category"]["slug"] == "electronics"

    second = client.get("/api/products", params={"limit": 2, "page": 2, "sortBy": "name", "sortDirection": "asc"})
    assert [p["name"] for p in second.json()["data"]["products"]] == ["Charlie"]

    by_category = client.get("/api/products", params={"category": "missing-slug"}).json()["data"]
    assert by_category["products"] == []
    assert by_category["pagination"]["totalPages"] == 0


def test_storefront_products_failure(client):
    response = client.get("/api/products", params={"sortBy": "bogus"})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to fetch products"}


def test_storefront_categories(client, category):
    client.post("/api/admin/categories", json={"name": "Phones", "parent_id": category["id"]}, headers=ADMIN)

    top = client.get("/api/categories", params={"level": 0}).json()
    assert top["success"] is True
    assert [c["name"] for c in top["data"]] == ["Electronics"]
    assert "shop" not in top["data"][0]

    children = client.get("/api/categories", params={"parentId": category["id"]}).json()["data"]
    assert [c["name"] for c in children] == ["Phones"]
    assert children[0]["level"] == 1

    featured = client.get("/api/categories", params={"featured": "true"}).json()["data"]
    assert [c["name"] for c in featured] == ["Electronics"]


def test_review_submission_and_moderation(client, category):
    product = _create_product(client, "Camera", category["id"])

    assert client.post("/api/reviews", json={"product_id": product["id"], "rating": 5}).status_code == 401
    submitted = client.post("/api/reviews", json={"product_id": product["id"], "rating": 5, "title": "Sharp"},
                            headers=CUSTOMER)
    assert submitted.status_code == 201
    review = submitted.json()["review"]
    assert review["status"] == "pending"

    moderated = client.post("/api/admin/reviews/moderate", json={"id": review["id"], "status": "published"},
                            headers=ADMIN)
    assert moderated.json()["message"] == "Review published"

    stored = client.get(f"/api/vendor/products/{product['id']}", headers=VENDOR).json()["product"]
    assert stored["review_count"] == 1
    assert stored["average_rating"] == 5.0


def test_admin_users_and_dashboard(client):
    stats = client.get("/api/admin/users/stats", headers=ADMIN).json()
    assert stats["success"] is True
    assert stats["stats"]["total_users"] == 4

    dashboard = client.get("/api/admin/dashboard", headers=ADMIN).json()
    assert dashboard["stats"]["total_shops"] == 2

    vendor_dashboard = client.get("/api/vendor/dashboard", headers=VENDOR).json()
    assert vendor_dashboard["stats"]["total_revenue_cents"] == 150000


def test_coupon_analytics_route(client):
    client.post("/api/vendor/coupons", json={"shop_id": "shop-1", "code": "save5", "discount_amount": 5},
                headers=VENDOR)
    response = client.get("/api/admin/coupons/analytics", headers=ADMIN)
    assert response.status_code == 200
    assert response.json()["analytics"]["coupon_count"] == 1
