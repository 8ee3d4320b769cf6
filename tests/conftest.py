"""Shared fixtures: in-memory database, recording event producer, callers and seed rows."""

import pytest
from sqlalchemy import insert

from marketplace.db.config import DatabaseConfig
from marketplace.db.connection import Database
from marketplace.db.tables import shops, users, vendors
from marketplace.services.attribute import AttributeService
from marketplace.services.brand import BrandService
from marketplace.services.category import CategoryService
from marketplace.services.coupon import CouponService
from marketplace.services.dashboard import DashboardService
from marketplace.services.product import ProductService
from marketplace.services.review import ReviewService
from marketplace.services.shop import ShopService
from marketplace.services.staff import StaffService
from marketplace.services.tag import TagService
from marketplace.services.user import UserService
from shared.models.common import Caller, Role


class RecordingProducer:
    """Stands in for KafkaProducer; keeps emitted events in memory."""

    def __init__(self):
        self.events = []

    def emit(self, event_type, entity_id, data):
        self.events.append({"event_type": event_type, "entity_id": entity_id, "data": data})

    def flush(self, timeout=10.0):
        return 0

    def types(self):
        return [e["event_type"] for e in self.events]


@pytest.fixture
def database():
    db = Database(DatabaseConfig(url="sqlite://"))
    db.init_tables()
    with db.transaction() as conn:
        conn.execute(insert(users), [
            {"id": "admin-1", "name": "Ada Admin", "email": "admin@example.com", "role": "admin",
             "email_verified": True},
            {"id": "vendor-user-1", "name": "Vera Vendor", "email": "vera@example.com", "role": "vendor",
             "email_verified": True},
            {"id": "vendor-user-2", "name": "Otto Other", "email": "otto@example.com", "role": "vendor",
             "email_verified": True},
            {"id": "customer-1", "name": "Cory Customer", "email": "cory@example.com", "role": "user",
             "email_verified": False},
        ])
        conn.execute(insert(vendors), [
            {"id": "vendor-1", "user_id": "vendor-user-1", "business_name": "Vera Goods", "status": "active"},
            {"id": "vendor-2", "user_id": "vendor-user-2", "business_name": "Otto Supplies",
             "status": "pending_approval"},
        ])
        conn.execute(insert(shops), [
            {"id": "shop-1", "vendor_id": "vendor-1", "name": "Vera Tech", "slug": "vera-tech",
             "status": "active", "monthly_revenue_cents": 150000},
            {"id": "shop-2", "vendor_id": "vendor-2", "name": "Otto Outdoor", "slug": "otto-outdoor",
             "status": "pending_approval", "monthly_revenue_cents": 50000},
        ])
    yield db
    db.dispose()


@pytest.fixture
def kafka():
    return RecordingProducer()


@pytest.fixture
def admin():
    return Caller(user_id="admin-1", role=Role.ADMIN)


@pytest.fixture
def vendor():
    return Caller(user_id="vendor-user-1", role=Role.VENDOR, shop_ids=["shop-1"])


@pytest.fixture
def other_vendor():
    return Caller(user_id="vendor-user-2", role=Role.VENDOR, shop_ids=["shop-2"])


@pytest.fixture
def customer():
    return Caller(user_id="customer-1", role=Role.CUSTOMER)


@pytest.fixture
def categories(database, kafka):
    return CategoryService(database, kafka)


@pytest.fixture
def brands(database, kafka):
    return BrandService(database, kafka)


@pytest.fixture
def tags(database, kafka):
    return TagService(database, kafka)


@pytest.fixture
def attributes(database, kafka):
    return AttributeService(database, kafka)


@pytest.fixture
def products(database, kafka):
    return ProductService(database, kafka)


@pytest.fixture
def coupons(database, kafka):
    return CouponService(database, kafka)


@pytest.fixture
def reviews(database, kafka):
    return ReviewService(database, kafka)


@pytest.fixture
def staff(database, kafka):
    return StaffService(database, kafka)


@pytest.fixture
def user_service(database, kafka):
    return UserService(database, kafka)


@pytest.fixture
def shop_service(database, kafka):
    return ShopService(database, kafka)


@pytest.fixture
def dashboard(database, kafka):
    return DashboardService(database, kafka)
