from datetime import datetime

import pytest

from marketplace.utils.datetime_utils import month_start
from shared.errors import ForbiddenError, NotFoundError
from shared.models.common import Caller, Role
from shared.models.product import CreateProductRequest, ProductStatus
from shared.models.shop import (
    ShopListQuery,
    ShopStatus,
    UpdateShopStatusRequest,
    UpdateVendorStatusRequest,
    VendorStatus,
)


def test_month_start():
    assert month_start(datetime(2024, 3, 17, 15, 42, 9, 1234)) == datetime(2024, 3, 1)


def test_list_and_get_shops(shop_service, products, admin, vendor):
    products.create(vendor, CreateProductRequest(shop_id="shop-1", name="Item", selling_price_cents=100))

    page = shop_service.get_page(admin, ShopListQuery())
    assert [s.name for s in page.data] == ["Otto Outdoor", "Vera Tech"]
    assert page.total == 2

    shop = shop_service.get(admin, "shop-1")
    assert shop.vendor_name == "Vera Goods"
    assert shop.product_count == 1

    pending = shop_service.get_page(admin, ShopListQuery(status=ShopStatus.PENDING_APPROVAL))
    assert [s.id for s in pending.data] == ["shop-2"]

    with pytest.raises(NotFoundError, match="Shop not found."):
        shop_service.get(admin, "missing")
    with pytest.raises(ForbiddenError):
        shop_service.get_page(vendor, ShopListQuery())


def test_shop_and_vendor_approval(shop_service, admin, kafka):
    shop = shop_service.update_status(admin, UpdateShopStatusRequest(id="shop-2", status=ShopStatus.ACTIVE))
    assert shop.status == ShopStatus.ACTIVE

    vendor = shop_service.update_vendor_status(
        admin, UpdateVendorStatusRequest(vendor_id="vendor-2", status=VendorStatus.ACTIVE),
    )
    assert vendor.status == VendorStatus.ACTIVE
    assert vendor.approved_at is not None

    suspended = shop_service.update_vendor_status(
        admin, UpdateVendorStatusRequest(vendor_id="vendor-1", status=VendorStatus.SUSPENDED),
    )
    assert suspended.approved_at is None
    assert kafka.types() == ["shop.status_changed", "shop.vendor_status_changed", "shop.vendor_status_changed"]

    with pytest.raises(NotFoundError, match="Vendor not found."):
        shop_service.update_vendor_status(
            admin, UpdateVendorStatusRequest(vendor_id="nobody", status=VendorStatus.ACTIVE),
        )


def test_platform_stats(dashboard, products, vendor, admin):
    products.create(vendor, CreateProductRequest(shop_id="shop-1", name="Item", selling_price_cents=100))

    stats = dashboard.platform_stats(admin)
    assert stats.total_tenants == 2
    assert stats.total_users == 4
    assert stats.total_products == 1
    assert stats.total_shops == 2
    assert stats.active_shops == 1
    assert stats.new_users_this_month == 4
    assert stats.new_products_this_month == 1
    # only active shops count toward platform revenue
    assert stats.platform_revenue_cents == 150000

    with pytest.raises(ForbiddenError):
        dashboard.platform_stats(vendor)


def test_vendor_stats(dashboard, products, vendor, other_vendor, customer):
    def create(name, caller=vendor, shop_id="shop-1", **fields):
        products.create(caller, CreateProductRequest(shop_id=shop_id, name=name, selling_price_cents=100, **fields))

    create("Plenty", stock=40, status=ProductStatus.ACTIVE)
    create("Few", stock=2)
    create("None", stock=0, status=ProductStatus.ACTIVE)
    create("Elsewhere", caller=other_vendor, shop_id="shop-2", stock=1)

    stats = dashboard.vendor_stats(vendor)
    assert stats.total_shops == 1
    assert stats.total_products == 3
    assert stats.active_products == 2
    assert stats.low_stock_products == 1
    assert stats.out_of_stock_products == 1
    assert stats.total_revenue_cents == 150000

    staff_caller = Caller(user_id="vendor-user-2", role=Role.STAFF, shop_ids=["shop-1", "shop-2"])
    assert dashboard.vendor_stats(staff_caller).total_products == 4

    with pytest.raises(ForbiddenError):
        dashboard.vendor_stats(customer)
