"""
Shop & Vendor Models

A vendor is the business behind one or more shops. Shops are the namespace
that scopes products, categories, brands, tags, attributes and coupons;
deleting a shop cascades to all of them.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from shared.models.common import ListQuery, Timestamped


class ShopStatus(str, Enum):
    PENDING_APPROVAL = "pending_approval"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    REJECTED = "rejected"


# Vendors go through the same approval states as shops
VendorStatus = ShopStatus


class Shop(Timestamped):
    id: str
    vendor_id: str
    vendor_name: Optional[str] = None
    name: str
    slug: str
    description: Optional[str] = None
    status: ShopStatus
    monthly_revenue_cents: int = 0
    product_count: int = 0


class Vendor(Timestamped):
    id: str
    user_id: str
    business_name: str
    commission_rate: float
    status: VendorStatus
    approved_at: Optional[datetime] = None


class UpdateShopStatusRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    status: ShopStatus


class UpdateVendorStatusRequest(BaseModel):
    vendor_id: Annotated[str, Field(min_length=1)]
    status: VendorStatus


class ShopListQuery(ListQuery):
    status: Optional[ShopStatus] = None
    vendor_id: Optional[str] = None


class PlatformStats(BaseModel):
    total_tenants: int
    total_users: int
    total_products: int
    total_shops: int
    active_shops: int
    new_tenants_this_month: int
    new_users_this_month: int
    new_products_this_month: int
    platform_revenue_cents: int


class VendorStats(BaseModel):
    total_shops: int
    total_products: int
    active_products: int
    low_stock_products: int
    out_of_stock_products: int
    total_revenue_cents: int
