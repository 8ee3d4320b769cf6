"""Table definitions for the marketplace database."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)

from marketplace.utils.datetime_utils import utc_now

metadata = MetaData()


def _timestamps():
    return [
        Column("created_at", DateTime, nullable=False, default=utc_now),
        Column("updated_at", DateTime, nullable=False, default=utc_now, onupdate=utc_now),
    ]


def _id():
    return Column("id", String(36), primary_key=True)


# ----------------------------------------------------------
# users
# ----------------------------------------------------------
users = Table(
    "users", metadata,
    _id(),
    Column("name", String(100), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("image", Text),
    Column("role", String(20), nullable=False, default="user"),
    Column("email_verified", Boolean, nullable=False, default=False),
    Column("banned", Boolean, nullable=False, default=False),
    Column("ban_reason", String(500)),
    Column("ban_expires", DateTime),
    *_timestamps(),
    Index("idx_users_created", "created_at"),
)

# ----------------------------------------------------------
# vendors
# ----------------------------------------------------------
vendors = Table(
    "vendors", metadata,
    _id(),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("business_name", String(200), nullable=False),
    Column("commission_rate", Numeric(5, 2, asdecimal=False), nullable=False, default=10.0),
    Column("status", String(20), nullable=False, default="pending_approval"),
    Column("contact_email", String(255)),
    Column("approved_at", DateTime),
    *_timestamps(),
    Index("idx_vendors_user", "user_id"),
)

# ----------------------------------------------------------
# shops
# ----------------------------------------------------------
shops = Table(
    "shops", metadata,
    _id(),
    Column("vendor_id", String(36), ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(200), nullable=False),
    Column("slug", String(220), nullable=False, unique=True),
    Column("description", Text),
    Column("status", String(20), nullable=False, default="pending_approval"),
    Column("monthly_revenue_cents", Integer, nullable=False, default=0),
    *_timestamps(),
    Index("idx_shops_vendor", "vendor_id"),
    Index("idx_shops_status", "status"),
)

# ----------------------------------------------------------
# categories (shop_id NULL = global)
# ----------------------------------------------------------
categories = Table(
    "categories", metadata,
    _id(),
    Column("shop_id", String(36), ForeignKey("shops.id", ondelete="CASCADE")),
    Column("name", String(100), nullable=False),
    Column("slug", String(120), nullable=False),
    Column("description", String(500)),
    Column("image", Text),
    Column("icon", String(100)),
    Column("parent_id", String(36), ForeignKey("categories.id")),
    Column("level", Integer, nullable=False, default=0),
    Column("sort_order", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("featured", Boolean, nullable=False, default=False),
    Column("product_count", Integer, nullable=False, default=0),
    *_timestamps(),
    UniqueConstraint("shop_id", "slug", name="uq_categories_shop_slug"),
    Index("idx_categories_parent", "parent_id"),
    Index("idx_categories_shop", "shop_id"),
)

# ----------------------------------------------------------
# brands
# ----------------------------------------------------------
brands = Table(
    "brands", metadata,
    _id(),
    Column("shop_id", String(36), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(100), nullable=False),
    Column("slug", String(120), nullable=False),
    Column("description", String(500)),
    Column("logo", Text),
    Column("website", String(255)),
    Column("sort_order", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    *_timestamps(),
    UniqueConstraint("shop_id", "slug", name="uq_brands_shop_slug"),
)

# ----------------------------------------------------------
# tags
# ----------------------------------------------------------
tags = Table(
    "tags", metadata,
    _id(),
    Column("shop_id", String(36), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(50), nullable=False),
    Column("slug", String(80), nullable=False),
    Column("description", String(255)),
    Column("sort_order", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    *_timestamps(),
    UniqueConstraint("shop_id", "slug", name="uq_tags_shop_slug"),
)

# ----------------------------------------------------------
# attributes + attribute_values
# ----------------------------------------------------------
attributes = Table(
    "attributes", metadata,
    _id(),
    Column("shop_id", String(36), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(100), nullable=False),
    Column("slug", String(120), nullable=False),
    Column("type", String(20), nullable=False, default="select"),
    Column("sort_order", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    *_timestamps(),
    UniqueConstraint("shop_id", "slug", name="uq_attributes_shop_slug"),
)

attribute_values = Table(
    "attribute_values", metadata,
    _id(),
    Column("attribute_id", String(36), ForeignKey("attributes.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(100), nullable=False),
    Column("slug", String(120), nullable=False),
    Column("value", String(255)),
    Column("sort_order", Integer, nullable=False, default=0),
    Index("idx_attribute_values_attribute", "attribute_id"),
)

# ----------------------------------------------------------
# products
# ----------------------------------------------------------
products = Table(
    "products", metadata,
    _id(),
    Column("shop_id", String(36), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(200), nullable=False),
    Column("slug", String(220), nullable=False),
    Column("sku", String(100)),
    Column("description", Text),
    Column("short_description", String(500)),
    Column("selling_price_cents", Integer, nullable=False),
    Column("regular_price_cents", Integer),
    Column("cost_price_cents", Integer),
    Column("stock", Integer, nullable=False, default=0),
    Column("low_stock_threshold", Integer, nullable=False, default=5),
    Column("status", String(20), nullable=False, default="draft"),
    Column("product_type", String(20), nullable=False, default="simple"),
    Column("is_featured", Boolean, nullable=False, default=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("average_rating", Numeric(3, 2, asdecimal=False), nullable=False, default=0),
    Column("review_count", Integer, nullable=False, default=0),
    Column("category_id", String(36), ForeignKey("categories.id", ondelete="SET NULL")),
    Column("brand_id", String(36), ForeignKey("brands.id", ondelete="SET NULL")),
    *_timestamps(),
    UniqueConstraint("shop_id", "slug", name="uq_products_shop_slug"),
    Index("idx_products_category", "category_id"),
    Index("idx_products_brand", "brand_id"),
    Index("idx_products_status", "status"),
    Index("idx_products_created", "created_at"),
)

product_images = Table(
    "product_images", metadata,
    _id(),
    Column("product_id", String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
    Column("url", Text, nullable=False),
    Column("alt", String(255)),
    Column("sort_order", Integer, nullable=False, default=0),
    Column("is_primary", Boolean, nullable=False, default=False),
    Index("idx_product_images_product", "product_id"),
)

product_tags = Table(
    "product_tags", metadata,
    Column("product_id", String(36), ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

product_attributes = Table(
    "product_attributes", metadata,
    Column("product_id", String(36), ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("attribute_id", String(36), ForeignKey("attributes.id", ondelete="CASCADE"), primary_key=True),
    Column("value", String(255)),
)

# ----------------------------------------------------------
# coupons
# ----------------------------------------------------------
coupons = Table(
    "coupons", metadata,
    _id(),
    Column("shop_id", String(36), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False),
    Column("code", String(32), nullable=False),
    Column("description", String(255)),
    Column("type", String(20), nullable=False),
    Column("discount_amount", Numeric(10, 2, asdecimal=False), nullable=False),
    Column("minimum_cart_cents", Integer),
    Column("status", String(20), nullable=False, default="active"),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("usage_limit", Integer),
    Column("usage_count", Integer, nullable=False, default=0),
    Column("active_from", DateTime),
    Column("active_to", DateTime),
    Column("applicable_to", String(30), nullable=False, default="all"),
    *_timestamps(),
    UniqueConstraint("shop_id", "code", name="uq_coupons_shop_code"),
)

# ----------------------------------------------------------
# reviews
# ----------------------------------------------------------
reviews = Table(
    "reviews", metadata,
    _id(),
    Column("product_id", String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
    Column("customer_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("rating", Integer, nullable=False),
    Column("title", String(200)),
    Column("comment", Text),
    Column("status", String(20), nullable=False, default="pending"),
    Column("admin_notes", Text),
    Column("moderated_at", DateTime),
    Column("moderated_by", String(36), ForeignKey("users.id", ondelete="SET NULL")),
    *_timestamps(),
    Index("idx_reviews_product", "product_id"),
    Index("idx_reviews_status", "status"),
)

# ----------------------------------------------------------
# staff
# ----------------------------------------------------------
staff = Table(
    "staff", metadata,
    _id(),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("shop_id", String(36), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False),
    Column("role", String(20), nullable=False),
    Column("status", String(20), nullable=False, default="active"),
    Column("permissions", JSON, nullable=False, default=list),
    Column("joined_date", DateTime, nullable=False, default=utc_now),
    *_timestamps(),
    UniqueConstraint("user_id", "shop_id", name="uq_staff_user_shop"),
    Index("idx_staff_shop", "shop_id"),
)
