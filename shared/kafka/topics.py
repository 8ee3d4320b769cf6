"""Kafka topic and event type definitions."""


class Topic:
    """Kafka topics."""
    PRODUCT = "product"
    CATEGORY = "category"
    BRAND = "brand"
    TAG = "tag"
    ATTRIBUTE = "attribute"
    COUPON = "coupon"
    REVIEW = "review"
    STAFF = "staff"
    USER = "user"
    SHOP = "shop"

    @classmethod
    def all(cls) -> list[str]:
        """Return all topics."""
        return [
            cls.PRODUCT,
            cls.CATEGORY,
            cls.BRAND,
            cls.TAG,
            cls.ATTRIBUTE,
            cls.COUPON,
            cls.REVIEW,
            cls.STAFF,
            cls.USER,
            cls.SHOP,
        ]

    @classmethod
    def for_event(cls, event_type: str) -> str:
        """Topic an event type is published to (the part before the dot)."""
        topic = event_type.split(".", 1)[0]
        if topic not in cls.all():
            raise ValueError(f"Unknown event type: {event_type}")
        return topic


class EventType:
    """Event types (topic.action)."""

    # Product
    PRODUCT_CREATED = "product.created"
    PRODUCT_UPDATED = "product.updated"
    PRODUCT_DELETED = "product.deleted"
    PRODUCT_ACTIVE_TOGGLED = "product.active_toggled"
    PRODUCT_FEATURED_TOGGLED = "product.featured_toggled"

    # Category
    CATEGORY_CREATED = "category.created"
    CATEGORY_UPDATED = "category.updated"
    CATEGORY_DELETED = "category.deleted"

    # Brand
    BRAND_CREATED = "brand.created"
    BRAND_UPDATED = "brand.updated"
    BRAND_DELETED = "brand.deleted"

    # Tag
    TAG_CREATED = "tag.created"
    TAG_UPDATED = "tag.updated"
    TAG_DELETED = "tag.deleted"

    # Attribute
    ATTRIBUTE_CREATED = "attribute.created"
    ATTRIBUTE_UPDATED = "attribute.updated"
    ATTRIBUTE_DELETED = "attribute.deleted"

    # Coupon
    COUPON_CREATED = "coupon.created"
    COUPON_UPDATED = "coupon.updated"
    COUPON_STATUS_CHANGED = "coupon.status_changed"
    COUPON_DELETED = "coupon.deleted"

    # Review
    REVIEW_CREATED = "review.created"
    REVIEW_MODERATED = "review.moderated"
    REVIEW_DELETED = "review.deleted"

    # Staff
    STAFF_ADDED = "staff.added"
    STAFF_UPDATED = "staff.updated"
    STAFF_REMOVED = "staff.removed"

    # User
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_BANNED = "user.banned"
    USER_UNBANNED = "user.unbanned"
    USER_DELETED = "user.deleted"

    # Shop / vendor
    SHOP_STATUS_CHANGED = "shop.status_changed"
    VENDOR_STATUS_CHANGED = "shop.vendor_status_changed"
