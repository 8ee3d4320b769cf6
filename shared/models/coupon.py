"""
Coupon Model - shop discount codes

`is_active` is derived from `status` and is never written independently:
it is True exactly when status is "active".
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from shared.models.common import ListQuery, ShopInfo, SortDirection, Timestamped, naive_utc


class CouponType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    FREE_SHIPPING = "free_shipping"


class CouponStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"


class CouponScope(str, Enum):
    """What the coupon applies to"""
    ALL = "all"
    SPECIFIC_PRODUCTS = "specific_products"
    SPECIFIC_CATEGORIES = "specific_categories"


class CouponSortField(str, Enum):
    CODE = "code"
    DISCOUNT_AMOUNT = "discount_amount"
    USAGE_COUNT = "usage_count"
    ACTIVE_FROM = "active_from"
    ACTIVE_TO = "active_to"
    CREATED_AT = "created_at"


def coupon_is_active(status: CouponStatus) -> bool:
    return status == CouponStatus.ACTIVE


class Coupon(Timestamped):
    id: str
    shop_id: str
    code: str
    description: Optional[str] = None
    type: CouponType
    discount_amount: float
    minimum_cart_cents: Optional[int] = None
    status: CouponStatus
    is_active: bool
    usage_limit: Optional[int] = None
    usage_count: int = 0
    active_from: Optional[datetime] = None
    active_to: Optional[datetime] = None
    applicable_to: CouponScope = CouponScope.ALL
    shop: Optional[ShopInfo] = None


class _CouponFields(BaseModel):

    @field_validator("code", check_fields=False)
    @classmethod
    def normalize_code(cls, v):
        if v is None:
            return v
        return v.strip().upper()

    @field_validator("active_from", "active_to", check_fields=False)
    @classmethod
    def store_as_utc(cls, v):
        return naive_utc(v)

    @model_validator(mode="after")
    def validate_discount(self):
        if self.type == CouponType.PERCENTAGE and self.discount_amount is not None and self.discount_amount > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        if self.active_from and self.active_to and self.active_to <= self.active_from:
            raise ValueError("active_to must be after active_from")
        return self


class CreateCouponRequest(_CouponFields):
    shop_id: Annotated[str, Field(min_length=1)]
    code: Annotated[str, Field(min_length=3, max_length=32, pattern=r"^[A-Za-z0-9_-]+$")]
    description: Annotated[Optional[str], Field(None, max_length=255)]
    type: CouponType = CouponType.PERCENTAGE
    discount_amount: Annotated[float, Field(ge=0)]
    minimum_cart_cents: Annotated[Optional[int], Field(None, ge=0)]
    usage_limit: Annotated[Optional[int], Field(None, ge=1)]
    active_from: Optional[datetime] = None
    active_to: Optional[datetime] = None
    applicable_to: CouponScope = CouponScope.ALL
    status: CouponStatus = CouponStatus.ACTIVE


class UpdateCouponRequest(_CouponFields):
    id: Annotated[str, Field(min_length=1)]
    code: Annotated[Optional[str], Field(None, min_length=3, max_length=32, pattern=r"^[A-Za-z0-9_-]+$")]
    description: Annotated[Optional[str], Field(None, max_length=255)]
    type: Optional[CouponType] = None
    discount_amount: Annotated[Optional[float], Field(None, ge=0)]
    minimum_cart_cents: Annotated[Optional[int], Field(None, ge=0)]
    usage_limit: Annotated[Optional[int], Field(None, ge=1)]
    active_from: Optional[datetime] = None
    active_to: Optional[datetime] = None
    applicable_to: Optional[CouponScope] = None
    status: Optional[CouponStatus] = None


class UpdateCouponStatusRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    status: CouponStatus


class CouponListQuery(ListQuery):
    limit: Annotated[int, Field(default=20, ge=1, le=100)]
    type: Optional[CouponType] = None
    status: Optional[CouponStatus] = None
    is_active: Optional[bool] = None
    applicable_to: Optional[CouponScope] = None
    sort_by: CouponSortField = CouponSortField.CREATED_AT
    sort_direction: SortDirection = SortDirection.DESC


class CouponAnalytics(BaseModel):
    coupon_count: int
    total_usage: int
    total_discount: float
