"""Brand Model - shop-scoped catalog facet"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from shared.models.common import ListQuery, SLUG_PATTERN, ShopInfo, Timestamped


class BrandSortField(str, Enum):
    NAME = "name"
    SORT_ORDER = "sort_order"
    CREATED_AT = "created_at"
    PRODUCT_COUNT = "product_count"


class Brand(Timestamped):
    id: str
    shop_id: str
    name: str
    slug: str
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    product_count: int = 0
    shop: Optional[ShopInfo] = None


class CreateBrandRequest(BaseModel):
    shop_id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1, max_length=100)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)]
    description: Annotated[Optional[str], Field(None, max_length=500)]
    logo: Optional[str] = None
    website: Annotated[Optional[str], Field(None, max_length=255)]
    sort_order: Annotated[int, Field(default=0, ge=0)]
    is_active: bool = True


class UpdateBrandRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    name: Annotated[Optional[str], Field(None, min_length=1, max_length=100)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)]
    description: Annotated[Optional[str], Field(None, max_length=500)]
    logo: Optional[str] = None
    website: Annotated[Optional[str], Field(None, max_length=255)]
    sort_order: Annotated[Optional[int], Field(None, ge=0)]
    is_active: Optional[bool] = None


class BrandListQuery(ListQuery):
    is_active: Optional[bool] = None
    sort_by: BrandSortField = BrandSortField.SORT_ORDER
