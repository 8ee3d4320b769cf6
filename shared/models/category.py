"""
Category Model - Hierarchical product categories

Categories are shop-scoped, except for the cross-shop categories an admin
creates without a shop; those carry the "global" shop id.

A category's level is always its parent's level + 1, or 0 for a root.
"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from shared.models.common import ListQuery, SLUG_PATTERN, ShopInfo, Timestamped

GLOBAL_SHOP_ID = "global"


class CategorySortField(str, Enum):
    NAME = "name"
    SORT_ORDER = "sort_order"
    CREATED_AT = "created_at"
    PRODUCT_COUNT = "product_count"
    LEVEL = "level"


class Category(Timestamped):
    """Normalized category"""

    id: str
    shop_id: Annotated[str, Field(description='Owning shop, or "global"')]
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = None
    parent_name: Optional[str] = None
    level: Annotated[int, Field(ge=0, description="0 for root categories")]
    sort_order: int = 0
    is_active: bool = True
    featured: bool = False
    product_count: Annotated[int, Field(default=0, ge=0, description="Denormalized product count")]
    children_count: int = 0
    shop: Optional[ShopInfo] = None


class CreateCategoryRequest(BaseModel):
    shop_id: Annotated[Optional[str], Field(None, description='Shop id; omitted or "global" for admin global categories')]
    name: Annotated[str, Field(min_length=1, max_length=100)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)]
    description: Annotated[Optional[str], Field(None, max_length=500)]
    image: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = None
    sort_order: Annotated[int, Field(default=0, ge=0)]
    is_active: bool = True
    featured: bool = False


class UpdateCategoryRequest(BaseModel):
    """Partial update; only fields that are explicitly set are written"""

    id: Annotated[str, Field(min_length=1)]
    name: Annotated[Optional[str], Field(None, min_length=1, max_length=100)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)]
    description: Annotated[Optional[str], Field(None, max_length=500)]
    image: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = None
    sort_order: Annotated[Optional[int], Field(None, ge=0)]
    is_active: Optional[bool] = None
    featured: Optional[bool] = None


class CategoryListQuery(ListQuery):
    parent_id: Optional[str] = None
    root_only: bool = False
    level: Annotated[Optional[int], Field(None, ge=0)]
    is_active: Optional[bool] = None
    featured: Optional[bool] = None
    sort_by: CategorySortField = CategorySortField.SORT_ORDER
