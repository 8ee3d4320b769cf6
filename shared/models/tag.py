"""Tag Model - shop-scoped product labels"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from shared.models.common import ListQuery, SLUG_PATTERN, ShopInfo, Timestamped


class TagSortField(str, Enum):
    NAME = "name"
    SORT_ORDER = "sort_order"
    CREATED_AT = "created_at"
    PRODUCT_COUNT = "product_count"


class Tag(Timestamped):
    id: str
    shop_id: str
    name: str
    slug: str
    description: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    product_count: int = 0
    shop: Optional[ShopInfo] = None


class CreateTagRequest(BaseModel):
    shop_id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1, max_length=50)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=80, pattern=SLUG_PATTERN)]
    description: Annotated[Optional[str], Field(None, max_length=255)]
    sort_order: Annotated[int, Field(default=0, ge=0)]
    is_active: bool = True


class UpdateTagRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    name: Annotated[Optional[str], Field(None, min_length=1, max_length=50)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=80, pattern=SLUG_PATTERN)]
    description: Annotated[Optional[str], Field(None, max_length=255)]
    sort_order: Annotated[Optional[int], Field(None, ge=0)]
    is_active: Optional[bool] = None


class TagListQuery(ListQuery):
    is_active: Optional[bool] = None
    sort_by: TagSortField = TagSortField.SORT_ORDER
