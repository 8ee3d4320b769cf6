"""
Attribute Model - product attributes and their ordered values

An attribute (e.g. "Color") owns an ordered list of values ("Red", "Blue").
Values are replaced wholesale on update and cascade when the attribute is
deleted.
"""

from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field

from shared.models.common import ListQuery, SLUG_PATTERN, ShopInfo, Timestamped


class AttributeType(str, Enum):
    """How the storefront renders the attribute"""
    SELECT = "select"
    COLOR = "color"
    IMAGE = "image"
    LABEL = "label"


class AttributeSortField(str, Enum):
    NAME = "name"
    SORT_ORDER = "sort_order"
    CREATED_AT = "created_at"


class AttributeValue(BaseModel):
    id: str
    name: str
    slug: str
    value: Optional[str] = None
    sort_order: int = 0


class AttributeValueInput(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=100)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)]
    value: Annotated[Optional[str], Field(None, max_length=255, description="Hex color, image url, ...")]


class Attribute(Timestamped):
    id: str
    shop_id: str
    name: str
    slug: str
    type: AttributeType
    sort_order: int = 0
    is_active: bool = True
    product_count: int = 0
    values: List[AttributeValue] = Field(default_factory=list)
    shop: Optional[ShopInfo] = None


class CreateAttributeRequest(BaseModel):
    shop_id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1, max_length=100)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)]
    type: AttributeType = AttributeType.SELECT
    sort_order: Annotated[int, Field(default=0, ge=0)]
    is_active: bool = True
    values: List[AttributeValueInput] = Field(default_factory=list)


class UpdateAttributeRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    name: Annotated[Optional[str], Field(None, min_length=1, max_length=100)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)]
    type: Optional[AttributeType] = None
    sort_order: Annotated[Optional[int], Field(None, ge=0)]
    is_active: Optional[bool] = None
    values: Optional[List[AttributeValueInput]] = None


class AttributeListQuery(ListQuery):
    type: Optional[AttributeType] = None
    is_active: Optional[bool] = None
    include_values: bool = True
    sort_by: AttributeSortField = AttributeSortField.SORT_ORDER
