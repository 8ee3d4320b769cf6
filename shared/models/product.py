"""
Product Model - Items sold by a shop

Products capture:
- Pricing in cents (selling, optional regular price for discounts, cost)
- Stock and low-stock threshold
- Catalog placement (category, brand, tags, attributes)
- Ordered images, exactly one of which is primary

Regular price, when present, must be >= selling price.
"""

from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, model_validator

from shared.models.common import ListQuery, SLUG_PATTERN, ShopInfo, SortDirection, Timestamped


class ProductStatus(str, Enum):
    """Product lifecycle status"""
    ACTIVE = "active"
    DRAFT = "draft"
    ARCHIVED = "archived"


class ProductType(str, Enum):
    SIMPLE = "simple"
    VARIABLE = "variable"
    DIGITAL = "digital"


class ProductSortField(str, Enum):
    NAME = "name"
    SELLING_PRICE = "selling_price"
    STOCK = "stock"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    AVERAGE_RATING = "average_rating"


# Embedded Schemas
class ProductImage(BaseModel):
    id: str
    url: str
    alt: Optional[str] = None
    sort_order: int = 0
    is_primary: bool = False


class CategoryRef(BaseModel):
    id: str
    name: str
    slug: str


class BrandRef(BaseModel):
    id: str
    name: str
    slug: str


class TagRef(BaseModel):
    id: str
    name: str
    slug: str


class ProductAttributeRef(BaseModel):
    attribute_id: str
    name: str
    slug: str
    value: Optional[str] = None


class ProductImageInput(BaseModel):
    url: Annotated[str, Field(min_length=1, max_length=2048)]
    alt: Annotated[Optional[str], Field(None, max_length=255)]
    sort_order: Annotated[Optional[int], Field(None, ge=0, description="Defaults to the position in the list")]
    is_primary: bool = False


class ProductAttributeInput(BaseModel):
    attribute_id: Annotated[str, Field(min_length=1)]
    value: Annotated[Optional[str], Field(None, max_length=255)]


def _check_prices(selling: Optional[int], regular: Optional[int]) -> None:
    if selling is not None and regular is not None and regular < selling:
        raise ValueError("Regular price must be greater than or equal to the selling price")


# Main Product model
class Product(Timestamped):
    """Normalized product: one object per product, joins flattened"""

    id: str
    shop_id: str
    name: str
    slug: str
    sku: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None

    # Pricing
    selling_price_cents: Annotated[int, Field(ge=0)]
    regular_price_cents: Optional[int] = None
    cost_price_cents: Annotated[Optional[int], Field(None, description="Stripped for callers that may not see it")]

    # Inventory
    stock: int = 0
    low_stock_threshold: int = 5

    # Status
    status: ProductStatus = ProductStatus.DRAFT
    product_type: ProductType = ProductType.SIMPLE
    is_featured: bool = False
    is_active: bool = True

    # Stats
    average_rating: float = 0.0
    review_count: int = 0

    # Placement
    category_id: Optional[str] = None
    brand_id: Optional[str] = None
    category: Optional[CategoryRef] = None
    brand: Optional[BrandRef] = None
    images: List[ProductImage] = Field(default_factory=list)
    tags: List[TagRef] = Field(default_factory=list)
    attributes: List[ProductAttributeRef] = Field(default_factory=list)
    shop: Optional[ShopInfo] = None


class CreateProductRequest(BaseModel):
    shop_id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1, max_length=200)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=220, pattern=SLUG_PATTERN)]
    sku: Annotated[Optional[str], Field(None, max_length=100)]
    description: Annotated[Optional[str], Field(None, max_length=5000)]
    short_description: Annotated[Optional[str], Field(None, max_length=500)]
    selling_price_cents: Annotated[int, Field(ge=0)]
    regular_price_cents: Annotated[Optional[int], Field(None, ge=0)]
    cost_price_cents: Annotated[Optional[int], Field(None, ge=0)]
    stock: Annotated[int, Field(default=0, ge=0)]
    low_stock_threshold: Annotated[int, Field(default=5, ge=0)]
    status: ProductStatus = ProductStatus.DRAFT
    product_type: ProductType = ProductType.SIMPLE
    is_featured: bool = False
    is_active: bool = True
    category_id: Optional[str] = None
    brand_id: Optional[str] = None
    images: List[ProductImageInput] = Field(default_factory=list)
    tag_ids: List[str] = Field(default_factory=list)
    attributes: List[ProductAttributeInput] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_prices(self):
        _check_prices(self.selling_price_cents, self.regular_price_cents)
        return self


class UpdateProductRequest(BaseModel):
    """Partial update; images, tag_ids and attributes replace the current set when given"""

    id: Annotated[str, Field(min_length=1)]
    name: Annotated[Optional[str], Field(None, min_length=1, max_length=200)]
    slug: Annotated[Optional[str], Field(None, min_length=1, max_length=220, pattern=SLUG_PATTERN)]
    sku: Annotated[Optional[str], Field(None, max_length=100)]
    description: Annotated[Optional[str], Field(None, max_length=5000)]
    short_description: Annotated[Optional[str], Field(None, max_length=500)]
    selling_price_cents: Annotated[Optional[int], Field(None, ge=0)]
    regular_price_cents: Annotated[Optional[int], Field(None, ge=0)]
    cost_price_cents: Annotated[Optional[int], Field(None, ge=0)]
    stock: Annotated[Optional[int], Field(None, ge=0)]
    low_stock_threshold: Annotated[Optional[int], Field(None, ge=0)]
    status: Optional[ProductStatus] = None
    product_type: Optional[ProductType] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    category_id: Optional[str] = None
    brand_id: Optional[str] = None
    images: Optional[List[ProductImageInput]] = None
    tag_ids: Optional[List[str]] = None
    attributes: Optional[List[ProductAttributeInput]] = None

    @model_validator(mode="after")
    def validate_prices(self):
        _check_prices(self.selling_price_cents, self.regular_price_cents)
        return self


class ProductListQuery(ListQuery):
    limit: Annotated[int, Field(default=20, ge=1, le=100)]
    status: Optional[ProductStatus] = None
    product_type: Optional[ProductType] = None
    category_id: Optional[str] = None
    category_slug: Optional[str] = None
    brand_id: Optional[str] = None
    tag_id: Optional[str] = None
    attribute_id: Optional[str] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    in_stock: Optional[bool] = None
    low_stock: Optional[bool] = None
    min_price_cents: Annotated[Optional[int], Field(None, ge=0)]
    max_price_cents: Annotated[Optional[int], Field(None, ge=0)]
    sort_by: ProductSortField = ProductSortField.CREATED_AT
    sort_direction: SortDirection = SortDirection.DESC

    @model_validator(mode="after")
    def validate_price_range(self):
        if (
            self.min_price_cents is not None
            and self.max_price_cents is not None
            and self.min_price_cents > self.max_price_cents
        ):
            raise ValueError("min_price_cents cannot exceed max_price_cents")
        return self
