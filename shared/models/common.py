"""
Common models shared by every catalog entity

- Caller: the authenticated identity every service call is made on behalf of
- Page: the normalized list payload returned by the query helpers
- ShopInfo: shop/vendor data hydrated onto shop-scoped entities
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timezone-aware datetimes become naive UTC, the form stored in the database."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class Role(str, Enum):
    """Role supplied by the auth middleware"""
    ADMIN = "admin"
    VENDOR = "vendor"
    STAFF = "staff"
    CUSTOMER = "customer"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Caller(BaseModel):
    """Identity of the caller, already verified upstream"""

    user_id: Annotated[str, Field(min_length=1, description="Authenticated user id")]
    role: Annotated[Role, Field(description="Caller role")]
    shop_ids: Annotated[List[str], Field(default_factory=list, description="Shops the caller owns or works for")]

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class ShopInfo(BaseModel):
    """Shop (and optionally vendor) information hydrated onto entities"""

    id: str
    name: str
    slug: str
    vendor_id: Optional[str] = None
    vendor_name: Optional[str] = None


class Page(BaseModel, Generic[T]):
    """One page of normalized entities plus the total matching count"""

    data: List[T]
    total: int
    limit: int
    offset: int


class ListQuery(BaseModel):
    """Pagination, search and shop filter common to every list endpoint"""

    limit: Annotated[int, Field(default=50, ge=1, le=100)]
    offset: Annotated[int, Field(default=0, ge=0)]
    search: Annotated[Optional[str], Field(None, max_length=200)]
    shop_id: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC


class Timestamped(BaseModel):
    created_at: datetime
    updated_at: datetime
