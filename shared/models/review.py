"""
Review Model - customer product reviews

Reviews start as pending and are moderated by an admin to published or
rejected. Only published reviews count toward a product's rating.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator

from shared.models.common import ListQuery, SortDirection, Timestamped


class ReviewStatus(str, Enum):
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"


class ReviewSortField(str, Enum):
    CREATED_AT = "created_at"
    RATING = "rating"


class Review(Timestamped):
    id: str
    product_id: str
    product_name: str = "Unknown Product"
    product_image: Optional[str] = None
    shop_id: Optional[str] = None
    customer_id: str
    customer_name: str = "Anonymous Customer"
    customer_avatar: Optional[str] = None
    rating: Annotated[int, Field(ge=1, le=5)]
    title: Optional[str] = None
    comment: Optional[str] = None
    status: ReviewStatus
    admin_notes: Optional[str] = None
    moderated_at: Optional[datetime] = None
    moderated_by: Optional[str] = None


class CreateReviewRequest(BaseModel):
    product_id: Annotated[str, Field(min_length=1)]
    rating: Annotated[int, Field(ge=1, le=5)]
    title: Annotated[Optional[str], Field(None, max_length=200)]
    comment: Annotated[Optional[str], Field(None, max_length=5000)]


class ModerateReviewRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    status: ReviewStatus
    admin_notes: Annotated[Optional[str], Field(None, max_length=1000)]

    @field_validator("status")
    @classmethod
    def status_is_decision(cls, v):
        if v == ReviewStatus.PENDING:
            raise ValueError("Moderation must publish or reject the review")
        return v


class ReviewListQuery(ListQuery):
    limit: Annotated[int, Field(default=20, ge=1, le=100)]
    status: Optional[ReviewStatus] = None
    product_id: Optional[str] = None
    rating: Annotated[Optional[int], Field(None, ge=1, le=5)]
    sort_by: ReviewSortField = ReviewSortField.CREATED_AT
    sort_direction: SortDirection = SortDirection.DESC
