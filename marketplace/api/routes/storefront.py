"""Public catalog endpoints for the storefront."""

import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from marketplace.api.deps import get_caller, get_services
from marketplace.api.routes.catalog import entity_response
from marketplace.api.services import Services
from shared.models.common import Caller, SortDirection
from shared.models.product import ProductListQuery, ProductSortField
from shared.models.review import CreateReviewRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["storefront"])

# storefront clients send camelCase sort keys
SORT_FIELDS = {
    "name": ProductSortField.NAME,
    "createdAt": ProductSortField.CREATED_AT,
    "updatedAt": ProductSortField.UPDATED_AT,
    "sellingPrice": ProductSortField.SELLING_PRICE,
    "stock": ProductSortField.STOCK,
    "averageRating": ProductSortField.AVERAGE_RATING,
}


def _storefront_product(product) -> dict:
    return product.model_dump(mode="json", exclude={"cost_price_cents", "tags", "attributes"})


@router.get("/products")
def list_products(page: int = 1,
                  limit: int = 12,
                  category: Optional[str] = None,
                  featured: Optional[str] = None,
                  search: Optional[str] = None,
                  sortBy: str = "createdAt",
                  sortDirection: str = "desc",
                  services: Services = Depends(get_services)):
    try:
        page = max(page, 1)
        limit = min(max(limit, 1), 100)
        sort_by = SORT_FIELDS.get(sortBy) or ProductSortField(sortBy)
        query = ProductListQuery(
            limit=limit,
            offset=(page - 1) * limit,
            category_slug=category or None,
            is_featured=True if featured == "true" else None,
            search=search or None,
            sort_by=sort_by,
            sort_direction=SortDirection.ASC if sortDirection == "asc" else SortDirection.DESC,
        )
        result = services.products.list_storefront(query)
    except Exception:
        logger.exception("Products API error")
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to fetch products"})

    return {
        "success": True,
        "data": {
            "products": [_storefront_product(p) for p in result.data],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": result.total,
                "totalPages": math.ceil(result.total / limit),
            },
        },
    }


@router.get("/categories")
def list_categories(level: Optional[int] = None,
                    parentId: Optional[str] = None,
                    featured: Optional[str] = None,
                    services: Services = Depends(get_services)):
    try:
        categories = services.categories.list_storefront(
            level=level, parent_id=parentId or None, featured=featured == "true",
        )
    except Exception:
        logger.exception("Categories API error")
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to fetch categories"})

    return {"success": True, "data": [c.model_dump(mode="json", exclude={"shop"}) for c in categories]}


@router.post("/reviews", status_code=201)
def submit_review(body: CreateReviewRequest,
                  caller: Caller = Depends(get_caller),
                  services: Services = Depends(get_services)):
    return entity_response("review", services.reviews.create(caller, body), "Review submitted for moderation")
