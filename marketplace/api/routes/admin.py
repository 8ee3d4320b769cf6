"""Admin-only endpoints: moderation, users, shops, coupon oversight and the dashboard."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from marketplace.api.deps import admin_caller, get_services
from marketplace.api.routes.catalog import IdRequest, entity_response, page_response
from marketplace.api.services import Services
from shared.models.common import Caller
from shared.models.coupon import UpdateCouponStatusRequest
from shared.models.review import ModerateReviewRequest, ReviewListQuery
from shared.models.shop import ShopListQuery, UpdateShopStatusRequest, UpdateVendorStatusRequest
from shared.models.user import BanUserRequest, CreateUserRequest, UpdateUserRequest, UserListQuery

router = APIRouter(prefix="/api/admin", tags=["admin"])


# ----------------------------------------------------------------
# Coupons (registered before the shared catalog routes)
# ----------------------------------------------------------------

@router.get("/coupons/analytics")
def coupon_analytics(shop_id: Optional[str] = None,
                     caller: Caller = Depends(admin_caller),
                     services: Services = Depends(get_services)):
    analytics = services.coupons.analytics(caller, shop_id)
    return {"success": True, "analytics": analytics.model_dump()}


@router.post("/coupons/status")
def update_coupon_status(body: UpdateCouponStatusRequest,
                         caller: Caller = Depends(admin_caller),
                         services: Services = Depends(get_services)):
    coupon = services.coupons.update_status(caller, body)
    return entity_response("coupon", coupon, "Coupon status updated successfully")


# ----------------------------------------------------------------
# Reviews
# ----------------------------------------------------------------

@router.get("/reviews")
def list_reviews(query: Annotated[ReviewListQuery, Query()],
                 caller: Caller = Depends(admin_caller),
                 services: Services = Depends(get_services)):
    return page_response(services.reviews.get_page(caller, query))


@router.get("/reviews/{review_id}")
def get_review(review_id: str,
               caller: Caller = Depends(admin_caller),
               services: Services = Depends(get_services)):
    return entity_response("review", services.reviews.get(caller, review_id))


@router.post("/reviews/moderate")
def moderate_review(body: ModerateReviewRequest,
                    caller: Caller = Depends(admin_caller),
                    services: Services = Depends(get_services)):
    review = services.reviews.moderate(caller, body)
    return entity_response("review", review, f"Review {review.status.value}")


@router.post("/reviews/delete")
def delete_review(body: IdRequest,
                  caller: Caller = Depends(admin_caller),
                  services: Services = Depends(get_services)):
    services.reviews.delete(caller, body.id)
    return {"success": True, "message": "Review deleted successfully"}


# ----------------------------------------------------------------
# Users
# ----------------------------------------------------------------

@router.get("/users")
def list_users(query: Annotated[UserListQuery, Query()],
               caller: Caller = Depends(admin_caller),
               services: Services = Depends(get_services)):
    return page_response(services.users.get_page(caller, query))


@router.get("/users/stats")
def user_stats(caller: Caller = Depends(admin_caller),
               services: Services = Depends(get_services)):
    return {"success": True, "stats": services.users.stats(caller).model_dump()}


@router.get("/users/{user_id}")
def get_user(user_id: str,
             caller: Caller = Depends(admin_caller),
             services: Services = Depends(get_services)):
    return entity_response("user", services.users.get(caller, user_id))


@router.post("/users", status_code=201)
def create_user(body: CreateUserRequest,
                caller: Caller = Depends(admin_caller),
                services: Services = Depends(get_services)):
    return entity_response("user", services.users.create(caller, body), "User created successfully")


@router.post("/users/update")
def update_user(body: UpdateUserRequest,
                caller: Caller = Depends(admin_caller),
                services: Services = Depends(get_services)):
    return entity_response("user", services.users.update(caller, body), "User updated successfully")


@router.post("/users/delete")
def delete_user(body: IdRequest,
                caller: Caller = Depends(admin_caller),
                services: Services = Depends(get_services)):
    services.users.delete(caller, body.id)
    return {"success": True, "message": "User deleted successfully"}


@router.post("/users/ban")
def ban_user(body: BanUserRequest,
             caller: Caller = Depends(admin_caller),
             services: Services = Depends(get_services)):
    return entity_response("user", services.users.ban(caller, body), "User banned successfully")


@router.post("/users/unban")
def unban_user(body: IdRequest,
               caller: Caller = Depends(admin_caller),
               services: Services = Depends(get_services)):
    return entity_response("user", services.users.unban(caller, body.id), "User unbanned successfully")


# ----------------------------------------------------------------
# Shops / vendors
# ----------------------------------------------------------------

@router.get("/shops")
def list_shops(query: Annotated[ShopListQuery, Query()],
               caller: Caller = Depends(admin_caller),
               services: Services = Depends(get_services)):
    return page_response(services.shops.get_page(caller, query))


@router.get("/shops/{shop_id}")
def get_shop(shop_id: str,
             caller: Caller = Depends(admin_caller),
             services: Services = Depends(get_services)):
    return entity_response("shop", services.shops.get(caller, shop_id))


@router.post("/shops/status")
def update_shop_status(body: UpdateShopStatusRequest,
                       caller: Caller = Depends(admin_caller),
                       services: Services = Depends(get_services)):
    shop = services.shops.update_status(caller, body)
    return entity_response("shop", shop, "Shop status updated successfully")


@router.post("/vendors/status")
def update_vendor_status(body: UpdateVendorStatusRequest,
                         caller: Caller = Depends(admin_caller),
                         services: Services = Depends(get_services)):
    vendor = services.shops.update_vendor_status(caller, body)
    return entity_response("vendor", vendor, "Vendor status updated successfully")


# ----------------------------------------------------------------
# Dashboard
# ----------------------------------------------------------------

@router.get("/dashboard")
def platform_dashboard(caller: Caller = Depends(admin_caller),
                       services: Services = Depends(get_services)):
    return {"success": True, "stats": services.dashboard.platform_stats(caller).model_dump()}
