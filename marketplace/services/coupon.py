"""Coupon Service - codes are unique per shop and is_active always mirrors status."""

import logging

from marketplace.dal.coupon_dal import CouponDAL
from marketplace.db.tables import coupons
from marketplace.services.access import (
    ensure_in_scope,
    require_admin,
    require_catalog_access,
    resolve_create_shop,
    scope_conditions,
)
from marketplace.services.base import BaseService, patch_values
from shared.errors import DuplicateError, NotFoundError, ValidationError
from shared.kafka.topics import EventType
from shared.models.common import Caller, Page
from shared.models.coupon import Coupon, CouponAnalytics, CouponListQuery, CouponStatus, coupon_is_active

logger = logging.getLogger(__name__)

NOT_FOUND = "Coupon not found."
DUPLICATE = "A coupon with this code already exists in this shop."
NULLABLE_FIELDS = ("description", "minimum_cart_cents", "usage_limit", "active_from", "active_to")


class CouponService(BaseService):
    """Handles coupon DB operations."""

    def __init__(self, database=None, kafka=None):
        super().__init__(database, kafka)
        self._dal = CouponDAL()

    def _existing(self, conn, caller: Caller, coupon_id: str):
        row = self._dal.get_row(conn, coupon_id)
        if row is None:
            raise NotFoundError(NOT_FOUND)
        ensure_in_scope(caller, row["shop_id"], NOT_FOUND)
        return row

    def _fetch(self, conn, caller: Caller, coupon_id: str) -> Coupon:
        return self._dal.get(conn, coupon_id, include_shop_info=True, include_vendor_info=caller.is_admin)

    def get_page(self, caller: Caller, query: CouponListQuery) -> Page:
        conditions = scope_conditions(caller, coupons.c.shop_id, query.shop_id)
        with self._read() as conn:
            return self._dal.execute_query(
                conn, conditions, query,
                include_shop_info=True, include_vendor_info=caller.is_admin,
            )

    def get(self, caller: Caller, coupon_id: str) -> Coupon:
        require_catalog_access(caller)
        with self._read() as conn:
            self._existing(conn, caller, coupon_id)
            return self._fetch(conn, caller, coupon_id)

    def create(self, caller: Caller, body) -> Coupon:
        """Create a coupon. `body` is a CreateCouponRequest (code already upper-cased)."""
        shop_id = resolve_create_shop(caller, body.shop_id)
        values = patch_values(body)
        values.update(
            code=body.code,
            type=body.type.value,
            status=body.status.value,
            is_active=coupon_is_active(body.status),
            usage_count=0,
        )

        with self._write(DUPLICATE) as conn:
            self._require_shop(conn, shop_id)
            if self._dal.find_by_slug(conn, shop_id, body.code):
                raise DuplicateError(DUPLICATE)
            coupon_id = self._dal.insert(conn, values)
            coupon = self._fetch(conn, caller, coupon_id)

        self._publish(EventType.COUPON_CREATED, coupon_id, coupon.model_dump(mode="json"))
        return coupon

    def update(self, caller: Caller, body) -> Coupon:
        """Partial update. `body` is an UpdateCouponRequest."""
        require_catalog_access(caller)
        values = patch_values(body, nullable=NULLABLE_FIELDS)
        if "status" in values:
            values["is_active"] = coupon_is_active(CouponStatus(values["status"]))

        with self._write(DUPLICATE) as conn:
            existing = self._existing(conn, caller, body.id)
            if values.get("code") and values["code"] != existing["code"]:
                if self._dal.find_by_slug(conn, existing["shop_id"], values["code"], exclude_id=body.id):
                    raise DuplicateError(DUPLICATE)

            # cross-field rules against the stored row for fields not in the patch
            kind = values.get("type", existing["type"])
            amount = values.get("discount_amount", existing["discount_amount"])
            if kind == "percentage" and amount > 100:
                raise ValidationError("Percentage discount cannot exceed 100.")
            active_from = values.get("active_from", existing["active_from"])
            active_to = values.get("active_to", existing["active_to"])
            if active_from and active_to and active_to <= active_from:
                raise ValidationError("The end date must be after the start date.")

            self._dal.update(conn, body.id, values)
            coupon = self._fetch(conn, caller, body.id)

        self._publish(EventType.COUPON_UPDATED, body.id, coupon.model_dump(mode="json"))
        return coupon

    def delete(self, caller: Caller, coupon_id: str) -> None:
        require_catalog_access(caller)
        with self._write() as conn:
            self._existing(conn, caller, coupon_id)
            self._dal.delete(conn, coupon_id)

        self._publish(EventType.COUPON_DELETED, coupon_id, {"coupon_id": coupon_id})

    def update_status(self, caller: Caller, body) -> Coupon:
        """Admin status change; is_active is written from the new status."""
        require_admin(caller)
        with self._write() as conn:
            self._existing(conn, caller, body.id)
            self._dal.update(conn, body.id, {
                "status": body.status.value,
                "is_active": coupon_is_active(body.status),
            })
            coupon = self._fetch(conn, caller, body.id)

        self._publish(
            EventType.COUPON_STATUS_CHANGED, body.id,
            {"coupon_id": body.id, "status": coupon.status.value, "is_active": coupon.is_active},
        )
        return coupon

    def analytics(self, caller: Caller, shop_id=None) -> CouponAnalytics:
        require_admin(caller)
        with self._read() as conn:
            return self._dal.analytics(conn, scope_conditions(caller, coupons.c.shop_id, shop_id))
