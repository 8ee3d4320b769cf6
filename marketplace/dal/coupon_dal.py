"""Data Access Layer for coupons table."""

import logging
from typing import Sequence

from sqlalchemy import func, select

from marketplace.dal.base import ShopScopedDAL
from marketplace.db.tables import coupons
from shared.models.coupon import Coupon, CouponAnalytics

logger = logging.getLogger(__name__)


class CouponDAL(ShopScopedDAL):
    table = coupons
    model = Coupon
    search_columns = ("code", "description")
    slug_column = "code"

    def filters(self, query):
        conditions = []
        if query.type is not None:
            conditions.append(coupons.c.type == query.type.value)
        if query.status is not None:
            conditions.append(coupons.c.status == query.status.value)
        if query.is_active is not None:
            conditions.append(coupons.c.is_active == query.is_active)
        if query.applicable_to is not None:
            conditions.append(coupons.c.applicable_to == query.applicable_to.value)
        return conditions

    def analytics(self, conn, conditions: Sequence) -> CouponAnalytics:
        """Usage totals over the coupons matching ``conditions``.

        Total discount is the sum of discount_amount * usage_count, so for
        percentage coupons it is a sum of percentage points, not money.
        """
        stmt = select(
            func.count(coupons.c.id),
            func.coalesce(func.sum(coupons.c.usage_count), 0),
            func.coalesce(func.sum(coupons.c.discount_amount * coupons.c.usage_count), 0),
        ).where(*conditions)
        count, usage, discount = conn.execute(stmt).one()
        return CouponAnalytics(
            coupon_count=count,
            total_usage=int(usage),
            total_discount=round(float(discount), 2),
        )
