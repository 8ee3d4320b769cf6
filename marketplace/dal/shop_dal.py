"""Data Access Layer for shops and vendors tables, plus dashboard aggregates."""

import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import func, select, update

from marketplace.dal.base import fetch_page, search_clause
from marketplace.db.tables import products, shops, users, vendors
from shared.models.common import Page, SortDirection
from shared.models.shop import PlatformStats, Shop, Vendor, VendorStats

logger = logging.getLogger(__name__)


def _count(conn, table, *conditions) -> int:
    return conn.execute(select(func.count()).select_from(table).where(*conditions)).scalar_one()


class ShopDAL:

    def _product_count(self):
        return (
            select(func.count())
            .select_from(products)
            .where(products.c.shop_id == shops.c.id)
            .correlate(shops)
            .scalar_subquery()
            .label("product_count")
        )

    def _select(self):
        return select(
            shops,
            vendors.c.business_name.label("vendor_name"),
            self._product_count(),
        ).select_from(shops.outerjoin(vendors, vendors.c.id == shops.c.vendor_id))

    def execute_query(self, conn, base_conditions, query) -> Page:
        conditions = list(base_conditions)
        if query.search:
            conditions.append(search_clause(query.search, shops.c.name, shops.c.slug))
        if query.status is not None:
            conditions.append(shops.c.status == query.status.value)
        if query.vendor_id:
            conditions.append(shops.c.vendor_id == query.vendor_id)
        if query.shop_id:
            conditions.append(shops.c.id == query.shop_id)
        order = shops.c.name.desc() if query.sort_direction == SortDirection.DESC else shops.c.name.asc()
        stmt = self._select().where(*conditions).order_by(order, shops.c.id)
        return fetch_page(conn, stmt, shops, conditions, lambda row: Shop(**row), query.limit, query.offset)

    def get(self, conn, shop_id) -> Optional[Shop]:
        row = conn.execute(self._select().where(shops.c.id == shop_id)).mappings().first()
        return Shop(**row) if row is not None else None

    def update_status(self, conn, shop_id, status: str) -> None:
        conn.execute(update(shops).where(shops.c.id == shop_id).values(status=status))

    def get_vendor(self, conn, vendor_id) -> Optional[Vendor]:
        row = conn.execute(select(vendors).where(vendors.c.id == vendor_id)).mappings().first()
        return Vendor(**row) if row is not None else None

    def update_vendor(self, conn, vendor_id, values: dict) -> None:
        conn.execute(update(vendors).where(vendors.c.id == vendor_id).values(**values))

    def platform_stats(self, conn, since: datetime) -> PlatformStats:
        """Platform-wide totals; ``since`` marks the start of "this month"."""
        revenue = conn.execute(
            select(func.coalesce(func.sum(shops.c.monthly_revenue_cents), 0)).where(shops.c.status == "active")
        ).scalar_one()
        return PlatformStats(
            total_tenants=_count(conn, vendors),
            total_users=_count(conn, users),
            total_products=_count(conn, products),
            total_shops=_count(conn, shops),
            active_shops=_count(conn, shops, shops.c.status == "active"),
            new_tenants_this_month=_count(conn, vendors, vendors.c.created_at >= since),
            new_users_this_month=_count(conn, users, users.c.created_at >= since),
            new_products_this_month=_count(conn, products, products.c.created_at >= since),
            platform_revenue_cents=int(revenue),
        )

    def vendor_stats(self, conn, shop_ids: Sequence[str]) -> VendorStats:
        in_shops = products.c.shop_id.in_(list(shop_ids))
        revenue = conn.execute(
            select(func.coalesce(func.sum(shops.c.monthly_revenue_cents), 0)).where(shops.c.id.in_(list(shop_ids)))
        ).scalar_one()
        return VendorStats(
            total_shops=_count(conn, shops, shops.c.id.in_(list(shop_ids))),
            total_products=_count(conn, products, in_shops),
            active_products=_count(conn, products, in_shops, products.c.status == "active", products.c.is_active.is_(True)),
            low_stock_products=_count(
                conn, products, in_shops,
                products.c.stock > 0, products.c.stock <= products.c.low_stock_threshold,
            ),
            out_of_stock_products=_count(conn, products, in_shops, products.c.stock <= 0),
            total_revenue_cents=int(revenue),
        )
