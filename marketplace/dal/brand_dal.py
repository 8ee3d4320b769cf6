"""Data Access Layer for brands table."""

import logging

from sqlalchemy import func, select

from marketplace.dal.base import ShopScopedDAL
from marketplace.db.tables import brands, products
from shared.models.brand import Brand, BrandSortField

logger = logging.getLogger(__name__)


class BrandDAL(ShopScopedDAL):
    table = brands
    model = Brand
    search_columns = ("name", "description")

    def _product_count(self):
        return (
            select(func.count())
            .select_from(products)
            .where(products.c.brand_id == brands.c.id)
            .correlate(brands)
            .scalar_subquery()
            .label("product_count")
        )

    def extra_columns(self):
        return [self._product_count()]

    def filters(self, query):
        conditions = []
        if query.is_active is not None:
            conditions.append(brands.c.is_active == query.is_active)
        return conditions

    def sort_column(self, sort_by):
        if sort_by == BrandSortField.PRODUCT_COUNT:
            return self._product_count()
        return super().sort_column(sort_by)

    def product_count(self, conn, brand_id) -> int:
        stmt = select(func.count()).select_from(products).where(products.c.brand_id == brand_id)
        return conn.execute(stmt).scalar_one()
