"""Data Access Layer for tags table."""

import logging

from sqlalchemy import func, select

from marketplace.dal.base import ShopScopedDAL
from marketplace.db.tables import product_tags, tags
from shared.models.tag import Tag, TagSortField

logger = logging.getLogger(__name__)


class TagDAL(ShopScopedDAL):
    table = tags
    model = Tag
    search_columns = ("name", "description")

    def _product_count(self):
        return (
            select(func.count())
            .select_from(product_tags)
            .where(product_tags.c.tag_id == tags.c.id)
            .correlate(tags)
            .scalar_subquery()
            .label("product_count")
        )

    def extra_columns(self):
        return [self._product_count()]

    def filters(self, query):
        conditions = []
        if query.is_active is not None:
            conditions.append(tags.c.is_active == query.is_active)
        return conditions

    def sort_column(self, sort_by):
        if sort_by == TagSortField.PRODUCT_COUNT:
            return self._product_count()
        return super().sort_column(sort_by)

    def product_count(self, conn, tag_id) -> int:
        stmt = select(func.count()).select_from(product_tags).where(product_tags.c.tag_id == tag_id)
        return conn.execute(stmt).scalar_one()
