"""Data Access Layer for categories table."""

import logging
from typing import Optional

from sqlalchemy import case, func, select, update

from marketplace.dal.base import ShopScopedDAL, join_shop_info, shop_info_columns, shop_info_from_row
from marketplace.db.tables import categories
from shared.models.category import GLOBAL_SHOP_ID, Category

logger = logging.getLogger(__name__)

parents = categories.alias("parent")
children = categories.alias("child")


def to_shop_column(shop_id: Optional[str]) -> Optional[str]:
    """Stored value for a shop id; global categories have no shop row."""
    if shop_id in (None, "", GLOBAL_SHOP_ID):
        return None
    return shop_id


class CategoryDAL(ShopScopedDAL):
    table = categories
    model = Category
    search_columns = ("name", "description")

    def _children_count(self):
        return (
            select(func.count())
            .select_from(children)
            .where(children.c.parent_id == categories.c.id)
            .correlate(categories)
            .scalar_subquery()
            .label("children_count")
        )

    def _select(self, include_shop_info=False, include_vendor_info=False):
        columns = [categories, parents.c.name.label("parent_name"), self._children_count()]
        from_clause = categories.outerjoin(parents, parents.c.id == categories.c.parent_id)
        if include_shop_info or include_vendor_info:
            columns.extend(shop_info_columns(include_vendor_info))
            from_clause = join_shop_info(from_clause, categories.c.shop_id, include_vendor_info)
        return select(*columns).select_from(from_clause)

    def normalize(self, row, include_shop_info=False):
        data = dict(row)
        shop = shop_info_from_row(row, row["shop_id"]) if include_shop_info else None
        data["shop_id"] = row["shop_id"] or GLOBAL_SHOP_ID
        return Category(**data, shop=shop)

    def filters(self, query):
        conditions = []
        if query.root_only:
            conditions.append(categories.c.parent_id.is_(None))
        elif query.parent_id:
            conditions.append(categories.c.parent_id == query.parent_id)
        if query.level is not None:
            conditions.append(categories.c.level == query.level)
        if query.is_active is not None:
            conditions.append(categories.c.is_active == query.is_active)
        if query.featured is not None:
            conditions.append(categories.c.featured == query.featured)
        return conditions

    def find_by_slug(self, conn, shop_id, slug, exclude_id=None):
        """Slug lookup in the category's scope; global categories are checked against every shop."""
        conditions = [categories.c.slug == slug]
        stored_shop = to_shop_column(shop_id)
        if stored_shop is not None:
            conditions.append(categories.c.shop_id == stored_shop)
        if exclude_id is not None:
            conditions.append(categories.c.id != exclude_id)
        return conn.execute(select(categories).where(*conditions).limit(1)).mappings().first()

    def children_count(self, conn, category_id) -> int:
        stmt = select(func.count()).select_from(categories).where(categories.c.parent_id == category_id)
        return conn.execute(stmt).scalar_one()

    def adjust_product_count(self, conn, category_id: Optional[str], delta: int) -> None:
        if category_id is None or delta == 0:
            return
        adjusted = categories.c.product_count + delta
        new_count = case((adjusted < 0, 0), else_=adjusted)
        conn.execute(
            update(categories)
            .where(categories.c.id == category_id)
            .values(product_count=new_count)
        )

    def list_storefront(self, conn, level=None, parent_id=None, featured=None) -> list[Category]:
        """Active categories for the public catalog, by sort order then name."""
        conditions = [categories.c.is_active.is_(True)]
        if level is not None:
            conditions.append(categories.c.level == level)
        if parent_id:
            conditions.append(categories.c.parent_id == parent_id)
        if featured:
            conditions.append(categories.c.featured.is_(True))
        stmt = self._select().where(*conditions).order_by(categories.c.sort_order, categories.c.name)
        return [self.normalize(row) for row in conn.execute(stmt).mappings()]
