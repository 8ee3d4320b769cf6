"""Data Access Layer for attributes and attribute_values tables."""

import logging
import uuid

from sqlalchemy import delete, func, insert, select

from marketplace.dal.base import (
    ShopScopedDAL,
    count_matching,
    group_rows,
    join_shop_info,
    ranked_page,
    shop_info_columns,
    shop_info_from_row,
    sort_clauses,
)
from marketplace.db.tables import attribute_values, attributes, product_attributes
from marketplace.utils.slug import resolve_slug
from shared.models.attribute import Attribute, AttributeValue
from shared.models.common import Page

logger = logging.getLogger(__name__)

_VALUE_COLUMNS = [
    attribute_values.c.id.label("value_id"),
    attribute_values.c.name.label("value_name"),
    attribute_values.c.slug.label("value_slug"),
    attribute_values.c.value.label("value_value"),
    attribute_values.c.sort_order.label("value_sort_order"),
]


def _value_from_row(row) -> AttributeValue:
    return AttributeValue(
        id=row["value_id"],
        name=row["value_name"],
        slug=row["value_slug"],
        value=row["value_value"],
        sort_order=row["value_sort_order"],
    )


class AttributeDAL(ShopScopedDAL):
    table = attributes
    model = Attribute
    search_columns = ("name", "slug")

    def _product_count(self):
        return (
            select(func.count())
            .select_from(product_attributes)
            .where(product_attributes.c.attribute_id == attributes.c.id)
            .correlate(attributes)
            .scalar_subquery()
            .label("product_count")
        )

    def extra_columns(self):
        return [self._product_count()]

    def filters(self, query):
        conditions = []
        if query.type is not None:
            conditions.append(attributes.c.type == query.type.value)
        if query.is_active is not None:
            conditions.append(attributes.c.is_active == query.is_active)
        return conditions

    def _select_with_values(self, from_clause, include_shop_info, include_vendor_info):
        columns = [attributes, self._product_count(), *_VALUE_COLUMNS]
        from_clause = from_clause.outerjoin(attribute_values, attribute_values.c.attribute_id == attributes.c.id)
        if include_shop_info or include_vendor_info:
            columns.extend(shop_info_columns(include_vendor_info))
            from_clause = join_shop_info(from_clause, attributes.c.shop_id, include_vendor_info)
        return select(*columns).select_from(from_clause)

    def _reduce(self, rows, include_shop_info):
        grouped = group_rows(
            rows, "id",
            make_parent=lambda row: {
                **{c.name: row[c.name] for c in attributes.columns},
                "product_count": row["product_count"],
                "shop": shop_info_from_row(row, row["shop_id"]) if include_shop_info else None,
            },
            children={"values": ("value_id", _value_from_row)},
        )
        return [Attribute(**item) for item in grouped]

    def execute_query(self, conn, base_conditions, query,
                      include_shop_info=False, include_vendor_info=False) -> Page:
        if not query.include_values:
            return super().execute_query(conn, base_conditions, query, include_shop_info, include_vendor_info)

        conditions = self.query_conditions(base_conditions, query)
        order = sort_clauses(self.sort_column(query.sort_by), query.sort_direction, attributes.c.id)
        page = ranked_page(attributes.c.id, conditions, order, query.limit, query.offset)
        stmt = (
            self._select_with_values(
                attributes.join(page, page.c.page_id == attributes.c.id),
                include_shop_info, include_vendor_info,
            )
            .order_by(page.c.position, attribute_values.c.sort_order, attribute_values.c.id)
        )
        rows = conn.execute(stmt).mappings().all()
        return Page(
            data=self._reduce(rows, include_shop_info or include_vendor_info),
            total=count_matching(conn, attributes, conditions),
            limit=query.limit,
            offset=query.offset,
        )

    def get(self, conn, entity_id, include_shop_info=False, include_vendor_info=False):
        stmt = (
            self._select_with_values(attributes, include_shop_info, include_vendor_info)
            .where(attributes.c.id == entity_id)
            .order_by(attribute_values.c.sort_order, attribute_values.c.id)
        )
        rows = conn.execute(stmt).mappings().all()
        if not rows:
            return None
        return self._reduce(rows, include_shop_info or include_vendor_info)[0]

    def replace_values(self, conn, attribute_id, values) -> None:
        """Delete existing values and insert new ones in list order.

        Args:
            attribute_id: The attribute ID.
            values: List of AttributeValueInput.
        """
        conn.execute(delete(attribute_values).where(attribute_values.c.attribute_id == attribute_id))
        if not values:
            return
        conn.execute(insert(attribute_values), [
            {
                "id": str(uuid.uuid4()),
                "attribute_id": attribute_id,
                "name": v.name,
                "slug": resolve_slug(v.slug, v.name),
                "value": v.value,
                "sort_order": index,
            }
            for index, v in enumerate(values)
        ])

    def product_count(self, conn, attribute_id) -> int:
        stmt = (
            select(func.count())
            .select_from(product_attributes)
            .where(product_attributes.c.attribute_id == attribute_id)
        )
        return conn.execute(stmt).scalar_one()
