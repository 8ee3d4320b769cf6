"""Data Access Layer for reviews table.

Reviews carry no shop id of their own; they are scoped through their
product, so every query joins products.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import delete, insert, select, update

from marketplace.dal.base import fetch_page, search_clause, sort_clauses
from marketplace.db.tables import product_images, products, reviews, users
from shared.models.common import Page
from shared.models.review import Review

logger = logging.getLogger(__name__)

SCOPED_FROM = reviews.join(products, products.c.id == reviews.c.product_id)


def _primary_image():
    return (
        select(product_images.c.url)
        .where(product_images.c.product_id == reviews.c.product_id)
        .order_by(product_images.c.is_primary.desc(), product_images.c.sort_order)
        .limit(1)
        .correlate(reviews)
        .scalar_subquery()
        .label("product_image")
    )


class ReviewDAL:

    def _select(self):
        return select(
            reviews,
            products.c.name.label("product_name"),
            products.c.shop_id,
            _primary_image(),
            users.c.name.label("customer_name"),
            users.c.image.label("customer_avatar"),
        ).select_from(SCOPED_FROM.outerjoin(users, users.c.id == reviews.c.customer_id))

    @staticmethod
    def normalize(row) -> Review:
        data = dict(row)
        for fallback in ("product_name", "customer_name"):
            if data[fallback] is None:
                del data[fallback]
        return Review(**data)

    def execute_query(self, conn, base_conditions, query) -> Page:
        conditions = list(base_conditions)
        if query.search:
            conditions.append(search_clause(query.search, reviews.c.title, reviews.c.comment, products.c.name))
        if query.shop_id:
            conditions.append(products.c.shop_id == query.shop_id)
        if query.status is not None:
            conditions.append(reviews.c.status == query.status.value)
        if query.product_id:
            conditions.append(reviews.c.product_id == query.product_id)
        if query.rating is not None:
            conditions.append(reviews.c.rating == query.rating)
        order = sort_clauses(reviews.c[query.sort_by.value], query.sort_direction, reviews.c.id)
        stmt = self._select().where(*conditions).order_by(*order)
        return fetch_page(conn, stmt, SCOPED_FROM, conditions, self.normalize, query.limit, query.offset)

    def get(self, conn, review_id) -> Optional[Review]:
        row = conn.execute(self._select().where(reviews.c.id == review_id)).mappings().first()
        return self.normalize(row) if row is not None else None

    def insert(self, conn, values: dict) -> str:
        review_id = str(uuid.uuid4())
        conn.execute(insert(reviews).values(id=review_id, **values))
        return review_id

    def get_row(self, conn, review_id):
        stmt = (
            select(reviews, products.c.shop_id)
            .select_from(SCOPED_FROM)
            .where(reviews.c.id == review_id)
        )
        return conn.execute(stmt).mappings().first()

    def update(self, conn, review_id, values: dict) -> None:
        conn.execute(update(reviews).where(reviews.c.id == review_id).values(**values))

    def delete(self, conn, review_id) -> None:
        conn.execute(delete(reviews).where(reviews.c.id == review_id))
