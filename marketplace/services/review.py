"""Review Service - submission, moderation and product rating upkeep."""

import logging

from marketplace.dal.product_dal import ProductDAL
from marketplace.dal.review_dal import ReviewDAL
from marketplace.db.tables import products
from marketplace.services.access import ensure_in_scope, require_admin, scope_conditions
from marketplace.services.base import BaseService
from marketplace.utils.datetime_utils import utc_now
from shared.errors import NotFoundError, ValidationError
from shared.kafka.topics import EventType
from shared.models.common import Caller, Page
from shared.models.review import Review, ReviewListQuery, ReviewStatus

logger = logging.getLogger(__name__)

NOT_FOUND = "Review not found."


class ReviewService(BaseService):
    """Handles review DB operations.

    A product's average_rating and review_count only reflect published
    reviews, so they are recomputed whenever a review leaves or enters that
    state.
    """

    def __init__(self, database=None, kafka=None):
        super().__init__(database, kafka)
        self._dal = ReviewDAL()
        self._products = ProductDAL()

    def _existing(self, conn, caller: Caller, review_id: str):
        row = self._dal.get_row(conn, review_id)
        if row is None:
            raise NotFoundError(NOT_FOUND)
        ensure_in_scope(caller, row["shop_id"], NOT_FOUND)
        return row

    def get_page(self, caller: Caller, query: ReviewListQuery) -> Page:
        require_admin(caller)
        conditions = scope_conditions(caller, products.c.shop_id)
        with self._read() as conn:
            return self._dal.execute_query(conn, conditions, query)

    def get(self, caller: Caller, review_id: str) -> Review:
        require_admin(caller)
        with self._read() as conn:
            self._existing(conn, caller, review_id)
            return self._dal.get(conn, review_id)

    def create(self, caller: Caller, body) -> Review:
        """Submit a review as the caller; it waits in pending until moderated."""
        with self._write() as conn:
            product = self._products.get_row(conn, body.product_id)
            if product is None:
                raise NotFoundError("Product not found.")
            review_id = self._dal.insert(conn, {
                "product_id": body.product_id,
                "customer_id": caller.user_id,
                "rating": body.rating,
                "title": body.title,
                "comment": body.comment,
                "status": ReviewStatus.PENDING.value,
            })
            review = self._dal.get(conn, review_id)

        self._publish(EventType.REVIEW_CREATED, review_id, review.model_dump(mode="json"))
        return review

    def moderate(self, caller: Caller, body) -> Review:
        """Publish or reject a pending review. `body` is a ModerateReviewRequest."""
        require_admin(caller)
        with self._write() as conn:
            existing = self._existing(conn, caller, body.id)
            if existing["status"] != ReviewStatus.PENDING.value:
                raise ValidationError("Only pending reviews can be moderated.")
            values = {
                "status": body.status.value,
                "moderated_at": utc_now(),
                "moderated_by": caller.user_id,
            }
            if body.admin_notes is not None:
                values["admin_notes"] = body.admin_notes
            self._dal.update(conn, body.id, values)
            self._products.recompute_rating(conn, existing["product_id"])
            review = self._dal.get(conn, body.id)

        self._publish(EventType.REVIEW_MODERATED, body.id, review.model_dump(mode="json"))
        return review

    def delete(self, caller: Caller, review_id: str) -> None:
        require_admin(caller)
        with self._write() as conn:
            existing = self._existing(conn, caller, review_id)
            self._dal.delete(conn, review_id)
            self._products.recompute_rating(conn, existing["product_id"])

        self._publish(EventType.REVIEW_DELETED, review_id, {"review_id": review_id, "product_id": existing["product_id"]})
