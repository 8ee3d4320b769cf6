"""Product Service - product rows plus images, tag and attribute links in one transaction."""

import logging
from typing import Optional

from sqlalchemy import select

from marketplace.dal.category_dal import CategoryDAL
from marketplace.dal.product_dal import ProductDAL
from marketplace.db.tables import attributes, brands, categories, products, tags
from marketplace.services.access import ensure_in_scope, require_catalog_access, resolve_create_shop, scope_conditions
from marketplace.services.base import BaseService, patch_values
from marketplace.utils.slug import resolve_slug
from shared.errors import DuplicateError, NotFoundError, ValidationError
from shared.kafka.topics import EventType
from shared.models.common import Caller, Page
from shared.models.product import Product, ProductListQuery, ProductStatus

logger = logging.getLogger(__name__)

NOT_FOUND = "Product not found."
DUPLICATE = "A product with this slug already exists in this shop. Please choose a different name or slug."
RELATED_FIELDS = ("images", "tag_ids", "attributes")
NULLABLE_FIELDS = (
    "sku", "description", "short_description",
    "regular_price_cents", "cost_price_cents", "category_id", "brand_id",
)


class ProductService(BaseService):
    """Handles product DB operations."""

    def __init__(self, database=None, kafka=None):
        super().__init__(database, kafka)
        self._dal = ProductDAL()
        self._categories = CategoryDAL()

    # ----------------------------------------------------------------
    # Helpers
    # ----------------------------------------------------------------

    def _existing(self, conn, caller: Caller, product_id: str):
        row = self._dal.get_row(conn, product_id)
        if row is None:
            raise NotFoundError(NOT_FOUND)
        ensure_in_scope(caller, row["shop_id"], NOT_FOUND)
        return row

    def _fetch(self, conn, caller: Caller, product_id: str) -> Product:
        return self._dal.get(conn, product_id, include_shop_info=True, include_vendor_info=caller.is_admin)

    @staticmethod
    def _check_category(conn, shop_id: str, category_id: Optional[str]) -> None:
        """Category must belong to the product's shop or be global."""
        if category_id is None:
            return
        row = conn.execute(select(categories.c.shop_id).where(categories.c.id == category_id)).first()
        if row is None or row.shop_id not in (None, shop_id):
            raise NotFoundError("Category not found.")

    @staticmethod
    def _check_owned(conn, table, shop_id: str, ids, message: str) -> None:
        ids = set(ids)
        if not ids:
            return
        stmt = select(table.c.id).where(table.c.id.in_(ids), table.c.shop_id == shop_id)
        found = {row.id for row in conn.execute(stmt)}
        if found != ids:
            raise NotFoundError(message)

    def _check_references(self, conn, shop_id: str, body, values: dict) -> None:
        if "category_id" in values:
            self._check_category(conn, shop_id, values["category_id"])
        if values.get("brand_id"):
            self._check_owned(conn, brands, shop_id, [values["brand_id"]], "Brand not found.")
        if body.tag_ids:
            self._check_owned(conn, tags, shop_id, body.tag_ids, "Tag not found.")
        if body.attributes:
            self._check_owned(conn, attributes, shop_id, [a.attribute_id for a in body.attributes],
                              "Attribute not found.")

    def _write_links(self, conn, product_id: str, body) -> None:
        if body.images is not None:
            self._dal.replace_images(conn, product_id, body.images)
        if body.tag_ids is not None:
            self._dal.replace_tags(conn, product_id, body.tag_ids)
        if body.attributes is not None:
            self._dal.replace_attributes(conn, product_id, body.attributes)

    # ----------------------------------------------------------------
    # Reads
    # ----------------------------------------------------------------

    def get_page(self, caller: Caller, query: ProductListQuery) -> Page:
        conditions = scope_conditions(caller, products.c.shop_id, query.shop_id)
        with self._read() as conn:
            return self._dal.execute_query(
                conn, conditions, query,
                include_shop_info=True, include_vendor_info=caller.is_admin,
            )

    def get(self, caller: Caller, product_id: str) -> Product:
        require_catalog_access(caller)
        with self._read() as conn:
            self._existing(conn, caller, product_id)
            return self._fetch(conn, caller, product_id)

    def list_storefront(self, query: ProductListQuery) -> Page:
        """Products a shopper may see: active, published and placed in a category."""
        conditions = [
            products.c.is_active.is_(True),
            products.c.status == ProductStatus.ACTIVE.value,
            products.c.category_id.is_not(None),
        ]
        with self._read() as conn:
            return self._dal.execute_query(conn, conditions, query, include_shop_info=True, exclude_cost_price=True)

    # ----------------------------------------------------------------
    # Mutations
    # ----------------------------------------------------------------

    def create(self, caller: Caller, body) -> Product:
        """Create a product with its images and links. `body` is a CreateProductRequest."""
        shop_id = resolve_create_shop(caller, body.shop_id)
        slug = resolve_slug(body.slug, body.name)
        values = patch_values(body, exclude=("slug", *RELATED_FIELDS))
        values["slug"] = slug

        with self._write(DUPLICATE) as conn:
            self._require_shop(conn, shop_id)
            if self._dal.find_by_slug(conn, shop_id, slug):
                raise DuplicateError(DUPLICATE)
            self._check_references(conn, shop_id, body, values)

            product_id = self._dal.insert(conn, values)
            self._write_links(conn, product_id, body)
            self._categories.adjust_product_count(conn, values.get("category_id"), 1)
            product = self._fetch(conn, caller, product_id)

        self._publish(EventType.PRODUCT_CREATED, product_id, product.model_dump(mode="json"))
        return product

    def update(self, caller: Caller, body) -> Product:
        """Partial update. `body` is an UpdateProductRequest.

        Images, tags and attributes are replaced when present in the
        request. Moving the product to another category moves its count.
        """
        require_catalog_access(caller)
        values = patch_values(body, nullable=NULLABLE_FIELDS, exclude=("id", *RELATED_FIELDS))

        with self._write(DUPLICATE) as conn:
            existing = self._existing(conn, caller, body.id)
            shop_id = existing["shop_id"]

            if values.get("slug") and values["slug"] != existing["slug"]:
                if self._dal.find_by_slug(conn, shop_id, values["slug"], exclude_id=body.id):
                    raise DuplicateError(DUPLICATE)

            selling = values.get("selling_price_cents", existing["selling_price_cents"])
            regular = values.get("regular_price_cents", existing["regular_price_cents"])
            if regular is not None and regular < selling:
                raise ValidationError("Regular price must be greater than or equal to the selling price.")

            self._check_references(conn, shop_id, body, values)
            self._dal.update(conn, body.id, values)
            self._write_links(conn, body.id, body)

            if "category_id" in values and values["category_id"] != existing["category_id"]:
                self._categories.adjust_product_count(conn, existing["category_id"], -1)
                self._categories.adjust_product_count(conn, values["category_id"], 1)
            product = self._fetch(conn, caller, body.id)

        self._publish(EventType.PRODUCT_UPDATED, body.id, product.model_dump(mode="json"))
        return product

    def delete(self, caller: Caller, product_id: str) -> None:
        require_catalog_access(caller)
        with self._write() as conn:
            existing = self._existing(conn, caller, product_id)
            self._dal.delete(conn, product_id)
            self._categories.adjust_product_count(conn, existing["category_id"], -1)

        self._publish(EventType.PRODUCT_DELETED, product_id, {"product_id": product_id})

    def toggle_active(self, caller: Caller, product_id: str) -> Product:
        return self._toggle(caller, product_id, "is_active", EventType.PRODUCT_ACTIVE_TOGGLED)

    def toggle_featured(self, caller: Caller, product_id: str) -> Product:
        return self._toggle(caller, product_id, "is_featured", EventType.PRODUCT_FEATURED_TOGGLED)

    def _toggle(self, caller: Caller, product_id: str, field: str, event_type: str) -> Product:
        require_catalog_access(caller)
        with self._write() as conn:
            existing = self._existing(conn, caller, product_id)
            self._dal.update(conn, product_id, {field: not existing[field]})
            product = self._fetch(conn, caller, product_id)

        self._publish(event_type, product_id, {"product_id": product_id, field: getattr(product, field)})
        return product
