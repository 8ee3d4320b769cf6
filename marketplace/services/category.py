"""Category Service - hierarchy rules, slugs and dependency-blocked deletes."""

import logging
from typing import Optional

from marketplace.dal.category_dal import CategoryDAL, to_shop_column
from marketplace.db.tables import categories
from marketplace.services.access import ensure_in_scope, require_catalog_access, resolve_create_shop, scope_conditions
from marketplace.services.base import BaseService, patch_values
from marketplace.utils.slug import resolve_slug
from shared.errors import ConflictError, DuplicateError, NotFoundError, ValidationError
from shared.kafka.topics import EventType
from shared.models.category import GLOBAL_SHOP_ID, Category, CategoryListQuery
from shared.models.common import Caller, Page

logger = logging.getLogger(__name__)

NOT_FOUND = "Category not found."


def _duplicate_message(shop_id: Optional[str]) -> str:
    if shop_id is None:
        return "A category with this slug already exists globally. Please choose a different name or slug."
    return "A category with this slug already exists in this shop. Please choose a different name or slug."


class CategoryService(BaseService):
    """Handles category DB operations."""

    def __init__(self, database=None, kafka=None):
        super().__init__(database, kafka)
        self._dal = CategoryDAL()

    def _scope(self, caller: Caller, shop_id: Optional[str]) -> list:
        if caller.is_admin and shop_id == GLOBAL_SHOP_ID:
            return [categories.c.shop_id.is_(None)]
        return scope_conditions(caller, categories.c.shop_id, shop_id)

    def _existing(self, conn, caller: Caller, category_id: str):
        row = self._dal.get_row(conn, category_id)
        if row is None:
            raise NotFoundError(NOT_FOUND)
        ensure_in_scope(caller, row["shop_id"], NOT_FOUND)
        return row

    def _level_under(self, conn, parent_id: str) -> int:
        parent = self._dal.get_row(conn, parent_id)
        if parent is None:
            raise NotFoundError("Parent category not found.")
        return parent["level"] + 1

    def _fetch(self, conn, caller: Caller, category_id: str) -> Category:
        return self._dal.get(conn, category_id, include_shop_info=True, include_vendor_info=caller.is_admin)

    # ----------------------------------------------------------------
    # Reads
    # ----------------------------------------------------------------

    def get_page(self, caller: Caller, query: CategoryListQuery) -> Page:
        conditions = self._scope(caller, query.shop_id)
        with self._read() as conn:
            return self._dal.execute_query(
                conn, conditions, query,
                include_shop_info=True, include_vendor_info=caller.is_admin,
            )

    def get(self, caller: Caller, category_id: str) -> Category:
        require_catalog_access(caller)
        with self._read() as conn:
            self._existing(conn, caller, category_id)
            return self._fetch(conn, caller, category_id)

    # ----------------------------------------------------------------
    # Mutations
    # ----------------------------------------------------------------

    def create(self, caller: Caller, body) -> Category:
        """Create a category. `body` is a CreateCategoryRequest.

        Admins may omit the shop (or pass "global") to create a global
        category; everyone else creates into one of their own shops.
        """
        require_catalog_access(caller)
        shop_id = to_shop_column(body.shop_id)
        if shop_id is None and not caller.is_admin:
            raise ValidationError("A shop is required to create a category.")
        if shop_id is not None:
            resolve_create_shop(caller, shop_id)

        slug = resolve_slug(body.slug, body.name)
        with self._write(_duplicate_message(shop_id)) as conn:
            if shop_id is not None:
                self._require_shop(conn, shop_id)
            if self._dal.find_by_slug(conn, shop_id, slug):
                raise DuplicateError(_duplicate_message(shop_id))
            level = self._level_under(conn, body.parent_id) if body.parent_id else 0

            category_id = self._dal.insert(conn, {
                "shop_id": shop_id,
                "name": body.name,
                "slug": slug,
                "description": body.description,
                "image": body.image or None,
                "icon": body.icon or None,
                "parent_id": body.parent_id or None,
                "level": level,
                "sort_order": body.sort_order,
                "is_active": body.is_active,
                "featured": body.featured,
                "product_count": 0,
            })
            category = self._fetch(conn, caller, category_id)

        self._publish(EventType.CATEGORY_CREATED, category_id, category.model_dump(mode="json"))
        return category

    def update(self, caller: Caller, body) -> Category:
        """Partial update. `body` is an UpdateCategoryRequest."""
        require_catalog_access(caller)
        values = patch_values(body, nullable=("description", "image", "icon", "parent_id"))

        with self._write() as conn:
            existing = self._existing(conn, caller, body.id)
            shop_id = existing["shop_id"]

            if values.get("slug") and values["slug"] != existing["slug"]:
                if self._dal.find_by_slug(conn, shop_id, values["slug"], exclude_id=body.id):
                    raise DuplicateError(_duplicate_message(shop_id))

            if "parent_id" in values:
                parent_id = values["parent_id"] or None
                if parent_id == body.id:
                    raise ValidationError("A category cannot be its own parent.")
                if parent_id != existing["parent_id"]:
                    values["level"] = self._level_under(conn, parent_id) if parent_id else 0
                values["parent_id"] = parent_id

            for nullable in ("image", "icon"):
                if nullable in values:
                    values[nullable] = values[nullable] or None

            self._dal.update(conn, body.id, values)
            category = self._fetch(conn, caller, body.id)

        self._publish(EventType.CATEGORY_UPDATED, body.id, category.model_dump(mode="json"))
        return category

    def delete(self, caller: Caller, category_id: str) -> None:
        """Delete a category that has no products and no subcategories."""
        require_catalog_access(caller)
        with self._write() as conn:
            existing = self._existing(conn, caller, category_id)
            product_count = existing["product_count"] or 0
            if product_count > 0:
                raise ConflictError(
                    f'Cannot delete category "{existing["name"]}" with {product_count} associated products. '
                    "Please reassign products first."
                )
            if self._dal.children_count(conn, category_id) > 0:
                raise ConflictError(
                    "Cannot delete a category that has subcategories. "
                    "Please delete or reassign subcategories first."
                )
            self._dal.delete(conn, category_id)

        self._publish(EventType.CATEGORY_DELETED, category_id, {"category_id": category_id})

    def toggle_active(self, caller: Caller, category_id: str) -> Category:
        return self._toggle(caller, category_id, "is_active")

    def toggle_featured(self, caller: Caller, category_id: str) -> Category:
        return self._toggle(caller, category_id, "featured")

    def _toggle(self, caller: Caller, category_id: str, field: str) -> Category:
        require_catalog_access(caller)
        with self._write() as conn:
            existing = self._existing(conn, caller, category_id)
            self._dal.update(conn, category_id, {field: not existing[field]})
            category = self._fetch(conn, caller, category_id)

        self._publish(EventType.CATEGORY_UPDATED, category_id, category.model_dump(mode="json"))
        return category

    # ----------------------------------------------------------------
    # Storefront
    # ----------------------------------------------------------------

    def list_storefront(self, level: Optional[int] = None, parent_id: Optional[str] = None,
                        featured: Optional[bool] = None) -> list[Category]:
        with self._read() as conn:
            return self._dal.list_storefront(conn, level=level, parent_id=parent_id, featured=featured)
