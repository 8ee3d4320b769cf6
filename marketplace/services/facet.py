"""Shared service logic for the flat shop-scoped catalog facets (brands, tags, attributes).

Each facet is a named, slugged row owned by one shop, counted by products
and locked against deletion while any product uses it.
"""

import logging

from marketplace.services.access import ensure_in_scope, require_catalog_access, resolve_create_shop, scope_conditions
from marketplace.services.base import BaseService, patch_values
from marketplace.utils.slug import resolve_slug
from shared.errors import ConflictError, DuplicateError, NotFoundError
from shared.models.common import Caller, Page

logger = logging.getLogger(__name__)


class FacetService(BaseService):
    """CRUD for one facet table; subclasses set the DAL, label and events."""

    dal_class = None
    label = "item"
    article = "a"
    created_event = None
    updated_event = None
    deleted_event = None
    nullable_fields: tuple = ()
    # request fields written by hooks rather than copied as columns
    related_fields: tuple = ()

    def __init__(self, database=None, kafka=None):
        super().__init__(database, kafka)
        self._dal = self.dal_class()

    @property
    def not_found_message(self) -> str:
        return f"{self.label.capitalize()} not found."

    @property
    def duplicate_message(self) -> str:
        return f"{self.article.capitalize()} {self.label} with this slug already exists in this shop. Please choose a different name or slug."

    def _existing(self, conn, caller: Caller, entity_id: str):
        row = self._dal.get_row(conn, entity_id)
        if row is None:
            raise NotFoundError(self.not_found_message)
        ensure_in_scope(caller, row["shop_id"], self.not_found_message)
        return row

    def _fetch(self, conn, caller: Caller, entity_id: str):
        return self._dal.get(conn, entity_id, include_shop_info=True, include_vendor_info=caller.is_admin)

    def _write_related(self, conn, entity_id: str, body, creating: bool) -> None:
        """Hook for child rows written in the same transaction."""

    def get_page(self, caller: Caller, query) -> Page:
        conditions = scope_conditions(caller, self._dal.table.c.shop_id, query.shop_id)
        with self._read() as conn:
            return self._dal.execute_query(
                conn, conditions, query,
                include_shop_info=True, include_vendor_info=caller.is_admin,
            )

    def get(self, caller: Caller, entity_id: str):
        require_catalog_access(caller)
        with self._read() as conn:
            self._existing(conn, caller, entity_id)
            return self._fetch(conn, caller, entity_id)

    def create(self, caller: Caller, body):
        shop_id = resolve_create_shop(caller, body.shop_id)
        slug = resolve_slug(body.slug, body.name)
        values = patch_values(body, exclude=("slug", *self.related_fields))
        values["slug"] = slug

        with self._write(self.duplicate_message) as conn:
            self._require_shop(conn, shop_id)
            if self._dal.find_by_slug(conn, shop_id, slug):
                raise DuplicateError(self.duplicate_message)
            entity_id = self._dal.insert(conn, values)
            self._write_related(conn, entity_id, body, creating=True)
            entity = self._fetch(conn, caller, entity_id)

        self._publish(self.created_event, entity_id, entity.model_dump(mode="json"))
        return entity

    def update(self, caller: Caller, body):
        """Partial update; only fields present in the request are written."""
        require_catalog_access(caller)
        values = patch_values(body, nullable=self.nullable_fields, exclude=("id", *self.related_fields))

        with self._write(self.duplicate_message) as conn:
            existing = self._existing(conn, caller, body.id)
            if values.get("slug") and values["slug"] != existing["slug"]:
                if self._dal.find_by_slug(conn, existing["shop_id"], values["slug"], exclude_id=body.id):
                    raise DuplicateError(self.duplicate_message)
            self._dal.update(conn, body.id, values)
            self._write_related(conn, body.id, body, creating=False)
            entity = self._fetch(conn, caller, body.id)

        self._publish(self.updated_event, body.id, entity.model_dump(mode="json"))
        return entity

    def delete(self, caller: Caller, entity_id: str) -> None:
        require_catalog_access(caller)
        with self._write() as conn:
            self._existing(conn, caller, entity_id)
            if self._dal.product_count(conn, entity_id) > 0:
                raise ConflictError(
                    f"Cannot delete {self.article} {self.label} that is assigned to products. "
                    "Please remove it from products first."
                )
            self._dal.delete(conn, entity_id)

        self._publish(self.deleted_event, entity_id, {f"{self.label}_id": entity_id})

    def toggle_active(self, caller: Caller, entity_id: str):
        require_catalog_access(caller)
        with self._write() as conn:
            existing = self._existing(conn, caller, entity_id)
            self._dal.update(conn, entity_id, {"is_active": not existing["is_active"]})
            entity = self._fetch(conn, caller, entity_id)

        self._publish(self.updated_event, entity_id, entity.model_dump(mode="json"))
        return entity
