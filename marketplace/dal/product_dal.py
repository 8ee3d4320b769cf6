"""Data Access Layer for products and their images, tag links and attribute links."""

import logging
import uuid
from typing import Optional, Sequence

from sqlalchemy import delete, func, insert, select, update

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
from marketplace.db.tables import (
    attributes,
    brands,
    categories,
    product_attributes,
    product_images,
    product_tags,
    products,
    reviews,
    tags,
)
from shared.models.common import Page
from shared.models.product import (
    BrandRef,
    CategoryRef,
    Product,
    ProductAttributeRef,
    ProductImage,
    ProductSortField,
    TagRef,
)

logger = logging.getLogger(__name__)

_RELATION_COLUMNS = [
    categories.c.name.label("category_name"),
    categories.c.slug.label("category_slug"),
    brands.c.name.label("brand_name"),
    brands.c.slug.label("brand_slug"),
    product_images.c.id.label("image_id"),
    product_images.c.url.label("image_url"),
    product_images.c.alt.label("image_alt"),
    product_images.c.sort_order.label("image_sort_order"),
    product_images.c.is_primary.label("image_is_primary"),
]

# primary image first, then by sort order
IMAGE_ORDER = (product_images.c.is_primary.desc(), product_images.c.sort_order, product_images.c.id)


def _image_from_row(row) -> ProductImage:
    return ProductImage(
        id=row["image_id"],
        url=row["image_url"],
        alt=row["image_alt"],
        sort_order=row["image_sort_order"],
        is_primary=row["image_is_primary"],
    )


def order_images(images) -> list[dict]:
    """Turn image inputs into rows: positional sort order, exactly one primary.

    The first image flagged primary wins; with none flagged the first image
    becomes primary.
    """
    primary_index = next((i for i, image in enumerate(images) if image.is_primary), 0)
    return [
        {
            "url": image.url,
            "alt": image.alt,
            "sort_order": image.sort_order if image.sort_order is not None else index,
            "is_primary": index == primary_index,
        }
        for index, image in enumerate(images)
    ]


class ProductDAL(ShopScopedDAL):
    table = products
    model = Product
    search_columns = ("name", "description")

    def sort_column(self, sort_by):
        if sort_by == ProductSortField.SELLING_PRICE:
            return products.c.selling_price_cents
        return super().sort_column(sort_by)

    def filters(self, query):
        conditions = []
        if query.status is not None:
            conditions.append(products.c.status == query.status.value)
        if query.product_type is not None:
            conditions.append(products.c.product_type == query.product_type.value)
        if query.category_id:
            conditions.append(products.c.category_id == query.category_id)
        if query.category_slug:
            conditions.append(products.c.category_id.in_(
                select(categories.c.id).where(categories.c.slug == query.category_slug)
            ))
        if query.brand_id:
            conditions.append(products.c.brand_id == query.brand_id)
        if query.tag_id:
            conditions.append(
                select(product_tags.c.product_id)
                .where(product_tags.c.product_id == products.c.id, product_tags.c.tag_id == query.tag_id)
                .exists()
            )
        if query.attribute_id:
            conditions.append(
                select(product_attributes.c.product_id)
                .where(
                    product_attributes.c.product_id == products.c.id,
                    product_attributes.c.attribute_id == query.attribute_id,
                )
                .exists()
            )
        if query.is_featured is not None:
            conditions.append(products.c.is_featured == query.is_featured)
        if query.is_active is not None:
            conditions.append(products.c.is_active == query.is_active)
        if query.in_stock is True:
            conditions.append(products.c.stock > 0)
        elif query.in_stock is False:
            conditions.append(products.c.stock <= 0)
        if query.low_stock:
            conditions.append(products.c.stock <= products.c.low_stock_threshold)
        if query.min_price_cents is not None:
            conditions.append(products.c.selling_price_cents >= query.min_price_cents)
        if query.max_price_cents is not None:
            conditions.append(products.c.selling_price_cents <= query.max_price_cents)
        return conditions

    def _select_with_relations(self, from_clause, include_shop_info, include_vendor_info):
        columns = [products, *_RELATION_COLUMNS]
        from_clause = (
            from_clause
            .outerjoin(categories, categories.c.id == products.c.category_id)
            .outerjoin(brands, brands.c.id == products.c.brand_id)
            .outerjoin(product_images, product_images.c.product_id == products.c.id)
        )
        if include_shop_info or include_vendor_info:
            columns.extend(shop_info_columns(include_vendor_info))
            from_clause = join_shop_info(from_clause, products.c.shop_id, include_vendor_info)
        return select(*columns).select_from(from_clause)

    def _reduce(self, rows, include_shop_info, exclude_cost_price):
        def make_parent(row):
            data = {c.name: row[c.name] for c in products.columns}
            if exclude_cost_price:
                data["cost_price_cents"] = None
            if row["category_id"] is not None and row["category_name"] is not None:
                data["category"] = CategoryRef(
                    id=row["category_id"], name=row["category_name"], slug=row["category_slug"],
                )
            if row["brand_id"] is not None and row["brand_name"] is not None:
                data["brand"] = BrandRef(id=row["brand_id"], name=row["brand_name"], slug=row["brand_slug"])
            if include_shop_info:
                data["shop"] = shop_info_from_row(row, row["shop_id"])
            return data

        grouped = group_rows(rows, "id", make_parent, children={"images": ("image_id", _image_from_row)})
        return [Product(**item) for item in grouped]

    def execute_query(self, conn, base_conditions: Sequence, query,
                      include_shop_info=False, include_vendor_info=False,
                      exclude_cost_price=False) -> Page:
        """One page of products with category, brand, images and shop hydrated.

        Paging is applied to a derived table of product ids, so image rows
        never count against ``limit``.
        """
        conditions = self.query_conditions(base_conditions, query)
        order = sort_clauses(self.sort_column(query.sort_by), query.sort_direction, products.c.id)
        page = ranked_page(products.c.id, conditions, order, query.limit, query.offset)
        stmt = (
            self._select_with_relations(
                products.join(page, page.c.page_id == products.c.id),
                include_shop_info, include_vendor_info,
            )
            .order_by(page.c.position, *IMAGE_ORDER)
        )
        rows = conn.execute(stmt).mappings().all()
        return Page(
            data=self._reduce(rows, include_shop_info or include_vendor_info, exclude_cost_price),
            total=count_matching(conn, products, conditions),
            limit=query.limit,
            offset=query.offset,
        )

    def get(self, conn, entity_id, include_shop_info=False, include_vendor_info=False,
            exclude_cost_price=False) -> Optional[Product]:
        """Product detail: list hydration plus tags and attributes."""
        stmt = (
            self._select_with_relations(products, include_shop_info, include_vendor_info)
            .where(products.c.id == entity_id)
            .order_by(*IMAGE_ORDER)
        )
        rows = conn.execute(stmt).mappings().all()
        if not rows:
            return None
        product = self._reduce(rows, include_shop_info or include_vendor_info, exclude_cost_price)[0]
        product.tags = self.fetch_tags(conn, entity_id)
        product.attributes = self.fetch_attributes(conn, entity_id)
        return product

    def fetch_tags(self, conn, product_id) -> list[TagRef]:
        stmt = (
            select(tags.c.id, tags.c.name, tags.c.slug)
            .select_from(tags.join(product_tags, product_tags.c.tag_id == tags.c.id))
            .where(product_tags.c.product_id == product_id)
            .order_by(tags.c.sort_order, tags.c.name)
        )
        return [TagRef(**row) for row in conn.execute(stmt).mappings()]

    def fetch_attributes(self, conn, product_id) -> list[ProductAttributeRef]:
        stmt = (
            select(
                attributes.c.id.label("attribute_id"),
                attributes.c.name,
                attributes.c.slug,
                product_attributes.c.value,
            )
            .select_from(attributes.join(product_attributes, product_attributes.c.attribute_id == attributes.c.id))
            .where(product_attributes.c.product_id == product_id)
            .order_by(attributes.c.sort_order, attributes.c.name)
        )
        return [ProductAttributeRef(**row) for row in conn.execute(stmt).mappings()]

    def replace_images(self, conn, product_id, images) -> None:
        conn.execute(delete(product_images).where(product_images.c.product_id == product_id))
        if not images:
            return
        conn.execute(insert(product_images), [
            {"id": str(uuid.uuid4()), "product_id": product_id, **row}
            for row in order_images(images)
        ])

    def replace_tags(self, conn, product_id, tag_ids) -> None:
        conn.execute(delete(product_tags).where(product_tags.c.product_id == product_id))
        unique_ids = list(dict.fromkeys(tag_ids or []))
        if not unique_ids:
            return
        conn.execute(insert(product_tags), [{"product_id": product_id, "tag_id": t} for t in unique_ids])

    def replace_attributes(self, conn, product_id, links) -> None:
        conn.execute(delete(product_attributes).where(product_attributes.c.product_id == product_id))
        by_attribute = {link.attribute_id: link.value for link in links or []}
        if not by_attribute:
            return
        conn.execute(insert(product_attributes), [
            {"product_id": product_id, "attribute_id": attribute_id, "value": value}
            for attribute_id, value in by_attribute.items()
        ])

    def recompute_rating(self, conn, product_id) -> None:
        """Refresh average_rating and review_count from published reviews."""
        stmt = select(func.avg(reviews.c.rating), func.count(reviews.c.id)).where(
            reviews.c.product_id == product_id,
            reviews.c.status == "published",
        )
        average, count = conn.execute(stmt).one()
        conn.execute(
            update(products)
            .where(products.c.id == product_id)
            .values(average_rating=round(float(average or 0), 2), review_count=count)
        )
        logger.debug(f"Recomputed rating for product {product_id}: {average} over {count} reviews")
