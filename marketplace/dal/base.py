"""Shared building blocks for the per-entity query helpers.

Every helper follows the same shape: the caller hands in ``base_conditions``
(already scoped to what the caller may see), the helper appends its own
filter predicates, then runs a page query and a count query over the *same*
predicate list so ``total`` always means "total matching".
"""

import logging
import uuid
from typing import Any, Callable, Iterable, Optional, Sequence

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.engine import Connection, RowMapping

from marketplace.db.tables import shops, vendors
from shared.models.common import Page, ShopInfo, SortDirection

logger = logging.getLogger(__name__)


def search_clause(term: str, *columns):
    """Case-insensitive substring match on any of ``columns``."""
    pattern = f"%{term.strip()}%"
    return or_(*(column.ilike(pattern) for column in columns))


def sort_clauses(column, direction: SortDirection, tiebreak) -> list:
    """ORDER BY the requested column, then by id so pages are stable."""
    if direction == SortDirection.DESC:
        return [column.desc(), tiebreak.asc()]
    return [column.asc(), tiebreak.asc()]


def count_matching(conn: Connection, table, conditions: Sequence) -> int:
    stmt = select(func.count()).select_from(table).where(*conditions)
    return conn.execute(stmt).scalar_one()


def fetch_page(conn: Connection, stmt, table, conditions: Sequence,
               normalize: Callable[[RowMapping], Any],
               limit: int, offset: int) -> Page:
    """Run ``stmt`` (already filtered and ordered) for one page plus the matching total.

    ``stmt`` must not fan out (one row per ``table`` row); one-to-many data is
    attached afterwards with ``group_rows``.
    """
    rows = conn.execute(stmt.limit(limit).offset(offset)).mappings().all()
    total = count_matching(conn, table, conditions)
    return Page(data=[normalize(row) for row in rows], total=total, limit=limit, offset=offset)


def group_rows(rows: Iterable[RowMapping], key: str,
               make_parent: Callable[[RowMapping], dict],
               children: Optional[dict] = None) -> list[dict]:
    """Reduce joined rows to one dict per parent.

    Merge rule:
    - parents keep the order in which their id first appears;
    - a parent is built from its first row only;
    - each entry of ``children`` maps a field name to ``(child_key,
      make_child)``; a child is appended at most once per parent (by
      ``child_key``) and rows whose child key is NULL (outer-join misses)
      add nothing.
    """
    children = children or {}
    parents: dict = {}
    seen: dict = {}
    for row in rows:
        parent_id = row[key]
        if parent_id not in parents:
            parent = make_parent(row)
            for field in children:
                parent[field] = []
            parents[parent_id] = parent
            seen[parent_id] = {field: set() for field in children}
        parent = parents[parent_id]
        for field, (child_key, make_child) in children.items():
            child_id = row[child_key]
            if child_id is None or child_id in seen[parent_id][field]:
                continue
            seen[parent_id][field].add(child_id)
            parent[field].append(make_child(row))
    return list(parents.values())


def shop_info_columns(include_vendor: bool = False) -> list:
    """Labelled shop (and vendor) columns for a LEFT JOIN on shops/vendors."""
    columns = [
        shops.c.name.label("shop_name"),
        shops.c.slug.label("shop_slug"),
        shops.c.vendor_id.label("shop_vendor_id"),
    ]
    if include_vendor:
        columns.append(vendors.c.business_name.label("vendor_name"))
    return columns


def join_shop_info(from_clause, shop_id_column, include_vendor: bool = False):
    joined = from_clause.outerjoin(shops, shops.c.id == shop_id_column)
    if include_vendor:
        joined = joined.outerjoin(vendors, vendors.c.id == shops.c.vendor_id)
    return joined


def shop_info_from_row(row: RowMapping, shop_id: Optional[str]) -> Optional[ShopInfo]:
    if shop_id is None or row.get("shop_name") is None:
        return None
    return ShopInfo(
        id=shop_id,
        name=row["shop_name"],
        slug=row["shop_slug"],
        vendor_id=row.get("shop_vendor_id"),
        vendor_name=row.get("vendor_name"),
    )


def fetch_shop_info(conn: Connection, shop_id: Optional[str], include_vendor: bool = False) -> Optional[ShopInfo]:
    if shop_id is None:
        return None
    stmt = select(shops.c.id, *shop_info_columns(include_vendor))
    stmt = stmt.select_from(join_shop_info(shops, shops.c.id, include_vendor)).where(shops.c.id == shop_id)
    row = conn.execute(stmt).mappings().first()
    if row is None:
        return None
    return shop_info_from_row(row, shop_id)


def exists_with(conn: Connection, table, *conditions) -> bool:
    stmt = select(table.c.id).where(*conditions).limit(1)
    return conn.execute(stmt).first() is not None


def ranked_page(id_column, conditions: Sequence, order: Sequence, limit: int, offset: int):
    """Derived table with the ids of one page of parents and their position.

    Joining one-to-many children onto this (instead of limiting the joined
    query) keeps ``limit``/``offset`` counting parents, not joined rows.
    """
    return (
        select(
            id_column.label("page_id"),
            func.row_number().over(order_by=list(order)).label("position"),
        )
        .where(*conditions)
        .order_by(*order)
        .limit(limit)
        .offset(offset)
        .subquery("page")
    )


class ShopScopedDAL:
    """Query helper for a table whose rows belong to one shop.

    Subclasses set ``table``/``model`` and override ``filters``,
    ``sort_column`` and ``extra_columns`` for their entity.
    """

    table = None
    model = None
    search_columns: tuple = ()
    slug_column = "slug"

    def extra_columns(self) -> list:
        return []

    def filters(self, query) -> list:
        return []

    def sort_column(self, sort_by):
        return self.table.c[sort_by.value]

    def _select(self, include_shop_info: bool = False, include_vendor_info: bool = False):
        table = self.table
        columns = [table, *self.extra_columns()]
        from_clause = table
        if include_shop_info or include_vendor_info:
            columns.extend(shop_info_columns(include_vendor_info))
            from_clause = join_shop_info(table, table.c.shop_id, include_vendor_info)
        return select(*columns).select_from(from_clause)

    def normalize(self, row: RowMapping, include_shop_info: bool = False):
        shop = shop_info_from_row(row, row["shop_id"]) if include_shop_info else None
        return self.model(**dict(row), shop=shop)

    def query_conditions(self, base_conditions: Sequence, query) -> list:
        conditions = list(base_conditions)
        if query.search and self.search_columns:
            conditions.append(search_clause(query.search, *(self.table.c[c] for c in self.search_columns)))
        conditions.extend(self.filters(query))
        return conditions

    def execute_query(self, conn: Connection, base_conditions: Sequence, query,
                      include_shop_info: bool = False, include_vendor_info: bool = False) -> Page:
        conditions = self.query_conditions(base_conditions, query)
        order = sort_clauses(self.sort_column(query.sort_by), query.sort_direction, self.table.c.id)
        stmt = self._select(include_shop_info, include_vendor_info).where(*conditions).order_by(*order)
        show_shop = include_shop_info or include_vendor_info
        return fetch_page(
            conn, stmt, self.table, conditions,
            lambda row: self.normalize(row, show_shop),
            query.limit, query.offset,
        )

    def get(self, conn: Connection, entity_id: str, include_shop_info: bool = False,
            include_vendor_info: bool = False):
        stmt = self._select(include_shop_info, include_vendor_info).where(self.table.c.id == entity_id)
        row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return self.normalize(row, include_shop_info or include_vendor_info)

    def get_row(self, conn: Connection, entity_id: str) -> Optional[RowMapping]:
        stmt = select(self.table).where(self.table.c.id == entity_id)
        return conn.execute(stmt).mappings().first()

    def find_by_slug(self, conn: Connection, shop_id: Optional[str], slug: str,
                     exclude_id: Optional[str] = None) -> Optional[RowMapping]:
        table = self.table
        conditions = [table.c.shop_id == shop_id, table.c[self.slug_column] == slug]
        if exclude_id is not None:
            conditions.append(table.c.id != exclude_id)
        return conn.execute(select(table).where(*conditions).limit(1)).mappings().first()

    def insert(self, conn: Connection, values: dict) -> str:
        entity_id = str(uuid.uuid4())
        conn.execute(insert(self.table).values(id=entity_id, **values))
        return entity_id

    def update(self, conn: Connection, entity_id: str, values: dict) -> None:
        if not values:
            return
        conn.execute(update(self.table).where(self.table.c.id == entity_id).values(**values))

    def delete(self, conn: Connection, entity_id: str) -> None:
        conn.execute(delete(self.table).where(self.table.c.id == entity_id))
