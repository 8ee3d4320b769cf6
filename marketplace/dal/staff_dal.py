"""Data Access Layer for staff table."""

import logging
import uuid
from typing import Optional

from sqlalchemy import delete, insert, select, update

from marketplace.dal.base import fetch_page, join_shop_info, search_clause, shop_info_columns, shop_info_from_row
from marketplace.db.tables import staff, users
from shared.models.common import Page
from shared.models.staff import StaffMember

logger = logging.getLogger(__name__)

MEMBER_FROM = staff.join(users, users.c.id == staff.c.user_id)


class StaffDAL:

    def _select(self, include_shop_info=False):
        columns = [
            staff,
            users.c.name,
            users.c.email,
            users.c.image.label("avatar"),
        ]
        from_clause = MEMBER_FROM
        if include_shop_info:
            columns.extend(shop_info_columns())
            from_clause = join_shop_info(from_clause, staff.c.shop_id)
        return select(*columns).select_from(from_clause)

    @staticmethod
    def normalize(row, include_shop_info=False) -> StaffMember:
        shop = shop_info_from_row(row, row["shop_id"]) if include_shop_info else None
        return StaffMember(**dict(row), shop=shop)

    def execute_query(self, conn, base_conditions, query, include_shop_info=False) -> Page:
        conditions = list(base_conditions)
        if query.search:
            conditions.append(search_clause(query.search, users.c.name, users.c.email))
        if query.shop_id:
            conditions.append(staff.c.shop_id == query.shop_id)
        if query.role is not None:
            conditions.append(staff.c.role == query.role.value)
        if query.status is not None:
            conditions.append(staff.c.status == query.status.value)
        stmt = self._select(include_shop_info).where(*conditions).order_by(staff.c.joined_date.desc(), staff.c.id)
        return fetch_page(
            conn, stmt, MEMBER_FROM, conditions,
            lambda row: self.normalize(row, include_shop_info),
            query.limit, query.offset,
        )

    def get(self, conn, staff_id, include_shop_info=False) -> Optional[StaffMember]:
        row = conn.execute(self._select(include_shop_info).where(staff.c.id == staff_id)).mappings().first()
        return self.normalize(row, include_shop_info) if row is not None else None

    def get_row(self, conn, staff_id):
        return conn.execute(select(staff).where(staff.c.id == staff_id)).mappings().first()

    def find_membership(self, conn, user_id, shop_id):
        stmt = select(staff).where(staff.c.user_id == user_id, staff.c.shop_id == shop_id)
        return conn.execute(stmt).mappings().first()

    def insert(self, conn, values: dict) -> str:
        staff_id = str(uuid.uuid4())
        conn.execute(insert(staff).values(id=staff_id, **values))
        return staff_id

    def update(self, conn, staff_id, values: dict) -> None:
        if values:
            conn.execute(update(staff).where(staff.c.id == staff_id).values(**values))

    def delete(self, conn, staff_id) -> None:
        conn.execute(delete(staff).where(staff.c.id == staff_id))
