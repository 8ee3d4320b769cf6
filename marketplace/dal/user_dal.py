"""Data Access Layer for users table."""

import logging
import uuid
from typing import Optional

from sqlalchemy import and_, delete, func, insert, select, update

from marketplace.dal.base import fetch_page, search_clause
from marketplace.db.tables import users
from shared.models.common import Page
from shared.models.user import User, UserStats, UserStatus, derive_user_status

logger = logging.getLogger(__name__)


def status_condition(status: UserStatus):
    """SQL predicate equivalent to derive_user_status(...) == status."""
    if status == UserStatus.SUSPENDED:
        return users.c.banned.is_(True)
    return and_(
        users.c.banned.is_(False),
        users.c.email_verified.is_(status == UserStatus.ACTIVE),
    )


def _user_from_row(row) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        avatar=row["image"],
        role=row["role"],
        status=derive_user_status(row["banned"], row["email_verified"]),
        email_verified=row["email_verified"],
        banned=row["banned"],
        ban_reason=row["ban_reason"],
        ban_expires=row["ban_expires"],
        created_at=row["created_at"],
    )


class UserDAL:

    def execute_query(self, conn, query) -> Page:
        conditions = []
        if query.search:
            conditions.append(search_clause(query.search, users.c.name, users.c.email))
        if query.status is not None:
            conditions.append(status_condition(query.status))
        if query.role is not None:
            conditions.append(users.c.role == query.role.value)
        stmt = select(users).where(*conditions).order_by(users.c.created_at.desc(), users.c.id)
        return fetch_page(conn, stmt, users, conditions, _user_from_row, query.limit, query.offset)

    def get(self, conn, user_id) -> Optional[User]:
        row = self.get_row(conn, user_id)
        return _user_from_row(row) if row is not None else None

    def get_row(self, conn, user_id):
        return conn.execute(select(users).where(users.c.id == user_id)).mappings().first()

    def find_by_email(self, conn, email: str, exclude_id: Optional[str] = None):
        conditions = [func.lower(users.c.email) == email.lower()]
        if exclude_id is not None:
            conditions.append(users.c.id != exclude_id)
        return conn.execute(select(users).where(*conditions).limit(1)).mappings().first()

    def insert(self, conn, values: dict) -> str:
        user_id = str(uuid.uuid4())
        conn.execute(insert(users).values(id=user_id, **values))
        return user_id

    def update(self, conn, user_id, values: dict) -> None:
        if values:
            conn.execute(update(users).where(users.c.id == user_id).values(**values))

    def delete(self, conn, user_id) -> None:
        conn.execute(delete(users).where(users.c.id == user_id))

    def stats(self, conn) -> UserStats:
        """Counts by derived status, so the three buckets always add up to the total."""
        def count(*conditions):
            return conn.execute(select(func.count()).select_from(users).where(*conditions)).scalar_one()

        return UserStats(
            total_users=count(),
            active_users=count(status_condition(UserStatus.ACTIVE)),
            inactive_users=count(status_condition(UserStatus.INACTIVE)),
            suspended_users=count(status_condition(UserStatus.SUSPENDED)),
        )
