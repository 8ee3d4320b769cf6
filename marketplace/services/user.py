"""User Service - admin user management with status derived from stored flags."""

import logging

from marketplace.dal.user_dal import UserDAL
from marketplace.services.access import require_admin
from marketplace.services.base import BaseService, patch_values
from shared.errors import DuplicateError, NotFoundError
from shared.kafka.topics import EventType
from shared.models.common import Caller, Page
from shared.models.user import User, UserListQuery, UserStats, UserStatus, status_flags

logger = logging.getLogger(__name__)

NOT_FOUND = "User not found."
DUPLICATE = "A user with this email already exists."


class UserService(BaseService):
    """Handles user DB operations. Every operation is admin-only."""

    def __init__(self, database=None, kafka=None):
        super().__init__(database, kafka)
        self._dal = UserDAL()

    def _existing(self, conn, user_id: str):
        row = self._dal.get_row(conn, user_id)
        if row is None:
            raise NotFoundError(NOT_FOUND)
        return row

    def get_page(self, caller: Caller, query: UserListQuery) -> Page:
        require_admin(caller)
        with self._read() as conn:
            return self._dal.execute_query(conn, query)

    def get(self, caller: Caller, user_id: str) -> User:
        require_admin(caller)
        with self._read() as conn:
            self._existing(conn, user_id)
            return self._dal.get(conn, user_id)

    def stats(self, caller: Caller) -> UserStats:
        require_admin(caller)
        with self._read() as conn:
            return self._dal.stats(conn)

    def create(self, caller: Caller, body) -> User:
        """Create a user. The requested status is stored as verified/banned flags."""
        require_admin(caller)
        email = body.email.lower()
        with self._write(DUPLICATE) as conn:
            if self._dal.find_by_email(conn, email):
                raise DuplicateError(DUPLICATE)
            user_id = self._dal.insert(conn, {
                "name": body.name,
                "email": email,
                "role": body.role.value,
                **status_flags(body.status),
            })
            user = self._dal.get(conn, user_id)

        self._publish(EventType.USER_CREATED, user_id, user.model_dump(mode="json"))
        return user

    def update(self, caller: Caller, body) -> User:
        require_admin(caller)
        values = patch_values(body)
        if "email" in values:
            values["email"] = values["email"].lower()
        if "status" in values:
            values.update(status_flags(UserStatus(values.pop("status"))))
            if not values["banned"]:
                values.update(ban_reason=None, ban_expires=None)

        with self._write(DUPLICATE) as conn:
            self._existing(conn, body.id)
            if "email" in values and self._dal.find_by_email(conn, values["email"], exclude_id=body.id):
                raise DuplicateError(DUPLICATE)
            self._dal.update(conn, body.id, values)
            user = self._dal.get(conn, body.id)

        self._publish(EventType.USER_UPDATED, body.id, user.model_dump(mode="json"))
        return user

    def delete(self, caller: Caller, user_id: str) -> None:
        require_admin(caller)
        with self._write() as conn:
            self._existing(conn, user_id)
            self._dal.delete(conn, user_id)

        self._publish(EventType.USER_DELETED, user_id, {"user_id": user_id})

    def ban(self, caller: Caller, body) -> User:
        """Ban a user with an optional reason and expiry. `body` is a BanUserRequest."""
        require_admin(caller)
        with self._write() as conn:
            self._existing(conn, body.id)
            self._dal.update(conn, body.id, {
                "banned": True,
                "ban_reason": body.reason,
                "ban_expires": body.expires_at,
            })
            user = self._dal.get(conn, body.id)

        self._publish(EventType.USER_BANNED, body.id, {
            "user_id": body.id,
            "reason": body.reason,
            "expires_at": body.expires_at.isoformat() if body.expires_at else None,
        })
        return user

    def unban(self, caller: Caller, user_id: str) -> User:
        require_admin(caller)
        with self._write() as conn:
            self._existing(conn, user_id)
            self._dal.update(conn, user_id, {"banned": False, "ban_reason": None, "ban_expires": None})
            user = self._dal.get(conn, user_id)

        self._publish(EventType.USER_UNBANNED, user_id, {"user_id": user_id})
        return user
