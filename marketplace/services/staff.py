"""Staff Service - shop memberships, found or created by email."""

import logging

from marketplace.dal.staff_dal import StaffDAL
from marketplace.dal.user_dal import UserDAL
from marketplace.db.tables import staff
from marketplace.services.access import ensure_in_scope, require_catalog_access, resolve_create_shop, scope_conditions
from marketplace.services.base import BaseService, patch_values
from marketplace.utils.datetime_utils import utc_now
from shared.errors import DuplicateError, NotFoundError
from shared.kafka.topics import EventType
from shared.models.common import Caller, Page
from shared.models.staff import StaffListQuery, StaffMember
from shared.models.user import UserRole

logger = logging.getLogger(__name__)

NOT_FOUND = "Staff member not found."
DUPLICATE = "This user is already a staff member of this shop."


class StaffService(BaseService):
    """Handles staff DB operations."""

    def __init__(self, database=None, kafka=None):
        super().__init__(database, kafka)
        self._dal = StaffDAL()
        self._users = UserDAL()

    def _existing(self, conn, caller: Caller, staff_id: str):
        row = self._dal.get_row(conn, staff_id)
        if row is None:
            raise NotFoundError(NOT_FOUND)
        ensure_in_scope(caller, row["shop_id"], NOT_FOUND)
        return row

    def get_page(self, caller: Caller, query: StaffListQuery) -> Page:
        conditions = scope_conditions(caller, staff.c.shop_id, query.shop_id)
        with self._read() as conn:
            return self._dal.execute_query(conn, conditions, query, include_shop_info=True)

    def get(self, caller: Caller, staff_id: str) -> StaffMember:
        require_catalog_access(caller)
        with self._read() as conn:
            self._existing(conn, caller, staff_id)
            return self._dal.get(conn, staff_id, include_shop_info=True)

    def add(self, caller: Caller, body) -> StaffMember:
        """Add a member to a shop. `body` is an AddStaffRequest.

        The user is looked up by email and created (unverified) when missing.
        """
        shop_id = resolve_create_shop(caller, body.shop_id)
        with self._write(DUPLICATE) as conn:
            self._require_shop(conn, shop_id)
            user = self._users.find_by_email(conn, body.email)
            if user is None:
                user_id = self._users.insert(conn, {
                    "name": body.name,
                    "email": body.email.lower(),
                    "role": UserRole.STAFF.value,
                    "email_verified": False,
                    "banned": False,
                })
                logger.info(f"Created user {user_id} for staff invite to shop {shop_id}")
            else:
                user_id = user["id"]
                if self._dal.find_membership(conn, user_id, shop_id):
                    raise DuplicateError(DUPLICATE)

            staff_id = self._dal.insert(conn, {
                "user_id": user_id,
                "shop_id": shop_id,
                "role": body.role.value,
                "status": body.status.value,
                "permissions": body.permissions,
                "joined_date": utc_now(),
            })
            member = self._dal.get(conn, staff_id, include_shop_info=True)

        self._publish(EventType.STAFF_ADDED, staff_id, member.model_dump(mode="json"))
        return member

    def update(self, caller: Caller, body) -> StaffMember:
        require_catalog_access(caller)
        values = patch_values(body)
        with self._write() as conn:
            self._existing(conn, caller, body.id)
            self._dal.update(conn, body.id, values)
            member = self._dal.get(conn, body.id, include_shop_info=True)

        self._publish(EventType.STAFF_UPDATED, body.id, member.model_dump(mode="json"))
        return member

    def remove(self, caller: Caller, staff_id: str) -> None:
        require_catalog_access(caller)
        with self._write() as conn:
            existing = self._existing(conn, caller, staff_id)
            self._dal.delete(conn, staff_id)

        self._publish(
            EventType.STAFF_REMOVED, staff_id,
            {"staff_id": staff_id, "user_id": existing["user_id"], "shop_id": existing["shop_id"]},
        )
