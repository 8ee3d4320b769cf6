"""Caller scoping for every service call.

Services turn the caller into ``base_conditions`` here, once, before handing
them to a query helper; the helpers themselves never look at the caller.
"""

from typing import Optional

from shared.errors import ForbiddenError, NotFoundError
from shared.models.common import Caller, Role

CATALOG_ROLES = (Role.ADMIN, Role.VENDOR, Role.STAFF)


def require_admin(caller: Caller) -> None:
    if not caller.is_admin:
        raise ForbiddenError("Admin access required.")


def require_catalog_access(caller: Caller) -> None:
    if caller.role not in CATALOG_ROLES:
        raise ForbiddenError("You do not have access to manage the catalog.")


def scope_conditions(caller: Caller, shop_column, shop_id: Optional[str] = None) -> list:
    """Predicates limiting ``shop_column`` to what the caller may see.

    Admins see every shop unless they ask for one. Vendors and staff are
    pinned to their own shops; a requested shop only narrows that set.
    """
    require_catalog_access(caller)
    conditions = []
    if not caller.is_admin:
        conditions.append(shop_column.in_(caller.shop_ids))
    if shop_id:
        conditions.append(shop_column == shop_id)
    return conditions


def in_scope(caller: Caller, shop_id: Optional[str]) -> bool:
    if caller.is_admin:
        return True
    return shop_id is not None and shop_id in caller.shop_ids


def ensure_in_scope(caller: Caller, shop_id: Optional[str], message: str) -> None:
    """Rows outside the caller's shops are reported as missing, not forbidden."""
    if not in_scope(caller, shop_id):
        raise NotFoundError(message)


def resolve_create_shop(caller: Caller, shop_id: str) -> str:
    require_catalog_access(caller)
    if not in_scope(caller, shop_id):
        raise ForbiddenError("You can only add items to your own shops.")
    return shop_id
