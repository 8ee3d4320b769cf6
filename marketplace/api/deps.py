"""Request dependencies: the caller identity and the service container."""

from typing import Optional

from fastapi import Depends, Header, Request

from marketplace.api.services import Services
from shared.errors import ForbiddenError, UnauthorizedError
from shared.models.common import Caller, Role


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_caller(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
    x_shop_ids: Optional[str] = Header(None),
) -> Caller:
    """Identity set by the upstream auth middleware; missing identity is a 401."""
    if not x_user_id or not x_user_role:
        raise UnauthorizedError("Not authenticated.")
    try:
        role = Role(x_user_role.strip().lower())
    except ValueError:
        raise UnauthorizedError("Unknown role.")
    shop_ids = [s.strip() for s in (x_shop_ids or "").split(",") if s.strip()]
    return Caller(user_id=x_user_id, role=role, shop_ids=shop_ids)


def admin_caller(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_admin:
        raise ForbiddenError("Admin access required.")
    return caller


def vendor_caller(caller: Caller = Depends(get_caller)) -> Caller:
    if caller.role not in (Role.VENDOR, Role.STAFF):
        raise ForbiddenError("Vendor access required.")
    return caller
