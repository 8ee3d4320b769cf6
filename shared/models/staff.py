"""Staff Model - users working for a shop, with a role and permission set"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from shared.models.common import ListQuery, ShopInfo


class StaffRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INVITED = "invited"
    INACTIVE = "inactive"


def _dedupe(permissions):
    if permissions is None:
        return permissions
    return list(dict.fromkeys(p.strip() for p in permissions if p.strip()))


class StaffMember(BaseModel):
    id: str
    user_id: str
    shop_id: str
    name: str = ""
    email: str = ""
    avatar: Optional[str] = None
    role: StaffRole
    status: StaffStatus
    permissions: List[str] = Field(default_factory=list)
    joined_date: datetime
    shop: Optional[ShopInfo] = None


class AddStaffRequest(BaseModel):
    shop_id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1, max_length=100)]
    email: EmailStr
    role: StaffRole = StaffRole.STAFF
    status: StaffStatus = StaffStatus.INVITED
    permissions: List[str] = Field(default_factory=list)

    @field_validator("permissions")
    @classmethod
    def dedupe_permissions(cls, v):
        return _dedupe(v)


class UpdateStaffRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    role: Optional[StaffRole] = None
    status: Optional[StaffStatus] = None
    permissions: Optional[List[str]] = None

    @field_validator("permissions")
    @classmethod
    def dedupe_permissions(cls, v):
        return _dedupe(v)


class StaffListQuery(ListQuery):
    role: Optional[StaffRole] = None
    status: Optional[StaffStatus] = None
