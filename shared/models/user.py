"""
User Model - platform identities

A user's status is not stored; it is derived from the ban flag and email
verification: suspended if banned, else active if verified, else inactive.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from shared.models.common import ListQuery, naive_utc


class UserRole(str, Enum):
    ADMIN = "admin"
    VENDOR = "vendor"
    STAFF = "staff"
    USER = "user"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


def derive_user_status(banned: bool, email_verified: bool) -> UserStatus:
    if banned:
        return UserStatus.SUSPENDED
    if email_verified:
        return UserStatus.ACTIVE
    return UserStatus.INACTIVE


def status_flags(status: UserStatus) -> dict:
    """Stored flags to write for a requested status.

    Suspending only sets the ban; email verification is left as stored so
    an unbanned user returns to the status they had.
    """
    if status == UserStatus.SUSPENDED:
        return {"banned": True}
    return {
        "email_verified": status == UserStatus.ACTIVE,
        "banned": False,
    }


class User(BaseModel):
    id: str
    name: str
    email: str
    avatar: Optional[str] = None
    role: UserRole
    status: UserStatus
    email_verified: bool
    banned: bool
    ban_reason: Optional[str] = None
    ban_expires: Optional[datetime] = None
    created_at: datetime


class CreateUserRequest(BaseModel):
    name: Annotated[str, Field(min_length=2, max_length=100)]
    email: EmailStr
    role: UserRole = UserRole.USER
    status: UserStatus = UserStatus.ACTIVE


class UpdateUserRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    name: Annotated[Optional[str], Field(None, min_length=2, max_length=100)]
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class BanUserRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    reason: Annotated[Optional[str], Field(None, max_length=500)]
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def store_as_utc(cls, v):
        return naive_utc(v)


class UserListQuery(ListQuery):
    status: Optional[UserStatus] = None
    role: Optional[UserRole] = None


class UserStats(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    suspended_users: int
