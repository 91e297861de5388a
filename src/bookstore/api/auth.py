"""Caller identity taken from trusted request headers.

Authentication happens upstream; these dependencies only check that the
expected header is present and that the role allows the route.
"""

from enum import Enum

from fastapi import Header

from bookstore.exceptions import ForbiddenError, UnauthorizedError


class Role(Enum):
    MEMBER = "Member"
    STAFF = "Staff"
    ADMIN = "Admin"


def _role(x_role: str | None) -> str:
    return (x_role or Role.MEMBER.value).strip().capitalize()


def current_member_id(x_member_id: str | None = Header(default=None)) -> str:
    if not x_member_id:
        raise UnauthorizedError({"auth": ["X-Member-Id header is required"]})
    return x_member_id


def current_staff_id(
    x_staff_id: str | None = Header(default=None),
    x_role: str | None = Header(default=None),
) -> str:
    if not x_staff_id:
        raise UnauthorizedError({"auth": ["X-Staff-Id header is required"]})
    if _role(x_role) not in (Role.STAFF.value, Role.ADMIN.value):
        raise ForbiddenError({"auth": ["Staff or Admin role required"]})
    return x_staff_id


def require_admin(x_role: str | None = Header(default=None)) -> str:
    if not x_role:
        raise UnauthorizedError({"auth": ["X-Role header is required"]})
    if _role(x_role) != Role.ADMIN.value:
        raise ForbiddenError({"auth": ["Admin role required"]})
    return Role.ADMIN.value
