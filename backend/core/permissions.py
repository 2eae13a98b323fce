"""
Role-based permissions.

Each role maps to a fixed allow-list. Route handlers do not look the current
user up themselves; they declare ``require_permission(...)`` and receive a
``Capability`` describing what the caller may do.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from fastapi import Depends, HTTPException, status

from core.auth import current_active_user
from db.users import User

logger = logging.getLogger(__name__)

VIEW_INVENTORY = "view_inventory"
ADD_INVENTORY = "add_inventory"
EDIT_INVENTORY = "edit_inventory"
DELETE_INVENTORY = "delete_inventory"
VIEW_SALES = "view_sales"
MANAGE_USERS = "manage_users"
VIEW_REPORTS = "view_reports"
EXPORT_DATA = "export_data"
VIEW_SETTINGS = "view_settings"
EDIT_SETTINGS = "edit_settings"

ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_STAFF = "staff"

ROLE_PERMISSIONS: Dict[str, Tuple[str, ...]] = {
    ROLE_ADMIN: (
        VIEW_INVENTORY,
        ADD_INVENTORY,
        EDIT_INVENTORY,
        DELETE_INVENTORY,
        VIEW_SALES,
        MANAGE_USERS,
        VIEW_REPORTS,
        EXPORT_DATA,
        VIEW_SETTINGS,
        EDIT_SETTINGS,
    ),
    ROLE_MANAGER: (
        VIEW_INVENTORY,
        ADD_INVENTORY,
        EDIT_INVENTORY,
        VIEW_SALES,
        VIEW_REPORTS,
        EXPORT_DATA,
    ),
    ROLE_STAFF: (
        VIEW_INVENTORY,
        ADD_INVENTORY,
    ),
}

ROLES = tuple(ROLE_PERMISSIONS)


def permissions_for(role: str) -> FrozenSet[str]:
    return frozenset(ROLE_PERMISSIONS.get(role, ()))


def has_permission(user, permission: str) -> bool:
    if user is None:
        return False
    return permission in permissions_for(getattr(user, "role", None))


@dataclass(frozen=True)
class Capability:
    """What the authenticated caller is allowed to do."""

    user: User
    permissions: FrozenSet[str]

    @classmethod
    def for_user(cls, user: User) -> "Capability":
        return cls(user=user, permissions=permissions_for(user.role))

    def can(self, permission: str) -> bool:
        return permission in self.permissions


def require_permission(permission: str):
    async def _dependency(user: User = Depends(current_active_user)) -> Capability:
        capability = Capability.for_user(user)
        if not capability.can(permission):
            logger.warning("User %s (%s) denied %s", user.id, user.role, permission)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")
        return capability

    return _dependency


async def current_capability(user: User = Depends(current_active_user)) -> Capability:
    return Capability.for_user(user)
