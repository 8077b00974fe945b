"""RBAC (Role-Based Access Control) module for campus events.

Defines the permission model, the permission set of each fixed role,
and access control utilities for API routes.
"""

from .permissions import Permission, Resource, Action, PERMISSION_DEFINITIONS
from .checker import PermissionChecker, has_permission, require_permission

__all__ = [
    "Permission",
    "Resource",
    "Action",
    "PERMISSION_DEFINITIONS",
    "PermissionChecker",
    "has_permission",
    "require_permission",
]
