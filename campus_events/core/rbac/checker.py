"""Permission checking utilities for campus events.

Provides decorators and utilities for enforcing RBAC permissions.
"""

from functools import wraps
from typing import Callable, Iterable, List, Union

from fastapi import HTTPException, status

from campus_events.core.approval.states import UserRole
from .permissions import Permission
from .roles import get_role_permissions


class PermissionChecker:
    """Checks if a role grants specific permissions."""

    def __init__(self, user_permissions: Iterable[str]):
        """
        Initialize with a permission list.

        Args:
            user_permissions: Permission strings granted to the user
        """
        self.permissions = set(user_permissions)

    @classmethod
    def for_role(cls, role: UserRole) -> "PermissionChecker":
        return cls(get_role_permissions(role))

    def has_permission(self, permission: Union[str, Permission]) -> bool:
        """Check if user has a specific permission."""
        perm_str = str(permission) if isinstance(permission, Permission) else permission
        return perm_str in self.permissions

    def has_any_permission(self, permissions: List[Union[str, Permission]]) -> bool:
        """Check if user has any of the given permissions."""
        return any(self.has_permission(p) for p in permissions)

    def has_all_permissions(self, permissions: List[Union[str, Permission]]) -> bool:
        """Check if user has all of the given permissions."""
        return all(self.has_permission(p) for p in permissions)


def has_permission(user, permission: Union[str, Permission]) -> bool:
    """
    Check if a user has a specific permission.

    Args:
        user: User model instance
        permission: Permission string or Permission object

    Returns:
        True if the user's role grants the permission
    """
    if not user or not user.role:
        return False

    try:
        checker = PermissionChecker.for_role(user.role)
    except ValueError:
        return False
    return checker.has_permission(permission)


def require_permission(*permissions: Union[str, Permission], require_all: bool = False):
    """
    Decorator factory for FastAPI endpoints requiring specific permissions.

    Args:
        permissions: One or more permission strings or Permission objects
        require_all: If True, user must have ALL permissions. Default: any one.

    Usage:
        @router.post("/events")
        @require_permission("events:create")
        async def create_event(current_user: User = Depends(get_current_user)):
            ...
    """
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            # current_user is injected by FastAPI Depends
            current_user = kwargs.get("current_user")

            if not current_user:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Authentication required"
                )

            try:
                checker = PermissionChecker.for_role(current_user.role)
            except ValueError:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="User has no valid role"
                )

            perm_strs = [str(p) if isinstance(p, Permission) else p for p in permissions]

            if require_all:
                has_access = checker.has_all_permissions(perm_strs)
            else:
                has_access = checker.has_any_permission(perm_strs)

            if not has_access:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Insufficient permissions. Required: {', '.join(perm_strs)}"
                )

            return await func(*args, **kwargs)

        return wrapper
    return decorator
