"""Permission model for campus events RBAC.

Permissions are resource × action pairs.

Permission string format: "resource:action"
Examples:
  - events:create
  - approvals:review
  - notices:delete
"""

from enum import Enum
from typing import NamedTuple, FrozenSet


class Resource(str, Enum):
    """Resources that can be protected by permissions."""
    
    EVENTS = "events"                 # Event proposals
    APPROVALS = "approvals"           # Review decisions and audit trail
    ANNOUNCEMENTS = "announcements"
    NOTICES = "notices"               # Notice board
    USERS = "users"                   # Profiles and user search


class Action(str, Enum):
    """Actions that can be performed on resources."""
    
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"
    REVIEW = "review"                 # Record an approval decision


class Permission(NamedTuple):
    """A permission is a combination of resource and action."""
    resource: Resource
    action: Action
    
    def __str__(self) -> str:
        return f"{self.resource.value}:{self.action.value}"
    
    @classmethod
    def from_string(cls, perm_str: str) -> "Permission":
        """Parse a permission string like 'events:read'."""
        parts = perm_str.split(":")
        if len(parts) != 2:
            raise ValueError(f"Invalid permission format: {perm_str}")
        return cls(Resource(parts[0]), Action(parts[1]))


_CRUD = frozenset([Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE, Action.LIST])

# Maps each resource to its valid actions
PERMISSION_MATRIX: dict[Resource, FrozenSet[Action]] = {
    Resource.EVENTS: _CRUD,
    Resource.APPROVALS: frozenset([Action.READ, Action.LIST, Action.REVIEW]),
    Resource.ANNOUNCEMENTS: _CRUD,
    Resource.NOTICES: _CRUD,
    Resource.USERS: frozenset([Action.READ, Action.UPDATE, Action.LIST]),
}


def _generate_permission_definitions() -> dict[str, Permission]:
    """Generate all valid permission combinations from the matrix."""
    permissions = {}
    for resource, actions in PERMISSION_MATRIX.items():
        for action in actions:
            perm = Permission(resource, action)
            permissions[str(perm)] = perm
    return permissions


# All valid permissions: "resource:action" -> Permission
PERMISSION_DEFINITIONS = _generate_permission_definitions()


def is_valid_permission(perm_str: str) -> bool:
    """Check if a permission string is valid."""
    return perm_str in PERMISSION_DEFINITIONS
