"""Domain errors for campus events.

Every error is scoped to a single request. Each class carries the HTTP
status the API renders it with and a short machine-readable code.
"""

from typing import Dict, Optional


class CampusEventsError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CampusEventsError):
    """Malformed input, e.g. an incomplete event proposal."""

    status_code = 422
    code = "validation_error"

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        if message is None:
            message = "Invalid fields: " + ", ".join(sorted(self.errors))
        super().__init__(message)


class NotFound(CampusEventsError):
    """Referenced event, user or content record does not exist."""

    status_code = 404
    code = "not_found"

    def __init__(self, resource: str, resource_id):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


class Unauthorized(CampusEventsError):
    """Actor may not perform this action (wrong role, stage or owner)."""

    status_code = 403
    code = "unauthorized"


class InvalidRole(CampusEventsError):
    """Role cannot review events at all."""

    status_code = 403
    code = "invalid_role"

    def __init__(self, role):
        value = getattr(role, "value", role)
        super().__init__(f"Role {value!r} cannot review events")
        self.role = role


class InvalidTransition(CampusEventsError):
    """Event is in a terminal state."""

    status_code = 409
    code = "invalid_transition"


class AlreadyReviewed(CampusEventsError):
    """Role already recorded a decision for this event."""

    status_code = 409
    code = "already_reviewed"


class Conflict(CampusEventsError):
    """Event status changed underneath the caller."""

    status_code = 409
    code = "conflict"
