"""Resource ownership checks."""

from enum import Enum
from uuid import UUID

from todo_api.errors import ForbiddenError
from todo_api.services.identity import CallerIdentity


class Access(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def authorize(owner_id: UUID, caller_id: UUID) -> Access:
    """Decide whether the caller may act on a resource owned by ``owner_id``."""
    return Access.ALLOW if owner_id == caller_id else Access.DENY


def require_owner(owner_id: UUID, caller: CallerIdentity, message: str = "Forbidden") -> None:
    """Raise ForbiddenError unless the caller owns the resource."""
    if authorize(owner_id, caller.id) is Access.DENY:
        raise ForbiddenError(message)
