"""Caller identity resolved from a verified session token."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class CallerIdentity:
    """The authenticated caller for the rest of a request.

    Only the id is known; the user row is not loaded to build it.
    """

    id: UUID
