"""Request context for ownership enforcement."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the requesting user's identity.

    Used to enforce ownership in all database operations.
    """

    user_id: UUID
