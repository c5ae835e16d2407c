"""Events exchanged over the event bus."""

from dataclasses import dataclass
from uuid import UUID

USER_DELETED = "user.deleted"


@dataclass(frozen=True)
class UserDeletionContinuation:
    """Signals that a user's intake history still needs deleting."""

    user_id: UUID
    type: str = USER_DELETED
