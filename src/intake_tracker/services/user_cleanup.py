"""Batched deletion of a user's intake history."""

import logging
from dataclasses import dataclass
from uuid import UUID

from intake_tracker.adapters.event_bus_client import EventBus
from intake_tracker.domain.events import UserDeletionContinuation
from intake_tracker.services.intakes import IntakeRepository

DELETE_BATCH_SIZE = 1000

_logger = logging.getLogger(__name__)


@dataclass
class UserCleanupService:
    """Deletes a user's intakes one bounded batch per event delivery.

    A full batch means rows may remain, so a continuation event is published
    for the next delivery. Redelivered events are harmless: each step deletes
    whatever rows are still left.
    """

    repository: IntakeRepository
    event_bus: EventBus
    batch_size: int = DELETE_BATCH_SIZE

    async def delete_next_batch(self, user_id: UUID) -> int:
        """Delete the next batch of intakes and return how many were removed."""
        _logger.info("Processing batch deletion for user_id=%s", user_id)
        deleted = self.repository.delete_batch(user_id, self.batch_size)
        _logger.info("Deleted %s intake records for user_id=%s", deleted, user_id)
        if deleted >= self.batch_size:
            _logger.info(
                "User %s still has data, publishing continuation event", user_id
            )
            await self.event_bus.publish(UserDeletionContinuation(user_id=user_id))
        else:
            _logger.info("Data cleanup completed for user_id=%s", user_id)
        return deleted
