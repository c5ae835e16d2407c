"""Event bus publishing over HTTP."""

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from typing import Protocol

import httpx

from intake_tracker.domain.events import UserDeletionContinuation

_logger = logging.getLogger(__name__)


class EventBus(Protocol):
    """Interface for publishing events."""

    async def publish(self, event: UserDeletionContinuation) -> None:
        """Publish an event without waiting for it to be handled."""


@dataclass
class HttpxEventBus(EventBus):
    """Hands events to a message broker's HTTP ingest endpoint.

    ``publish`` only schedules the delivery and returns. Deliveries run as
    background tasks; a failed delivery is logged, and the broker's own
    redelivery is what resumes the work. ``close`` waits for pending
    deliveries before closing the session.
    """

    url: str
    token: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15
    _pending: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )

    @classmethod
    def create(cls, url: str, token: str) -> "HttpxEventBus":
        """Create an event bus with a managed httpx session."""
        return cls(url=url, token=token, http_client=httpx.AsyncClient())

    async def publish(self, event: UserDeletionContinuation) -> None:
        """Schedule delivery of an event and return immediately."""
        payload = asdict(event)
        payload["user_id"] = str(event.user_id)
        task = asyncio.create_task(self._deliver(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, payload: dict[str, object]) -> None:
        try:
            response = await self.http_client.post(
                self.url,
                json=payload,
                headers={"X-Event-Token": self.token},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPError:
            _logger.exception(
                "Failed to publish %s event for user_id=%s",
                payload["type"],
                payload["user_id"],
            )

    async def close(self) -> None:
        """Wait for pending deliveries, then close the HTTP session."""
        if self._pending:
            await asyncio.gather(*self._pending)
        await self.http_client.aclose()
