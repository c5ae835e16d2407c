"""Event delivery endpoints with shared token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from intake_tracker.api.models import UserDeletedEvent  # noqa: TC001

if TYPE_CHECKING:
    from intake_tracker.containers import AppContainer

router = APIRouter(prefix="/events", tags=["events"])


def _get_event_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.event_token


async def require_event_token(
    x_event_token: str | None = Header(default=None),
    event_token: str = Depends(_get_event_token),
) -> None:
    """Ensure deliveries carry the shared event token."""
    if not x_event_token or x_event_token != event_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/user-deleted", dependencies=[Depends(require_event_token)])
async def user_deleted(event: UserDeletedEvent, request: Request) -> dict[str, int]:
    """Delete the next batch of a deleted user's intakes."""
    container: AppContainer = request.app.state.container
    deleted = await container.user_cleanup_service.delete_next_batch(event.user_id)
    return {"deleted": deleted}
