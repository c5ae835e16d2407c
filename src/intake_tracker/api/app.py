"""FastAPI application factory."""

import datetime as dt
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, Header, Request, status
from fastapi.responses import JSONResponse

from intake_tracker.api.events import router as events_router
from intake_tracker.api.models import (
    IntakeCreateRequest,
    IntakeResponse,
    IntakeUpdateRequest,
    TemplateApplyRequest,
    TemplateCreateRequest,
    TemplateResponse,
    TemplateUpdateRequest,
)
from intake_tracker.app_logging import configure_logging
from intake_tracker.containers import AppContainer
from intake_tracker.domain.errors import (
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from intake_tracker.domain.intakes import IntakeRequest, IntakeUpdate
from intake_tracker.domain.templates import TemplateUpdate

_ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    UpstreamUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(events_router)

    for error_type, status_code in _ERROR_STATUS.items():
        app.add_exception_handler(error_type, _error_handler(status_code))

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/intakes", status_code=status.HTTP_201_CREATED)
    async def create_intake(
        body: IntakeCreateRequest, request: Request, x_user_id: UUID = Header()
    ) -> IntakeResponse:
        """Record an intake."""
        state_container: AppContainer = request.app.state.container
        record = await state_container.intake_service.create(
            x_user_id,
            IntakeRequest(
                food_id=body.food_id,
                date=body.date,
                amount=body.amount,
                period=body.period,
                unit=body.unit,
            ),
        )
        return IntakeResponse.from_record(record)

    @app.get("/intakes")
    async def list_intakes(
        request: Request, x_user_id: UUID = Header(), date: dt.date | None = None
    ) -> list[IntakeResponse]:
        """List intakes for a day, or all intakes when no day is given."""
        state_container: AppContainer = request.app.state.container
        records = state_container.intake_service.list_for_date(x_user_id, date)
        return [IntakeResponse.from_record(record) for record in records]

    @app.patch("/intakes/{intake_id}")
    async def update_intake(
        intake_id: UUID,
        body: IntakeUpdateRequest,
        request: Request,
        x_user_id: UUID = Header(),
    ) -> IntakeResponse:
        """Update an intake."""
        state_container: AppContainer = request.app.state.container
        record = state_container.intake_service.update(
            intake_id,
            x_user_id,
            IntakeUpdate(
                amount=body.amount,
                unit=body.unit,
                date=body.date,
                period=body.period,
            ),
        )
        return IntakeResponse.from_record(record)

    @app.delete("/intakes/{intake_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_intake(
        intake_id: UUID, request: Request, x_user_id: UUID = Header()
    ) -> None:
        """Delete an intake."""
        state_container: AppContainer = request.app.state.container
        state_container.intake_service.delete(intake_id, x_user_id)

    @app.delete("/intakes/groups/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def undo_intake_group(
        group_id: UUID, request: Request, x_user_id: UUID = Header()
    ) -> None:
        """Delete every intake created together by one template application."""
        state_container: AppContainer = request.app.state.container
        state_container.intake_service.undo_group(group_id, x_user_id)

    @app.get("/templates")
    async def list_templates(
        request: Request, x_user_id: UUID = Header()
    ) -> list[TemplateResponse]:
        """List the user's meal templates."""
        state_container: AppContainer = request.app.state.container
        templates = state_container.template_service.list_templates(x_user_id)
        return [TemplateResponse.from_template(template) for template in templates]

    @app.post("/templates", status_code=status.HTTP_201_CREATED)
    async def create_template(
        body: TemplateCreateRequest, request: Request, x_user_id: UUID = Header()
    ) -> TemplateResponse:
        """Create a meal template."""
        state_container: AppContainer = request.app.state.container
        template = await state_container.template_service.create_template(
            x_user_id, body.name, [item.to_input() for item in body.items]
        )
        return TemplateResponse.from_template(template)

    @app.patch("/templates/{template_id}")
    async def update_template(
        template_id: UUID,
        body: TemplateUpdateRequest,
        request: Request,
        x_user_id: UUID = Header(),
    ) -> TemplateResponse:
        """Rename a template and/or reconcile its items."""
        state_container: AppContainer = request.app.state.container
        items = None
        if body.items is not None:
            items = [item.to_input() for item in body.items]
        template = await state_container.template_service.update_template(
            template_id, x_user_id, TemplateUpdate(name=body.name, items=items)
        )
        return TemplateResponse.from_template(template)

    @app.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_template(
        template_id: UUID, request: Request, x_user_id: UUID = Header()
    ) -> None:
        """Delete a meal template."""
        state_container: AppContainer = request.app.state.container
        state_container.template_service.delete_template(template_id, x_user_id)

    @app.post(
        "/templates/{template_id}/apply", status_code=status.HTTP_201_CREATED
    )
    async def apply_template(
        template_id: UUID,
        body: TemplateApplyRequest,
        request: Request,
        x_user_id: UUID = Header(),
    ) -> list[IntakeResponse]:
        """Record a template's items as a group of intakes."""
        state_container: AppContainer = request.app.state.container
        records = state_container.template_service.apply_template(
            template_id, body.date, x_user_id, period=body.period
        )
        return [IntakeResponse.from_record(record) for record in records]

    return app


def _error_handler(status_code: int):  # type: ignore[no-untyped-def]
    async def handle(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handle
