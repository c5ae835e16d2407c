"""Meal template service."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID, uuid4

from intake_tracker.domain.errors import NotFoundError, ValidationError
from intake_tracker.domain.intakes import IntakePeriod, IntakeRecord
from intake_tracker.domain.templates import (
    MealTemplate,
    TemplateItemInput,
    TemplateUpdate,
)
from intake_tracker.services.cache import (
    SafeCache,
    intake_list_key,
    template_list_key,
)
from intake_tracker.services.intakes import IntakeRepository
from intake_tracker.services.template_sync import (
    TemplateSynchronizer,
    build_item,
    fetch_foods,
    index_by_food_id,
    validate_new_item,
)

DEFAULT_PERIOD = IntakePeriod.SNACK

_logger = logging.getLogger(__name__)


class MealTemplateRepository(Protocol):
    """Persistence interface for meal templates."""

    def save(self, template: MealTemplate) -> MealTemplate:
        """Insert or replace a template together with its items."""

    def get(self, template_id: UUID, user_id: UUID) -> MealTemplate | None:
        """Return a template owned by the user, if present."""

    def list_by_user(self, user_id: UUID) -> list[MealTemplate]:
        """Return all templates of a user."""

    def delete(self, template_id: UUID, user_id: UUID) -> None:
        """Delete a template owned by the user."""


@dataclass
class MealTemplateService:
    """Manages meal templates and applies them as intake groups."""

    repository: MealTemplateRepository
    intake_repository: IntakeRepository
    synchronizer: TemplateSynchronizer
    cache: SafeCache
    list_ttl_seconds: int = 3600

    def list_templates(self, user_id: UUID) -> list[MealTemplate]:
        """Return the user's templates, served from cache when possible."""
        key = template_list_key(user_id)
        cached = self.cache.get(key)
        if isinstance(cached, list):
            return list(cached)
        _logger.info("Fetching meal templates from store for user_id=%s", user_id)
        templates = self.repository.list_by_user(user_id)
        self.cache.set(key, list(templates), ttl_seconds=self.list_ttl_seconds)
        return templates

    async def create_template(
        self, user_id: UUID, name: str, items: list[TemplateItemInput]
    ) -> MealTemplate:
        """Create a template, fetching every referenced food in one batch."""
        _logger.info("Creating meal template '%s' for user_id=%s", name, user_id)
        _require_items(items)
        entries = list(index_by_food_id(items).values())
        for entry in entries:
            validate_new_item(entry)
        registry = self.synchronizer.registry
        foods = await fetch_foods(
            self.synchronizer.catalog, [entry.food_id for entry in entries]
        )
        template = MealTemplate(
            id=uuid4(),
            user_id=user_id,
            name=name,
            items=[
                build_item(registry, foods[entry.food_id], entry.amount, entry.unit)
                for entry in entries
            ],
        )
        saved = self.repository.save(template)
        self.cache.evict(template_list_key(user_id))
        return saved

    async def update_template(
        self, template_id: UUID, user_id: UUID, update: TemplateUpdate
    ) -> MealTemplate:
        """Rename a template and/or reconcile its items."""
        _logger.info("Updating template id=%s for user_id=%s", template_id, user_id)
        template = self._get_owned(template_id, user_id)
        name = template.name if update.name is None else update.name
        items = template.items
        if update.items is not None:
            _require_items(update.items)
            items = await self.synchronizer.reconcile(template.items, update.items)
        saved = self.repository.save(replace(template, name=name, items=items))
        self.cache.evict(template_list_key(user_id))
        _logger.debug("Meal template updated id=%s user_id=%s", template_id, user_id)
        return saved

    def delete_template(self, template_id: UUID, user_id: UUID) -> None:
        """Delete a template owned by the user."""
        _logger.info("Deleting template id=%s for user_id=%s", template_id, user_id)
        self._get_owned(template_id, user_id)
        self.repository.delete(template_id, user_id)
        self.cache.evict(template_list_key(user_id))

    def apply_template(
        self,
        template_id: UUID,
        day: date,
        user_id: UUID,
        period: IntakePeriod | None = None,
    ) -> list[IntakeRecord]:
        """Record every template item as an intake sharing a new group id."""
        _logger.info(
            "Applying template id=%s for user_id=%s on date=%s",
            template_id,
            user_id,
            day,
        )
        template = self._get_owned(template_id, user_id)
        group_id = uuid4()
        records = [
            IntakeRecord(
                id=uuid4(),
                user_id=user_id,
                food_id=item.food_id,
                food_name=item.food_name,
                date=day,
                period=period or DEFAULT_PERIOD,
                amount=item.amount,
                unit=item.unit,
                profile=item.profile,
                group_id=group_id,
            )
            for item in template.items
        ]
        saved = self.intake_repository.save_all(records)
        self.cache.evict(intake_list_key(user_id, day))
        _logger.debug(
            "Applied template '%s', created %s intake records",
            template.name,
            len(saved),
        )
        return saved

    def _get_owned(self, template_id: UUID, user_id: UUID) -> MealTemplate:
        template = self.repository.get(template_id, user_id)
        if template is None:
            raise NotFoundError("Template not found")
        return template


def _require_items(items: list[TemplateItemInput]) -> None:
    if not items:
        raise ValidationError("Template must contain at least 1 item")
