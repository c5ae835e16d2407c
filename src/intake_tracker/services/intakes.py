"""Intake lifecycle service."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID, uuid4

from intake_tracker.domain.errors import (
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from intake_tracker.domain.intakes import IntakeRecord, IntakeRequest, IntakeUpdate
from intake_tracker.domain.nutrition import Food, UnitKind
from intake_tracker.services.cache import SafeCache, intake_list_key
from intake_tracker.services.calculators import (
    UnitStrategyRegistry,
    validate_unit_available,
    validate_unit_supported,
)
from intake_tracker.services.catalog import (
    CatalogFoodNotFound,
    CatalogUnavailable,
    FoodCatalogGateway,
)

DEFAULT_UNIT = UnitKind.GRAMS

_logger = logging.getLogger(__name__)


class IntakeRepository(Protocol):
    """Persistence interface for intake records."""

    def save(self, record: IntakeRecord) -> IntakeRecord:
        """Insert or update an intake record."""

    def save_all(self, records: list[IntakeRecord]) -> list[IntakeRecord]:
        """Insert several intake records in one statement."""

    def get(self, intake_id: UUID, user_id: UUID) -> IntakeRecord | None:
        """Return an intake owned by the user, if present."""

    def list_by_date(self, user_id: UUID, day: date) -> list[IntakeRecord]:
        """Return a user's intakes for one day."""

    def list_by_user(self, user_id: UUID) -> list[IntakeRecord]:
        """Return all of a user's intakes."""

    def find_first_in_group(
        self, group_id: UUID, user_id: UUID
    ) -> IntakeRecord | None:
        """Return any one intake of a group."""

    def delete(self, intake_id: UUID, user_id: UUID) -> None:
        """Delete an intake owned by the user."""

    def delete_group(self, group_id: UUID, user_id: UUID) -> int:
        """Delete every intake of a group and return how many were removed."""

    def delete_batch(self, user_id: UUID, limit: int) -> int:
        """Delete up to limit intakes of a user and return how many were removed."""


@dataclass
class IntakeService:
    """Creates, reads, updates and deletes intake records."""

    catalog: FoodCatalogGateway
    repository: IntakeRepository
    cache: SafeCache
    registry: UnitStrategyRegistry
    list_ttl_seconds: int = 3600

    async def create(self, user_id: UUID, request: IntakeRequest) -> IntakeRecord:
        """Record a new intake with totals computed from catalog baselines."""
        _logger.info("Saving intake for user_id=%s", user_id)
        _require_positive(request.amount)
        food = await self._fetch_food(request.food_id, user_id)
        unit = request.unit or DEFAULT_UNIT
        validate_unit_supported(food, unit)
        record = IntakeRecord(
            id=uuid4(),
            user_id=user_id,
            food_id=food.id,
            food_name=food.name,
            date=request.date,
            period=request.period,
            amount=request.amount,
            unit=unit,
            profile=self.registry.compute(food.baselines, unit, request.amount),
        )
        saved = self.repository.save(record)
        self.cache.evict(intake_list_key(user_id, saved.date))
        _logger.debug("Intake saved user_id=%s intake_id=%s", user_id, saved.id)
        return saved

    def list_for_date(self, user_id: UUID, day: date | None) -> list[IntakeRecord]:
        """Return a user's intakes for a day, or all of them when day is None."""
        key = intake_list_key(user_id, day)
        cached = self.cache.get(key)
        if isinstance(cached, list):
            return list(cached)
        _logger.debug("Loading intakes for user_id=%s date=%s", user_id, day)
        if day is None:
            records = self.repository.list_by_user(user_id)
        else:
            records = self.repository.list_by_date(user_id, day)
        self.cache.set(key, list(records), ttl_seconds=self.list_ttl_seconds)
        return records

    def update(
        self, intake_id: UUID, user_id: UUID, update: IntakeUpdate
    ) -> IntakeRecord:
        """Apply a partial update, recomputing totals when amount or unit change."""
        _logger.info("Updating intake id=%s for user_id=%s", intake_id, user_id)
        record = self.repository.get(intake_id, user_id)
        if record is None:
            raise NotFoundError("Intake not found")
        self.cache.evict(intake_list_key(user_id, record.date))

        amount = record.amount if update.amount is None else update.amount
        unit = update.unit or record.unit
        _require_positive(amount)
        profile = record.profile
        if unit != record.unit:
            validate_unit_available(unit, profile)
        if amount != record.amount or unit != record.unit:
            profile = self.registry.compute(profile, unit, amount)

        updated = replace(
            record,
            amount=amount,
            unit=unit,
            profile=profile,
            date=update.date or record.date,
            period=update.period or record.period,
        )
        if updated.date != record.date:
            self.cache.evict(intake_list_key(user_id, updated.date))
        saved = self.repository.save(updated)
        _logger.debug("Intake updated id=%s user_id=%s", intake_id, user_id)
        return saved

    def delete(self, intake_id: UUID, user_id: UUID) -> None:
        """Delete an intake; a missing intake is ignored."""
        _logger.info("Deleting intake id=%s for user_id=%s", intake_id, user_id)
        record = self.repository.get(intake_id, user_id)
        if record is None:
            return
        self.cache.evict(intake_list_key(user_id, record.date))
        self.repository.delete(intake_id, user_id)

    def undo_group(self, group_id: UUID, user_id: UUID) -> int:
        """Delete every intake created together under group_id."""
        _logger.info("Reverting intake group %s for user_id=%s", group_id, user_id)
        representative = self.repository.find_first_in_group(group_id, user_id)
        if representative is not None:
            self.cache.evict(intake_list_key(user_id, representative.date))
        return self.repository.delete_group(group_id, user_id)

    async def _fetch_food(self, food_id: str, user_id: UUID) -> Food:
        """Fetch a food, mapping catalog failures to domain errors."""
        try:
            return await self.catalog.get_by_id(food_id)
        except CatalogFoodNotFound as exc:
            _logger.warning("Food not found food_id=%s user_id=%s", food_id, user_id)
            raise NotFoundError("Food not found") from exc
        except CatalogUnavailable as exc:
            _logger.error(
                "Food service unavailable user_id=%s food_id=%s", user_id, food_id
            )
            raise UpstreamUnavailableError("Food service is unavailable") from exc


def _require_positive(amount: int) -> None:
    if amount < 1:
        raise ValidationError("Amount must be at least 1")
