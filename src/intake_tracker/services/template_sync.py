"""Reconciliation of a template's items against a desired item list."""

import logging
from dataclasses import dataclass, replace

from intake_tracker.domain.errors import (
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from intake_tracker.domain.nutrition import Food, UnitKind
from intake_tracker.domain.templates import MealTemplateItem, TemplateItemInput
from intake_tracker.services.calculators import (
    UnitStrategyRegistry,
    validate_unit_available,
    validate_unit_supported,
)
from intake_tracker.services.catalog import CatalogUnavailable, FoodCatalogGateway

_logger = logging.getLogger(__name__)


@dataclass
class TemplateSynchronizer:
    """Computes a template's new item list from an update payload.

    Items missing from the payload are dropped, matching items are updated in
    place and unknown foods are fetched from the catalog in one batch and
    appended in payload order.
    """

    catalog: FoodCatalogGateway
    registry: UnitStrategyRegistry

    async def reconcile(
        self,
        current: list[MealTemplateItem],
        incoming: list[TemplateItemInput],
    ) -> list[MealTemplateItem]:
        """Return the reconciled items; current is left untouched."""
        desired = index_by_food_id(incoming)
        existing_ids = {item.food_id for item in current}
        new_entries = [
            entry for food_id, entry in desired.items() if food_id not in existing_ids
        ]
        for entry in new_entries:
            validate_new_item(entry)
        foods = await fetch_foods(self.catalog, [entry.food_id for entry in new_entries])

        items = [
            self._update_item(item, desired[item.food_id])
            for item in current
            if item.food_id in desired
        ]
        kept = len(items)
        items.extend(
            build_item(self.registry, foods[entry.food_id], entry.amount, entry.unit)
            for entry in new_entries
        )
        _logger.debug(
            "Reconciled template items: kept=%s added=%s removed=%s",
            kept,
            len(new_entries),
            len(current) - kept,
        )
        return items

    def _update_item(
        self, item: MealTemplateItem, entry: TemplateItemInput
    ) -> MealTemplateItem:
        amount = item.amount
        unit = item.unit
        if entry.amount is not None and entry.amount != item.amount:
            if entry.amount < 1:
                raise ValidationError(f"Amount must be at least 1: {item.food_id}")
            amount = entry.amount
        if entry.unit is not None and entry.unit != item.unit:
            validate_unit_available(entry.unit, item.profile)
            unit = entry.unit
        if amount == item.amount and unit == item.unit:
            return item
        return replace(
            item,
            amount=amount,
            unit=unit,
            profile=self.registry.compute(item.profile, unit, amount),
        )


def index_by_food_id(
    entries: list[TemplateItemInput],
) -> dict[str, TemplateItemInput]:
    """Map entries by food id; the first entry for a food id wins."""
    # Later duplicates are ignored outright. Applying every entry in order
    # would instead let the last duplicate overwrite the item's amount and unit.
    indexed: dict[str, TemplateItemInput] = {}
    for entry in entries:
        indexed.setdefault(entry.food_id, entry)
    return indexed


def validate_new_item(entry: TemplateItemInput) -> None:
    """Ensure an entry carries everything needed to create an item."""
    if entry.amount is None:
        raise ValidationError(
            f"Amount is required for new template item: {entry.food_id}"
        )
    if entry.unit is None:
        raise ValidationError(
            f"UnitType is required for new template item: {entry.food_id}"
        )
    if entry.amount < 1:
        raise ValidationError(f"Amount must be at least 1: {entry.food_id}")


async def fetch_foods(
    catalog: FoodCatalogGateway, food_ids: list[str]
) -> dict[str, Food]:
    """Fetch foods in one batch, failing if any id is unknown to the catalog."""
    unique_ids = list(dict.fromkeys(food_ids))
    if not unique_ids:
        return {}
    try:
        foods = await catalog.get_by_ids(unique_ids)
    except CatalogUnavailable as exc:
        _logger.error("Food service unavailable for batch of %s", len(unique_ids))
        raise UpstreamUnavailableError("Food service is unavailable") from exc
    by_id = {food.id: food for food in foods}
    missing = [food_id for food_id in unique_ids if food_id not in by_id]
    if missing:
        raise NotFoundError(f"Foods not found: {', '.join(missing)}")
    return by_id


def build_item(
    registry: UnitStrategyRegistry, food: Food, amount: int, unit: UnitKind
) -> MealTemplateItem:
    """Create a template item with totals computed from catalog baselines."""
    validate_unit_supported(food, unit)
    return MealTemplateItem(
        food_id=food.id,
        food_name=food.name,
        amount=amount,
        unit=unit,
        profile=registry.compute(food.baselines, unit, amount),
    )
