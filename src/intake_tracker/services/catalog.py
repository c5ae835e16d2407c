"""Gateway translating food catalog responses into domain foods."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from http import HTTPStatus

import httpx

from intake_tracker.adapters.food_catalog_client import FoodCatalogClient
from intake_tracker.domain.nutrition import Food, NutrientProfile, UnitKind

_logger = logging.getLogger(__name__)

_BASELINE_FIELDS = {
    "calories_per_100": "caloriesPer100",
    "carbohydrates_per_100": "carbohydratesPer100",
    "fat_per_100": "fatPer100",
    "protein_per_100": "proteinPer100",
    "calories_per_piece": "caloriesPerPiece",
    "carbohydrates_per_piece": "carbohydratesPerPiece",
    "fat_per_piece": "fatPerPiece",
    "protein_per_piece": "proteinPerPiece",
}

# Raised by response.json() or parse_food when a 2xx body is not a catalog payload.
_MALFORMED_PAYLOAD_ERRORS = (
    ValueError,
    KeyError,
    TypeError,
    AttributeError,
    InvalidOperation,
)


class CatalogFoodNotFound(Exception):
    """The catalog reported that a food does not exist."""


class CatalogUnavailable(Exception):
    """The catalog could not be reached or failed to answer."""


@dataclass
class FoodCatalogGateway:
    """Fetches foods from the catalog without retrying."""

    client: FoodCatalogClient

    async def get_by_id(self, food_id: str) -> Food:
        """Return a food, raising CatalogFoodNotFound or CatalogUnavailable."""
        try:
            return parse_food(await self.client.get_food(food_id))
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == HTTPStatus.NOT_FOUND:
                raise CatalogFoodNotFound(food_id) from exc
            raise CatalogUnavailable(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise CatalogUnavailable(str(exc)) from exc
        except _MALFORMED_PAYLOAD_ERRORS as exc:
            _logger.warning("Malformed catalog response for food_id=%s", food_id)
            raise CatalogUnavailable(f"Malformed catalog response: {exc!r}") from exc

    async def get_by_ids(self, food_ids: list[str]) -> list[Food]:
        """Return the foods the catalog knows about among food_ids."""
        if not food_ids:
            return []
        try:
            payload = await self.client.get_foods(food_ids)
            _logger.debug(
                "Catalog batch lookup: requested=%s returned=%s",
                len(food_ids),
                len(payload),
            )
            return [parse_food(item) for item in payload]
        except httpx.HTTPError as exc:
            raise CatalogUnavailable(str(exc)) from exc
        except _MALFORMED_PAYLOAD_ERRORS as exc:
            _logger.warning("Malformed catalog batch response")
            raise CatalogUnavailable(f"Malformed catalog response: {exc!r}") from exc


def parse_food(payload: dict[str, object]) -> Food:
    """Build a Food from a catalog payload."""
    nutriments = payload.get("nutriments") or {}
    baselines = NutrientProfile(
        **{
            field: _to_decimal(nutriments.get(key))
            for field, key in _BASELINE_FIELDS.items()
        }
    )
    units = frozenset(
        UnitKind(unit)
        for unit in payload.get("availableUnits") or []
        if unit in UnitKind.__members__
    )
    return Food(
        id=str(payload["id"]),
        name=str(payload.get("productName") or ""),
        baselines=baselines,
        available_units=units,
    )


def _to_decimal(value: object) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))
