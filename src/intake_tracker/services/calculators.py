"""Nutrient scaling per unit kind."""

from collections.abc import Callable, Mapping
from decimal import Decimal
from types import MappingProxyType

from intake_tracker.domain.errors import ConfigurationError, ValidationError
from intake_tracker.domain.nutrition import (
    Food,
    MacroTotals,
    NutrientProfile,
    UnitKind,
)

NutrientCalculator = Callable[[NutrientProfile, int], MacroTotals]

_HUNDRED = Decimal(100)


def calculate_grams(profile: NutrientProfile, amount: int) -> MacroTotals:
    """Scale per-100 baselines to the given number of grams."""
    if not profile.is_grams_complete():
        raise ValidationError(f"Unit type '{UnitKind.GRAMS}' is not available")
    factor = Decimal(amount)
    return MacroTotals(
        calories=profile.calories_per_100 * factor / _HUNDRED,
        carbohydrates=profile.carbohydrates_per_100 * factor / _HUNDRED,
        fat=profile.fat_per_100 * factor / _HUNDRED,
        protein=profile.protein_per_100 * factor / _HUNDRED,
    )


def calculate_pieces(profile: NutrientProfile, amount: int) -> MacroTotals:
    """Scale per-piece baselines to the given number of pieces."""
    if not profile.is_pieces_complete():
        raise ValidationError(f"Unit type '{UnitKind.PIECES}' is not available")
    factor = Decimal(amount)
    return MacroTotals(
        calories=profile.calories_per_piece * factor,
        carbohydrates=profile.carbohydrates_per_piece * factor,
        fat=profile.fat_per_piece * factor,
        protein=profile.protein_per_piece * factor,
    )


DEFAULT_CALCULATORS: Mapping[UnitKind, NutrientCalculator] = MappingProxyType(
    {
        UnitKind.GRAMS: calculate_grams,
        UnitKind.PIECES: calculate_pieces,
    }
)


class UnitStrategyRegistry:
    """Resolves a unit kind to the calculator that scales it."""

    def __init__(
        self, calculators: Mapping[UnitKind, NutrientCalculator] | None = None
    ) -> None:
        self._calculators = dict(
            DEFAULT_CALCULATORS if calculators is None else calculators
        )

    def get(self, unit: UnitKind) -> NutrientCalculator:
        """Return the calculator for a unit kind."""
        calculator = self._calculators.get(unit)
        if calculator is None:
            raise ConfigurationError(f"No nutrient calculator registered for {unit}")
        return calculator

    def compute(
        self, profile: NutrientProfile, unit: UnitKind, amount: int
    ) -> NutrientProfile:
        """Return the profile with totals computed for amount in unit."""
        totals = self.get(unit)(profile, amount)
        return profile.with_totals(totals)


def validate_unit_available(unit: UnitKind, profile: NutrientProfile) -> None:
    """Ensure a stored profile carries the baselines a unit needs."""
    available = profile.available_units()
    if unit not in available:
        raise ValidationError(
            f"Unit type '{unit}' is not available for this food. "
            f"Available units: {', '.join(sorted(available))}"
        )


def validate_unit_supported(food: Food, unit: UnitKind) -> None:
    """Ensure a catalog food advertises the requested unit."""
    if unit not in food.available_units:
        raise ValidationError(
            f"Food '{food.name}' does not support unit type {unit}. "
            f"Available types: {', '.join(sorted(food.available_units))}"
        )
