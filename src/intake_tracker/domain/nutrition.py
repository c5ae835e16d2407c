"""Nutrition domain models."""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import StrEnum


class UnitKind(StrEnum):
    """Measurement basis used to interpret an amount."""

    GRAMS = "GRAMS"
    PIECES = "PIECES"


@dataclass(frozen=True)
class MacroTotals:
    """Macronutrient values for a specific amount."""

    calories: Decimal = Decimal(0)
    carbohydrates: Decimal = Decimal(0)
    fat: Decimal = Decimal(0)
    protein: Decimal = Decimal(0)


@dataclass(frozen=True)
class NutrientProfile:
    """Baselines copied from the catalog plus totals for the recorded amount."""

    calories_per_100: Decimal | None = None
    carbohydrates_per_100: Decimal | None = None
    fat_per_100: Decimal | None = None
    protein_per_100: Decimal | None = None
    calories_per_piece: Decimal | None = None
    carbohydrates_per_piece: Decimal | None = None
    fat_per_piece: Decimal | None = None
    protein_per_piece: Decimal | None = None
    totals: MacroTotals = MacroTotals()

    def is_grams_complete(self) -> bool:
        """Return True when all per-100 baselines are present."""
        return None not in (
            self.calories_per_100,
            self.carbohydrates_per_100,
            self.fat_per_100,
            self.protein_per_100,
        )

    def is_pieces_complete(self) -> bool:
        """Return True when all per-piece baselines are present."""
        return None not in (
            self.calories_per_piece,
            self.carbohydrates_per_piece,
            self.fat_per_piece,
            self.protein_per_piece,
        )

    def available_units(self) -> set[UnitKind]:
        """Return the unit kinds this profile can be computed for."""
        units: set[UnitKind] = set()
        if self.is_grams_complete():
            units.add(UnitKind.GRAMS)
        if self.is_pieces_complete():
            units.add(UnitKind.PIECES)
        return units

    def with_totals(self, totals: MacroTotals) -> "NutrientProfile":
        """Return a copy carrying the same baselines and new totals."""
        return replace(self, totals=totals)

    def baselines_only(self) -> "NutrientProfile":
        """Return a copy with the totals reset."""
        return replace(self, totals=MacroTotals())


@dataclass(frozen=True)
class Food:
    """Food as returned by the catalog."""

    id: str
    name: str
    baselines: NutrientProfile
    available_units: frozenset[UnitKind]
