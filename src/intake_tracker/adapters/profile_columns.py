"""Column mapping for nutrient profiles stored in Supabase."""

from decimal import Decimal

from intake_tracker.domain.nutrition import MacroTotals, NutrientProfile

_BASELINE_COLUMNS = (
    "calories_per_100",
    "carbohydrates_per_100",
    "fat_per_100",
    "protein_per_100",
    "calories_per_piece",
    "carbohydrates_per_piece",
    "fat_per_piece",
    "protein_per_piece",
)
_TOTAL_COLUMNS = ("calories", "carbohydrates", "fat", "protein")


def profile_to_columns(profile: NutrientProfile) -> dict[str, str | None]:
    """Flatten a profile into columns, with decimals as strings."""
    columns: dict[str, str | None] = {}
    for column in _BASELINE_COLUMNS:
        value = getattr(profile, column)
        columns[column] = None if value is None else str(value)
    for name in _TOTAL_COLUMNS:
        columns[f"{name}_total"] = str(getattr(profile.totals, name))
    return columns


def profile_from_columns(row: dict[str, object]) -> NutrientProfile:
    """Rebuild a profile from flattened columns."""
    baselines = {
        column: _optional_decimal(row.get(column)) for column in _BASELINE_COLUMNS
    }
    totals = MacroTotals(
        **{
            name: _optional_decimal(row.get(f"{name}_total")) or Decimal(0)
            for name in _TOTAL_COLUMNS
        }
    )
    return NutrientProfile(**baselines, totals=totals)


def _optional_decimal(value: object) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))
