"""Domain models for recorded intake."""

from dataclasses import dataclass
import datetime as dt
from enum import StrEnum
from uuid import UUID

from intake_tracker.domain.nutrition import NutrientProfile, UnitKind


class IntakePeriod(StrEnum):
    """Meal slot an intake belongs to."""

    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACK = "SNACK"


@dataclass(frozen=True)
class IntakeRecord:
    """A food consumed by a user on a given day."""

    id: UUID
    user_id: UUID
    food_id: str
    food_name: str
    date: dt.date
    period: IntakePeriod
    amount: int
    unit: UnitKind
    profile: NutrientProfile
    group_id: UUID | None = None


@dataclass(frozen=True)
class IntakeRequest:
    """Data needed to record a new intake."""

    food_id: str
    date: dt.date
    amount: int
    period: IntakePeriod = IntakePeriod.SNACK
    unit: UnitKind | None = None


@dataclass(frozen=True)
class IntakeUpdate:
    """Partial update for an intake; None leaves a field unchanged."""

    amount: int | None = None
    unit: UnitKind | None = None
    date: dt.date | None = None
    period: IntakePeriod | None = None
