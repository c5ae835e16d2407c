"""Pydantic models for the HTTP API."""

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from intake_tracker.domain.intakes import IntakePeriod, IntakeRecord
from intake_tracker.domain.nutrition import NutrientProfile, UnitKind
from intake_tracker.domain.templates import MealTemplate, TemplateItemInput


class IntakeCreateRequest(BaseModel):
    """Request to record an intake."""

    food_id: str = Field(min_length=1)
    date: dt.date
    amount: int = Field(ge=1)
    period: IntakePeriod = IntakePeriod.SNACK
    unit: UnitKind | None = None


class IntakeUpdateRequest(BaseModel):
    """Partial intake update."""

    amount: int | None = Field(default=None, ge=1)
    unit: UnitKind | None = None
    date: dt.date | None = None
    period: IntakePeriod | None = None


class TemplateItemRequest(BaseModel):
    """Food entry in a template request."""

    food_id: str = Field(min_length=1)
    amount: int | None = Field(default=None, ge=1)
    unit: UnitKind | None = None

    def to_input(self) -> TemplateItemInput:
        """Convert to the domain input."""
        return TemplateItemInput(
            food_id=self.food_id, amount=self.amount, unit=self.unit
        )


class TemplateCreateRequest(BaseModel):
    """Request to create a template."""

    name: str = Field(min_length=1)
    items: list[TemplateItemRequest] = Field(min_length=1)


class TemplateUpdateRequest(BaseModel):
    """Request to rename a template and/or replace its items."""

    name: str | None = Field(default=None, min_length=1)
    items: list[TemplateItemRequest] | None = None


class TemplateApplyRequest(BaseModel):
    """Request to record a template's items as intakes."""

    date: dt.date
    period: IntakePeriod | None = None


class UserDeletedEvent(BaseModel):
    """Event asking for a user's intake history to be deleted."""

    user_id: UUID


class NutrimentsResponse(BaseModel):
    """Totals and baselines of a nutrient profile."""

    calories: Decimal
    carbohydrates: Decimal
    fat: Decimal
    protein: Decimal
    calories_per_100: Decimal | None
    carbohydrates_per_100: Decimal | None
    fat_per_100: Decimal | None
    protein_per_100: Decimal | None
    calories_per_piece: Decimal | None
    carbohydrates_per_piece: Decimal | None
    fat_per_piece: Decimal | None
    protein_per_piece: Decimal | None

    @classmethod
    def from_profile(cls, profile: NutrientProfile) -> "NutrimentsResponse":
        """Build from a domain profile."""
        return cls(
            calories=profile.totals.calories,
            carbohydrates=profile.totals.carbohydrates,
            fat=profile.totals.fat,
            protein=profile.totals.protein,
            calories_per_100=profile.calories_per_100,
            carbohydrates_per_100=profile.carbohydrates_per_100,
            fat_per_100=profile.fat_per_100,
            protein_per_100=profile.protein_per_100,
            calories_per_piece=profile.calories_per_piece,
            carbohydrates_per_piece=profile.carbohydrates_per_piece,
            fat_per_piece=profile.fat_per_piece,
            protein_per_piece=profile.protein_per_piece,
        )


class IntakeResponse(BaseModel):
    """Recorded intake."""

    id: UUID
    food_id: str
    food_name: str
    date: dt.date
    period: IntakePeriod
    amount: int
    unit: UnitKind
    group_id: UUID | None
    nutriments: NutrimentsResponse

    @classmethod
    def from_record(cls, record: IntakeRecord) -> "IntakeResponse":
        """Build from a domain record."""
        return cls(
            id=record.id,
            food_id=record.food_id,
            food_name=record.food_name,
            date=record.date,
            period=record.period,
            amount=record.amount,
            unit=record.unit,
            group_id=record.group_id,
            nutriments=NutrimentsResponse.from_profile(record.profile),
        )


class TemplateItemResponse(BaseModel):
    """Template item with the units its profile supports."""

    food_id: str
    food_name: str
    amount: int
    unit: UnitKind
    nutriments: NutrimentsResponse
    available_units: list[UnitKind]


class TemplateResponse(BaseModel):
    """Meal template."""

    id: UUID
    name: str
    items: list[TemplateItemResponse]

    @classmethod
    def from_template(cls, template: MealTemplate) -> "TemplateResponse":
        """Build from a domain template."""
        return cls(
            id=template.id,
            name=template.name,
            items=[
                TemplateItemResponse(
                    food_id=item.food_id,
                    food_name=item.food_name,
                    amount=item.amount,
                    unit=item.unit,
                    nutriments=NutrimentsResponse.from_profile(item.profile),
                    available_units=sorted(item.profile.available_units()),
                )
                for item in template.items
            ],
        )
