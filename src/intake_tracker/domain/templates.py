"""Domain models for reusable meal templates."""

from dataclasses import dataclass, field
from uuid import UUID

from intake_tracker.domain.nutrition import NutrientProfile, UnitKind


@dataclass(frozen=True)
class MealTemplateItem:
    """A food entry inside a template."""

    food_id: str
    food_name: str
    amount: int
    unit: UnitKind
    profile: NutrientProfile


@dataclass(frozen=True)
class MealTemplate:
    """A named, ordered collection of template items."""

    id: UUID
    user_id: UUID
    name: str
    items: list[MealTemplateItem] = field(default_factory=list)


@dataclass(frozen=True)
class TemplateItemInput:
    """Desired state of a template item.

    Amount and unit may be omitted when updating an item already in the
    template; both are required for new items.
    """

    food_id: str
    amount: int | None = None
    unit: UnitKind | None = None


@dataclass(frozen=True)
class TemplateUpdate:
    """Rename and/or reconcile a template's items."""

    name: str | None = None
    items: list[TemplateItemInput] | None = None
