"""Supabase repository for meal templates."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from intake_tracker.adapters.profile_columns import (
    profile_from_columns,
    profile_to_columns,
)
from intake_tracker.domain.nutrition import UnitKind
from intake_tracker.domain.templates import MealTemplate, MealTemplateItem
from intake_tracker.services.templates import MealTemplateRepository

_TABLE = "meal_templates"


@dataclass
class SupabaseMealTemplateRepository(MealTemplateRepository):
    """Supabase implementation storing items in a JSONB column."""

    client: Client

    def save(self, template: MealTemplate) -> MealTemplate:
        """Insert or replace a template row with its items."""
        response = (
            self.client.table(_TABLE)
            .upsert(
                {
                    "id": str(template.id),
                    "user_id": str(template.user_id),
                    "name": template.name,
                    "items": [_item_to_json(item) for item in template.items],
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal template")
        return _parse_template(response.data[0])

    def get(self, template_id: UUID, user_id: UUID) -> MealTemplate | None:
        """Return a template owned by the user."""
        response = (
            self.client.table(_TABLE)
            .select("id, user_id, name, items")
            .eq("id", str(template_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_template(response.data[0])

    def list_by_user(self, user_id: UUID) -> list[MealTemplate]:
        """Return a user's templates."""
        response = (
            self.client.table(_TABLE)
            .select("id, user_id, name, items")
            .eq("user_id", str(user_id))
            .order("name", desc=False)
            .execute()
        )
        return [_parse_template(row) for row in response.data or []]

    def delete(self, template_id: UUID, user_id: UUID) -> None:
        """Delete a template row."""
        self.client.table(_TABLE).delete().eq("id", str(template_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _item_to_json(item: MealTemplateItem) -> dict[str, object]:
    return {
        "food_id": item.food_id,
        "food_name": item.food_name,
        "amount": item.amount,
        "unit_type": item.unit.value,
        **profile_to_columns(item.profile),
    }


def _parse_template(row: dict[str, object]) -> MealTemplate:
    return MealTemplate(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        name=str(row.get("name") or ""),
        items=[
            MealTemplateItem(
                food_id=str(item["food_id"]),
                food_name=str(item.get("food_name") or ""),
                amount=int(item["amount"]),
                unit=UnitKind(item["unit_type"]),
                profile=profile_from_columns(item),
            )
            for item in row.get("items") or []
        ],
    )
