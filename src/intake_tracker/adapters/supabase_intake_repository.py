"""Supabase repository for intake records."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from intake_tracker.adapters.profile_columns import (
    profile_from_columns,
    profile_to_columns,
)
from intake_tracker.domain.intakes import IntakePeriod, IntakeRecord
from intake_tracker.domain.nutrition import UnitKind
from intake_tracker.services.intakes import IntakeRepository

_TABLE = "intakes"


@dataclass
class SupabaseIntakeRepository(IntakeRepository):
    """Supabase implementation for intake records."""

    client: Client

    def save(self, record: IntakeRecord) -> IntakeRecord:
        """Insert or update an intake row."""
        response = self.client.table(_TABLE).upsert(_to_row(record)).execute()
        if not response.data:
            raise RuntimeError("Failed to save intake")
        return _parse_intake(response.data[0])

    def save_all(self, records: list[IntakeRecord]) -> list[IntakeRecord]:
        """Insert intake rows in one statement."""
        if not records:
            return []
        response = (
            self.client.table(_TABLE)
            .insert([_to_row(record) for record in records])
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save intakes")
        return [_parse_intake(row) for row in response.data]

    def get(self, intake_id: UUID, user_id: UUID) -> IntakeRecord | None:
        """Return an intake owned by the user."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(intake_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_intake(response.data[0])

    def list_by_date(self, user_id: UUID, day: date) -> list[IntakeRecord]:
        """Return a user's intakes for a day."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_intake(row) for row in response.data or []]

    def list_by_user(self, user_id: UUID) -> list[IntakeRecord]:
        """Return all intakes of a user."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .order("date", desc=False)
            .execute()
        )
        return [_parse_intake(row) for row in response.data or []]

    def find_first_in_group(
        self, group_id: UUID, user_id: UUID
    ) -> IntakeRecord | None:
        """Return one intake of a group."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("meal_group_id", str(group_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_intake(response.data[0])

    def delete(self, intake_id: UUID, user_id: UUID) -> None:
        """Delete an intake row."""
        self.client.table(_TABLE).delete().eq("id", str(intake_id)).eq(
            "user_id", str(user_id)
        ).execute()

    def delete_group(self, group_id: UUID, user_id: UUID) -> int:
        """Delete every intake of a group."""
        response = (
            self.client.table(_TABLE)
            .delete()
            .eq("meal_group_id", str(group_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return len(response.data or [])

    def delete_batch(self, user_id: UUID, limit: int) -> int:
        """Delete up to limit intakes of a user in a single statement."""
        response = self.client.rpc(
            "delete_intakes_batch",
            {"p_user_id": str(user_id), "p_limit": limit},
        ).execute()
        return int(response.data or 0)


def _to_row(record: IntakeRecord) -> dict[str, object]:
    return {
        "id": str(record.id),
        "user_id": str(record.user_id),
        "food_id": record.food_id,
        "food_name": record.food_name,
        "date": record.date.isoformat(),
        "intake_period": record.period.value,
        "amount": record.amount,
        "unit_type": record.unit.value,
        "meal_group_id": str(record.group_id) if record.group_id else None,
        **profile_to_columns(record.profile),
    }


def _parse_intake(row: dict[str, object]) -> IntakeRecord:
    return IntakeRecord(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        food_id=str(row["food_id"]),
        food_name=str(row.get("food_name") or ""),
        date=date.fromisoformat(row["date"]),
        period=IntakePeriod(row.get("intake_period") or IntakePeriod.SNACK),
        amount=int(row["amount"]),
        unit=UnitKind(row.get("unit_type") or UnitKind.GRAMS),
        group_id=UUID(row["meal_group_id"]) if row.get("meal_group_id") else None,
        profile=profile_from_columns(row),
    )
